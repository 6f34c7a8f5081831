"""Run engine operations as single transactions and report their outcome."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy.exc import DBAPIError

from leaveflow.config import get_settings
from leaveflow.exceptions import AppError, ConcurrencyConflict
from leaveflow.outcome import Failure, Success

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

T = TypeVar("T")

# PostgreSQL serialization_failure and deadlock_detected.
_RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


def is_serialization_failure(exc: DBAPIError) -> bool:
    """Whether a driver error means a competing transaction won the race."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _RETRYABLE_SQLSTATES:
        return True
    return "database is locked" in str(orig)


async def run_mutation(
    session: AsyncSession,
    operation: Callable[..., Awaitable[T]],
    /,
    *args: Any,
    **kwargs: Any,
) -> Success[T] | Failure:
    """Execute ``operation`` in one transaction and commit it.

    Typed failures roll the transaction back and are returned as a Failure.
    A ConcurrencyConflict is retried from scratch up to the configured number
    of times. Any other exception rolls back and propagates.
    """
    settings = get_settings()
    attempts = settings.max_transaction_retries + 1
    name = getattr(operation, "__name__", repr(operation))

    for attempt in range(1, attempts + 1):
        try:
            value = await operation(session, *args, **kwargs)
            await session.commit()
        except AppError as exc:
            await session.rollback()
            error = exc
        except DBAPIError as exc:
            await session.rollback()
            if not is_serialization_failure(exc):
                raise
            error = ConcurrencyConflict("The request conflicted with a concurrent update; retry")
        except Exception:
            await session.rollback()
            raise
        else:
            return Success(value)

        if isinstance(error, ConcurrencyConflict) and attempt < attempts:
            logger.warning("Concurrency conflict in %s (attempt %d/%d); retrying", name, attempt, attempts)
            await asyncio.sleep(settings.retry_backoff_seconds * attempt)
            continue
        return Failure(error)

    # Unreachable: the final attempt always returns.
    raise AssertionError("retry loop exited without an outcome")


async def run_query(
    session: AsyncSession,
    operation: Callable[..., Awaitable[T]],
    /,
    *args: Any,
    **kwargs: Any,
) -> Success[T] | Failure:
    """Execute a read-only operation, reporting typed failures as a Failure."""
    try:
        value = await operation(session, *args, **kwargs)
    except AppError as exc:
        return Failure(exc)
    return Success(value)
