"""Discriminated results returned by every exposed engine operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from leaveflow.exceptions import AppError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """The operation was accepted; ``value`` is its payload."""

    value: T


@dataclass(frozen=True)
class Failure:
    """The operation was refused or failed; nothing was persisted."""

    error: AppError

    @property
    def error_type(self) -> str:
        return type(self.error).__name__


def unwrap(outcome: Success[T] | Failure) -> T:
    """Return the success payload or raise the carried error."""
    if isinstance(outcome, Failure):
        raise outcome.error
    return outcome.value
