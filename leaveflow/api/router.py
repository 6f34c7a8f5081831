from fastapi import APIRouter

from leaveflow.api.balances import balance_admin_router, employee_balance_router
from leaveflow.api.coverage import coverage_router
from leaveflow.api.holidays import holidays_router
from leaveflow.api.policies import router as policies_router
from leaveflow.api.requests import requests_router

api_router = APIRouter()
api_router.include_router(requests_router)
api_router.include_router(employee_balance_router)
api_router.include_router(balance_admin_router)
api_router.include_router(coverage_router)
api_router.include_router(policies_router)
api_router.include_router(holidays_router)
