from fastapi import APIRouter

from leaveflow.api.approvals import approvals_router
from leaveflow.api.audit import audit_router
from leaveflow.api.holidays import holidays_router
from leaveflow.api.ledger import adjustment_router, user_ledger_router
from leaveflow.api.requests import requests_router
from leaveflow.api.users import users_router

api_router = APIRouter()
api_router.include_router(users_router)
api_router.include_router(user_ledger_router)
api_router.include_router(adjustment_router)
api_router.include_router(requests_router)
api_router.include_router(approvals_router)
api_router.include_router(holidays_router)
api_router.include_router(audit_router)
