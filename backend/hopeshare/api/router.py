"""Aggregate all sub-routers."""

from fastapi import APIRouter

from hopeshare.api.banks import router as banks_router
from hopeshare.api.campaigns import router as campaigns_router
from hopeshare.api.deposits import router as deposits_router
from hopeshare.api.donations import router as donations_router
from hopeshare.api.donations import webhook_router
from hopeshare.api.financial_reports import router as financial_reports_router
from hopeshare.api.health import router as health_router
from hopeshare.api.payout_configs import router as payout_configs_router
from hopeshare.api.reports import router as reports_router
from hopeshare.api.users import router as users_router
from hopeshare.api.validations import router as validations_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
# Deposit routes first: their literal segments must win over /campanha/{campanha_id}
api_router.include_router(deposits_router, prefix="/campanha", tags=["deposits"])
api_router.include_router(campaigns_router, prefix="/campanha", tags=["campaigns"])
api_router.include_router(donations_router, prefix="/donations", tags=["donations"])
api_router.include_router(webhook_router, prefix="/webhooks", tags=["webhooks"])
api_router.include_router(validations_router, prefix="/validation", tags=["validation"])
api_router.include_router(
    payout_configs_router, prefix="/config-receipt", tags=["payout-config"]
)
api_router.include_router(reports_router, prefix="/report", tags=["reports"])
api_router.include_router(
    financial_reports_router, prefix="/financial-report", tags=["financial-reports"]
)
api_router.include_router(banks_router, prefix="/banks", tags=["banks"])
