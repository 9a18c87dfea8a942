"""API routes."""

from billing_engine.api.routes.advisory import router as advisory_router
from billing_engine.api.routes.billing import router as billing_router
from billing_engine.api.routes.health import router as health_router
from billing_engine.api.routes.payments import router as payments_router
from billing_engine.api.routes.payroll import router as payroll_router
from billing_engine.api.routes.subscriptions import router as subscriptions_router
from billing_engine.api.routes.team import router as team_router

__all__ = [
    "advisory_router",
    "billing_router",
    "health_router",
    "payments_router",
    "payroll_router",
    "subscriptions_router",
    "team_router",
]
