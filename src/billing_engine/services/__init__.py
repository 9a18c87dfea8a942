"""Billing engine services."""

from billing_engine.services.advisory_service import AdvisoryService, SessionDetails
from billing_engine.services.company_service import CompanyService
from billing_engine.services.payment_service import PaymentService
from billing_engine.services.payroll_service import PayrollRunResult, PayrollService
from billing_engine.services.subscription_service import SubscriptionService
from billing_engine.services.team_service import EmployeeDetails, TeamService
from billing_engine.services.tier_policy import (
    MIN_TEAM_MEMBERS_FOR_SERVICES,
    PayrollTierState,
    TierPolicy,
)

__all__ = [
    "AdvisoryService",
    "CompanyService",
    "EmployeeDetails",
    "MIN_TEAM_MEMBERS_FOR_SERVICES",
    "PaymentService",
    "PayrollRunResult",
    "PayrollService",
    "PayrollTierState",
    "SessionDetails",
    "SubscriptionService",
    "TeamService",
    "TierPolicy",
]
