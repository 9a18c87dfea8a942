"""Domain errors raised by the billing services.

Every error carries the HTTP status it maps to, a stable machine code and
an optional ``context`` dict with remediation data (current vs. required
team size, days left on a commitment). The API layer renders them as
``{"message": ..., "code": ..., **context}``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID


class BillingError(Exception):
    """Base class for client-facing billing errors."""

    status_code: int = 400
    code: str = "BILLING_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)


# --- NotFound ---------------------------------------------------------------


class NotFoundError(BillingError):
    status_code = 404
    code = "NOT_FOUND"


class CompanyNotFoundError(NotFoundError):
    """Raised when no company matches the caller."""

    code = "COMPANY_NOT_FOUND"

    def __init__(self, identifier: str | UUID):
        self.identifier = identifier
        super().__init__("Company not found")


class SubscriptionNotFoundError(NotFoundError):
    """Raised when a company has never had a subscription."""

    code = "SUBSCRIPTION_NOT_FOUND"

    def __init__(self, company_id: UUID):
        self.company_id = company_id
        super().__init__("Subscription not found")


class EmployeeNotFoundError(NotFoundError):
    """Raised when an employee id is not on the caller's team."""

    code = "EMPLOYEE_NOT_FOUND"

    def __init__(self, employee_id: UUID):
        self.employee_id = employee_id
        super().__init__("Employee not found")


# --- PreconditionFailed -----------------------------------------------------


class PreconditionFailedError(BillingError):
    code = "PRECONDITION_FAILED"


class InsufficientTeamSizeError(PreconditionFailedError):
    """Raised when a gated action needs more active employees."""

    code = "INSUFFICIENT_TEAM_SIZE"

    def __init__(self, current: int, required: int, action: str = "this service"):
        self.current = current
        self.required = required
        super().__init__(
            f"A minimum of {required} active team members is required for {action}",
            {"currentTeamSize": current, "required": required},
        )


class PayrollNotEnabledError(PreconditionFailedError):
    code = "PAYROLL_NOT_ENABLED"

    def __init__(self) -> None:
        super().__init__("Payroll service is not enabled")


class PaymentMethodMissingError(PreconditionFailedError):
    code = "PAYMENT_METHOD_MISSING"

    def __init__(self) -> None:
        super().__init__("A connected payment card is required to run payroll")


class TierNotEnabledError(PreconditionFailedError):
    """Raised when none of the tiers that unlock an action is enabled."""

    code = "TIER_NOT_ENABLED"

    def __init__(self, required_tiers: list[str]):
        self.required_tiers = required_tiers
        super().__init__(
            f"One of these services must be enabled: {', '.join(required_tiers)}",
            {"requiredTiers": required_tiers},
        )


# --- CommitmentViolation ----------------------------------------------------


class CommitmentActiveError(BillingError):
    """Raised on an attempt to cancel a tier inside its commitment window."""

    code = "COMMITMENT_ACTIVE"

    def __init__(self, tier: str, commitment_end_date: datetime, days_remaining: int):
        self.tier = tier
        self.commitment_end_date = commitment_end_date
        self.days_remaining = days_remaining
        super().__init__(
            f"Cannot disable {tier} during the 6-month commitment period",
            {
                "commitmentEndDate": commitment_end_date.isoformat(),
                "daysRemaining": days_remaining,
            },
        )


# --- ValidationError --------------------------------------------------------


class InvalidScheduleError(BillingError):
    """Raised for a payroll schedule that cannot be applied."""

    code = "INVALID_SCHEDULE"
