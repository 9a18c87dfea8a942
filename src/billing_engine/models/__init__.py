"""ORM models."""

from billing_engine.models.base import Base, TimestampMixin
from billing_engine.models.billing import (
    AdvisorySession,
    BillingHistory,
    PaymentCard,
    PayrollSchedule,
    Subscription,
)
from billing_engine.models.company import (
    Company,
    Employee,
    EmployeeStatus,
    EmploymentType,
    normalize_email,
)

__all__ = [
    "AdvisorySession",
    "Base",
    "BillingHistory",
    "Company",
    "Employee",
    "EmployeeStatus",
    "EmploymentType",
    "PaymentCard",
    "PayrollSchedule",
    "Subscription",
    "TimestampMixin",
    "normalize_email",
]
