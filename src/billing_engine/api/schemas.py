"""Pydantic schemas for API request/response models.

Field names are snake_case in Python and camelCase on the wire, which is
what the dashboard frontend sends and expects.
"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CallerRequest(CamelModel):
    """Every request identifies the caller by the company owner's email."""

    email: str = Field(min_length=3, max_length=320)


# ============================================================================
# Team schemas
# ============================================================================

EmploymentTypeValue = Literal["full-time", "part-time", "contractor"]
SSN_PATTERN = r"^\d{3}-?\d{2}-?\d{4}$"


class TeamMemberCreate(CamelModel):
    """Schema for adding an employee. ``email`` here is the employee's."""

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: str | None = Field(default=None, max_length=320)
    role: str | None = Field(default=None, max_length=200)
    department: str | None = Field(default=None, max_length=200)
    employment_type: EmploymentTypeValue = "full-time"
    salary: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    start_date: date | None = None
    ssn: str | None = Field(default=None, pattern=SSN_PATTERN)


class TeamMemberUpdate(CamelModel):
    """Schema for editing an employee. Only fields sent are changed."""

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: str | None = Field(default=None, max_length=320)
    role: str | None = Field(default=None, max_length=200)
    department: str | None = Field(default=None, max_length=200)
    employment_type: EmploymentTypeValue | None = None
    salary: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    start_date: date | None = None
    status: Literal["active", "inactive"] | None = None
    ssn: str | None = Field(default=None, pattern=SSN_PATTERN)


class TeamMemberResponse(CamelModel):
    """Schema for an employee. The SSN is never returned, only its last four."""

    employee_id: UUID = Field(serialization_alias="id")
    first_name: str
    last_name: str
    email: str | None = None
    role: str | None = None
    department: str | None = None
    employment_type: str
    salary: Decimal
    start_date: date | None = None
    ssn_last4: str | None = None
    status: str
    created_at: datetime


class TeamMemberEnvelope(CamelModel):
    employee: TeamMemberResponse


class TeamListResponse(CamelModel):
    employees: list[TeamMemberResponse]


class TeamMemberRemovedResponse(CamelModel):
    message: str
    employee: TeamMemberResponse


# ============================================================================
# Subscription schemas
# ============================================================================


class SubscriptionUpdate(CallerRequest):
    """Desired tier states. Omitted tiers are left as they are."""

    payroll_enabled: bool | None = None
    tax_enabled: bool | None = None
    advisory_enabled: bool | None = None


class SubscriptionResponse(CamelModel):
    """Schema for subscription response."""

    company_id: UUID
    payroll_enabled: bool
    tax_enabled: bool
    advisory_enabled: bool
    start_date: datetime | None = None
    commitment_end_date: datetime | None = None
    commitment_active: bool = False
    fee_percent: int = 0


# ============================================================================
# Payroll schemas
# ============================================================================


class PayrollRunRequest(CallerRequest):
    """Schema for running payroll."""

    idempotency_key: str | None = Field(default=None, min_length=1, max_length=128)


class PayrollChargeResponse(CamelModel):
    """Amounts for one payroll run."""

    payroll_amount: Decimal
    fee: Decimal
    total_charged: Decimal
    fee_percent: int
    employee_count: int


class PayrollRunResponse(PayrollChargeResponse):
    """Schema for a completed payroll run."""

    billing_id: UUID
    next_payroll_date: date | None = None


class PayrollScheduleUpdate(CallerRequest):
    """Schema for changing the payroll cadence."""

    frequency: Literal["weekly", "biweekly", "bi-weekly", "monthly"]
    next_payroll_date: date | None = None


class PayrollScheduleResponse(CamelModel):
    """Schema for payroll schedule response."""

    company_id: UUID
    frequency: str
    next_payroll_date: date | None = None
    last_run_at: datetime | None = None


# ============================================================================
# Payment schemas
# ============================================================================


class CardConnectRequest(CamelModel):
    """Schema for connecting an AMEX card. Only the last four digits are sent."""

    last4: str = Field(pattern=r"^\d{4}$")
    cardholder_name: str | None = Field(default=None, max_length=200)
    expiry_month: int | None = Field(default=None, ge=1, le=12)
    expiry_year: int | None = Field(default=None, ge=2000, le=2100)


class CardResponse(CamelModel):
    """Schema for connected card response."""

    card_id: UUID
    brand: str
    last4: str
    cardholder_name: str | None = None
    expiry_month: int | None = None
    expiry_year: int | None = None
    connected_at: datetime


class CardStatusResponse(CamelModel):
    """Whether a card is connected, and which."""

    connected: bool
    card: CardResponse | None = None


class BillingHistoryResponse(CamelModel):
    """Schema for a billing history entry."""

    billing_id: UUID
    billed_at: datetime = Field(serialization_alias="date")
    description: str
    amount: Decimal
    status: str
    gross_amount: Decimal
    fee_percent: int
    fee_amount: Decimal
    employee_count: int


class BillingHistoryListResponse(CamelModel):
    """Billing history, newest first."""

    history: list[BillingHistoryResponse]


# ============================================================================
# Advisory schemas
# ============================================================================


class AdvisorySessionCreate(CallerRequest):
    """Schema for booking an advisory session."""

    session_type: str = Field(alias="type", min_length=1, max_length=100)
    session_date: date = Field(alias="date")
    session_time: time = Field(alias="time")
    duration_minutes: int = Field(alias="duration", gt=0, le=480)
    advisor: str | None = None
    meeting_link: str | None = None


class AdvisorySessionResponse(CamelModel):
    """Schema for advisory session response."""

    session_id: UUID
    company_id: UUID
    session_type: str = Field(serialization_alias="type")
    session_date: date = Field(serialization_alias="date")
    session_time: time = Field(serialization_alias="time")
    duration_minutes: int = Field(serialization_alias="duration")
    advisor: str | None = None
    meeting_link: str | None = None
    status: str
    created_at: datetime


# ============================================================================
# Health & error schemas
# ============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    database: str
    version: str


class ErrorResponse(BaseModel):
    """Schema for error response.

    Remediation fields (``currentTeamSize``, ``daysRemaining``, ...) are
    added alongside ``message`` and ``code``.
    """

    model_config = ConfigDict(extra="allow")

    message: str
    code: str
