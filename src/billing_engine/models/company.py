"""Company and employee models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from billing_engine.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from billing_engine.models.billing import (
        AdvisorySession,
        BillingHistory,
        PaymentCard,
        PayrollSchedule,
        Subscription,
    )


class EmployeeStatus:
    """Employee status values."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class EmploymentType:
    """Employment type values."""

    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACTOR = "contractor"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class Company(Base, TimestampMixin):
    """Client company. The owner's email identifies the caller.

    Owner emails are stored lowercased and unique regardless of case.
    """

    __tablename__ = "company"

    company_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String, nullable=False)
    owner_email: Mapped[str] = mapped_column(String, nullable=False)

    # Relationships
    employees: Mapped[list[Employee]] = relationship(back_populates="company")
    subscription: Mapped[Subscription | None] = relationship(back_populates="company")
    payment_card: Mapped[PaymentCard | None] = relationship(back_populates="company")
    payroll_schedule: Mapped[PayrollSchedule | None] = relationship(back_populates="company")
    billing_history: Mapped[list[BillingHistory]] = relationship(back_populates="company")
    advisory_sessions: Mapped[list[AdvisorySession]] = relationship(back_populates="company")

    @validates("owner_email")
    def _normalize_owner_email(self, key: str, value: str) -> str:
        return normalize_email(value)


Index("uq_company_owner_email_lower", func.lower(Company.owner_email), unique=True)


class Employee(Base, TimestampMixin):
    """Employee on a company's team.

    Only the last four digits of an SSN are ever stored.
    """

    __tablename__ = "employee"

    employee_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    company_id: Mapped[UUID] = mapped_column(
        ForeignKey("company.company_id", ondelete="CASCADE"),
        nullable=False,
    )
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    role: Mapped[str | None] = mapped_column(String, nullable=True)
    department: Mapped[str | None] = mapped_column(String, nullable=True)
    employment_type: Mapped[str] = mapped_column(
        String,
        nullable=False,
        default=EmploymentType.FULL_TIME,
    )
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    ssn_last4: Mapped[str | None] = mapped_column(String(4), nullable=True)
    status: Mapped[str] = mapped_column(
        String,
        nullable=False,
        default=EmployeeStatus.ACTIVE,
    )
    salary: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0"),
    )

    __table_args__ = (
        CheckConstraint("status IN ('active', 'inactive')", name="employee_status_check"),
        CheckConstraint(
            "employment_type IN ('full-time', 'part-time', 'contractor')",
            name="employee_employment_type_check",
        ),
        CheckConstraint("salary >= 0", name="employee_salary_non_negative"),
        Index("ix_employee_company_status", "company_id", "status"),
    )

    # Relationships
    company: Mapped[Company] = relationship(back_populates="employees")
