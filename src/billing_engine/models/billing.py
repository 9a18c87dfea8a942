"""Subscription, billing and scheduling models."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from billing_engine.models.base import Base, TimestampMixin, utcnow
from billing_engine.models.company import Company


class Subscription(Base, TimestampMixin):
    """Enabled service tiers for a company. At most one per company."""

    __tablename__ = "subscription"

    subscription_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    company_id: Mapped[UUID] = mapped_column(
        ForeignKey("company.company_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    payroll_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tax_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    advisory_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    start_date: Mapped[datetime | None] = mapped_column(nullable=True)
    commitment_end_date: Mapped[datetime | None] = mapped_column(nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )

    # Relationships
    company: Mapped[Company] = relationship(back_populates="subscription")


class PaymentCard(Base):
    """Connected payment card used to fund payroll runs."""

    __tablename__ = "payment_card"

    card_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    company_id: Mapped[UUID] = mapped_column(
        ForeignKey("company.company_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    brand: Mapped[str] = mapped_column(String, nullable=False, default="amex")
    last4: Mapped[str] = mapped_column(String(4), nullable=False)
    cardholder_name: Mapped[str | None] = mapped_column(String, nullable=True)
    expiry_month: Mapped[int | None] = mapped_column(Integer, nullable=True)
    expiry_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    connected_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    # Relationships
    company: Mapped[Company] = relationship(back_populates="payment_card")


class BillingHistory(Base):
    """Append-only billing record. One row per payroll run."""

    __tablename__ = "billing_history"

    billing_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    company_id: Mapped[UUID] = mapped_column(
        ForeignKey("company.company_id", ondelete="CASCADE"),
        nullable=False,
    )
    billed_at: Mapped[datetime] = mapped_column(nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False)
    gross_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    fee_percent: Mapped[int] = mapped_column(Integer, nullable=False)
    fee_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    employee_count: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="paid")
    idempotency_key: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "company_id",
            "idempotency_key",
            name="billing_history_company_idempotency_unique",
        ),
        CheckConstraint(
            "status IN ('paid', 'pending', 'failed')",
            name="billing_history_status_check",
        ),
        Index("ix_billing_history_company_billed_at", "company_id", "billed_at"),
    )

    # Relationships
    company: Mapped[Company] = relationship(back_populates="billing_history")


class PayrollSchedule(Base, TimestampMixin):
    """Payroll cadence. next_payroll_date is informational only."""

    __tablename__ = "payroll_schedule"

    schedule_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    company_id: Mapped[UUID] = mapped_column(
        ForeignKey("company.company_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    frequency: Mapped[str] = mapped_column(String, nullable=False, default="biweekly")
    next_payroll_date: Mapped[date | None] = mapped_column(nullable=True)
    last_run_at: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (
        CheckConstraint(
            "frequency IN ('weekly', 'biweekly', 'monthly')",
            name="payroll_schedule_frequency_check",
        ),
    )

    # Relationships
    company: Mapped[Company] = relationship(back_populates="payroll_schedule")


class AdvisorySession(Base, TimestampMixin):
    """Scheduled advisory meeting."""

    __tablename__ = "advisory_session"

    session_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    company_id: Mapped[UUID] = mapped_column(
        ForeignKey("company.company_id", ondelete="CASCADE"),
        nullable=False,
    )
    session_type: Mapped[str] = mapped_column(String, nullable=False)
    session_date: Mapped[date] = mapped_column(nullable=False)
    session_time: Mapped[time] = mapped_column(nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    advisor: Mapped[str | None] = mapped_column(String, nullable=True)
    meeting_link: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="scheduled")

    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="advisory_session_duration_positive"),
        CheckConstraint(
            "status IN ('scheduled', 'completed', 'cancelled')",
            name="advisory_session_status_check",
        ),
    )

    # Relationships
    company: Mapped[Company] = relationship(back_populates="advisory_sessions")
