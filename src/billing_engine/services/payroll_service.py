"""Payroll run service: pricing, billing and schedule advance."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from billing_engine.calculators.dates import as_utc, next_payroll_date, utcnow
from billing_engine.calculators.fees import compute_payroll_charge
from billing_engine.calculators.types import PayrollCharge, PayrollFrequency
from billing_engine.models import BillingHistory, PayrollSchedule, Subscription
from billing_engine.services.company_service import CompanyService
from billing_engine.services.errors import (
    InsufficientTeamSizeError,
    InvalidScheduleError,
    PaymentMethodMissingError,
    PayrollNotEnabledError,
    SubscriptionNotFoundError,
)
from billing_engine.services.payment_service import PaymentService
from billing_engine.services.subscription_service import (
    SubscriptionService,
    subscription_fee_percent,
)
from billing_engine.services.tier_policy import MIN_TEAM_MEMBERS_FOR_SERVICES

logger = logging.getLogger(__name__)


@dataclass
class PayrollRunResult:
    """Outcome of a payroll run."""

    charge: PayrollCharge
    billing_record: BillingHistory
    next_payroll_date: date | None
    replayed: bool = False


def charge_from_record(record: BillingHistory) -> PayrollCharge:
    """Rebuild the charge stored on a billing history row."""
    return PayrollCharge(
        gross_total=record.gross_amount,
        fee_percent=record.fee_percent,
        fee=record.fee_amount,
        total_charged=record.amount,
        employee_count=record.employee_count,
    )


class PayrollService:
    """Service for running payroll against a company's subscription.

    A run is one unit of work: the billing history row and the schedule
    advance are flushed in the caller's transaction and commit together.

    Preconditions, first failure wins:
    1. subscription exists
    2. payroll tier enabled
    3. payment card connected
    4. at least MIN_TEAM_MEMBERS_FOR_SERVICES active employees
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.companies = CompanyService(session)
        self.subscriptions = SubscriptionService(session)
        self.payments = PaymentService(session)

    async def run_payroll(
        self,
        company_id: UUID,
        idempotency_key: str | None = None,
        now: datetime | None = None,
    ) -> PayrollRunResult:
        """Run payroll for all active employees and record the charge.

        A retried call carrying an idempotency key the company has already
        used returns the recorded charge and writes nothing.
        """
        now = now or utcnow()
        idempotency_key = idempotency_key or None

        subscription = await self.subscriptions.lock_subscription(company_id, create=False)
        if subscription is None:
            raise SubscriptionNotFoundError(company_id)

        if idempotency_key:
            existing = await self.payments.find_by_idempotency_key(company_id, idempotency_key)
            if existing is not None:
                logger.info(
                    "Payroll run for company %s replayed from key %s",
                    company_id,
                    idempotency_key,
                )
                schedule = await self._find_schedule(company_id)
                return PayrollRunResult(
                    charge=charge_from_record(existing),
                    billing_record=existing,
                    next_payroll_date=schedule.next_payroll_date if schedule else None,
                    replayed=True,
                )

        if not subscription.payroll_enabled:
            raise PayrollNotEnabledError()

        if await self.payments.get_card(company_id) is None:
            raise PaymentMethodMissingError()

        salaries = await self.companies.active_salaries(company_id)
        if len(salaries) < MIN_TEAM_MEMBERS_FOR_SERVICES:
            raise InsufficientTeamSizeError(
                len(salaries),
                MIN_TEAM_MEMBERS_FOR_SERVICES,
                action="running payroll",
            )

        charge = compute_payroll_charge(salaries, subscription_fee_percent(subscription))

        record = BillingHistory(
            company_id=company_id,
            billed_at=now,
            description=charge.description,
            gross_amount=charge.gross_total,
            fee_percent=charge.fee_percent,
            fee_amount=charge.fee,
            amount=charge.total_charged,
            employee_count=charge.employee_count,
            status="paid",
            idempotency_key=idempotency_key,
        )
        self.session.add(record)

        schedule = await self._get_or_create_schedule(company_id)
        today = as_utc(now).date()
        base = max(schedule.next_payroll_date or today, today)
        schedule.next_payroll_date = next_payroll_date(base, schedule.frequency)
        schedule.last_run_at = now

        await self.session.flush()

        logger.info(
            "Payroll run recorded for company %s: %d employees, %d%% fee, total %s",
            company_id,
            charge.employee_count,
            charge.fee_percent,
            charge.total_charged,
        )

        return PayrollRunResult(
            charge=charge,
            billing_record=record,
            next_payroll_date=schedule.next_payroll_date,
        )

    async def preview_payroll(self, company_id: UUID) -> PayrollCharge:
        """Price a run at the current tiers without checking or writing anything."""
        result = await self.session.execute(
            select(Subscription).where(Subscription.company_id == company_id)
        )
        subscription = result.scalar_one_or_none()
        percent = subscription_fee_percent(subscription) if subscription else 0

        salaries = await self.companies.active_salaries(company_id)
        return compute_payroll_charge(salaries, percent)

    async def get_schedule(self, company_id: UUID) -> PayrollSchedule:
        return await self._get_or_create_schedule(company_id)

    async def update_schedule(
        self,
        company_id: UUID,
        frequency: PayrollFrequency | str,
        next_date: date | None = None,
        now: datetime | None = None,
    ) -> PayrollSchedule:
        """Change the payroll cadence.

        Without an explicit next date the next run is one cycle from today.
        """
        now = now or utcnow()
        today = as_utc(now).date()
        try:
            freq = PayrollFrequency.parse(frequency) if isinstance(frequency, str) else frequency
        except ValueError:
            raise InvalidScheduleError(f"Unsupported payroll frequency: {frequency}") from None

        if next_date is not None and next_date < today:
            raise InvalidScheduleError("Next payroll date cannot be in the past")

        await self.subscriptions.lock_subscription(company_id)
        schedule = await self._get_or_create_schedule(company_id)
        schedule.frequency = freq.value
        schedule.next_payroll_date = next_date or next_payroll_date(today, freq)

        await self.session.flush()
        logger.info("Company %s payroll schedule set to %s", company_id, freq.value)
        return schedule

    async def _find_schedule(self, company_id: UUID) -> PayrollSchedule | None:
        result = await self.session.execute(
            select(PayrollSchedule).where(PayrollSchedule.company_id == company_id)
        )
        return result.scalar_one_or_none()

    async def _get_or_create_schedule(self, company_id: UUID) -> PayrollSchedule:
        schedule = await self._find_schedule(company_id)
        if schedule is None:
            schedule = PayrollSchedule(
                company_id=company_id,
                frequency=PayrollFrequency.BIWEEKLY.value,
            )
            self.session.add(schedule)
            await self.session.flush()
        return schedule
