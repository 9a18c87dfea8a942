"""Subscription tier management."""

from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from billing_engine.calculators.dates import commitment_end, utcnow
from billing_engine.calculators.fees import fee_percent
from billing_engine.calculators.types import Tier
from billing_engine.database import insert_ignoring_conflicts
from billing_engine.models import Subscription
from billing_engine.services.company_service import CompanyService
from billing_engine.services.errors import InsufficientTeamSizeError, SubscriptionNotFoundError
from billing_engine.services.tier_policy import TierPolicy

logger = logging.getLogger(__name__)


def tier_enabled(subscription: Subscription, tier: Tier) -> bool:
    """Whether tier is switched on in subscription."""
    return bool(getattr(subscription, f"{tier.value}_enabled"))


def subscription_fee_percent(subscription: Subscription) -> int:
    return fee_percent(
        subscription.payroll_enabled,
        subscription.tax_enabled,
        subscription.advisory_enabled,
    )


class SubscriptionService:
    """Service for reading and changing a company's service tiers.

    All mutations go through ``lock_subscription`` so that concurrent
    requests for the same company are serialized on the subscription row.
    The caller owns the transaction and commits once the operation returns.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.companies = CompanyService(session)

    async def lock_subscription(
        self,
        company_id: UUID,
        create: bool = True,
    ) -> Subscription | None:
        """Load the subscription row FOR UPDATE, creating it if absent.

        Creation is an INSERT ... ON CONFLICT DO NOTHING, so two requests
        racing to create the first subscription end up on the same row.
        """
        if create:
            await self.session.execute(
                insert_ignoring_conflicts(self.session, Subscription, ["company_id"]).values(
                    subscription_id=uuid4(),
                    company_id=company_id,
                    payroll_enabled=False,
                    tax_enabled=False,
                    advisory_enabled=False,
                )
            )

        result = await self.session.execute(
            select(Subscription)
            .where(Subscription.company_id == company_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_subscription(self, company_id: UUID) -> Subscription:
        """Return the company's subscription, creating a disabled one on first read."""
        subscription = await self.lock_subscription(company_id)
        if subscription is None:
            raise SubscriptionNotFoundError(company_id)
        return subscription

    async def set_subscription_tiers(
        self,
        company_id: UUID,
        payroll: bool | None = None,
        tax: bool | None = None,
        advisory: bool | None = None,
        now: datetime | None = None,
    ) -> Subscription:
        """Apply the desired tier states.

        Tiers passed as None are left unchanged. Every rule is checked
        before anything is modified, so a rejected request leaves the
        subscription exactly as it was.

        Raises:
            InsufficientTeamSizeError: enabling payroll or advisory below
                the minimum team size
            CommitmentActiveError: disabling payroll inside its commitment
        """
        now = now or utcnow()
        subscription = await self.get_subscription(company_id)

        desired = {Tier.PAYROLL: payroll, Tier.TAX: tax, Tier.ADVISORY: advisory}
        changes = {
            tier: want
            for tier, want in desired.items()
            if want is not None and want != tier_enabled(subscription, tier)
        }

        enabling = [tier for tier, want in changes.items() if want]
        disabling = [tier for tier, want in changes.items() if not want]

        gated = [tier for tier in enabling if TierPolicy.is_team_gated(tier)]
        if gated:
            active_count = await self.companies.count_active_employees(company_id)
            for tier in gated:
                try:
                    TierPolicy.validate_enable(tier, active_count)
                except InsufficientTeamSizeError:
                    logger.info(
                        "Rejected enabling %s for company %s: %d active employees",
                        tier.value,
                        company_id,
                        active_count,
                    )
                    raise

        for tier in disabling:
            TierPolicy.validate_disable(tier, subscription, now)

        for tier, want in changes.items():
            setattr(subscription, f"{tier.value}_enabled", want)
            if tier is Tier.PAYROLL and want:
                subscription.start_date = now
                subscription.commitment_end_date = commitment_end(now)

        if changes:
            await self.session.flush()
            logger.info(
                "Company %s tiers changed: %s",
                company_id,
                ", ".join(f"{t.value}={'on' if w else 'off'}" for t, w in changes.items()),
            )

        return subscription
