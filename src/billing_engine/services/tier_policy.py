"""Service tier rules: team-size gating and commitment windows."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from billing_engine.calculators.dates import as_utc, days_remaining
from billing_engine.calculators.types import Tier
from billing_engine.services.errors import CommitmentActiveError, InsufficientTeamSizeError

if TYPE_CHECKING:
    from billing_engine.models import Subscription

MIN_TEAM_MEMBERS_FOR_SERVICES = 5


class PayrollTierState(str, Enum):
    """Lifecycle of the payroll tier."""

    DISABLED = "disabled"
    COMMITTED = "committed"
    MONTH_TO_MONTH = "month_to_month"


class TierPolicy:
    """Rules applied when a tier is switched on or off.

    Payroll tier:
    - disabled → committed (enable; needs the minimum team)
    - committed → committed (disable attempt before commitment end, rejected)
    - committed → month_to_month (commitment end passes)
    - month_to_month → disabled

    Tax and advisory carry no commitment. Advisory shares the team-size
    gate with payroll; tax has none.
    """

    TEAM_GATED_TIERS = frozenset({Tier.PAYROLL, Tier.ADVISORY})
    COMMITTED_TIERS = frozenset({Tier.PAYROLL})

    @classmethod
    def is_team_gated(cls, tier: Tier) -> bool:
        return tier in cls.TEAM_GATED_TIERS

    @classmethod
    def has_commitment(cls, tier: Tier) -> bool:
        return tier in cls.COMMITTED_TIERS

    @classmethod
    def payroll_state(cls, subscription: Subscription, now: datetime) -> PayrollTierState:
        """Current state of the payroll tier at time now."""
        if not subscription.payroll_enabled:
            return PayrollTierState.DISABLED
        end = subscription.commitment_end_date
        if end is not None and as_utc(now) < as_utc(end):
            return PayrollTierState.COMMITTED
        return PayrollTierState.MONTH_TO_MONTH

    @classmethod
    def validate_enable(cls, tier: Tier, active_count: int) -> None:
        """Raise InsufficientTeamSizeError if tier needs a bigger team."""
        if cls.is_team_gated(tier) and active_count < MIN_TEAM_MEMBERS_FOR_SERVICES:
            raise InsufficientTeamSizeError(
                active_count,
                MIN_TEAM_MEMBERS_FOR_SERVICES,
                action=f"the {tier.value} service",
            )

    @classmethod
    def validate_disable(cls, tier: Tier, subscription: Subscription, now: datetime) -> None:
        """Raise CommitmentActiveError if tier is still inside its commitment."""
        if not cls.has_commitment(tier):
            return
        if cls.payroll_state(subscription, now) is PayrollTierState.COMMITTED:
            end = as_utc(subscription.commitment_end_date)  # type: ignore[arg-type]
            raise CommitmentActiveError(tier.value, end, days_remaining(end, now))

    @classmethod
    def is_commitment_active(cls, subscription: Subscription, now: datetime) -> bool:
        return cls.payroll_state(subscription, now) is PayrollTierState.COMMITTED
