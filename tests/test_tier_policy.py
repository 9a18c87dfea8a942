"""Tests for service tier rules."""

from datetime import datetime, timedelta, timezone

import pytest

from billing_engine.calculators.dates import commitment_end
from billing_engine.calculators.types import Tier
from billing_engine.models import Subscription
from billing_engine.services.errors import CommitmentActiveError, InsufficientTeamSizeError
from billing_engine.services.tier_policy import (
    MIN_TEAM_MEMBERS_FOR_SERVICES,
    PayrollTierState,
    TierPolicy,
)

START = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def payroll_subscription(enabled: bool = True) -> Subscription:
    return Subscription(
        payroll_enabled=enabled,
        tax_enabled=False,
        advisory_enabled=False,
        start_date=START if enabled else None,
        commitment_end_date=commitment_end(START) if enabled else None,
    )


class TestTeamGate:
    def test_minimum_is_five(self):
        assert MIN_TEAM_MEMBERS_FOR_SERVICES == 5

    @pytest.mark.parametrize("tier", [Tier.PAYROLL, Tier.ADVISORY])
    def test_gated_tiers_need_five(self, tier):
        with pytest.raises(InsufficientTeamSizeError) as exc_info:
            TierPolicy.validate_enable(tier, 4)

        assert exc_info.value.context == {"currentTeamSize": 4, "required": 5}
        TierPolicy.validate_enable(tier, 5)

    def test_tax_is_not_gated(self):
        TierPolicy.validate_enable(Tier.TAX, 0)
        assert TierPolicy.is_team_gated(Tier.TAX) is False


class TestPayrollCommitment:
    def test_states(self):
        sub = payroll_subscription()
        assert TierPolicy.payroll_state(sub, START + timedelta(days=1)) is PayrollTierState.COMMITTED
        assert (
            TierPolicy.payroll_state(sub, commitment_end(START))
            is PayrollTierState.MONTH_TO_MONTH
        )
        assert (
            TierPolicy.payroll_state(payroll_subscription(False), START)
            is PayrollTierState.DISABLED
        )

    def test_disable_inside_window_rejected(self):
        sub = payroll_subscription()
        with pytest.raises(CommitmentActiveError) as exc_info:
            TierPolicy.validate_disable(Tier.PAYROLL, sub, START + timedelta(days=10))

        assert exc_info.value.days_remaining == 171
        assert exc_info.value.context["daysRemaining"] == 171
        assert exc_info.value.status_code == 400

    def test_disable_after_window_allowed(self):
        sub = payroll_subscription()
        TierPolicy.validate_disable(Tier.PAYROLL, sub, commitment_end(START))

    def test_naive_stored_dates_compare(self):
        """SQLite hands back naive datetimes; they are read as UTC."""
        sub = payroll_subscription()
        sub.commitment_end_date = commitment_end(START).replace(tzinfo=None)
        assert TierPolicy.is_commitment_active(sub, START + timedelta(days=1)) is True

    @pytest.mark.parametrize("tier", [Tier.TAX, Tier.ADVISORY])
    def test_other_tiers_have_no_commitment(self, tier):
        sub = payroll_subscription()
        TierPolicy.validate_disable(tier, sub, START + timedelta(days=1))
        assert TierPolicy.has_commitment(tier) is False
