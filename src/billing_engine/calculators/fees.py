"""Tiered fee computation for payroll runs.

Each enabled tier adds a fixed number of percentage points to the fee
charged on gross payroll:

    Payroll   2
    Tax       2
    Advisory  1

The fee is rounded half-up to cents and added on top of gross.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from billing_engine.calculators.types import PayrollCharge, Tier

CENTS = Decimal("0.01")

TIER_FEE_PERCENT: dict[Tier, int] = {
    Tier.PAYROLL: 2,
    Tier.TAX: 2,
    Tier.ADVISORY: 1,
}


def quantize_money(amount: Decimal) -> Decimal:
    """Round to cents, half-up."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def fee_percent(payroll: bool, tax: bool, advisory: bool) -> int:
    """Sum the percentage points of the enabled tiers."""
    enabled = {Tier.PAYROLL: payroll, Tier.TAX: tax, Tier.ADVISORY: advisory}
    return sum(TIER_FEE_PERCENT[tier] for tier, on in enabled.items() if on)


def compute_payroll_charge(salaries: Iterable[Decimal], percent: int) -> PayrollCharge:
    """Price a payroll run over the given active-employee salaries."""
    amounts = [Decimal(s) for s in salaries]
    gross_total = quantize_money(sum(amounts, Decimal("0")))
    fee = quantize_money(gross_total * Decimal(percent) / Decimal(100))

    return PayrollCharge(
        gross_total=gross_total,
        fee_percent=percent,
        fee=fee,
        total_charged=gross_total + fee,
        employee_count=len(amounts),
    )
