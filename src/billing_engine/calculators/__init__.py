"""Pure billing calculations: fees and calendar math."""

from billing_engine.calculators.dates import (
    COMMITMENT_MONTHS,
    add_months,
    commitment_end,
    days_remaining,
    next_payroll_date,
)
from billing_engine.calculators.fees import (
    TIER_FEE_PERCENT,
    compute_payroll_charge,
    fee_percent,
)
from billing_engine.calculators.types import PayrollCharge, PayrollFrequency, Tier

__all__ = [
    "COMMITMENT_MONTHS",
    "PayrollCharge",
    "PayrollFrequency",
    "TIER_FEE_PERCENT",
    "Tier",
    "add_months",
    "commitment_end",
    "compute_payroll_charge",
    "days_remaining",
    "fee_percent",
    "next_payroll_date",
]
