"""Type definitions shared by the billing calculators."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class Tier(str, Enum):
    """Service tiers a company can subscribe to."""

    PAYROLL = "payroll"
    TAX = "tax"
    ADVISORY = "advisory"


class PayrollFrequency(str, Enum):
    """Payroll cadence values."""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: str) -> PayrollFrequency:
        """Parse a frequency, accepting the 'bi-weekly' spelling."""
        normalized = value.strip().lower().replace("-", "").replace("_", "")
        return cls(normalized)


@dataclass(frozen=True)
class PayrollCharge:
    """Result of pricing one payroll run."""

    gross_total: Decimal
    fee_percent: int
    fee: Decimal
    total_charged: Decimal
    employee_count: int

    @property
    def description(self) -> str:
        """Billing history line for this charge."""
        return (
            f"Payroll - {self.employee_count} employees "
            f"({self.fee_percent}% fee)"
        )
