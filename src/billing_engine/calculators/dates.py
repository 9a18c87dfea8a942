"""Calendar arithmetic for commitments and payroll schedules."""

from __future__ import annotations

import calendar
import math
from datetime import date, datetime, timedelta, timezone
from typing import TypeVar

from billing_engine.calculators.types import PayrollFrequency

COMMITMENT_MONTHS = 6

_D = TypeVar("_D", date, datetime)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on read)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def add_months(value: _D, months: int) -> _D:
    """Add calendar months, clamping the day to the target month's length.

    Jan 31 + 1 month is Feb 28 (or 29), not Mar 3.
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def commitment_end(start: datetime) -> datetime:
    """End of the payroll commitment window that begins at start."""
    return add_months(as_utc(start), COMMITMENT_MONTHS)


def days_remaining(end: datetime, now: datetime) -> int:
    """Whole days until end, rounded up. Zero once end has passed."""
    seconds = (as_utc(end) - as_utc(now)).total_seconds()
    if seconds <= 0:
        return 0
    return math.ceil(seconds / 86400)


def next_payroll_date(base: date, frequency: PayrollFrequency | str) -> date:
    """Next payroll date one cycle after base."""
    freq = PayrollFrequency.parse(frequency) if isinstance(frequency, str) else frequency
    if freq is PayrollFrequency.WEEKLY:
        return base + timedelta(days=7)
    if freq is PayrollFrequency.BIWEEKLY:
        return base + timedelta(days=14)
    return add_months(base, 1)
