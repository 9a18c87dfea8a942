"""Subscription and billing rule engine for payroll, tax and advisory tiers."""

__version__ = "0.1.0"
