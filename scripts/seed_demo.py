#!/usr/bin/env python3
"""
Demo Database Seeder

Creates the schema and a demo company ready to run payroll:
- 5 active employees at 60,000 each, 1 former employee
- AMEX card connected
- payroll and tax tiers enabled (4% fee), biweekly schedule

Usage:
    python scripts/seed_demo.py --database-url postgresql+asyncpg://...

Or with environment variable:
    DATABASE_URL=postgresql+asyncpg://... python scripts/seed_demo.py
"""

import argparse
import asyncio
import os
import sys
from datetime import timedelta
from decimal import Decimal

from sqlalchemy import select

from billing_engine.calculators.dates import commitment_end, utcnow
from billing_engine.calculators.types import PayrollFrequency
from billing_engine.database import create_schema, get_engine, make_session_factory
from billing_engine.models import (
    Base,
    Company,
    Employee,
    EmployeeStatus,
    PaymentCard,
    PayrollSchedule,
    Subscription,
)

DEMO_EMAIL = "owner@acme-demo.com"

DEMO_TEAM = [
    ("Ada", "Park", EmployeeStatus.ACTIVE),
    ("Ben", "Ortiz", EmployeeStatus.ACTIVE),
    ("Chloe", "Nakamura", EmployeeStatus.ACTIVE),
    ("Dev", "Raman", EmployeeStatus.ACTIVE),
    ("Elena", "Sousa", EmployeeStatus.ACTIVE),
    ("Frank", "Hale", EmployeeStatus.INACTIVE),
]


async def create_demo_scenario(session) -> Company | None:
    """Create the demo company. Returns None when it already exists."""
    existing = await session.scalar(select(Company).where(Company.owner_email == DEMO_EMAIL))
    if existing is not None:
        return None

    now = utcnow()
    company = Company(name="Acme Demo Co", owner_email=DEMO_EMAIL)
    session.add(company)
    await session.flush()

    for first_name, last_name, status in DEMO_TEAM:
        session.add(
            Employee(
                company_id=company.company_id,
                first_name=first_name,
                last_name=last_name,
                email=f"{first_name.lower()}@acme-demo.com",
                status=status,
                salary=Decimal("60000.00"),
            )
        )

    session.add(PaymentCard(company_id=company.company_id, brand="amex", last4="1005"))
    session.add(
        Subscription(
            company_id=company.company_id,
            payroll_enabled=True,
            tax_enabled=True,
            advisory_enabled=False,
            start_date=now,
            commitment_end_date=commitment_end(now),
        )
    )
    session.add(
        PayrollSchedule(
            company_id=company.company_id,
            frequency=PayrollFrequency.BIWEEKLY.value,
            next_payroll_date=(now + timedelta(days=3)).date(),
        )
    )
    return company


async def seed(database_url: str, drop_first: bool) -> None:
    engine = get_engine(database_url)
    try:
        if drop_first:
            print("\n[1/3] Dropping existing tables...")
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.drop_all)
            print("  Done")
        else:
            print("\n[1/3] Skipping drop (use --drop-first to reset)")

        print("\n[2/3] Creating schema...")
        await create_schema(engine)
        print("  Done")

        print("\n[3/3] Creating demo scenario...")
        async with make_session_factory(engine)() as session:
            company = await create_demo_scenario(session)
            await session.commit()
        if company is None:
            print(f"  {DEMO_EMAIL} already seeded")
        else:
            print(f"  Demo company ID: {company.company_id}")
            print(f"  Owner email: {DEMO_EMAIL}")
    finally:
        await engine.dispose()


def main():
    parser = argparse.ArgumentParser(description="Seed demo database")
    parser.add_argument(
        "--database-url",
        default=os.environ.get("DATABASE_URL"),
        help="Async SQLAlchemy URL (or set DATABASE_URL)",
    )
    parser.add_argument(
        "--drop-first",
        action="store_true",
        help="Drop and recreate all tables before seeding",
    )

    args = parser.parse_args()

    if not args.database_url:
        print("ERROR: --database-url required (or set DATABASE_URL)")
        sys.exit(1)

    print("=" * 60)
    print("Demo Database Seeder")
    print("=" * 60)

    asyncio.run(seed(args.database_url, args.drop_first))

    print("\n" + "=" * 60)
    print("Demo database seeded successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()
