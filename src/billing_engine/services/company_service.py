"""Company lookup and team queries."""

from __future__ import annotations

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from billing_engine.models import Company, Employee, EmployeeStatus, normalize_email
from billing_engine.services.errors import CompanyNotFoundError

logger = logging.getLogger(__name__)


class CompanyService:
    """Resolves callers to companies and answers team-size questions.

    Only employees with status ``active`` count toward team minimums and
    payroll totals.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def resolve_company(self, email: str) -> Company:
        """Find the company owned by email. Case-insensitive."""
        result = await self.session.execute(
            select(Company).where(func.lower(Company.owner_email) == normalize_email(email))
        )
        company = result.scalar_one_or_none()
        if company is None:
            logger.info("No company for owner email lookup")
            raise CompanyNotFoundError(email)
        return company

    async def count_active_employees(self, company_id: UUID) -> int:
        count = await self.session.scalar(
            select(func.count())
            .select_from(Employee)
            .where(
                Employee.company_id == company_id,
                Employee.status == EmployeeStatus.ACTIVE,
            )
        )
        return int(count or 0)

    async def active_salaries(self, company_id: UUID) -> list[Decimal]:
        result = await self.session.execute(
            select(Employee.salary).where(
                Employee.company_id == company_id,
                Employee.status == EmployeeStatus.ACTIVE,
            )
        )
        return [Decimal(s) for s in result.scalars().all()]
