"""Team management: the employees whose headcount drives every tier rule."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from billing_engine.models import Employee, EmployeeStatus, EmploymentType
from billing_engine.services.errors import EmployeeNotFoundError
from billing_engine.services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {
        "first_name",
        "last_name",
        "email",
        "role",
        "department",
        "employment_type",
        "start_date",
        "salary",
        "status",
        "ssn",
    }
)


def ssn_last4(ssn: str) -> str:
    """Keep only the last four digits of an SSN."""
    digits = re.sub(r"\D", "", ssn)
    if len(digits) < 4:
        raise ValueError("SSN must contain at least four digits")
    return digits[-4:]


@dataclass
class EmployeeDetails:
    """A new team member."""

    first_name: str
    last_name: str
    salary: Decimal
    email: str | None = None
    role: str | None = None
    department: str | None = None
    employment_type: str = EmploymentType.FULL_TIME
    start_date: date | None = None
    ssn: str | None = None


class TeamService:
    """Adds, edits and deactivates a company's employees.

    Team changes take the company's subscription lock, so a headcount
    change cannot interleave with a payroll run or tier change.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.subscriptions = SubscriptionService(session)

    async def list_employees(self, company_id: UUID) -> list[Employee]:
        result = await self.session.execute(
            select(Employee)
            .where(Employee.company_id == company_id)
            .order_by(Employee.created_at, Employee.last_name)
        )
        return list(result.scalars().all())

    async def get_employee(self, company_id: UUID, employee_id: UUID) -> Employee:
        result = await self.session.execute(
            select(Employee).where(
                Employee.company_id == company_id,
                Employee.employee_id == employee_id,
            )
        )
        employee = result.scalar_one_or_none()
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    async def add_employee(self, company_id: UUID, details: EmployeeDetails) -> Employee:
        """Add an active employee."""
        await self.subscriptions.lock_subscription(company_id)

        employee = Employee(
            company_id=company_id,
            first_name=details.first_name,
            last_name=details.last_name,
            email=details.email,
            role=details.role,
            department=details.department,
            employment_type=details.employment_type,
            start_date=details.start_date,
            ssn_last4=ssn_last4(details.ssn) if details.ssn else None,
            status=EmployeeStatus.ACTIVE,
            salary=details.salary,
        )
        self.session.add(employee)
        await self.session.flush()

        logger.info("Employee %s added to company %s", employee.employee_id, company_id)
        return employee

    async def update_employee(
        self,
        company_id: UUID,
        employee_id: UUID,
        **changes: Any,
    ) -> Employee:
        """Apply field changes. An ``ssn`` change stores only its last four digits."""
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update employee fields: {', '.join(sorted(unknown))}")

        await self.subscriptions.lock_subscription(company_id)
        employee = await self.get_employee(company_id, employee_id)
        fields = sorted(changes)

        ssn = changes.pop("ssn", None)
        if ssn:
            employee.ssn_last4 = ssn_last4(ssn)
        for field, value in changes.items():
            setattr(employee, field, value)

        await self.session.flush()
        logger.info(
            "Employee %s of company %s updated: %s",
            employee_id,
            company_id,
            ", ".join(fields),
        )
        return employee

    async def deactivate_employee(self, company_id: UUID, employee_id: UUID) -> Employee:
        """Take an employee off the active team. The record is kept."""
        await self.subscriptions.lock_subscription(company_id)
        employee = await self.get_employee(company_id, employee_id)
        employee.status = EmployeeStatus.INACTIVE

        await self.session.flush()
        logger.info("Employee %s of company %s deactivated", employee_id, company_id)
        return employee
