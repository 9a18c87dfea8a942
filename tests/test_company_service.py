"""Tests for caller resolution and team queries."""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from billing_engine.models import Company
from billing_engine.services.company_service import CompanyService
from billing_engine.services.errors import CompanyNotFoundError

from tests.factories import create_company

pytestmark = pytest.mark.asyncio


class TestResolveCompany:
    async def test_owner_email_is_stored_lowercased(self, session: AsyncSession):
        company = await create_company(session, email="  Owner@Example.COM ")

        assert company.owner_email == "owner@example.com"

    async def test_lookup_ignores_case(self, session: AsyncSession):
        company = await create_company(session, email="owner@example.com")

        found = await CompanyService(session).resolve_company("Owner@EXAMPLE.com")

        assert found.company_id == company.company_id

    async def test_emails_differing_only_in_case_collide(self, session: AsyncSession):
        await create_company(session, email="Owner@Example.com")

        session.add(Company(name="Copycat Co", owner_email="owner@example.com"))
        with pytest.raises(IntegrityError):
            await session.flush()

    async def test_unknown_email(self, session: AsyncSession):
        with pytest.raises(CompanyNotFoundError):
            await CompanyService(session).resolve_company("nobody@example.com")


class TestTeamQueries:
    async def test_only_active_employees_count(self, session: AsyncSession):
        company = await create_company(session, active=5, inactive=2)
        service = CompanyService(session)

        assert await service.count_active_employees(company.company_id) == 5
        assert len(await service.active_salaries(company.company_id)) == 5
