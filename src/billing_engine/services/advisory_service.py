"""Advisory session scheduling."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, time
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from billing_engine.calculators.types import Tier
from billing_engine.models import AdvisorySession
from billing_engine.services.company_service import CompanyService
from billing_engine.services.errors import InsufficientTeamSizeError, TierNotEnabledError
from billing_engine.services.subscription_service import SubscriptionService, tier_enabled
from billing_engine.services.tier_policy import MIN_TEAM_MEMBERS_FOR_SERVICES

logger = logging.getLogger(__name__)

# Either tier unlocks advisory sessions.
ADVISORY_UNLOCKING_TIERS = (Tier.TAX, Tier.ADVISORY)


@dataclass
class SessionDetails:
    """What the caller asked for."""

    session_type: str
    session_date: date
    session_time: time
    duration_minutes: int
    advisor: str | None = None
    meeting_link: str | None = None


class AdvisoryService:
    """Books advisory sessions for companies that qualify for them."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.companies = CompanyService(session)
        self.subscriptions = SubscriptionService(session)

    async def schedule_session(
        self,
        company_id: UUID,
        details: SessionDetails,
    ) -> AdvisorySession:
        """Create a scheduled advisory session.

        Raises:
            InsufficientTeamSizeError: fewer than the minimum active employees
            TierNotEnabledError: neither tax nor advisory is enabled
        """
        subscription = await self.subscriptions.get_subscription(company_id)

        active_count = await self.companies.count_active_employees(company_id)
        if active_count < MIN_TEAM_MEMBERS_FOR_SERVICES:
            raise InsufficientTeamSizeError(
                active_count,
                MIN_TEAM_MEMBERS_FOR_SERVICES,
                action="advisory sessions",
            )

        if not any(tier_enabled(subscription, tier) for tier in ADVISORY_UNLOCKING_TIERS):
            raise TierNotEnabledError([tier.value for tier in ADVISORY_UNLOCKING_TIERS])

        advisory_session = AdvisorySession(
            company_id=company_id,
            session_type=details.session_type,
            session_date=details.session_date,
            session_time=details.session_time,
            duration_minutes=details.duration_minutes,
            advisor=details.advisor,
            meeting_link=details.meeting_link,
            status="scheduled",
        )
        self.session.add(advisory_session)
        await self.session.flush()

        logger.info(
            "Advisory session %s scheduled for company %s on %s",
            advisory_session.session_id,
            company_id,
            details.session_date,
        )
        return advisory_session

    async def list_sessions(self, company_id: UUID) -> list[AdvisorySession]:
        result = await self.session.execute(
            select(AdvisorySession)
            .where(AdvisorySession.company_id == company_id)
            .order_by(AdvisorySession.session_date, AdvisorySession.session_time)
        )
        return list(result.scalars().all())
