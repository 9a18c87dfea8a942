"""Payment card and billing history service."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from billing_engine.calculators.dates import utcnow
from billing_engine.models import BillingHistory, PaymentCard

logger = logging.getLogger(__name__)


class PaymentService:
    """Connected card and billing history for a company.

    A company has at most one connected card; connecting again replaces it.
    Billing history is append-only and only written by payroll runs.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_card(self, company_id: UUID) -> PaymentCard | None:
        result = await self.session.execute(
            select(PaymentCard).where(PaymentCard.company_id == company_id)
        )
        return result.scalar_one_or_none()

    async def connect_card(
        self,
        company_id: UUID,
        last4: str,
        brand: str = "amex",
        cardholder_name: str | None = None,
        expiry_month: int | None = None,
        expiry_year: int | None = None,
    ) -> PaymentCard:
        """Connect (or replace) the company's payment card."""
        card = await self.get_card(company_id)
        if card is None:
            card = PaymentCard(company_id=company_id)
            self.session.add(card)
        card.brand = brand
        card.last4 = last4
        card.cardholder_name = cardholder_name
        card.expiry_month = expiry_month
        card.expiry_year = expiry_year
        card.connected_at = utcnow()

        await self.session.flush()
        logger.info("Company %s connected %s card ending %s", company_id, brand, last4)
        return card

    async def list_billing_history(self, company_id: UUID) -> list[BillingHistory]:
        """Billing history, newest first."""
        result = await self.session.execute(
            select(BillingHistory)
            .where(BillingHistory.company_id == company_id)
            .order_by(BillingHistory.billed_at.desc())
        )
        return list(result.scalars().all())

    async def find_by_idempotency_key(
        self,
        company_id: UUID,
        idempotency_key: str,
    ) -> BillingHistory | None:
        result = await self.session.execute(
            select(BillingHistory).where(
                BillingHistory.company_id == company_id,
                BillingHistory.idempotency_key == idempotency_key,
            )
        )
        return result.scalar_one_or_none()
