"""Subscription tier endpoints."""

from fastapi import APIRouter, status

from billing_engine.api.dependencies import DbSession, QueryCompany
from billing_engine.api.schemas import ErrorResponse, SubscriptionResponse, SubscriptionUpdate
from billing_engine.calculators.dates import utcnow
from billing_engine.models import Subscription
from billing_engine.services.company_service import CompanyService
from billing_engine.services.subscription_service import (
    SubscriptionService,
    subscription_fee_percent,
)
from billing_engine.services.tier_policy import TierPolicy

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


def to_response(subscription: Subscription) -> SubscriptionResponse:
    return SubscriptionResponse(
        company_id=subscription.company_id,
        payroll_enabled=subscription.payroll_enabled,
        tax_enabled=subscription.tax_enabled,
        advisory_enabled=subscription.advisory_enabled,
        start_date=subscription.start_date,
        commitment_end_date=subscription.commitment_end_date,
        commitment_active=TierPolicy.is_commitment_active(subscription, utcnow()),
        fee_percent=subscription_fee_percent(subscription),
    )


@router.get(
    "",
    response_model=SubscriptionResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_subscription(db: DbSession, company: QueryCompany) -> SubscriptionResponse:
    """Get the caller's subscription, creating a disabled one on first access."""
    subscription = await SubscriptionService(db).get_subscription(company.company_id)
    await db.commit()
    return to_response(subscription)


@router.put(
    "",
    response_model=SubscriptionResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_subscription(
    db: DbSession,
    payload: SubscriptionUpdate,
) -> SubscriptionResponse:
    """Enable or disable service tiers.

    Enabling payroll or advisory needs the minimum team size. Enabling
    payroll starts a 6-month commitment during which it cannot be disabled.
    """
    company = await CompanyService(db).resolve_company(payload.email)
    subscription = await SubscriptionService(db).set_subscription_tiers(
        company.company_id,
        payroll=payload.payroll_enabled,
        tax=payload.tax_enabled,
        advisory=payload.advisory_enabled,
    )
    await db.commit()
    return to_response(subscription)
