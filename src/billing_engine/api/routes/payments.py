"""AMEX card endpoints."""

from fastapi import APIRouter, status

from billing_engine.api.dependencies import DbSession, QueryCompany
from billing_engine.api.schemas import (
    CardConnectRequest,
    CardResponse,
    CardStatusResponse,
    ErrorResponse,
)
from billing_engine.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get(
    "/amex",
    response_model=CardStatusResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_amex_status(db: DbSession, company: QueryCompany) -> CardStatusResponse:
    """Report whether a card is connected."""
    card = await PaymentService(db).get_card(company.company_id)
    return CardStatusResponse(
        connected=card is not None,
        card=CardResponse.model_validate(card) if card else None,
    )


@router.post(
    "/amex",
    response_model=CardStatusResponse,
    status_code=status.HTTP_200_OK,
    responses={404: {"model": ErrorResponse}},
)
async def connect_amex(
    db: DbSession,
    company: QueryCompany,
    payload: CardConnectRequest,
) -> CardStatusResponse:
    """Connect an AMEX card, replacing any previously connected card."""
    card = await PaymentService(db).connect_card(
        company.company_id,
        last4=payload.last4,
        brand="amex",
        cardholder_name=payload.cardholder_name,
        expiry_month=payload.expiry_month,
        expiry_year=payload.expiry_year,
    )
    await db.commit()
    return CardStatusResponse(connected=True, card=CardResponse.model_validate(card))
