"""Billing history endpoint."""

from fastapi import APIRouter

from billing_engine.api.dependencies import DbSession, QueryCompany
from billing_engine.api.schemas import (
    BillingHistoryListResponse,
    BillingHistoryResponse,
    ErrorResponse,
)
from billing_engine.services.payment_service import PaymentService

router = APIRouter(prefix="/billing", tags=["billing"])


@router.get(
    "/history",
    response_model=BillingHistoryListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def list_billing_history(
    db: DbSession,
    company: QueryCompany,
) -> BillingHistoryListResponse:
    """List billing history, newest first."""
    records = await PaymentService(db).list_billing_history(company.company_id)
    return BillingHistoryListResponse(
        history=[BillingHistoryResponse.model_validate(r) for r in records]
    )
