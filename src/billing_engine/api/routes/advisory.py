"""Advisory session endpoints."""

from fastapi import APIRouter, status

from billing_engine.api.dependencies import DbSession, QueryCompany
from billing_engine.api.schemas import (
    AdvisorySessionCreate,
    AdvisorySessionResponse,
    ErrorResponse,
)
from billing_engine.services.advisory_service import AdvisoryService, SessionDetails
from billing_engine.services.company_service import CompanyService

router = APIRouter(prefix="/advisory", tags=["advisory"])


@router.post(
    "",
    response_model=AdvisorySessionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_advisory_session(
    db: DbSession,
    payload: AdvisorySessionCreate,
) -> AdvisorySessionResponse:
    """Book an advisory session. Needs the minimum team and tax or advisory."""
    company = await CompanyService(db).resolve_company(payload.email)
    advisory_session = await AdvisoryService(db).schedule_session(
        company.company_id,
        SessionDetails(
            session_type=payload.session_type,
            session_date=payload.session_date,
            session_time=payload.session_time,
            duration_minutes=payload.duration_minutes,
            advisor=payload.advisor,
            meeting_link=payload.meeting_link,
        ),
    )
    await db.commit()
    await db.refresh(advisory_session)
    return AdvisorySessionResponse.model_validate(advisory_session)


@router.get(
    "",
    response_model=list[AdvisorySessionResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_advisory_sessions(
    db: DbSession,
    company: QueryCompany,
) -> list[AdvisorySessionResponse]:
    """List the caller's advisory sessions in date order."""
    sessions = await AdvisoryService(db).list_sessions(company.company_id)
    return [AdvisorySessionResponse.model_validate(s) for s in sessions]
