"""Payroll run and schedule endpoints."""

from fastapi import APIRouter, status

from billing_engine.api.dependencies import DbSession, QueryCompany
from billing_engine.api.schemas import (
    ErrorResponse,
    PayrollChargeResponse,
    PayrollRunRequest,
    PayrollRunResponse,
    PayrollScheduleResponse,
    PayrollScheduleUpdate,
)
from billing_engine.calculators.types import PayrollCharge
from billing_engine.models import PayrollSchedule
from billing_engine.services.company_service import CompanyService
from billing_engine.services.payroll_service import PayrollService

router = APIRouter(prefix="/payroll", tags=["payroll"])


def charge_fields(charge: PayrollCharge) -> dict:
    return {
        "payroll_amount": charge.gross_total,
        "fee": charge.fee,
        "total_charged": charge.total_charged,
        "fee_percent": charge.fee_percent,
        "employee_count": charge.employee_count,
    }


def schedule_response(schedule: PayrollSchedule) -> PayrollScheduleResponse:
    return PayrollScheduleResponse.model_validate(schedule)


@router.post(
    "/run",
    response_model=PayrollRunResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def run_payroll(db: DbSession, payload: PayrollRunRequest) -> PayrollRunResponse:
    """Run payroll and bill gross pay plus the tier fee. Idempotent per key."""
    company = await CompanyService(db).resolve_company(payload.email)
    result = await PayrollService(db).run_payroll(
        company.company_id,
        idempotency_key=payload.idempotency_key,
    )
    await db.commit()

    return PayrollRunResponse(
        **charge_fields(result.charge),
        billing_id=result.billing_record.billing_id,
        next_payroll_date=result.next_payroll_date,
    )


@router.get(
    "/preview",
    response_model=PayrollChargeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def preview_payroll(db: DbSession, company: QueryCompany) -> PayrollChargeResponse:
    """Price a payroll run at the current tiers. Nothing is written."""
    charge = await PayrollService(db).preview_payroll(company.company_id)
    return PayrollChargeResponse(**charge_fields(charge))


@router.get(
    "/schedule",
    response_model=PayrollScheduleResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_schedule(db: DbSession, company: QueryCompany) -> PayrollScheduleResponse:
    """Get the payroll schedule, creating the default biweekly one if absent."""
    schedule = await PayrollService(db).get_schedule(company.company_id)
    await db.commit()
    return schedule_response(schedule)


@router.put(
    "/schedule",
    response_model=PayrollScheduleResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_schedule(
    db: DbSession,
    payload: PayrollScheduleUpdate,
) -> PayrollScheduleResponse:
    """Change payroll frequency and, optionally, the next payroll date."""
    company = await CompanyService(db).resolve_company(payload.email)
    schedule = await PayrollService(db).update_schedule(
        company.company_id,
        payload.frequency,
        next_date=payload.next_payroll_date,
    )
    await db.commit()
    return schedule_response(schedule)
