"""Team management endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from billing_engine.api.dependencies import DbSession, QueryCompany
from billing_engine.api.schemas import (
    ErrorResponse,
    TeamListResponse,
    TeamMemberCreate,
    TeamMemberEnvelope,
    TeamMemberRemovedResponse,
    TeamMemberResponse,
    TeamMemberUpdate,
)
from billing_engine.services.team_service import EmployeeDetails, TeamService

router = APIRouter(prefix="/team", tags=["team"])


@router.get(
    "",
    response_model=TeamListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def list_team(db: DbSession, company: QueryCompany) -> TeamListResponse:
    """List every employee, active or not."""
    employees = await TeamService(db).list_employees(company.company_id)
    return TeamListResponse(
        employees=[TeamMemberResponse.model_validate(e) for e in employees]
    )


@router.post(
    "",
    response_model=TeamMemberEnvelope,
    status_code=status.HTTP_200_OK,
    responses={404: {"model": ErrorResponse}},
)
async def add_team_member(
    db: DbSession,
    company: QueryCompany,
    payload: TeamMemberCreate,
) -> TeamMemberEnvelope:
    """Add an active employee."""
    employee = await TeamService(db).add_employee(
        company.company_id,
        EmployeeDetails(**payload.model_dump()),
    )
    await db.commit()
    return TeamMemberEnvelope(employee=TeamMemberResponse.model_validate(employee))


@router.put(
    "/{employee_id}",
    response_model=TeamMemberEnvelope,
    responses={404: {"model": ErrorResponse}},
)
async def update_team_member(
    db: DbSession,
    company: QueryCompany,
    employee_id: UUID,
    payload: TeamMemberUpdate,
) -> TeamMemberEnvelope:
    """Edit an employee. Setting ``status`` to inactive removes them from the team count."""
    employee = await TeamService(db).update_employee(
        company.company_id,
        employee_id,
        **payload.model_dump(exclude_none=True),
    )
    await db.commit()
    return TeamMemberEnvelope(employee=TeamMemberResponse.model_validate(employee))


@router.delete(
    "/{employee_id}",
    response_model=TeamMemberRemovedResponse,
    responses={404: {"model": ErrorResponse}},
)
async def remove_team_member(
    db: DbSession,
    company: QueryCompany,
    employee_id: UUID,
) -> TeamMemberRemovedResponse:
    """Remove an employee from the team. The record is kept as inactive."""
    employee = await TeamService(db).deactivate_employee(company.company_id, employee_id)
    await db.commit()
    return TeamMemberRemovedResponse(
        message="Employee removed from the team",
        employee=TeamMemberResponse.model_validate(employee),
    )
