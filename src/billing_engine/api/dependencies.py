"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from billing_engine.database import init_db
from billing_engine.models import Company
from billing_engine.services.company_service import CompanyService


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency.

    Handlers commit explicitly; anything left uncommitted is rolled back
    when the session closes.
    """
    _, session_factory = init_db()
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_company_from_query(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    email: Annotated[str, Query(min_length=3, max_length=320)],
) -> Company:
    """Resolve the caller's company from the ``email`` query parameter."""
    return await CompanyService(db).resolve_company(email)


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
QueryCompany = Annotated[Company, Depends(get_company_from_query)]
