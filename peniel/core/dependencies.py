from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, Header
from sqlalchemy.ext.asyncio import AsyncSession

from peniel.application.contact import ContactService
from peniel.application.inspiration import DailyInspirationHandler, default_handler
from peniel.application.services import ActivityLogger, ContentService
from peniel.core.security import security_service
from peniel.domain.exceptions import UnauthorizedAccessException
from peniel.infrastructure.db.database import Database
from peniel.infrastructure.db.repositories import (
    SqlActivityLogRepository,
    SqlEventRepository,
    SqlInspirationRepository,
    SqlSermonRepository,
    SqlServiceRepository,
    SqlSiteContentRepository,
)
from peniel.infrastructure.email.resend_client import EmailSender
from peniel.infrastructure.storage.file_storage import FileStorage

# Global instances (initialized in main.py)
database: Optional[Database] = None
file_storage: Optional[FileStorage] = None
email_sender: Optional[EmailSender] = None


async def get_database_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    if not database:
        raise HTTPException(status_code=500, detail="Database not initialized")

    async with database.session() as session:
        yield session


async def require_admin(authorization: str | None = Header(None)) -> str:
    """Extract the admin subject from the bearer token."""
    if not authorization:
        raise HTTPException(status_code=401, detail="Authorization header required")
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header")

    token = authorization.split(" ", 1)[1]
    try:
        return security_service.extract_admin_from_token(token)
    except UnauthorizedAccessException:
        raise HTTPException(status_code=401, detail="Invalid or expired token")


async def get_content_service(
    session: AsyncSession = Depends(get_database_session),
) -> ContentService:
    """Get content service with dependencies."""
    return ContentService(
        sermon_repo=SqlSermonRepository(session),
        event_repo=SqlEventRepository(session),
        service_repo=SqlServiceRepository(session),
        inspiration_repo=SqlInspirationRepository(session),
        site_content_repo=SqlSiteContentRepository(session),
        activity=ActivityLogger(SqlActivityLogRepository(session)),
    )


async def get_file_storage() -> FileStorage:
    if not file_storage:
        raise HTTPException(status_code=500, detail="File storage not initialized")
    return file_storage


async def get_contact_service() -> ContactService:
    return ContactService(sender=email_sender)


async def get_inspiration_handler() -> DailyInspirationHandler:
    return default_handler
