from datetime import timedelta

import structlog
from fastapi import APIRouter, HTTPException

from peniel.api.schemas import LoginRequest, Token
from peniel.core.config import settings
from peniel.core.security import security_service
from peniel.domain.exceptions import InvalidCredentialsException

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=Token)
async def login(request: LoginRequest) -> Token:
    """Exchange admin credentials for a bearer token."""
    try:
        subject = security_service.authenticate_admin(request.email, request.password)
    except InvalidCredentialsException:
        logger.warning("Admin login failed", email=request.email)
        raise HTTPException(status_code=401, detail="Invalid email or password")

    expires = timedelta(minutes=settings.jwt_expiration_minutes)
    token = security_service.create_access_token(
        data={"sub": subject, "role": "admin"}, expires_delta=expires
    )
    logger.info("Admin logged in", email=subject)
    return Token(access_token=token, expires_in=int(expires.total_seconds()))
