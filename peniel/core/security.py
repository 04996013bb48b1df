from datetime import datetime, timedelta, UTC
from typing import Any, Dict, Optional

import bleach
from jose import JWTError, jwt
from passlib.context import CryptContext

from peniel.core.config import settings
from peniel.domain.exceptions import (
    InvalidCredentialsException,
    UnauthorizedAccessException,
)


class SecurityService:
    def __init__(self) -> None:
        self.pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    def create_access_token(
        self, data: Dict[str, Any], expires_delta: Optional[timedelta] = None
    ) -> str:
        """Create a JWT access token."""
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.now(UTC) + expires_delta
        else:
            expire = datetime.now(UTC) + timedelta(
                minutes=settings.jwt_expiration_minutes
            )

        to_encode.update({"exp": expire, "iat": datetime.now(UTC)})

        return jwt.encode(
            to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm
        )

    def verify_token(self, token: str) -> Dict[str, Any]:
        """Verify and decode a JWT token."""
        try:
            return jwt.decode(
                token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
            )
        except JWTError as e:
            raise UnauthorizedAccessException("admin", str(e))

    def hash_password(self, password: str) -> str:
        """Hash a password."""
        return self.pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        return self.pwd_context.verify(plain_password, hashed_password)

    def authenticate_admin(self, email: str, password: str) -> str:
        """Check the admin credentials and return the admin subject."""
        if not settings.admin_password_hash:
            raise InvalidCredentialsException()
        if email.strip().lower() != settings.admin_email.lower():
            raise InvalidCredentialsException()
        if not self.verify_password(password, settings.admin_password_hash):
            raise InvalidCredentialsException()
        return settings.admin_email

    def extract_admin_from_token(self, token: str) -> str:
        """Extract the admin subject from a JWT token."""
        payload = self.verify_token(token)
        subject = payload.get("sub")
        if subject is None or payload.get("role") != "admin":
            raise UnauthorizedAccessException("admin", "Token carries no admin role")
        return subject


class HTMLSanitizer:
    def __init__(self) -> None:
        self.allowed_tags = settings.html_sanitizer_tags
        self.allowed_attributes = settings.html_sanitizer_attributes

    def sanitize(self, html_content: str) -> str:
        """Escape markup in user-supplied text before embedding it in HTML."""
        return bleach.clean(
            html_content,
            tags=self.allowed_tags,
            attributes=self.allowed_attributes,
            strip=False,
            strip_comments=True,
        )


# Global instances
security_service = SecurityService()
html_sanitizer = HTMLSanitizer()
