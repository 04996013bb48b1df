"""Unit tests for admin authentication and HTML sanitizing."""

from datetime import timedelta

import pytest

from peniel.core.security import HTMLSanitizer, SecurityService, security_service
from peniel.domain.exceptions import InvalidCredentialsException, UnauthorizedAccessException
from tests._helpers.fakes import ADMIN_EMAIL, ADMIN_PASSWORD


class TestTokens:
    def test_round_trip(self, admin_token):
        assert security_service.extract_admin_from_token(admin_token) == ADMIN_EMAIL

    def test_expired_token_rejected(self, expired_admin_token):
        with pytest.raises(UnauthorizedAccessException):
            security_service.extract_admin_from_token(expired_admin_token)

    def test_tampered_token_rejected(self, admin_token):
        with pytest.raises(UnauthorizedAccessException):
            security_service.verify_token(admin_token[:-4] + "abcd")

    def test_token_without_admin_role_rejected(self):
        token = security_service.create_access_token(
            {"sub": "visitor@example.com"}, expires_delta=timedelta(minutes=5)
        )
        with pytest.raises(UnauthorizedAccessException):
            security_service.extract_admin_from_token(token)

    def test_default_expiry_applied(self):
        token = SecurityService().create_access_token({"sub": ADMIN_EMAIL, "role": "admin"})
        payload = security_service.verify_token(token)
        assert payload["exp"] > payload["iat"]


class TestAdminLogin:
    def test_valid_credentials(self, admin_settings):
        assert security_service.authenticate_admin(ADMIN_EMAIL, ADMIN_PASSWORD) == ADMIN_EMAIL

    def test_email_is_case_insensitive(self, admin_settings):
        assert security_service.authenticate_admin(" Admin@Peniel.Example ", ADMIN_PASSWORD) == ADMIN_EMAIL

    def test_wrong_password(self, admin_settings):
        with pytest.raises(InvalidCredentialsException):
            security_service.authenticate_admin(ADMIN_EMAIL, "wrong")

    def test_wrong_email(self, admin_settings):
        with pytest.raises(InvalidCredentialsException):
            security_service.authenticate_admin("someone@else.example", ADMIN_PASSWORD)

    def test_no_password_configured(self, monkeypatch):
        from peniel.core.config import settings

        monkeypatch.setattr(settings, "admin_password_hash", None)
        with pytest.raises(InvalidCredentialsException):
            security_service.authenticate_admin(ADMIN_EMAIL, ADMIN_PASSWORD)


class TestHTMLSanitizer:
    def test_escapes_markup(self):
        cleaned = HTMLSanitizer().sanitize('<img src=x onerror="alert(1)">hi')
        assert "<img" not in cleaned
        assert "&lt;img" in cleaned

    def test_plain_text_untouched(self):
        assert HTMLSanitizer().sanitize("Hello, friends") == "Hello, friends"
