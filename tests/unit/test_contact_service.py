"""Unit tests for the contact form service and the Resend client."""

import json

import httpx
import pytest

from peniel.api.schemas import ContactRequest
from peniel.application.contact import ContactService
from peniel.core.config import Settings
from peniel.domain.exceptions import EmailConfigurationException, EmailDeliveryException
from peniel.infrastructure.email.resend_client import ResendEmailSender
from tests._helpers.fakes import FakeEmailSender

pytestmark = pytest.mark.asyncio


@pytest.fixture
def email_settings() -> Settings:
    return Settings(
        resend_api_key="re_test_key",
        sender_email="noreply@peniel.example",
        contact_form_recipient_email="office@peniel.example",
    )


@pytest.fixture
def contact_request() -> ContactRequest:
    return ContactRequest(
        name="Grace <b>Hopper</b>",
        email="grace@example.com",
        subject="Prayer request",
        message="Please pray for my <script>alert(1)</script> family.",
    )


class TestContactService:
    async def test_sends_to_recipient_with_reply_to(self, email_settings, contact_request):
        sender = FakeEmailSender()
        service = ContactService(sender=sender, config=email_settings)

        result = await service.send(contact_request)

        assert result == {"id": "email-1"}
        sent = sender.sent[0]
        assert sent["from"] == "Contact Form <noreply@peniel.example>"
        assert sent["to"] == ["office@peniel.example"]
        assert sent["subject"] == "New Contact Form Message: Prayer request"
        assert sent["reply_to"] == "grace@example.com"

    async def test_html_escapes_user_input(self, email_settings, contact_request):
        sender = FakeEmailSender()
        service = ContactService(sender=sender, config=email_settings)

        await service.send(contact_request)

        html = sender.sent[0]["html"]
        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert "Grace &lt;b&gt;Hopper&lt;/b&gt;" in html
        assert "New Message from Peniel Global Ministry Website" in html

    async def test_missing_configuration(self, contact_request):
        service = ContactService(
            sender=FakeEmailSender(),
            config=Settings(resend_api_key=None, sender_email=None, contact_form_recipient_email=None),
        )
        with pytest.raises(EmailConfigurationException, match="Missing required environment variables"):
            await service.send(contact_request)

    async def test_missing_sender(self, email_settings, contact_request):
        service = ContactService(sender=None, config=email_settings)
        with pytest.raises(EmailConfigurationException):
            await service.send(contact_request)

    async def test_delivery_failure_propagates(self, email_settings, contact_request):
        service = ContactService(
            sender=FakeEmailSender(fail_with="domain not verified"), config=email_settings
        )
        with pytest.raises(EmailDeliveryException, match="domain not verified"):
            await service.send(contact_request)


class TestResendEmailSender:
    async def test_posts_message(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "49a3999c-0ce1-4ea6-ab68-afcd6dc2e794"})

        sender = ResendEmailSender(
            api_key="re_123",
            api_url="https://api.resend.test/emails",
            transport=httpx.MockTransport(handler),
        )

        result = await sender.send(
            sender="Contact Form <noreply@peniel.example>",
            to=["office@peniel.example"],
            subject="New Contact Form Message: Hello",
            html="<p>Hi</p>",
            reply_to="visitor@example.com",
        )

        assert result["id"] == "49a3999c-0ce1-4ea6-ab68-afcd6dc2e794"
        assert captured["url"] == "https://api.resend.test/emails"
        assert captured["auth"] == "Bearer re_123"
        assert captured["body"] == {
            "from": "Contact Form <noreply@peniel.example>",
            "to": ["office@peniel.example"],
            "subject": "New Contact Form Message: Hello",
            "html": "<p>Hi</p>",
            "reply_to": "visitor@example.com",
        }

    async def test_reply_to_omitted_when_absent(self):
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"id": "x"})

        sender = ResendEmailSender(api_key="k", transport=httpx.MockTransport(handler))
        await sender.send(sender="a@b.c", to=["d@e.f"], subject="s", html="h")

        assert "reply_to" not in bodies[0]

    async def test_provider_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(422, json={"message": "Invalid `from` field."})

        sender = ResendEmailSender(api_key="k", transport=httpx.MockTransport(handler))

        with pytest.raises(EmailDeliveryException, match="Invalid `from` field."):
            await sender.send(sender="bad", to=["d@e.f"], subject="s", html="h")

    async def test_network_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        sender = ResendEmailSender(api_key="k", transport=httpx.MockTransport(handler))

        with pytest.raises(EmailDeliveryException, match="connection refused"):
            await sender.send(sender="a@b.c", to=["d@e.f"], subject="s", html="h")
