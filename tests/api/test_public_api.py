"""API tests for the public read endpoints, contact form and health check."""

import pytest

from peniel.application.contact import ContactService
from peniel.core.config import Settings
from peniel.core.dependencies import get_contact_service
from tests._helpers.fakes import FakeEmailSender

pytestmark = pytest.mark.asyncio

SERMON = {
    "title": "Walking in Faith",
    "speaker": "Pastor Debra",
    "topic": "Faith",
    "date": "2024-05-12",
    "video_url": "https://www.youtube.com/watch?v=abc123",
    "audio_url": "",
    "thumbnail_url": "https://example.com/thumb.png",
    "description": "How trust grows.",
}


class TestHealth:
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["services"]["database"] is True


class TestSermons:
    async def test_empty_archive(self, client):
        response = await client.get("/api/v1/sermons")

        assert response.status_code == 200
        assert response.json() == []

    async def test_filters(self, client, auth_headers):
        await client.post("/api/v1/admin/sermons", json=SERMON, headers=auth_headers)
        await client.post(
            "/api/v1/admin/sermons",
            json={**SERMON, "title": "Grace Abounds", "topic": "Grace", "date": "2024-06-02"},
            headers=auth_headers,
        )

        everything = (await client.get("/api/v1/sermons")).json()
        grace = (await client.get("/api/v1/sermons", params={"topic": "Grace"})).json()
        search = (await client.get("/api/v1/sermons", params={"search": "walking"})).json()
        facets = (await client.get("/api/v1/sermons/facets")).json()

        assert [s["title"] for s in everything] == ["Grace Abounds", "Walking in Faith"]
        assert [s["title"] for s in grace] == ["Grace Abounds"]
        assert [s["title"] for s in search] == ["Walking in Faith"]
        assert sorted(facets["topics"]) == ["Faith", "Grace"]
        assert facets["speakers"] == ["Pastor Debra"]
        assert everything[1]["audio_url"] is None


class TestSiteContent:
    async def test_default_document(self, client):
        response = await client.get("/api/v1/content/home")

        assert response.status_code == 200
        assert response.json()["hero_headline"] == "Welcome to Peniel Global Ministry"

    async def test_unknown_key(self, client):
        response = await client.get("/api/v1/content/nonsense")

        assert response.status_code == 404

    async def test_services_and_inspirations_empty(self, client):
        assert (await client.get("/api/v1/services")).json() == []
        assert (await client.get("/api/v1/inspirations")).json() == []


class TestContact:
    @pytest.fixture
    def email_sender(self, test_app):
        sender = FakeEmailSender()
        config = Settings(
            resend_api_key="re_test",
            sender_email="noreply@peniel.example",
            contact_form_recipient_email="office@peniel.example",
        )
        test_app.dependency_overrides[get_contact_service] = lambda: ContactService(
            sender=sender, config=config
        )
        return sender

    async def test_message_forwarded(self, client, email_sender):
        response = await client.post(
            "/api/v1/contact",
            json={
                "name": "Ruth",
                "email": "ruth@example.com",
                "subject": "Visiting Sunday",
                "message": "What time does service start?",
            },
        )

        assert response.status_code == 200
        assert response.json()["id"] == "email-1"
        assert email_sender.sent[0]["subject"] == "New Contact Form Message: Visiting Sunday"
        assert email_sender.sent[0]["reply_to"] == "ruth@example.com"

    async def test_invalid_email_rejected(self, client, email_sender):
        response = await client.post(
            "/api/v1/contact",
            json={"name": "Ruth", "email": "not-an-email", "subject": "Hi", "message": "Hello"},
        )

        assert response.status_code == 422
        assert email_sender.sent == []

    async def test_unconfigured_email(self, client, test_app):
        test_app.dependency_overrides[get_contact_service] = lambda: ContactService(
            sender=None,
            config=Settings(resend_api_key=None, sender_email=None, contact_form_recipient_email=None),
        )

        response = await client.post(
            "/api/v1/contact",
            json={"name": "Ruth", "email": "ruth@example.com", "subject": "Hi", "message": "Hello"},
        )

        assert response.status_code == 503
        assert response.json()["detail"] == "Missing required environment variables for email sending."
