from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

import structlog
from pydantic import BaseModel

from peniel.api.schemas import EventInput, InspirationInput, SermonInput, ServiceInput
from peniel.core.config import settings
from peniel.core.observability import trace_async_operation
from peniel.domain.entities import (
    ActivityLog,
    Event,
    Inspiration,
    Sermon,
    Service,
    SITE_CONTENT_MODELS,
    SiteContentKey,
    default_site_content,
)
from peniel.domain.exceptions import ContentNotFoundException, UnknownContentKeyException
from peniel.domain.repositories import (
    ActivityLogRepository,
    EventRepository,
    InspirationRepository,
    SermonRepository,
    ServiceRepository,
    SiteContentRepository,
)

logger = structlog.get_logger(__name__)

CONTENT_LABELS = {
    SiteContentKey.HOME: ("Updated Home Page", "Home page text and images updated."),
    SiteContentKey.BRANDING: ("Updated Branding", "Logo and/or Header Background updated."),
    SiteContentKey.CONTACT: ("Updated Contact Page", "Contact details updated."),
    SiteContentKey.DONATIONS: ("Updated Donations Page", "Donation tiers updated."),
    SiteContentKey.ONLINE_MEETING: ("Updated Online Meeting", "Online meeting details updated."),
}


def parse_content_key(key: str) -> SiteContentKey:
    try:
        return SiteContentKey(key)
    except ValueError:
        raise UnknownContentKeyException(key)


class ActivityLogger:
    """Appends admin actions to the activity log and keeps it bounded."""

    def __init__(self, repo: ActivityLogRepository, retention: Optional[int] = None) -> None:
        self.repo = repo
        self.retention = retention if retention is not None else settings.activity_log_retention

    async def log(self, action: str, details: str) -> ActivityLog:
        entry = await self.repo.create(ActivityLog(action=action, details=details))
        await self.repo.prune(self.retention)
        logger.info("Admin activity", action=action, details=details)
        return entry

    async def recent(self, limit: Optional[int] = None) -> List[ActivityLog]:
        return await self.repo.list_recent(limit or settings.dashboard_activity_limit)


class ContentService:
    def __init__(
        self,
        sermon_repo: SermonRepository,
        event_repo: EventRepository,
        service_repo: ServiceRepository,
        inspiration_repo: InspirationRepository,
        site_content_repo: SiteContentRepository,
        activity: ActivityLogger,
    ) -> None:
        self.sermon_repo = sermon_repo
        self.event_repo = event_repo
        self.service_repo = service_repo
        self.inspiration_repo = inspiration_repo
        self.site_content_repo = site_content_repo
        self.activity = activity

    # Sermons

    async def list_sermons(
        self,
        search: Optional[str] = None,
        topic: Optional[str] = None,
        speaker: Optional[str] = None,
    ) -> List[Sermon]:
        """List sermons newest first, narrowed by search term, topic and speaker."""
        async with trace_async_operation("list_sermons", topic=topic, speaker=speaker):
            sermons = await self.sermon_repo.list_newest_first()
            return [
                sermon
                for sermon in sermons
                if (not search or sermon.matches_search(search))
                and (not topic or topic == "all" or sermon.topic == topic)
                and (not speaker or speaker == "all" or sermon.speaker == speaker)
            ]

    async def sermon_facets(self) -> Tuple[List[str], List[str]]:
        """Distinct topics and speakers, in first-seen order."""
        sermons = await self.sermon_repo.list_newest_first()
        topics = list(dict.fromkeys(s.topic for s in sermons))
        speakers = list(dict.fromkeys(s.speaker for s in sermons))
        return topics, speakers

    async def get_sermon(self, sermon_id: UUID) -> Sermon:
        sermon = await self.sermon_repo.get_by_id(sermon_id)
        if not sermon:
            raise ContentNotFoundException("Sermon", str(sermon_id))
        return sermon

    async def create_sermon(self, data: SermonInput) -> Sermon:
        async with trace_async_operation("create_sermon", title=data.title):
            sermon = await self.sermon_repo.create(Sermon(**data.model_dump()))
            await self.activity.log("Created Sermon", f"Sermon Title: {sermon.title}")
            return sermon

    async def update_sermon(self, sermon_id: UUID, data: SermonInput) -> Sermon:
        async with trace_async_operation("update_sermon", sermon_id=str(sermon_id)):
            existing = await self.get_sermon(sermon_id)
            sermon = existing.model_copy(update=data.model_dump())
            await self.sermon_repo.update(sermon)
            await self.activity.log("Updated Sermon", f"Sermon Title: {sermon.title}")
            return sermon

    async def delete_sermon(self, sermon_id: UUID) -> None:
        sermon = await self.get_sermon(sermon_id)
        await self.sermon_repo.delete(sermon_id)
        await self.activity.log("Deleted Sermon", f"Sermon Title: {sermon.title}")

    # Events

    async def list_events(self, upcoming_only: bool = False) -> List[Event]:
        events = await self.event_repo.list_by_date()
        if upcoming_only:
            events = [event for event in events if event.is_upcoming()]
        return events

    async def get_event(self, event_id: UUID) -> Event:
        event = await self.event_repo.get_by_id(event_id)
        if not event:
            raise ContentNotFoundException("Event", str(event_id))
        return event

    async def create_event(self, data: EventInput) -> Event:
        async with trace_async_operation("create_event", title=data.title):
            event = await self.event_repo.create(Event(**data.model_dump()))
            await self.activity.log("Created Event", f"Event Title: {event.title}")
            return event

    async def update_event(self, event_id: UUID, data: EventInput) -> Event:
        existing = await self.get_event(event_id)
        event = existing.model_copy(update=data.model_dump())
        await self.event_repo.update(event)
        await self.activity.log("Updated Event", f"Event Title: {event.title}")
        return event

    async def delete_event(self, event_id: UUID) -> None:
        event = await self.get_event(event_id)
        await self.event_repo.delete(event_id)
        await self.activity.log("Deleted Event", f"Event Title: {event.title}")

    # Services

    async def list_services(self) -> List[Service]:
        return await self.service_repo.list_all()

    async def get_service(self, service_id: int) -> Service:
        service = await self.service_repo.get_by_id(service_id)
        if not service:
            raise ContentNotFoundException("Service", str(service_id))
        return service

    async def create_service(self, data: ServiceInput) -> Service:
        service = await self.service_repo.create(Service(**data.model_dump()))
        await self.activity.log("Created Service", f"Service Title: {service.title}")
        return service

    async def update_service(self, service_id: int, data: ServiceInput) -> Service:
        existing = await self.get_service(service_id)
        service = existing.model_copy(update=data.model_dump())
        await self.service_repo.update(service)
        await self.activity.log("Updated Service", f"Service Title: {service.title}")
        return service

    async def delete_service(self, service_id: int) -> None:
        service = await self.get_service(service_id)
        await self.service_repo.delete(service_id)
        await self.activity.log("Deleted Service", f"Service Title: {service.title}")

    # Inspirations

    async def list_inspirations(self) -> List[Inspiration]:
        return await self.inspiration_repo.list_all()

    async def get_inspiration(self, inspiration_id: int) -> Inspiration:
        inspiration = await self.inspiration_repo.get_by_id(inspiration_id)
        if not inspiration:
            raise ContentNotFoundException("Inspiration", str(inspiration_id))
        return inspiration

    async def create_inspiration(self, data: InspirationInput) -> Inspiration:
        inspiration = await self.inspiration_repo.create(Inspiration(**data.model_dump()))
        await self.activity.log("Created Inspiration", _describe_inspiration(inspiration))
        return inspiration

    async def update_inspiration(self, inspiration_id: int, data: InspirationInput) -> Inspiration:
        existing = await self.get_inspiration(inspiration_id)
        inspiration = Inspiration(
            **{**existing.model_dump(), **data.model_dump()}
        )
        await self.inspiration_repo.update(inspiration)
        await self.activity.log("Updated Inspiration", _describe_inspiration(inspiration))
        return inspiration

    async def delete_inspiration(self, inspiration_id: int) -> None:
        inspiration = await self.get_inspiration(inspiration_id)
        await self.inspiration_repo.delete(inspiration_id)
        await self.activity.log("Deleted Inspiration", _describe_inspiration(inspiration))

    # Site content

    async def get_site_content(self, key: SiteContentKey) -> BaseModel:
        """Stored document for ``key``, or its default when nothing is stored."""
        stored = await self.site_content_repo.get(key)
        if not stored:
            return default_site_content(key)
        return SITE_CONTENT_MODELS[key].model_validate(stored)

    async def update_site_content(self, key: SiteContentKey, content: Dict[str, Any]) -> BaseModel:
        async with trace_async_operation("update_site_content", key=key.value):
            document = SITE_CONTENT_MODELS[key].model_validate(content)
            await self.site_content_repo.put(key, document.model_dump(mode="json"))
            action, details = CONTENT_LABELS[key]
            await self.activity.log(action, details)
            return document

    # Dashboard

    async def dashboard(self) -> Tuple[int, int, List[ActivityLog]]:
        sermon_count = await self.sermon_repo.count()
        event_count = await self.event_repo.count()
        recent = await self.activity.recent()
        return sermon_count, event_count, recent


def _describe_inspiration(inspiration: Inspiration) -> str:
    if inspiration.prompt:
        return f"Prompt: {inspiration.prompt}"
    return f"Image: {inspiration.image_url}"
