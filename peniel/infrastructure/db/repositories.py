from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from peniel.core.observability import metrics
from peniel.domain.entities import (
    ActivityLog,
    Event,
    Inspiration,
    Sermon,
    Service,
    SiteContentKey,
)
from peniel.domain.repositories import (
    ActivityLogRepository,
    EventRepository,
    InspirationRepository,
    SermonRepository,
    ServiceRepository,
    SiteContentRepository,
)
from peniel.infrastructure.db.models import (
    ActivityLogModel,
    EventModel,
    InspirationModel,
    SermonModel,
    ServiceModel,
    SiteContentModel,
)


def _to_sermon(row: SermonModel) -> Sermon:
    return Sermon(
        id=row.id,
        title=row.title,
        speaker=row.speaker,
        date=row.date,
        topic=row.topic,
        video_url=row.video_url,
        audio_url=row.audio_url,
        thumbnail_url=row.thumbnail_url,
        description=row.description,
        created_at=row.created_at,
    )


def _to_event(row: EventModel) -> Event:
    return Event(
        id=row.id,
        title=row.title,
        date=row.date,
        time=row.time,
        location=row.location,
        description=row.description,
        image_url=row.image_url,
        created_at=row.created_at,
    )


def _to_service(row: ServiceModel) -> Service:
    return Service(
        id=row.id,
        title=row.title,
        schedule=row.schedule,
        details=row.details,
        icon=row.icon,
    )


def _to_inspiration(row: InspirationModel) -> Inspiration:
    return Inspiration(
        id=row.id,
        type=row.type,
        prompt=row.prompt,
        image_url=row.image_url,
        created_at=row.created_at,
    )


class SqlSermonRepository(SermonRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, sermon: Sermon) -> Sermon:
        try:
            self.session.add(
                SermonModel(
                    id=sermon.id,
                    title=sermon.title,
                    speaker=sermon.speaker,
                    date=sermon.date,
                    topic=sermon.topic,
                    video_url=sermon.video_url,
                    audio_url=sermon.audio_url,
                    thumbnail_url=sermon.thumbnail_url,
                    description=sermon.description,
                    created_at=sermon.created_at,
                )
            )
            await self.session.flush()

            metrics.record_database_operation("create", "sermons", "success")
            return sermon
        except Exception as e:
            metrics.record_database_operation(
                "create", "sermons", "error", exception_type=e.__class__.__name__
            )
            raise

    async def get_by_id(self, sermon_id: UUID) -> Optional[Sermon]:
        try:
            result = await self.session.execute(
                select(SermonModel).where(SermonModel.id == sermon_id)
            )
            row = result.scalar_one_or_none()

            metrics.record_database_operation("get", "sermons", "success")
            return _to_sermon(row) if row is not None else None
        except Exception:
            metrics.record_database_operation("get", "sermons", "error")
            raise

    async def list_newest_first(self) -> List[Sermon]:
        try:
            result = await self.session.execute(
                select(SermonModel).order_by(
                    desc(SermonModel.date), desc(SermonModel.created_at)
                )
            )
            rows = result.scalars().all()

            metrics.record_database_operation("list", "sermons", "success")
            return [_to_sermon(row) for row in rows]
        except Exception:
            metrics.record_database_operation("list", "sermons", "error")
            raise

    async def update(self, sermon: Sermon) -> Sermon:
        try:
            result = await self.session.execute(
                select(SermonModel).where(SermonModel.id == sermon.id)
            )
            row = result.scalar_one_or_none()
            if row is None:
                metrics.record_database_operation("update", "sermons", "not_found")
                raise ValueError(f"Sermon with ID {sermon.id} not found")

            row.title = sermon.title
            row.speaker = sermon.speaker
            row.date = sermon.date
            row.topic = sermon.topic
            row.video_url = sermon.video_url
            row.audio_url = sermon.audio_url
            row.thumbnail_url = sermon.thumbnail_url
            row.description = sermon.description

            await self.session.flush()

            metrics.record_database_operation("update", "sermons", "success")
            return sermon
        except ValueError:
            raise
        except Exception:
            metrics.record_database_operation("update", "sermons", "error")
            raise

    async def delete(self, sermon_id: UUID) -> bool:
        try:
            result = await self.session.execute(
                select(SermonModel).where(SermonModel.id == sermon_id)
            )
            row = result.scalar_one_or_none()
            if row is None:
                metrics.record_database_operation("delete", "sermons", "not_found")
                return False

            await self.session.delete(row)
            await self.session.flush()

            metrics.record_database_operation("delete", "sermons", "success")
            return True
        except Exception:
            metrics.record_database_operation("delete", "sermons", "error")
            raise

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(SermonModel.id)))
        metrics.record_database_operation("count", "sermons", "success")
        return result.scalar() or 0


class SqlEventRepository(EventRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, event: Event) -> Event:
        try:
            self.session.add(
                EventModel(
                    id=event.id,
                    title=event.title,
                    date=event.date,
                    time=event.time,
                    location=event.location,
                    description=event.description,
                    image_url=event.image_url,
                    created_at=event.created_at,
                )
            )
            await self.session.flush()

            metrics.record_database_operation("create", "events", "success")
            return event
        except Exception as e:
            metrics.record_database_operation(
                "create", "events", "error", exception_type=e.__class__.__name__
            )
            raise

    async def get_by_id(self, event_id: UUID) -> Optional[Event]:
        try:
            result = await self.session.execute(
                select(EventModel).where(EventModel.id == event_id)
            )
            row = result.scalar_one_or_none()

            metrics.record_database_operation("get", "events", "success")
            return _to_event(row) if row is not None else None
        except Exception:
            metrics.record_database_operation("get", "events", "error")
            raise

    async def list_by_date(self) -> List[Event]:
        try:
            result = await self.session.execute(
                select(EventModel).order_by(EventModel.date, EventModel.time)
            )
            rows = result.scalars().all()

            metrics.record_database_operation("list", "events", "success")
            return [_to_event(row) for row in rows]
        except Exception:
            metrics.record_database_operation("list", "events", "error")
            raise

    async def update(self, event: Event) -> Event:
        try:
            result = await self.session.execute(
                select(EventModel).where(EventModel.id == event.id)
            )
            row = result.scalar_one_or_none()
            if row is None:
                metrics.record_database_operation("update", "events", "not_found")
                raise ValueError(f"Event with ID {event.id} not found")

            row.title = event.title
            row.date = event.date
            row.time = event.time
            row.location = event.location
            row.description = event.description
            row.image_url = event.image_url

            await self.session.flush()

            metrics.record_database_operation("update", "events", "success")
            return event
        except ValueError:
            raise
        except Exception:
            metrics.record_database_operation("update", "events", "error")
            raise

    async def delete(self, event_id: UUID) -> bool:
        try:
            result = await self.session.execute(
                select(EventModel).where(EventModel.id == event_id)
            )
            row = result.scalar_one_or_none()
            if row is None:
                metrics.record_database_operation("delete", "events", "not_found")
                return False

            await self.session.delete(row)
            await self.session.flush()

            metrics.record_database_operation("delete", "events", "success")
            return True
        except Exception:
            metrics.record_database_operation("delete", "events", "error")
            raise

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(EventModel.id)))
        metrics.record_database_operation("count", "events", "success")
        return result.scalar() or 0


class SqlServiceRepository(ServiceRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, service: Service) -> Service:
        try:
            row = ServiceModel(
                title=service.title,
                schedule=service.schedule,
                details=service.details,
                icon=service.icon.value,
            )
            self.session.add(row)
            await self.session.flush()

            service.id = row.id

            metrics.record_database_operation("create", "services", "success")
            return service
        except Exception:
            metrics.record_database_operation("create", "services", "error")
            raise

    async def get_by_id(self, service_id: int) -> Optional[Service]:
        result = await self.session.execute(
            select(ServiceModel).where(ServiceModel.id == service_id)
        )
        row = result.scalar_one_or_none()
        metrics.record_database_operation("get", "services", "success")
        return _to_service(row) if row is not None else None

    async def list_all(self) -> List[Service]:
        result = await self.session.execute(
            select(ServiceModel).order_by(ServiceModel.id)
        )
        metrics.record_database_operation("list", "services", "success")
        return [_to_service(row) for row in result.scalars().all()]

    async def update(self, service: Service) -> Service:
        result = await self.session.execute(
            select(ServiceModel).where(ServiceModel.id == service.id)
        )
        row = result.scalar_one_or_none()
        if row is None:
            metrics.record_database_operation("update", "services", "not_found")
            raise ValueError(f"Service with ID {service.id} not found")

        row.title = service.title
        row.schedule = service.schedule
        row.details = service.details
        row.icon = service.icon.value

        await self.session.flush()

        metrics.record_database_operation("update", "services", "success")
        return service

    async def delete(self, service_id: int) -> bool:
        result = await self.session.execute(
            select(ServiceModel).where(ServiceModel.id == service_id)
        )
        row = result.scalar_one_or_none()
        if row is None:
            metrics.record_database_operation("delete", "services", "not_found")
            return False

        await self.session.delete(row)
        await self.session.flush()

        metrics.record_database_operation("delete", "services", "success")
        return True


class SqlInspirationRepository(InspirationRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, inspiration: Inspiration) -> Inspiration:
        try:
            row = InspirationModel(
                type=inspiration.type.value,
                prompt=inspiration.prompt,
                image_url=inspiration.image_url,
                created_at=inspiration.created_at,
            )
            self.session.add(row)
            await self.session.flush()

            inspiration.id = row.id

            metrics.record_database_operation("create", "inspirations", "success")
            return inspiration
        except Exception:
            metrics.record_database_operation("create", "inspirations", "error")
            raise

    async def get_by_id(self, inspiration_id: int) -> Optional[Inspiration]:
        result = await self.session.execute(
            select(InspirationModel).where(InspirationModel.id == inspiration_id)
        )
        row = result.scalar_one_or_none()
        metrics.record_database_operation("get", "inspirations", "success")
        return _to_inspiration(row) if row is not None else None

    async def list_all(self) -> List[Inspiration]:
        result = await self.session.execute(
            select(InspirationModel).order_by(InspirationModel.id)
        )
        metrics.record_database_operation("list", "inspirations", "success")
        return [_to_inspiration(row) for row in result.scalars().all()]

    async def update(self, inspiration: Inspiration) -> Inspiration:
        result = await self.session.execute(
            select(InspirationModel).where(InspirationModel.id == inspiration.id)
        )
        row = result.scalar_one_or_none()
        if row is None:
            metrics.record_database_operation("update", "inspirations", "not_found")
            raise ValueError(f"Inspiration with ID {inspiration.id} not found")

        row.type = inspiration.type.value
        row.prompt = inspiration.prompt
        row.image_url = inspiration.image_url

        await self.session.flush()

        metrics.record_database_operation("update", "inspirations", "success")
        return inspiration

    async def delete(self, inspiration_id: int) -> bool:
        result = await self.session.execute(
            select(InspirationModel).where(InspirationModel.id == inspiration_id)
        )
        row = result.scalar_one_or_none()
        if row is None:
            metrics.record_database_operation("delete", "inspirations", "not_found")
            return False

        await self.session.delete(row)
        await self.session.flush()

        metrics.record_database_operation("delete", "inspirations", "success")
        return True


class SqlSiteContentRepository(SiteContentRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, key: SiteContentKey) -> Optional[Dict[str, Any]]:
        try:
            result = await self.session.execute(
                select(SiteContentModel).where(SiteContentModel.key == key.value)
            )
            row = result.scalar_one_or_none()

            metrics.record_database_operation("get", "site_content", "success")
            return dict(row.content) if row is not None and row.content else None
        except Exception:
            metrics.record_database_operation("get", "site_content", "error")
            raise

    async def put(self, key: SiteContentKey, content: Dict[str, Any]) -> Dict[str, Any]:
        try:
            result = await self.session.execute(
                select(SiteContentModel).where(SiteContentModel.key == key.value)
            )
            row = result.scalar_one_or_none()
            if row is None:
                self.session.add(SiteContentModel(key=key.value, content=content))
            else:
                row.content = content

            await self.session.flush()

            metrics.record_database_operation("put", "site_content", "success")
            return content
        except Exception:
            metrics.record_database_operation("put", "site_content", "error")
            raise


class SqlActivityLogRepository(ActivityLogRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, entry: ActivityLog) -> ActivityLog:
        try:
            self.session.add(
                ActivityLogModel(
                    id=entry.id,
                    action=entry.action,
                    details=entry.details,
                    timestamp=entry.timestamp,
                )
            )
            await self.session.flush()

            metrics.record_database_operation("create", "activity_logs", "success")
            return entry
        except Exception:
            metrics.record_database_operation("create", "activity_logs", "error")
            raise

    async def list_recent(self, limit: int = 5) -> List[ActivityLog]:
        result = await self.session.execute(
            select(ActivityLogModel)
            .order_by(desc(ActivityLogModel.timestamp))
            .limit(limit)
        )
        metrics.record_database_operation("list", "activity_logs", "success")
        return [
            ActivityLog(
                id=row.id,
                action=row.action,
                details=row.details,
                timestamp=row.timestamp,
            )
            for row in result.scalars().all()
        ]

    async def prune(self, keep: int) -> int:
        result = await self.session.execute(
            select(ActivityLogModel.id)
            .order_by(desc(ActivityLogModel.timestamp))
            .offset(keep)
        )
        stale_ids = list(result.scalars().all())
        if not stale_ids:
            return 0

        await self.session.execute(
            delete(ActivityLogModel).where(ActivityLogModel.id.in_(stale_ids))
        )
        await self.session.flush()

        metrics.record_database_operation("prune", "activity_logs", "success")
        return len(stale_ids)
