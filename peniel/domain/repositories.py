from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from uuid import UUID

from peniel.domain.entities import (
    ActivityLog,
    Event,
    Inspiration,
    Sermon,
    Service,
    SiteContentKey,
)


class SermonRepository(ABC):
    @abstractmethod
    async def create(self, sermon: Sermon) -> Sermon:
        pass

    @abstractmethod
    async def get_by_id(self, sermon_id: UUID) -> Optional[Sermon]:
        pass

    @abstractmethod
    async def list_newest_first(self) -> List[Sermon]:
        pass

    @abstractmethod
    async def update(self, sermon: Sermon) -> Sermon:
        pass

    @abstractmethod
    async def delete(self, sermon_id: UUID) -> bool:
        pass

    @abstractmethod
    async def count(self) -> int:
        pass


class EventRepository(ABC):
    @abstractmethod
    async def create(self, event: Event) -> Event:
        pass

    @abstractmethod
    async def get_by_id(self, event_id: UUID) -> Optional[Event]:
        pass

    @abstractmethod
    async def list_by_date(self) -> List[Event]:
        pass

    @abstractmethod
    async def update(self, event: Event) -> Event:
        pass

    @abstractmethod
    async def delete(self, event_id: UUID) -> bool:
        pass

    @abstractmethod
    async def count(self) -> int:
        pass


class ServiceRepository(ABC):
    @abstractmethod
    async def create(self, service: Service) -> Service:
        pass

    @abstractmethod
    async def get_by_id(self, service_id: int) -> Optional[Service]:
        pass

    @abstractmethod
    async def list_all(self) -> List[Service]:
        pass

    @abstractmethod
    async def update(self, service: Service) -> Service:
        pass

    @abstractmethod
    async def delete(self, service_id: int) -> bool:
        pass


class InspirationRepository(ABC):
    @abstractmethod
    async def create(self, inspiration: Inspiration) -> Inspiration:
        pass

    @abstractmethod
    async def get_by_id(self, inspiration_id: int) -> Optional[Inspiration]:
        pass

    @abstractmethod
    async def list_all(self) -> List[Inspiration]:
        pass

    @abstractmethod
    async def update(self, inspiration: Inspiration) -> Inspiration:
        pass

    @abstractmethod
    async def delete(self, inspiration_id: int) -> bool:
        pass


class SiteContentRepository(ABC):
    @abstractmethod
    async def get(self, key: SiteContentKey) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def put(self, key: SiteContentKey, content: Dict[str, Any]) -> Dict[str, Any]:
        pass


class ActivityLogRepository(ABC):
    @abstractmethod
    async def create(self, entry: ActivityLog) -> ActivityLog:
        pass

    @abstractmethod
    async def list_recent(self, limit: int = 5) -> List[ActivityLog]:
        pass

    @abstractmethod
    async def prune(self, keep: int) -> int:
        pass
