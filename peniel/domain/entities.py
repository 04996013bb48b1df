from datetime import date as Date, datetime, UTC
from enum import Enum
from typing import Dict, List, Optional, Type
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, model_validator


class Sermon(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    title: str
    speaker: str
    date: Date
    topic: str
    video_url: Optional[str] = None
    audio_url: Optional[str] = None
    thumbnail_url: str
    description: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def matches_search(self, term: str) -> bool:
        term = term.lower()
        return term in self.title.lower() or term in self.description.lower()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Sermon):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class Event(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    title: str
    date: Date
    time: str
    location: str
    description: str
    image_url: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def is_upcoming(self, today: Optional[Date] = None) -> bool:
        return self.date >= (today or datetime.now(UTC).date())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Event):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class ServiceIcon(str, Enum):
    CLOCK = "Clock"
    RSS = "Rss"
    CHURCH = "Church"


class Service(BaseModel):
    id: Optional[int] = None
    title: str
    schedule: str
    details: str
    icon: ServiceIcon = ServiceIcon.CHURCH


class InspirationType(str, Enum):
    TEXT = "text"
    IMAGE = "image"


class Inspiration(BaseModel):
    id: Optional[int] = None
    type: InspirationType = InspirationType.TEXT
    prompt: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def check_payload(self):
        if self.type == InspirationType.TEXT and not (self.prompt or "").strip():
            raise ValueError("text inspirations require a prompt")
        if self.type == InspirationType.IMAGE and not self.image_url:
            raise ValueError("image inspirations require an image_url")
        return self


class ActivityLog(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    action: str
    details: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


# Site content documents, stored as JSON under a fixed key


class SiteContentKey(str, Enum):
    HOME = "home"
    BRANDING = "branding"
    CONTACT = "contact"
    DONATIONS = "donations"
    ONLINE_MEETING = "online_meeting"


class HomeContent(BaseModel):
    hero_headline: str = "Welcome to Peniel Global Ministry"
    hero_subheadline: str = "A place of faith, hope, and community."
    hero_image: str = "https://placehold.co/1920x1080.png"
    about_title: str = "Our Community of Faith"
    about_text: str = "Peniel Global Ministry is more than just a building..."
    about_image: str = "https://placehold.co/600x400.png"
    latest_sermon_title: str = ""
    latest_sermon_speaker: str = ""
    latest_sermon_image: str = ""


class Branding(BaseModel):
    logo_url: Optional[str] = "/placeholder-logo.svg"
    header_bg_url: Optional[str] = "https://placehold.co/1200x200.png"


class SocialLink(BaseModel):
    platform: str
    url: str


class ContactContent(BaseModel):
    address: str = ""
    phone: str = ""
    general_email: str = ""
    prayer_email: str = ""
    social_links: List[SocialLink] = Field(default_factory=list)


class DonationTier(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str
    description: str
    suggested_amount: str
    link: str


class DonationsContent(BaseModel):
    headline: str = "Support Our Ministry"
    intro: str = ""
    tiers: List[DonationTier] = Field(default_factory=list)


class OnlineMeetingContent(BaseModel):
    title: str = "Join Us Online"
    intro: str = ""
    meeting_title: str = ""
    meeting_time: str = ""
    description: str = ""
    meeting_link: str = ""
    image_url: str = ""


SITE_CONTENT_MODELS: Dict[SiteContentKey, Type[BaseModel]] = {
    SiteContentKey.HOME: HomeContent,
    SiteContentKey.BRANDING: Branding,
    SiteContentKey.CONTACT: ContactContent,
    SiteContentKey.DONATIONS: DonationsContent,
    SiteContentKey.ONLINE_MEETING: OnlineMeetingContent,
}


def default_site_content(key: SiteContentKey) -> BaseModel:
    return SITE_CONTENT_MODELS[key]()
