from datetime import date as Date, datetime, UTC
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from peniel.domain.entities import (
    ActivityLog,
    Event,
    Inspiration,
    InspirationType,
    Sermon,
    Service,
    ServiceIcon,
)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not str(value).strip():
        return None
    return value


# Admin form schemas


class SermonInput(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    speaker: str = Field(..., min_length=1, max_length=255)
    topic: str = Field(..., min_length=1, max_length=255)
    date: Date
    video_url: Optional[str] = None
    audio_url: Optional[str] = None
    thumbnail_url: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)

    @field_validator("video_url", "audio_url", mode="before")
    @classmethod
    def check_media_url(cls, value: Optional[str]) -> Optional[str]:
        # the admin form submits "" for an absent link
        value = _blank_to_none(value)
        if value is not None and not value.startswith(("http://", "https://")):
            raise ValueError("Please enter a valid URL.")
        return value


class EventInput(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    date: Date
    time: str = Field(..., min_length=1, max_length=64)
    description: str = Field(..., min_length=1)
    image_url: str = Field(..., min_length=1)


class ServiceInput(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    schedule: str = Field(..., min_length=1, max_length=255)
    details: str = Field(..., min_length=1)
    icon: ServiceIcon


class InspirationInput(BaseModel):
    type: InspirationType = InspirationType.TEXT
    prompt: Optional[str] = Field(default=None, max_length=1000)
    image_url: Optional[str] = None

    @field_validator("prompt")
    @classmethod
    def strip_prompt(cls, value: Optional[str]) -> Optional[str]:
        return value.strip() if value is not None else None


# Responses


class SermonResponse(BaseModel):
    id: UUID
    title: str
    speaker: str
    date: Date
    topic: str
    video_url: Optional[str] = None
    audio_url: Optional[str] = None
    thumbnail_url: str
    description: str

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, sermon: Sermon) -> "SermonResponse":
        return cls.model_validate(sermon)


class SermonFacetsResponse(BaseModel):
    topics: List[str]
    speakers: List[str]


class EventResponse(BaseModel):
    id: UUID
    title: str
    date: Date
    time: str
    location: str
    description: str
    image_url: str

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, event: Event) -> "EventResponse":
        return cls.model_validate(event)


class ServiceResponse(BaseModel):
    id: int
    title: str
    schedule: str
    details: str
    icon: ServiceIcon

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, service: Service) -> "ServiceResponse":
        return cls.model_validate(service)


class InspirationResponse(BaseModel):
    id: int
    type: InspirationType
    prompt: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, inspiration: Inspiration) -> "InspirationResponse":
        return cls.model_validate(inspiration)


class ActivityLogResponse(BaseModel):
    id: UUID
    action: str
    details: str
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, entry: ActivityLog) -> "ActivityLogResponse":
        return cls.model_validate(entry)


class DashboardResponse(BaseModel):
    sermon_count: int
    event_count: int
    recent_activity: List[ActivityLogResponse] = Field(default_factory=list)


class UploadResponse(BaseModel):
    bucket: str
    url: str


# Contact form


class ContactRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)


class ContactResponse(BaseModel):
    id: Optional[str] = None
    message: str = "Message sent"


# Authentication


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


# Health Check Schema
class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    services: Dict[str, bool] = Field(default_factory=dict)
    version: str


# Error Schemas
class ErrorResponse(BaseModel):
    error: str
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
