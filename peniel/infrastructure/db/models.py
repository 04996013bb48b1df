from uuid import uuid4

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Integer,
    JSON,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import UUID as PostgresUUID
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator, CHAR

Base = declarative_base()


class GUID(TypeDecorator):
    """Platform-independent GUID type."""
    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(PostgresUUID())
        else:
            return dialect.type_descriptor(CHAR(32))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        elif dialect.name == 'postgresql':
            return str(value)
        else:
            if not isinstance(value, str):
                return "%.32x" % int(value.hex, 16)
            else:
                return "%.32x" % int(value.replace('-', ''), 16)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        else:
            if not isinstance(value, str):
                return str(value)
            return value


class SermonModel(Base):
    __tablename__ = "sermons"

    id = Column(GUID(), primary_key=True, default=uuid4)
    title = Column(String(255), nullable=False)
    speaker = Column(String(255), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    topic = Column(String(255), nullable=False, index=True)
    video_url = Column(Text, nullable=True)
    audio_url = Column(Text, nullable=True)
    thumbnail_url = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self) -> str:
        return f"<SermonModel(id={self.id}, title='{self.title}', speaker='{self.speaker}')>"


class EventModel(Base):
    __tablename__ = "events"

    id = Column(GUID(), primary_key=True, default=uuid4)
    title = Column(String(255), nullable=False)
    date = Column(Date, nullable=False, index=True)
    time = Column(String(64), nullable=False)
    location = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    image_url = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self) -> str:
        return f"<EventModel(id={self.id}, title='{self.title}', date={self.date})>"


class ServiceModel(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    schedule = Column(String(255), nullable=False)
    details = Column(Text, nullable=False)
    icon = Column(String(32), nullable=False)

    def __repr__(self) -> str:
        return f"<ServiceModel(id={self.id}, title='{self.title}')>"


class InspirationModel(Base):
    __tablename__ = "inspirations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String(16), nullable=False, default="text")
    prompt = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self) -> str:
        return f"<InspirationModel(id={self.id}, type='{self.type}')>"


class SiteContentModel(Base):
    __tablename__ = "site_content"

    key = Column(String(64), primary_key=True)
    content = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<SiteContentModel(key='{self.key}')>"


class ActivityLogModel(Base):
    __tablename__ = "activity_logs"

    id = Column(GUID(), primary_key=True, default=uuid4)
    action = Column(String(255), nullable=False)
    details = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True, server_default=func.now())

    def __repr__(self) -> str:
        return f"<ActivityLogModel(id={self.id}, action='{self.action}')>"
