from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from enum import Enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum as SqlEnum,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from techfest.extensions import db, bcrypt

JSONType = JSON().with_variant(JSONB, 'postgresql')

GENERAL_DEPARTMENT = 'General'


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: datetime | date | None) -> str | None:
    return value.isoformat() if value else None


class TimestampedBase(db.Model):
    """Abstract base providing id/created/updated columns."""

    __abstract__ = True

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )


class UserRole(Enum):
    ADMIN = "admin"
    COORDINATOR = "coordinator"
    EVENT_HEAD = "eventHead"
    PARTICIPANT = "participant"


class AuthProvider(Enum):
    PASSWORD = "password"
    GOOGLE = "google"


class AnnouncementPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EventCategory(Enum):
    TECHNICAL = "Technical"
    NON_TECHNICAL = "Non-Technical"


class EventStatus(Enum):
    SCHEDULED = "scheduled"
    LIVE = "live"
    ENDED = "ended"
    WINNERS_DECLARED = "winners_declared"


class User(TimestampedBase):
    __tablename__ = "user"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    photo_url: Mapped[str | None] = mapped_column(String(1024))
    role: Mapped[UserRole] = mapped_column(
        SqlEnum(UserRole, name="user_role", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UserRole.PARTICIPANT,
    )
    department: Mapped[str | None] = mapped_column(String(64))
    auth_provider: Mapped[AuthProvider] = mapped_column(
        SqlEnum(AuthProvider, name="auth_provider", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=AuthProvider.PASSWORD,
    )
    google_sub: Mapped[str | None] = mapped_column(String(255), unique=True)
    active: Mapped[bool] = mapped_column('is_active', Boolean, nullable=False, default=True)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    registrations: Mapped[list["Registration"]] = relationship(back_populates="user")
    headed_events: Mapped[list["Event"]] = relationship(
        back_populates="event_head",
        foreign_keys="Event.event_head_id",
    )
    audit_logs: Mapped[list["AuditLog"]] = relationship(back_populates="user")

    def set_password(self, password: str) -> None:
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        try:
            return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))
        except ValueError:
            return False

    def has_role(self, *roles: UserRole | str) -> bool:
        role_value = self.role.value if isinstance(self.role, UserRole) else str(self.role)
        allowed = {r.value if isinstance(r, UserRole) else str(r) for r in roles}
        return role_value in allowed

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def is_active(self) -> bool:  # Flask-Login compatibility
        return bool(self.active)

    @property
    def is_anonymous(self) -> bool:
        return False

    def get_id(self) -> str:
        return self.id

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'email': self.email,
            'display_name': self.display_name,
            'photo_url': self.photo_url,
            'role': self.role.value,
            'department': self.department,
            'created_at': _iso(self.created_at),
        }


class Event(TimestampedBase):
    __tablename__ = "event"
    __table_args__ = (
        CheckConstraint("max_participants >= 1", name="ck_event_max_participants"),
        CheckConstraint("current_participants >= 0", name="ck_event_current_participants"),
        Index("ix_event_department", "department"),
        Index("ix_event_event_date", "event_date"),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default='')
    banner: Mapped[str | None] = mapped_column(String(1024))
    rules: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    eligibility: Mapped[str] = mapped_column(Text, nullable=False, default='')
    max_participants: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    current_participants: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    event_date: Mapped[date] = mapped_column(Date, nullable=False)
    event_time: Mapped[str] = mapped_column(String(64), nullable=False, default='')
    location: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    category: Mapped[str] = mapped_column(String(64), nullable=False, default=EventCategory.TECHNICAL.value)
    department: Mapped[str] = mapped_column(String(64), nullable=False, default=GENERAL_DEPARTMENT)

    coordinator_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("user.id", ondelete="SET NULL"),
    )
    coordinator_name: Mapped[str | None] = mapped_column(String(255))
    event_head_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("user.id", ondelete="SET NULL"),
        index=True,
    )
    event_head_name: Mapped[str | None] = mapped_column(String(255))

    is_live: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    event_head: Mapped[User | None] = relationship(
        back_populates="headed_events",
        foreign_keys=[event_head_id],
    )
    registrations: Mapped[list["Registration"]] = relationship(
        back_populates="event",
        cascade="all, delete-orphan",
    )
    winners: Mapped[list["Winner"]] = relationship(
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="Winner.position",
    )

    @property
    def status(self) -> EventStatus:
        if self.winners:
            return EventStatus.WINNERS_DECLARED
        if self.is_live:
            return EventStatus.LIVE
        if self.ended_at:
            return EventStatus.ENDED
        return EventStatus.SCHEDULED

    @property
    def spots_left(self) -> int:
        return max(0, self.max_participants - self.current_participants)

    @property
    def is_full(self) -> bool:
        return self.current_participants >= self.max_participants

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'banner': self.banner,
            'rules': list(self.rules or []),
            'eligibility': self.eligibility,
            'max_participants': self.max_participants,
            'current_participants': self.current_participants,
            'event_date': _iso(self.event_date),
            'event_time': self.event_time,
            'location': self.location,
            'category': self.category,
            'department': self.department,
            'coordinator_id': self.coordinator_id,
            'coordinator_name': self.coordinator_name,
            'event_head_id': self.event_head_id,
            'event_head_name': self.event_head_name,
            'is_live': self.is_live,
            'status': self.status.value,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class Registration(TimestampedBase):
    __tablename__ = "registration"
    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_registration_user_event"),
        Index("ix_registration_event_attended", "event_id", "attended"),
    )

    event_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("event.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event_title: Mapped[str] = mapped_column(String(255), nullable=False)
    user_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("user.id", ondelete="SET NULL"),
        index=True,
    )
    user_name: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    user_email: Mapped[str] = mapped_column(String(255), nullable=False)
    user_photo: Mapped[str | None] = mapped_column(String(1024))
    registered_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    attended: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    certificate_id: Mapped[str | None] = mapped_column(String(64))

    event: Mapped[Event] = relationship(back_populates="registrations")
    user: Mapped[User | None] = relationship(back_populates="registrations")

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'event_id': self.event_id,
            'event_title': self.event_title,
            'user_id': self.user_id,
            'user_name': self.user_name,
            'user_email': self.user_email,
            'user_photo': self.user_photo,
            'registered_at': _iso(self.registered_at),
            'attended': self.attended,
            'certificate_id': self.certificate_id,
        }


class Announcement(TimestampedBase):
    __tablename__ = "announcement"
    __table_args__ = (
        Index("ix_announcement_created", "created_at"),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default='')
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    author_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("user.id", ondelete="SET NULL"),
    )
    priority: Mapped[AnnouncementPriority] = mapped_column(
        SqlEnum(
            AnnouncementPriority,
            name="announcement_priority",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=AnnouncementPriority.MEDIUM,
    )
    is_system: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    event_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("event.id", ondelete="SET NULL"),
    )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'author': self.author,
            'author_id': self.author_id,
            'priority': self.priority.value,
            'is_system': self.is_system,
            'event_id': self.event_id,
            'created_at': _iso(self.created_at),
        }


class Winner(TimestampedBase):
    __tablename__ = "winner"
    __table_args__ = (
        UniqueConstraint("event_id", "position", name="uq_winner_event_position"),
        UniqueConstraint("event_id", "user_id", name="uq_winner_event_user"),
        CheckConstraint("position IN (1, 2, 3)", name="ck_winner_position"),
    )

    event_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("event.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event_title: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("user.id", ondelete="SET NULL"),
    )
    user_name: Mapped[str] = mapped_column(String(255), nullable=False)
    user_photo: Mapped[str | None] = mapped_column(String(1024))
    approved_by: Mapped[str] = mapped_column(String(255), nullable=False)
    approved_by_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("user.id", ondelete="SET NULL"),
    )
    approved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    event: Mapped[Event] = relationship(back_populates="winners")

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'event_id': self.event_id,
            'event_title': self.event_title,
            'position': self.position,
            'user_id': self.user_id,
            'user_name': self.user_name,
            'user_photo': self.user_photo,
            'approved_by': self.approved_by,
            'approved_at': _iso(self.approved_at),
        }


class AuditLog(TimestampedBase):
    __tablename__ = "audit_log"

    user_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("user.id", ondelete="SET NULL"),
        index=True,
    )
    action: Mapped[str] = mapped_column(String(128), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(128), nullable=False)
    entity_id: Mapped[str | None] = mapped_column(String(36))
    meta: Mapped[dict | None] = mapped_column(JSONType, default=dict)

    user: Mapped[User | None] = relationship(back_populates="audit_logs")
