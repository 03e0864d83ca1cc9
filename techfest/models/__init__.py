from .models import (
    GENERAL_DEPARTMENT,
    Announcement,
    AnnouncementPriority,
    AuditLog,
    AuthProvider,
    Event,
    EventCategory,
    EventStatus,
    Registration,
    TimestampedBase,
    User,
    UserRole,
    Winner,
    utcnow,
)

__all__ = [
    'GENERAL_DEPARTMENT',
    'Announcement',
    'AnnouncementPriority',
    'AuditLog',
    'AuthProvider',
    'Event',
    'EventCategory',
    'EventStatus',
    'Registration',
    'TimestampedBase',
    'User',
    'UserRole',
    'Winner',
    'utcnow',
]
