"""Announcement feed: staff posts, lifecycle notices and the live stream."""

from __future__ import annotations

import json
import time
from typing import Iterator

from flask import current_app
from sqlalchemy import func

from techfest.extensions import db
from techfest.models import Announcement, AnnouncementPriority, Event, User, UserRole
from techfest.errors import PermissionDenied
from techfest.services.audit import log_admin_action
from techfest.services.store import get_or_404, transaction

POSTING_ROLES = (UserRole.ADMIN, UserRole.COORDINATOR)


def build_system_announcement(
    event: Event,
    author: User,
    title: str,
    content: str,
    priority: AnnouncementPriority,
) -> Announcement:
    """Create (but do not commit) an announcement tied to an event transition."""
    announcement = Announcement(
        title=title,
        content=content,
        author=author.display_name,
        author_id=author.id,
        priority=priority,
        is_system=True,
        event_id=event.id,
    )
    db.session.add(announcement)
    return announcement


class AnnouncementService:

    @staticmethod
    def list_announcements(limit: int | None = None) -> list[Announcement]:
        query = Announcement.query.order_by(Announcement.created_at.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def post(author: User, title: str, content: str, priority: AnnouncementPriority) -> Announcement:
        if not author.has_role(*POSTING_ROLES):
            raise PermissionDenied('You do not have permission to post announcements')
        announcement = Announcement(
            title=title.strip(),
            content=content.strip(),
            author=author.display_name,
            author_id=author.id,
            priority=priority,
        )
        with transaction('post announcement'):
            db.session.add(announcement)
        current_app.logger.info(f"Announcement {announcement.id} posted by {author.id}")
        return announcement

    @staticmethod
    def edit(actor: User, announcement_id: str, title: str, content: str, priority: AnnouncementPriority) -> Announcement:
        if not actor.has_role(UserRole.ADMIN):
            raise PermissionDenied('Only administrators can edit announcements')
        announcement = get_or_404(Announcement, announcement_id, 'Announcement')
        with transaction('update announcement'):
            announcement.title = title.strip()
            announcement.content = content.strip()
            announcement.priority = priority
        log_admin_action(actor, 'announcement_updated', 'announcement', announcement.id)
        return announcement

    @staticmethod
    def delete(actor: User, announcement_id: str) -> None:
        if not actor.has_role(UserRole.ADMIN):
            raise PermissionDenied('Only administrators can delete announcements')
        announcement = get_or_404(Announcement, announcement_id, 'Announcement')
        with transaction('delete announcement'):
            db.session.delete(announcement)
        log_admin_action(actor, 'announcement_deleted', 'announcement', announcement_id)


def feed_version() -> tuple[int, str | None]:
    """Cheap fingerprint of the feed: row count and newest change."""
    count, latest = db.session.query(
        func.count(Announcement.id),
        func.max(Announcement.updated_at),
    ).one()
    return count, latest.isoformat() if latest else None


def _sse(event: str, payload) -> str:
    return f"event: {event}\ndata: {json.dumps(payload)}\n\n"


def stream_announcements(poll_seconds: float, max_polls: int | None = None) -> Iterator[str]:
    """Yield Server-Sent Events: a snapshot now, then one per feed change.

    Polls the store every ``poll_seconds``; a comment line keeps idle
    connections open. ``max_polls`` bounds the loop (tests, health checks).
    """
    last_version = None
    polls = 0
    while True:
        version = feed_version()
        if version != last_version:
            last_version = version
            items = [a.to_dict() for a in AnnouncementService.list_announcements()]
            yield _sse('snapshot', {'items': items})
        else:
            yield ": keep-alive\n\n"
        # Release the connection between polls
        db.session.remove()
        polls += 1
        if max_polls is not None and polls >= max_polls:
            return
        time.sleep(poll_seconds)


__all__ = [
    'AnnouncementService',
    'build_system_announcement',
    'stream_announcements',
    'feed_version',
    'POSTING_ROLES',
]
