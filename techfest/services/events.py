"""Event catalogue and management service."""

from __future__ import annotations

from typing import Any

from flask import current_app
from sqlalchemy import func, or_, update

from techfest.errors import ConflictError, PermissionDenied, ValidationError
from techfest.extensions import db
from techfest.models import (
    GENERAL_DEPARTMENT,
    Announcement,
    AnnouncementPriority,
    Event,
    Registration,
    User,
    UserRole,
    Winner,
    utcnow,
)
from techfest.services.announcements import build_system_announcement
from techfest.services.audit import log_admin_action
from techfest.services.store import get_or_404, transaction
from techfest.services.users import EVENT_HEAD_ELIGIBLE_ROLES
from techfest.services.winners import WINNERS_EXIST

EDITABLE_FIELDS = (
    'title',
    'description',
    'category',
    'location',
    'event_date',
    'event_time',
    'max_participants',
    'rules',
    'eligibility',
    'banner',
)


def live_announcement_title(event: Event) -> str:
    return f"{event.title} is now LIVE!"


def ended_announcement_title(event: Event) -> str:
    return f"{event.title} has ended"


class EventService:
    """Reads and writes against the events collection."""

    @staticmethod
    def list_events(search: str | None = None, category: str | None = None) -> list[Event]:
        """All events by event date, optionally filtered by text and category."""
        query = Event.query
        if category and category != 'all':
            query = query.filter(Event.category == category)
        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(or_(
                func.lower(Event.title).like(pattern),
                func.lower(Event.description).like(pattern),
            ))
        return query.order_by(Event.event_date.asc(), Event.created_at.asc()).all()

    @staticmethod
    def featured_events(limit: int = 3) -> list[Event]:
        return Event.query.order_by(Event.created_at.desc()).limit(limit).all()

    @staticmethod
    def get_event(event_id: str) -> Event:
        return get_or_404(Event, event_id, 'Event')

    @staticmethod
    def events_for_department(department: str) -> list[Event]:
        return (
            Event.query
            .filter(Event.department.in_((department, GENERAL_DEPARTMENT)))
            .order_by(Event.event_date.asc())
            .all()
        )

    @staticmethod
    def events_headed_by(user: User) -> list[Event]:
        return (
            Event.query
            .filter(Event.event_head_id == user.id)
            .order_by(Event.event_date.asc())
            .all()
        )

    @staticmethod
    def create_event(actor: User, data: dict[str, Any], department: str | None = None) -> Event:
        event = Event(
            **{k: data[k] for k in EDITABLE_FIELDS if k in data},
            department=department or GENERAL_DEPARTMENT,
            current_participants=0,
            is_live=False,
        )
        if actor.has_role(UserRole.COORDINATOR):
            event.coordinator_id = actor.id
            event.coordinator_name = actor.display_name
        with transaction('create event'):
            db.session.add(event)

        current_app.logger.info(f"Event {event.id} ({event.title}) created by {actor.id}")
        log_admin_action(actor, 'event_created', 'event', event.id, metadata={'title': event.title})
        return event

    @staticmethod
    def update_event(actor: User, event: Event, data: dict[str, Any], department: str | None = None) -> Event:
        max_participants = data.get('max_participants', event.max_participants)
        if max_participants < event.current_participants:
            raise ValidationError(
                f'Capacity cannot be lower than the {event.current_participants} registered participants'
            )

        title_changed = 'title' in data and data['title'] != event.title
        with transaction('update event'):
            for field in EDITABLE_FIELDS:
                if field in data:
                    setattr(event, field, data[field])
            if department:
                event.department = department
            if actor.has_role(UserRole.COORDINATOR):
                event.coordinator_id = actor.id
                event.coordinator_name = actor.display_name
            if title_changed:
                EventService._refresh_event_copies(event)

        current_app.logger.info(f"Event {event.id} updated by {actor.id}")
        log_admin_action(actor, 'event_updated', 'event', event.id)
        return event

    @staticmethod
    def update_description_and_banner(actor: User, event: Event, description: str, banner: str | None) -> Event:
        if event.event_head_id != actor.id:
            raise PermissionDenied('You are not the event head for this event')
        with transaction('update event'):
            event.description = description
            event.banner = banner or None
        current_app.logger.info(f"Event {event.id} details edited by event head {actor.id}")
        return event

    @staticmethod
    def delete_event(actor: User, event: Event) -> None:
        event_id, title = event.id, event.title
        with transaction('delete event'):
            # System announcements outlive the event they describe
            db.session.execute(
                update(Announcement)
                .where(Announcement.event_id == event_id)
                .values(event_id=None)
            )
            db.session.delete(event)
        current_app.logger.info(f"Event {event_id} ({title}) deleted by {actor.id}")
        log_admin_action(actor, 'event_deleted', 'event', event_id, metadata={'title': title})

    @staticmethod
    def assign_event_head(actor: User, event: Event, user_id: str | None, department: str | None = None) -> Event:
        """Assign (or with a falsy ``user_id``, clear) the event head.

        ``department`` restricts candidates to one department (coordinators).
        """
        head = None
        if user_id:
            head = get_or_404(User, user_id, 'User')
            if not head.has_role(*EVENT_HEAD_ELIGIBLE_ROLES):
                raise ValidationError('Only event heads or admins can be assigned to an event')
            if department is not None and head.department != department:
                raise ValidationError('Event head must belong to your department')

        with transaction('assign event head'):
            event.event_head_id = head.id if head else None
            event.event_head_name = head.display_name if head else None

        log_admin_action(
            actor,
            'event_head_assigned',
            'event',
            event.id,
            metadata={'event_head_id': event.event_head_id},
        )
        return event

    @staticmethod
    def toggle_live(actor: User, event: Event) -> Event:
        """Start or end an event, announcing each transition."""
        if event.event_head_id != actor.id:
            raise PermissionDenied('You are not the event head for this event')
        if event.winners:
            raise ConflictError(WINNERS_EXIST)

        with transaction('update live status'):
            if event.is_live:
                event.is_live = False
                event.ended_at = utcnow()
                build_system_announcement(
                    event,
                    actor,
                    ended_announcement_title(event),
                    f"{event.title} has concluded. Thank you to everyone who participated! "
                    "Results will be announced soon.",
                    AnnouncementPriority.MEDIUM,
                )
            else:
                event.is_live = True
                event.started_at = utcnow()
                event.ended_at = None
                build_system_announcement(
                    event,
                    actor,
                    live_announcement_title(event),
                    f"{event.title} has started at {event.location}. Head over now!",
                    AnnouncementPriority.HIGH,
                )

        current_app.logger.info(f"Event {event.id} is_live={event.is_live} (by {actor.id})")
        return event

    @staticmethod
    def stats(events: list[Event]) -> dict[str, int]:
        return {
            'total_events': len(events),
            'live_events': sum(1 for e in events if e.is_live),
            'total_participants': sum(e.current_participants for e in events),
        }

    @staticmethod
    def _refresh_event_copies(event: Event) -> None:
        db.session.execute(
            update(Registration)
            .where(Registration.event_id == event.id)
            .values(event_title=event.title)
        )
        db.session.execute(
            update(Winner)
            .where(Winner.event_id == event.id)
            .values(event_title=event.title)
        )


def form_to_event_data(form) -> dict[str, Any]:
    """Collect the editable event fields from a validated ``EventForm``."""
    return {
        'title': form.title.data.strip(),
        'description': form.description.data.strip(),
        'category': form.category.data,
        'location': form.location.data.strip(),
        'event_date': form.event_date.data,
        'event_time': form.event_time.data.strip(),
        'max_participants': form.max_participants.data,
        'rules': form.rules.data or [],
        'eligibility': (form.eligibility.data or '').strip(),
        'banner': (form.banner.data or '').strip() or None,
    }


__all__ = [
    'EventService',
    'form_to_event_data',
    'live_announcement_title',
    'ended_announcement_title',
]
