"""Event registration flow and attendance tracking."""

from __future__ import annotations

from typing import Any

from flask import current_app
from sqlalchemy import func, update

from techfest.errors import ConflictError, PermissionDenied
from techfest.extensions import db
from techfest.models import Event, Registration, User
from techfest.services.store import get_or_404, transaction

EVENT_FULL = 'Event is full'
ALREADY_REGISTERED = 'Already registered'


class RegistrationService:

    @staticmethod
    def is_registered(user: User | None, event_id: str) -> bool:
        if user is None:
            return False
        return db.session.query(
            Registration.query.filter_by(user_id=user.id, event_id=event_id).exists()
        ).scalar()

    @staticmethod
    def register(user: User, event_id: str) -> Registration:
        """Register ``user`` for an event.

        The capacity counter is bumped with a conditional UPDATE in the same
        transaction as the insert, so two racing registrations for the last
        spot cannot both succeed; the unique (user, event) constraint does the
        same for double submits.
        """
        event = get_or_404(Event, event_id, 'Event')
        if event.is_full:
            raise ConflictError(EVENT_FULL)
        if RegistrationService.is_registered(user, event.id):
            raise ConflictError(ALREADY_REGISTERED)

        registration = Registration(
            event_id=event.id,
            event_title=event.title,
            user_id=user.id,
            user_name=user.display_name,
            user_email=user.email,
            user_photo=user.photo_url,
            attended=False,
        )
        with transaction('register for event', conflict_message=ALREADY_REGISTERED):
            result = db.session.execute(
                update(Event)
                .where(Event.id == event.id, Event.current_participants < Event.max_participants)
                .values(current_participants=Event.current_participants + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise ConflictError(EVENT_FULL)
            db.session.add(registration)

        current_app.logger.info(f"User {user.id} registered for event {event.id}")
        return registration

    @staticmethod
    def list_for_event(event_id: str) -> list[Registration]:
        return (
            Registration.query
            .filter_by(event_id=event_id)
            .order_by(Registration.registered_at.asc())
            .all()
        )

    @staticmethod
    def set_attendance(actor: User, registration_id: str, attended: bool | None = None) -> Registration:
        """Mark attendance; ``attended=None`` flips the current value."""
        registration = get_or_404(Registration, registration_id, 'Registration')
        if registration.event.event_head_id != actor.id:
            raise PermissionDenied('You are not the event head for this event')
        with transaction('update attendance'):
            registration.attended = (not registration.attended) if attended is None else bool(attended)
        current_app.logger.info(
            f"Attendance for registration {registration.id} set to {registration.attended} by {actor.id}"
        )
        return registration

    @staticmethod
    def attended_user_ids(event_id: str) -> set[str]:
        rows = db.session.execute(
            db.select(Registration.user_id)
            .where(Registration.event_id == event_id, Registration.attended.is_(True))
        ).scalars()
        return {user_id for user_id in rows if user_id}

    @staticmethod
    def registrations_for_user(user: User) -> list[dict[str, Any]]:
        """The user's registrations, newest first, each with its event attached.

        Events are fetched in one query by id set.
        """
        registrations = (
            Registration.query
            .filter_by(user_id=user.id)
            .order_by(Registration.registered_at.desc())
            .all()
        )
        event_ids = {r.event_id for r in registrations}
        events = {}
        if event_ids:
            events = {e.id: e for e in Event.query.filter(Event.id.in_(event_ids)).all()}

        items = []
        for registration in registrations:
            item = registration.to_dict()
            event = events.get(registration.event_id)
            item['event'] = event.to_dict() if event else None
            items.append(item)
        return items

    @staticmethod
    def participant_stats(user: User) -> dict[str, int]:
        registered, attended = db.session.query(
            func.count(Registration.id),
            func.count(Registration.id).filter(Registration.attended.is_(True)),
        ).filter(Registration.user_id == user.id).one()
        return {
            'registered': registered,
            'attended': attended,
            'certificates': attended,
        }

    @staticmethod
    def event_stats(event: Event) -> dict[str, int]:
        attended = (
            Registration.query
            .filter_by(event_id=event.id, attended=True)
            .count()
        )
        return {
            'registered': event.current_participants,
            'attended': attended,
            'remaining': event.spots_left,
        }

    @staticmethod
    def total_registrations() -> int:
        return db.session.query(func.count(Registration.id)).scalar()


__all__ = ['RegistrationService', 'EVENT_FULL', 'ALREADY_REGISTERED']
