"""Winner declaration and the public winners board."""

from __future__ import annotations

from typing import Any

from flask import current_app

from techfest.errors import ConflictError, PermissionDenied, ValidationError
from techfest.extensions import db
from techfest.models import AnnouncementPriority, Event, Registration, User, Winner, utcnow
from techfest.services.announcements import build_system_announcement
from techfest.services.registrations import RegistrationService
from techfest.services.store import get_or_404, transaction

PLACES = ('1st Place', '2nd Place', '3rd Place')
WINNERS_EXIST = 'Winners have already been declared for this event'
EVENT_NOT_ENDED = 'Winners can only be declared after the event has ended'


def winners_announcement_title(event: Event) -> str:
    return f"Winners announced: {event.title}"


class WinnerService:

    @staticmethod
    def declare_winners(actor: User, event_id: str, user_ids: list[str]) -> list[Winner]:
        """Record the podium for an event and announce it.

        ``user_ids`` holds the 1st, 2nd and 3rd place user ids in order. All
        three winners and the announcement are committed together.
        """
        event = get_or_404(Event, event_id, 'Event')
        if event.event_head_id != actor.id:
            raise PermissionDenied('You are not the event head for this event')
        if event.is_live or event.ended_at is None:
            raise ConflictError(EVENT_NOT_ENDED)

        if len(user_ids) != 3 or not all(user_ids):
            raise ValidationError('Select a participant for each of the three places')
        if len(set(user_ids)) != 3:
            raise ValidationError('Each place must go to a different participant')

        attended = RegistrationService.attended_user_ids(event.id)
        if len(attended) < 3:
            raise ValidationError('At least 3 participants must be marked as attended to declare winners')
        if any(user_id not in attended for user_id in user_ids):
            raise ValidationError('Winners must be chosen from attended participants')

        if Winner.query.filter_by(event_id=event.id).first() is not None:
            raise ConflictError(WINNERS_EXIST)

        registrations = {
            r.user_id: r
            for r in Registration.query.filter(
                Registration.event_id == event.id,
                Registration.user_id.in_(user_ids),
            )
        }
        approved_at = utcnow()
        winners = [
            Winner(
                event_id=event.id,
                event_title=event.title,
                position=position,
                user_id=user_id,
                user_name=registrations[user_id].user_name,
                user_photo=registrations[user_id].user_photo,
                approved_by=actor.display_name,
                approved_by_id=actor.id,
                approved_at=approved_at,
            )
            for position, user_id in enumerate(user_ids, start=1)
        ]

        content = "Congratulations to our winners! " + ", ".join(
            f"{place}: {winner.user_name}" for place, winner in zip(PLACES, winners)
        )
        with transaction('declare winners', conflict_message=WINNERS_EXIST):
            db.session.add_all(winners)
            build_system_announcement(
                event,
                actor,
                winners_announcement_title(event),
                content,
                AnnouncementPriority.HIGH,
            )

        current_app.logger.info(f"Winners declared for event {event.id} by {actor.id}")
        return winners

    @staticmethod
    def grouped_winners() -> list[dict[str, Any]]:
        """Winners grouped per event, latest approvals first, podium order inside."""
        winners = Winner.query.order_by(Winner.approved_at.desc(), Winner.position.asc()).all()
        event_ids = {w.event_id for w in winners}
        events = {}
        if event_ids:
            events = {e.id: e for e in Event.query.filter(Event.id.in_(event_ids)).all()}

        groups: dict[str, dict[str, Any]] = {}
        for winner in winners:
            group = groups.get(winner.event_id)
            if group is None:
                event = events.get(winner.event_id)
                group = groups[winner.event_id] = {
                    'event_id': winner.event_id,
                    'event_title': winner.event_title,
                    'event_date': event.event_date.isoformat() if event else None,
                    'winners': [],
                }
            group['winners'].append(winner.to_dict())

        for group in groups.values():
            group['winners'].sort(key=lambda w: w['position'])
        return list(groups.values())

    @staticmethod
    def total_winners() -> int:
        return Winner.query.count()


__all__ = ['WinnerService', 'winners_announcement_title', 'WINNERS_EXIST', 'EVENT_NOT_ENDED']
