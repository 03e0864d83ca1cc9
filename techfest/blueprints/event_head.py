"""Event-head console: live toggle, attendance and winners."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from techfest.auth import current_profile, role_required
from techfest.errors import PermissionDenied
from techfest.forms import EventHeadEditForm, WinnerSelectionForm
from techfest.models import Event, UserRole
from techfest.services.events import EventService
from techfest.services.registrations import RegistrationService
from techfest.services.winners import WinnerService

event_head_bp = Blueprint("event_head", __name__)

event_head_required = role_required(UserRole.EVENT_HEAD, UserRole.ADMIN)


def _headed_event(event_id: str) -> Event:
    event = EventService.get_event(event_id)
    if event.event_head_id != current_profile().id:
        raise PermissionDenied('You are not the event head for this event')
    return event


@event_head_bp.route("/events")
@event_head_required
def list_events():
    events = EventService.events_headed_by(current_profile())
    return jsonify({
        'events': [
            {**e.to_dict(), 'stats': RegistrationService.event_stats(e)}
            for e in events
        ],
    })


@event_head_bp.route("/events/<event_id>", methods=["PATCH"])
@event_head_required
def edit_event(event_id):
    event = _headed_event(event_id)
    form = EventHeadEditForm()
    form.validate_or_raise()
    event = EventService.update_description_and_banner(
        current_profile(),
        event,
        form.description.data.strip(),
        (form.banner.data or '').strip() or None,
    )
    return jsonify({'event': event.to_dict()})


@event_head_bp.route("/events/<event_id>/live", methods=["POST"])
@event_head_required
def toggle_live(event_id):
    event = EventService.toggle_live(current_profile(), _headed_event(event_id))
    return jsonify({'event': event.to_dict()})


@event_head_bp.route("/events/<event_id>/registrations")
@event_head_required
def registrations(event_id):
    event = _headed_event(event_id)
    return jsonify({
        'registrations': [r.to_dict() for r in RegistrationService.list_for_event(event.id)],
        'stats': RegistrationService.event_stats(event),
    })


@event_head_bp.route("/registrations/<registration_id>/attendance", methods=["POST"])
@event_head_required
def attendance(registration_id):
    """Set attendance from ``{"attended": bool}``, or flip it when omitted."""
    data = request.get_json(silent=True) or {}
    attended = data.get('attended')
    registration = RegistrationService.set_attendance(
        current_profile(),
        registration_id,
        None if attended is None else bool(attended),
    )
    return jsonify({'registration': registration.to_dict()})


@event_head_bp.route("/events/<event_id>/winners", methods=["POST"])
@event_head_required
def declare_winners(event_id):
    form = WinnerSelectionForm()
    form.validate_or_raise()
    winners = WinnerService.declare_winners(
        current_profile(),
        event_id,
        [form.first.data, form.second.data, form.third.data],
    )
    return jsonify({
        'message': 'Winners declared successfully!',
        'winners': [w.to_dict() for w in winners],
    }), 201
