"""Public pages: landing, event catalogue, registration, winners."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from techfest.auth import current_profile, login_required_json
from techfest.services.auth_session import AuthSessionManager
from techfest.services.certificates import verify_certificate
from techfest.services.events import EventService
from techfest.services.registrations import RegistrationService
from techfest.services.winners import WinnerService

public_bp = Blueprint("public", __name__)


@public_bp.route("/")
def home():
    """Landing data: newest events and headline counts."""
    return jsonify({
        'featured_events': [e.to_dict() for e in EventService.featured_events()],
        'counts': {
            'events': len(EventService.list_events()),
            'registrations': RegistrationService.total_registrations(),
            'winners': WinnerService.total_winners(),
        },
    })


@public_bp.route("/events")
def list_events():
    events = EventService.list_events(
        search=request.args.get('q'),
        category=request.args.get('category'),
    )
    return jsonify({'events': [e.to_dict() for e in events]})


@public_bp.route("/events/<event_id>")
def event_detail(event_id):
    event = EventService.get_event(event_id)
    payload = event.to_dict()
    payload['spots_left'] = event.spots_left
    payload['is_registered'] = RegistrationService.is_registered(
        AuthSessionManager.current_profile(), event.id
    )
    return jsonify({'event': payload})


@public_bp.route("/events/<event_id>/register", methods=["POST"])
@login_required_json('Please login to register')
def register(event_id):
    registration = RegistrationService.register(current_profile(), event_id)
    return jsonify({
        'message': 'Successfully registered!',
        'registration': registration.to_dict(),
    }), 201


@public_bp.route("/winners")
def winners():
    return jsonify({'events': WinnerService.grouped_winners()})


@public_bp.route("/certificates/verify/<verification_id>")
def verify(verification_id):
    return jsonify(verify_certificate(verification_id))
