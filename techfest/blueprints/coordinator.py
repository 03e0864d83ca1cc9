"""Coordinator console, scoped to the coordinator's department."""

from __future__ import annotations

from flask import Blueprint, jsonify

from techfest.auth import current_profile, role_required
from techfest.errors import PermissionDenied, ValidationError
from techfest.forms import AssignEventHeadForm, EventForm
from techfest.models import Event, UserRole
from techfest.services.dashboards import CoordinatorDashboard, Viewer
from techfest.services.events import EventService, form_to_event_data
from techfest.services.users import UserService

coordinator_bp = Blueprint("coordinator", __name__)

coordinator_required = role_required(UserRole.COORDINATOR)


def _department() -> str:
    department = current_profile().department
    if not department:
        raise ValidationError('Department not assigned')
    return department


def _own_event(event_id: str) -> Event:
    event = EventService.get_event(event_id)
    if event.department != _department():
        raise PermissionDenied('You can only manage events in your department')
    return event


@coordinator_bp.route("/events")
@coordinator_required
def list_events():
    dashboard = CoordinatorDashboard(Viewer(current_profile()))
    return jsonify({'events': [e.to_dict() for e in dashboard.events()]})


@coordinator_bp.route("/events", methods=["POST"])
@coordinator_required
def create_event():
    department = _department()
    form = EventForm()
    form.validate_or_raise()
    event = EventService.create_event(current_profile(), form_to_event_data(form), department=department)
    return jsonify({'event': event.to_dict()}), 201


@coordinator_bp.route("/events/<event_id>", methods=["PUT", "PATCH"])
@coordinator_required
def update_event(event_id):
    event = _own_event(event_id)
    form = EventForm()
    form.validate_or_raise()
    event = EventService.update_event(current_profile(), event, form_to_event_data(form))
    return jsonify({'event': event.to_dict()})


@coordinator_bp.route("/events/<event_id>", methods=["DELETE"])
@coordinator_required
def delete_event(event_id):
    EventService.delete_event(current_profile(), _own_event(event_id))
    return jsonify({'message': 'Event deleted'})


@coordinator_bp.route("/event-heads")
@coordinator_required
def eligible_event_heads():
    users = UserService.eligible_event_heads(_department())
    return jsonify({'users': [u.to_dict() for u in users]})


@coordinator_bp.route("/events/<event_id>/event-head", methods=["POST"])
@coordinator_required
def assign_event_head(event_id):
    event = _own_event(event_id)
    form = AssignEventHeadForm()
    form.validate_or_raise()
    event = EventService.assign_event_head(
        current_profile(),
        event,
        form.user_id.data,
        department=_department(),
    )
    return jsonify({'event': event.to_dict()})
