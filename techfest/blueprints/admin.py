"""Administrator console: events, users, exports."""

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from techfest.auth import admin_required, current_profile
from techfest.forms import AssignEventHeadForm, EventForm, SignUpForm, UserUpdateForm
from techfest.models import GENERAL_DEPARTMENT, UserRole
from techfest.services.auth_session import AuthSessionManager
from techfest.services.dashboards import AdminDashboard, Viewer
from techfest.services.events import EventService, form_to_event_data
from techfest.services.export import export_filename, registrations_csv
from techfest.services.users import UserService

admin_bp = Blueprint("admin", __name__)


@admin_bp.route("/stats")
@admin_required
def stats():
    return jsonify(AdminDashboard(Viewer(current_profile())).stats())


# ============= Events =============

@admin_bp.route("/events")
@admin_required
def list_events():
    return jsonify({'events': [e.to_dict() for e in EventService.list_events()]})


@admin_bp.route("/events", methods=["POST"])
@admin_required
def create_event():
    form = EventForm()
    form.validate_or_raise()
    event = EventService.create_event(
        current_profile(),
        form_to_event_data(form),
        department=(form.department.data or '').strip() or GENERAL_DEPARTMENT,
    )
    return jsonify({'event': event.to_dict()}), 201


@admin_bp.route("/events/<event_id>", methods=["PUT", "PATCH"])
@admin_required
def update_event(event_id):
    event = EventService.get_event(event_id)
    form = EventForm()
    form.validate_or_raise()
    event = EventService.update_event(
        current_profile(),
        event,
        form_to_event_data(form),
        department=(form.department.data or '').strip() or None,
    )
    return jsonify({'event': event.to_dict()})


@admin_bp.route("/events/<event_id>", methods=["DELETE"])
@admin_required
def delete_event(event_id):
    EventService.delete_event(current_profile(), EventService.get_event(event_id))
    return jsonify({'message': 'Event deleted'})


@admin_bp.route("/events/<event_id>/event-head", methods=["POST"])
@admin_required
def assign_event_head(event_id):
    event = EventService.get_event(event_id)
    form = AssignEventHeadForm()
    form.validate_or_raise()
    event = EventService.assign_event_head(current_profile(), event, form.user_id.data)
    return jsonify({'event': event.to_dict()})


@admin_bp.route("/event-heads")
@admin_required
def eligible_event_heads():
    return jsonify({'users': [u.to_dict() for u in UserService.eligible_event_heads()]})


# ============= Users =============

@admin_bp.route("/users")
@admin_required
def list_users():
    return jsonify({'users': [u.to_dict() for u in UserService.list_users()]})


@admin_bp.route("/users", methods=["POST"])
@admin_required
def create_user():
    """Create an account with any role; the admin stays signed in."""
    form = SignUpForm()
    form.validate_or_raise()
    user = AuthSessionManager.sign_up(
        form.email.data,
        form.password.data,
        form.name.data,
        role=UserRole(form.role.data or UserRole.PARTICIPANT.value),
        acting_user=current_profile(),
    )
    return jsonify({'user': user.to_dict()}), 201


@admin_bp.route("/users/<user_id>", methods=["PATCH"])
@admin_required
def update_user(user_id):
    form = UserUpdateForm()
    form.validate_or_raise()
    user = UserService.update_user(
        current_profile(),
        user_id,
        role=UserRole(form.role.data) if form.role.data else None,
        department=form.department.data,
        set_department=bool(form.department.raw_data),
    )
    return jsonify({'user': user.to_dict()})


@admin_bp.route("/users/<user_id>", methods=["DELETE"])
@admin_required
def delete_user(user_id):
    UserService.delete_user(current_profile(), user_id)
    return jsonify({'message': 'User deleted'})


# ============= Export =============

@admin_bp.route("/registrations/export")
@admin_required
def export_registrations():
    return Response(
        registrations_csv(),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={export_filename()}'},
    )
