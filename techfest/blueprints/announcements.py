"""Announcement feed blueprint, including the live stream."""

from __future__ import annotations

from flask import Blueprint, Response, current_app, jsonify, stream_with_context

from techfest.auth import admin_required, current_profile, role_required
from techfest.forms import AnnouncementForm
from techfest.models import AnnouncementPriority
from techfest.services.announcements import POSTING_ROLES, AnnouncementService, stream_announcements

announcements_bp = Blueprint("announcements", __name__)


@announcements_bp.route("")
def list_announcements():
    items = AnnouncementService.list_announcements()
    return jsonify({'announcements': [a.to_dict() for a in items]})


@announcements_bp.route("/stream")
def stream():
    """Server-Sent Events feed of announcement snapshots."""
    generator = stream_announcements(
        current_app.config.get('ANNOUNCEMENT_POLL_SECONDS', 3),
        current_app.config.get('ANNOUNCEMENT_STREAM_MAX_POLLS'),
    )
    return Response(
        stream_with_context(generator),
        mimetype='text/event-stream',
        headers={'Cache-Control': 'no-cache', 'X-Accel-Buffering': 'no'},
    )


@announcements_bp.route("", methods=["POST"])
@role_required(*POSTING_ROLES)
def create_announcement():
    form = AnnouncementForm()
    form.validate_or_raise()
    announcement = AnnouncementService.post(
        current_profile(),
        form.title.data,
        form.content.data,
        AnnouncementPriority(form.priority.data),
    )
    return jsonify({'announcement': announcement.to_dict()}), 201


@announcements_bp.route("/<announcement_id>", methods=["PUT", "PATCH"])
@admin_required
def update_announcement(announcement_id):
    form = AnnouncementForm()
    form.validate_or_raise()
    announcement = AnnouncementService.edit(
        current_profile(),
        announcement_id,
        form.title.data,
        form.content.data,
        AnnouncementPriority(form.priority.data),
    )
    return jsonify({'announcement': announcement.to_dict()})


@announcements_bp.route("/<announcement_id>", methods=["DELETE"])
@admin_required
def delete_announcement(announcement_id):
    AnnouncementService.delete(current_profile(), announcement_id)
    return jsonify({'message': 'Announcement deleted'})
