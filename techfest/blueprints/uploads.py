"""Image uploads and the public blob route."""

from __future__ import annotations

from flask import Blueprint, jsonify, request, send_from_directory

from techfest.auth import current_profile, staff_required
from techfest.services.uploads import upload_root, validate_and_upload

uploads_bp = Blueprint("uploads", __name__)


@uploads_bp.route("/images", methods=["POST"])
@staff_required
def upload_image():
    folder = request.args.get('folder', 'events')
    url = validate_and_upload(request.files.get('file'), folder)
    return jsonify({'url': url, 'uploaded_by': current_profile().id}), 201


@uploads_bp.route("/<path:key>")
def serve(key):
    return send_from_directory(upload_root(), key)
