"""Participant area: own registrations and certificates."""

from __future__ import annotations

import io

from flask import Blueprint, jsonify, send_file

from techfest.auth import current_profile, login_required_json
from techfest.services.certificates import certificate_for_registration
from techfest.services.registrations import RegistrationService

participant_bp = Blueprint("participant", __name__)


@participant_bp.route("/registrations")
@login_required_json()
def registrations():
    return jsonify({'registrations': RegistrationService.registrations_for_user(current_profile())})


@participant_bp.route("/stats")
@login_required_json()
def stats():
    return jsonify(RegistrationService.participant_stats(current_profile()))


@participant_bp.route("/registrations/<registration_id>/certificate")
@login_required_json()
def certificate(registration_id):
    filename, pdf = certificate_for_registration(current_profile(), registration_id)
    return send_file(
        io.BytesIO(pdf),
        mimetype='application/pdf',
        as_attachment=True,
        download_name=filename,
    )
