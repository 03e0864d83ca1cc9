from __future__ import annotations

from flask import Blueprint, jsonify

from techfest.auth import current_profile, login_required_json
from techfest.services.dashboards import Viewer, dashboard_for

dashboard_bp = Blueprint("dashboard", __name__)


@dashboard_bp.route("/dashboard")
@login_required_json()
def dashboard():
    """The signed-in user's dashboard, picked by role."""
    return jsonify(dashboard_for(Viewer(current_profile())).summary())
