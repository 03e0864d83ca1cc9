"""Authentication blueprint: sign-up, sign-in, Google, profile."""

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_login import current_user
from flask_wtf.csrf import generate_csrf

from techfest.auth import current_profile, login_required_json
from techfest.errors import ValidationError
from techfest.extensions import limiter
from techfest.forms import GoogleSignInForm, LoginForm, ProfileForm, SignUpForm
from techfest.models import UserRole
from techfest.services.auth_session import AuthSessionManager, is_cancelled_popup

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/csrf")
def csrf_token():
    return jsonify({'csrf_token': generate_csrf()})


@auth_bp.route("/me")
def me():
    user = AuthSessionManager.current_profile()
    return jsonify({'user': user.to_dict() if user else None})


@auth_bp.route("/signup", methods=["POST"])
@limiter.limit("10 per minute")
def signup():
    form = SignUpForm()
    form.validate_or_raise()

    acting_user = None
    if current_user.is_authenticated and current_user.has_role(UserRole.ADMIN):
        acting_user = current_profile()

    user = AuthSessionManager.sign_up(
        form.email.data,
        form.password.data,
        form.name.data,
        role=UserRole(form.role.data or UserRole.PARTICIPANT.value),
        acting_user=acting_user,
    )
    return jsonify({'user': user.to_dict()}), 201


@auth_bp.route("/login", methods=["POST"])
@limiter.limit("10 per minute")
def login():
    form = LoginForm()
    form.validate_or_raise()
    user = AuthSessionManager.sign_in(form.email.data, form.password.data, remember=form.remember_me.data)
    return jsonify({'user': user.to_dict()})


@auth_bp.route("/google", methods=["POST"])
@limiter.limit("10 per minute")
def google_sign_in():
    form = GoogleSignInForm()
    form.validate_or_raise()

    # A dismissed popup is not an error and leaves the session alone
    if is_cancelled_popup(form.cancelled.data, form.error.data):
        return '', 204
    if not form.id_token.data:
        raise ValidationError('Missing Google credential')

    user = AuthSessionManager.sign_in_with_google(form.id_token.data)
    return jsonify({'user': user.to_dict()})


@auth_bp.route("/logout", methods=["POST"])
def logout():
    AuthSessionManager.logout()
    return jsonify({'message': 'Logged out'})


@auth_bp.route("/profile", methods=["PATCH", "POST"])
@login_required_json()
def update_profile():
    form = ProfileForm()
    form.validate_or_raise()
    user = AuthSessionManager.update_profile(
        current_profile(),
        form.display_name.data,
        form.photo_url.data,
    )
    return jsonify({'user': user.to_dict()})
