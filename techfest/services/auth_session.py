"""Authentication session manager.

Wraps the identity store (``User`` rows with bcrypt hashes), Google ID token
verification and the Flask-Login session. Every profile mutation goes through
here so the session and the stored profile never disagree.
"""

from __future__ import annotations

from typing import Any

from flask import current_app, session
from flask_login import current_user, login_user, logout_user
from google.auth.exceptions import TransportError
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token

from techfest.errors import AuthError
from techfest.extensions import db
from techfest.models import AuthProvider, User, UserRole, utcnow
from techfest.services.audit import log_security_event
from techfest.services.store import transaction
from techfest.services.users import refresh_user_copies

MIN_PASSWORD_LENGTH = 6

# Error codes a browser client reports when the user dismisses the Google popup
CANCELLED_POPUP_CODES = frozenset({
    'popup_closed_by_user',
    'cancelled_popup_request',
    'auth/popup-closed-by-user',
    'auth/cancelled-popup-request',
})

GOOGLE_ISSUERS = ('accounts.google.com', 'https://accounts.google.com')


def verify_google_token(token: str) -> dict[str, Any]:
    """Verify a Google ID token and return its claims.

    Raises:
        AuthError: if the token is invalid, expired, or for another client
    """
    client_id = current_app.config.get('GOOGLE_CLIENT_ID')
    if not client_id:
        raise AuthError('Google sign-in is not configured', status_code=503)
    try:
        claims = google_id_token.verify_oauth2_token(token, google_requests.Request(), client_id)
    except TransportError as e:
        current_app.logger.error(f"Could not fetch Google certificates: {e}")
        raise AuthError('Google sign-in is temporarily unavailable', status_code=503) from e
    except ValueError as e:
        raise AuthError('Invalid Google credential') from e
    if claims.get('iss') not in GOOGLE_ISSUERS:
        raise AuthError('Invalid Google credential issuer')
    if not claims.get('email'):
        raise AuthError('Google account has no email address')
    if claims.get('email_verified') is not True:
        raise AuthError('Google account email is not verified')
    return claims


def is_cancelled_popup(cancelled: bool, error_code: str | None) -> bool:
    return bool(cancelled) or (error_code or '').strip().lower() in CANCELLED_POPUP_CODES


def _start_session(user: User, remember: bool = False) -> None:
    login_user(user, remember=remember)
    session['user_role'] = user.role.value


class AuthSessionManager:
    """Sign-up, sign-in and sign-out against the local identity store."""

    @staticmethod
    def current_profile() -> User | None:
        """Return the signed-in profile, or None.

        The user loader reloads the profile on every request, so a profile
        deleted by an admin simply yields an anonymous session here.
        """
        if current_user.is_authenticated:
            return current_user._get_current_object()
        return None

    @staticmethod
    def sign_up(
        email: str,
        password: str,
        name: str,
        role: UserRole = UserRole.PARTICIPANT,
        acting_user: User | None = None,
        system: bool = False,
    ) -> User:
        """Create an identity plus its profile and sign it in.

        Only an admin (or a ``system`` caller such as the CLI) may create
        accounts with a role other than participant; in that case nobody is
        signed in as the new account.
        """
        email = email.strip().lower()
        name = name.strip()
        is_admin = system or (acting_user is not None and acting_user.has_role(UserRole.ADMIN))
        if role != UserRole.PARTICIPANT and not is_admin:
            raise AuthError('Only administrators can create staff accounts', status_code=403)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError(
                f'Password should be at least {MIN_PASSWORD_LENGTH} characters',
                status_code=400,
            )
        if User.query.filter(User.email == email).first():
            raise AuthError('An account with this email already exists', status_code=409)

        user = User(email=email, display_name=name, role=role, auth_provider=AuthProvider.PASSWORD)
        user.set_password(password)
        with transaction('create account', conflict_message='An account with this email already exists'):
            db.session.add(user)

        current_app.logger.info(f"Account created for {email} with role {role.value}")
        log_security_event(user, 'signup', metadata={'role': role.value})

        if acting_user is None and not system:
            _start_session(user)
        return user

    @staticmethod
    def sign_in(email: str, password: str, remember: bool = False) -> User:
        email = email.strip().lower()
        user = User.query.filter(User.email == email).first()
        if user is None or not user.check_password(password):
            if user is not None:
                log_security_event(user, 'login_failed', 'Invalid password')
            raise AuthError('Invalid email or password')
        if not user.is_active:
            raise AuthError('Account is inactive. Contact your administrator.')

        with transaction('record sign-in'):
            user.last_login_at = utcnow()

        _start_session(user, remember=remember)
        log_security_event(user, 'login_success', 'User logged in successfully')
        return user

    @staticmethod
    def sign_in_with_google(token: str) -> User:
        """Sign in with a Google ID token, creating a participant on first use."""
        claims = verify_google_token(token)
        sub = claims['sub']
        email = claims['email'].strip().lower()

        user = User.query.filter(User.google_sub == sub).first()
        if user is None:
            user = User.query.filter(User.email == email).first()
        if user is not None and not user.is_active:
            raise AuthError('Account is inactive. Contact your administrator.')

        created = False
        with transaction('sign in with Google', conflict_message='An account with this email already exists'):
            if user is None:
                user = User(
                    email=email,
                    display_name=claims.get('name') or email.split('@')[0],
                    photo_url=claims.get('picture'),
                    role=UserRole.PARTICIPANT,
                    auth_provider=AuthProvider.GOOGLE,
                    google_sub=sub,
                )
                db.session.add(user)
                created = True
            elif user.google_sub is None:
                user.google_sub = sub
            if user.photo_url is None and claims.get('picture'):
                user.photo_url = claims['picture']
            user.last_login_at = utcnow()

        _start_session(user, remember=True)
        if created:
            current_app.logger.info(f"Profile created for Google account {email}")
        log_security_event(user, 'login_success', 'Google sign-in', metadata={'created': created})
        return user

    @staticmethod
    def logout() -> None:
        user = AuthSessionManager.current_profile()
        logout_user()
        session.clear()
        if user is not None:
            log_security_event(user, 'logout')

    @staticmethod
    def update_profile(user: User, display_name: str, photo_url: str | None = None) -> User:
        with transaction('update profile'):
            user.display_name = display_name.strip()
            if photo_url is not None:
                user.photo_url = photo_url.strip() or None
            refresh_user_copies(user)
        current_app.logger.info(f"Profile updated for {user.id}")
        return user


__all__ = [
    'AuthSessionManager',
    'verify_google_token',
    'is_cancelled_popup',
    'MIN_PASSWORD_LENGTH',
]
