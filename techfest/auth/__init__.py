"""Authentication helpers shared across blueprints."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar, cast

from flask_login import current_user

from techfest.errors import AuthError, PermissionDenied
from techfest.models import User, UserRole

F = TypeVar('F', bound=Callable[..., object])


def login_required_json(message: str = 'Authentication required'):
    """Decorator factory rejecting anonymous requests with a JSON 401."""
    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                raise AuthError(message)
            return func(*args, **kwargs)
        return cast(F, wrapper)
    return decorator


def role_required(*required_roles: UserRole | str):
    """Decorator factory to require specific roles."""
    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                raise AuthError('Authentication required')

            if not current_user.has_role(*required_roles):
                raise PermissionDenied('You do not have permission to perform this action')

            return func(*args, **kwargs)
        return cast(F, wrapper)
    return decorator


admin_required = role_required(UserRole.ADMIN)
staff_required = role_required(UserRole.ADMIN, UserRole.COORDINATOR, UserRole.EVENT_HEAD)


def current_profile() -> User:
    """The signed-in ``User`` row (unwrapped from the Flask-Login proxy)."""
    return current_user._get_current_object()


__all__ = [
    'login_required_json',
    'role_required',
    'admin_required',
    'staff_required',
    'current_profile',
]
