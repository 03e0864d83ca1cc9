"""Audit logging service for security and administrative events."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from flask import current_app, has_request_context, request
from sqlalchemy.exc import SQLAlchemyError

from techfest.extensions import db
from techfest.models import AuditLog

if TYPE_CHECKING:
    from techfest.models import User


def _remote_addr() -> str | None:
    return request.remote_addr if has_request_context() else None


def log_security_event(
    user: User,
    action: str,
    details: str | None = None,
    metadata: dict[str, Any] | None = None
) -> None:
    """
    Log a security-related event to the audit log.

    Args:
        user: User who performed the action
        action: Action performed (e.g., "login_success", "signup", "logout")
        details: Optional additional details
        metadata: Additional metadata to store
    """
    meta = dict(metadata or {})
    if details:
        meta['details'] = details
    _write(user, action, 'user', user.id, meta)


def log_admin_action(
    user: User,
    action: str,
    entity_type: str,
    entity_id: str | None = None,
    metadata: dict[str, Any] | None = None
) -> None:
    """
    Log an administrative action.

    Args:
        user: User who performed the action
        action: Action performed (e.g., "event_created", "user_deleted")
        entity_type: Type of entity affected
        entity_id: ID of entity affected
        metadata: Additional metadata
    """
    _write(user, action, entity_type, entity_id, dict(metadata or {}))


def _write(user: User, action: str, entity_type: str, entity_id: str | None, meta: dict[str, Any]) -> None:
    # Audit writes never fail the request that triggered them.
    try:
        meta['ip_address'] = _remote_addr()
        db.session.add(AuditLog(
            user_id=user.id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            meta=meta,
        ))
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to write audit entry {action}: {e}")


__all__ = ["log_security_event", "log_admin_action"]
