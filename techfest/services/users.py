"""User administration and denormalized-copy reconciliation."""

from __future__ import annotations

from flask import current_app
from sqlalchemy import update

from techfest.errors import PermissionDenied, ValidationError
from techfest.extensions import db
from techfest.models import Announcement, Event, Registration, User, UserRole, Winner
from techfest.services.audit import log_admin_action
from techfest.services.store import get_or_404, transaction

EVENT_HEAD_ELIGIBLE_ROLES = (UserRole.EVENT_HEAD, UserRole.ADMIN)


def refresh_user_copies(user: User) -> None:
    """Push the user's current name/photo onto records that cache them.

    Runs inside the caller's transaction; the user record is authoritative.
    """
    db.session.execute(
        update(Registration)
        .where(Registration.user_id == user.id)
        .values(user_name=user.display_name, user_photo=user.photo_url, user_email=user.email)
    )
    db.session.execute(
        update(Winner)
        .where(Winner.user_id == user.id)
        .values(user_name=user.display_name, user_photo=user.photo_url)
    )
    db.session.execute(
        update(Event)
        .where(Event.event_head_id == user.id)
        .values(event_head_name=user.display_name)
    )
    db.session.execute(
        update(Event)
        .where(Event.coordinator_id == user.id)
        .values(coordinator_name=user.display_name)
    )


class UserService:
    """Admin-facing user operations."""

    @staticmethod
    def list_users() -> list[User]:
        return User.query.order_by(User.created_at.desc()).all()

    @staticmethod
    def eligible_event_heads(department: str | None = None) -> list[User]:
        query = User.query.filter(User.role.in_(EVENT_HEAD_ELIGIBLE_ROLES))
        if department is not None:
            query = query.filter(User.department == department)
        return query.order_by(User.display_name).all()

    @staticmethod
    def update_user(
        actor: User,
        user_id: str,
        role: UserRole | None = None,
        department: str | None = None,
        set_department: bool = False,
    ) -> User:
        """Change a user's role and/or department.

        ``set_department`` distinguishes "leave unchanged" from "clear".
        """
        user = get_or_404(User, user_id, 'User')
        changes: dict[str, str | None] = {}
        with transaction('update user'):
            if role is not None and role != user.role:
                changes['role'] = role.value
                user.role = role
            if set_department:
                department = (department or '').strip() or None
                if department != user.department:
                    changes['department'] = department
                    user.department = department

        if changes:
            current_app.logger.info(f"User {user.id} updated by {actor.id}: {changes}")
            log_admin_action(actor, 'user_updated', 'user', user.id, metadata={'changes': changes})
        return user

    @staticmethod
    def delete_user(actor: User, user_id: str) -> None:
        if actor.id == user_id:
            raise ValidationError('You cannot delete your own account')
        if not actor.has_role(UserRole.ADMIN):
            raise PermissionDenied('Only administrators can delete users')

        user = get_or_404(User, user_id, 'User')
        email = user.email
        with transaction('delete user'):
            # Registrations and winners keep their cached names; only the links go
            db.session.execute(
                update(Event)
                .where(Event.event_head_id == user.id)
                .values(event_head_id=None, event_head_name=None)
            )
            db.session.execute(
                update(Event)
                .where(Event.coordinator_id == user.id)
                .values(coordinator_id=None)
            )
            db.session.execute(
                update(Winner)
                .where(Winner.user_id == user.id)
                .values(user_id=None)
            )
            db.session.execute(
                update(Winner)
                .where(Winner.approved_by_id == user.id)
                .values(approved_by_id=None)
            )
            db.session.execute(
                update(Announcement)
                .where(Announcement.author_id == user.id)
                .values(author_id=None)
            )
            db.session.delete(user)

        current_app.logger.info(f"User {user_id} ({email}) deleted by {actor.id}")
        log_admin_action(actor, 'user_deleted', 'user', user_id, metadata={'email': email})


__all__ = ['UserService', 'refresh_user_copies', 'EVENT_HEAD_ELIGIBLE_ROLES']
