"""Role-specific dashboards, chosen by the viewer's role."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from techfest.errors import PermissionDenied, ValidationError
from techfest.models import Event, User, UserRole
from techfest.services.announcements import AnnouncementService
from techfest.services.events import EventService
from techfest.services.registrations import RegistrationService
from techfest.services.users import UserService


@dataclass(frozen=True)
class Viewer:
    """The signed-in profile a dashboard renders for."""

    user: User

    @property
    def role(self) -> UserRole:
        return self.user.role

    @property
    def department(self) -> str | None:
        return self.user.department


class Dashboard:
    role: UserRole

    def __init__(self, viewer: Viewer):
        if viewer.role != self.role:
            raise PermissionDenied('Dashboard not available for this role')
        self.viewer = viewer

    def summary(self) -> dict[str, Any]:
        raise NotImplementedError


class AdminDashboard(Dashboard):
    role = UserRole.ADMIN

    def stats(self) -> dict[str, int]:
        events = EventService.list_events()
        return {
            **EventService.stats(events),
            'total_users': len(UserService.list_users()),
        }

    def summary(self) -> dict[str, Any]:
        return {
            'role': self.role.value,
            'stats': self.stats(),
            'events': [e.to_dict() for e in EventService.list_events()],
            'users': [u.to_dict() for u in UserService.list_users()],
            'announcements': [a.to_dict() for a in AnnouncementService.list_announcements()],
        }


class CoordinatorDashboard(Dashboard):
    role = UserRole.COORDINATOR

    def __init__(self, viewer: Viewer):
        super().__init__(viewer)
        if not viewer.department:
            raise ValidationError('Department not assigned')

    def events(self) -> list[Event]:
        return EventService.events_for_department(self.viewer.department)

    def summary(self) -> dict[str, Any]:
        events = self.events()
        return {
            'role': self.role.value,
            'department': self.viewer.department,
            'stats': EventService.stats(events),
            'events': [e.to_dict() for e in events],
            'event_heads': [
                u.to_dict() for u in UserService.eligible_event_heads(self.viewer.department)
            ],
        }


class EventHeadDashboard(Dashboard):
    role = UserRole.EVENT_HEAD

    def summary(self) -> dict[str, Any]:
        events = EventService.events_headed_by(self.viewer.user)
        return {
            'role': self.role.value,
            'events': [
                {**e.to_dict(), 'stats': RegistrationService.event_stats(e)}
                for e in events
            ],
        }


class ParticipantDashboard(Dashboard):
    role = UserRole.PARTICIPANT

    def summary(self) -> dict[str, Any]:
        user = self.viewer.user
        return {
            'role': self.role.value,
            'stats': RegistrationService.participant_stats(user),
            'registrations': RegistrationService.registrations_for_user(user),
        }


DASHBOARDS: dict[UserRole, type[Dashboard]] = {
    UserRole.ADMIN: AdminDashboard,
    UserRole.COORDINATOR: CoordinatorDashboard,
    UserRole.EVENT_HEAD: EventHeadDashboard,
    UserRole.PARTICIPANT: ParticipantDashboard,
}

_missing = set(UserRole) - set(DASHBOARDS)
if _missing:
    raise RuntimeError(f"No dashboard for roles: {sorted(r.value for r in _missing)}")


def dashboard_for(viewer: Viewer) -> Dashboard:
    return DASHBOARDS[viewer.role](viewer)


__all__ = [
    'Viewer',
    'Dashboard',
    'AdminDashboard',
    'CoordinatorDashboard',
    'EventHeadDashboard',
    'ParticipantDashboard',
    'DASHBOARDS',
    'dashboard_for',
]
