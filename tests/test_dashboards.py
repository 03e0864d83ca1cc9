"""Role dispatch and admin user management."""

import pytest

from techfest.errors import PermissionDenied
from techfest.extensions import db
from techfest.models import Announcement, Event, Registration, User, UserRole, Winner
from techfest.services.dashboards import DASHBOARDS, AdminDashboard, Viewer, dashboard_for

from conftest import create_event, create_registration, create_user, login


class TestDispatch:

    def test_every_role_has_a_dashboard(self):
        assert set(DASHBOARDS) == set(UserRole)

    @pytest.mark.parametrize('role', list(UserRole))
    def test_dashboard_matches_role(self, client, app, role):
        user_id = create_user(app, f'{role.value.lower()}@example.com', role, department='CSE')
        login(client, user_id)

        response = client.get('/dashboard')
        assert response.status_code == 200
        assert response.get_json()['role'] == role.value

    def test_role_change_seen_on_next_request(self, client, app):
        user_id = create_user(app, 'p@example.com')
        login(client, user_id)
        assert client.get('/dashboard').get_json()['role'] == 'participant'

        with app.app_context():
            user = db.session.get(User, user_id)
            user.role = UserRole.EVENT_HEAD
            db.session.commit()

        assert client.get('/dashboard').get_json()['role'] == 'eventHead'

    def test_dashboard_rejects_mismatched_viewer(self, app):
        with app.app_context():
            user = User(email='p@example.com', display_name='P', role=UserRole.PARTICIPANT)
            with pytest.raises(PermissionDenied):
                AdminDashboard(Viewer(user))
            assert dashboard_for(Viewer(user)).role == UserRole.PARTICIPANT

    def test_admin_stats(self, admin_client, app):
        user_id = create_user(app, 'p@example.com')
        event_id = create_event(app)
        create_event(app, 'Live One', is_live=True)
        create_registration(app, user_id, event_id)

        stats = admin_client.get('/admin/stats').get_json()
        assert stats == {
            'total_events': 2,
            'live_events': 1,
            'total_participants': 1,
            'total_users': 2,
        }


class TestUserAdministration:

    def test_change_role_and_department(self, admin_client, app):
        user_id = create_user(app, 'p@example.com')
        response = admin_client.patch(f'/admin/users/{user_id}', json={'role': 'coordinator', 'department': 'ECE'})
        assert response.status_code == 200
        body = response.get_json()['user']
        assert body['role'] == 'coordinator'
        assert body['department'] == 'ECE'

        # Omitting the department leaves it alone; an empty one clears it
        admin_client.patch(f'/admin/users/{user_id}', json={'role': 'eventHead'})
        with app.app_context():
            assert db.session.get(User, user_id).department == 'ECE'
        admin_client.patch(f'/admin/users/{user_id}', json={'department': ''})
        with app.app_context():
            assert db.session.get(User, user_id).department is None

    def test_cannot_delete_self(self, admin_client, admin_id):
        assert admin_client.delete(f'/admin/users/{admin_id}').status_code == 400

    def test_delete_user_unlinks_events_and_keeps_history(self, admin_client, head_client, app, head_id):
        event_id = create_event(app, event_head_id=head_id)
        registration_id = create_registration(app, head_id, event_id)

        winner_ids = [create_user(app, f'w{i}@example.com', name=f'W{i}') for i in range(3)]
        for user_id in winner_ids:
            create_registration(app, user_id, event_id, attended=True)
        head_client.post(f'/event-head/events/{event_id}/live')
        head_client.post(f'/event-head/events/{event_id}/live')
        declared = head_client.post(
            f'/event-head/events/{event_id}/winners',
            json={'first': winner_ids[0], 'second': winner_ids[1], 'third': winner_ids[2]},
        )
        assert declared.status_code == 201

        assert admin_client.delete(f'/admin/users/{head_id}').status_code == 200
        assert admin_client.delete(f'/admin/users/{winner_ids[0]}').status_code == 200
        with app.app_context():
            assert all(a.author_id is None for a in Announcement.query.all())
            winners = Winner.query.order_by(Winner.position).all()
            assert [w.approved_by_id for w in winners] == [None, None, None]
            assert winners[0].user_id is None
            assert winners[0].user_name == 'W0'
            assert winners[0].approved_by == 'Event Head'

        with app.app_context():
            assert db.session.get(User, head_id) is None
            event = db.session.get(Event, event_id)
            assert event.event_head_id is None
            assert event.event_head_name is None
            registration = db.session.get(Registration, registration_id)
            assert registration.user_id is None
            assert registration.user_name == 'Event Head'
