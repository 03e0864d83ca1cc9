"""Registration flow, capacity guard and attendance."""

from techfest.extensions import db
from techfest.models import Event, Registration

from conftest import create_event, create_registration, create_user, login


class TestRegistration:

    def test_anonymous_must_login(self, client, app):
        event_id = create_event(app)
        response = client.post(f'/events/{event_id}/register')
        assert response.status_code == 401
        assert response.get_json()['error'] == 'Please login to register'

    def test_register_creates_one_registration(self, client, app):
        user_id = create_user(app, 'p@example.com', name='Pat')
        event_id = create_event(app, 'Code Sprint')
        login(client, user_id)

        response = client.post(f'/events/{event_id}/register')
        assert response.status_code == 201
        registration = response.get_json()['registration']
        assert registration['user_name'] == 'Pat'
        assert registration['event_title'] == 'Code Sprint'
        assert registration['attended'] is False

        assert client.get(f'/events/{event_id}').get_json()['event']['is_registered'] is True
        with app.app_context():
            assert Registration.query.filter_by(user_id=user_id, event_id=event_id).count() == 1
            assert db.session.get(Event, event_id).current_participants == 1

    def test_second_registration_rejected(self, client, app):
        user_id = create_user(app, 'p@example.com')
        event_id = create_event(app)
        login(client, user_id)

        assert client.post(f'/events/{event_id}/register').status_code == 201
        again = client.post(f'/events/{event_id}/register')
        assert again.status_code == 409
        assert again.get_json()['error'] == 'Already registered'
        with app.app_context():
            assert Registration.query.count() == 1
            assert db.session.get(Event, event_id).current_participants == 1

    def test_hack_night_capacity(self, make_client, app):
        event_id = create_event(app, 'Hack Night', max_participants=2)
        clients = [
            login(make_client(), create_user(app, f'hacker{i}@example.com'))
            for i in range(3)
        ]

        assert clients[0].post(f'/events/{event_id}/register').status_code == 201
        assert clients[1].post(f'/events/{event_id}/register').status_code == 201
        third = clients[2].post(f'/events/{event_id}/register')
        assert third.status_code == 409
        assert third.get_json()['error'] == 'Event is full'

        with app.app_context():
            event = db.session.get(Event, event_id)
            assert event.current_participants == 2
            assert event.spots_left == 0
            assert Registration.query.filter_by(event_id=event_id).count() == 2

    def test_conditional_increment_blocks_stale_capacity_check(self, client, app, monkeypatch):
        event_id = create_event(app, 'Last Seat', max_participants=1)
        create_registration(app, create_user(app, 'first@example.com'), event_id)
        login(client, create_user(app, 'late@example.com'))

        # Simulate a request that loaded the event before the last seat went
        monkeypatch.setattr(Event, 'is_full', property(lambda self: False))
        response = client.post(f'/events/{event_id}/register')
        assert response.status_code == 409
        assert response.get_json()['error'] == 'Event is full'

        with app.app_context():
            assert Registration.query.filter_by(event_id=event_id).count() == 1
            assert db.session.get(Event, event_id).current_participants == 1

    def test_register_unknown_event(self, client, app):
        login(client, create_user(app, 'p@example.com'))
        assert client.post('/events/missing/register').status_code == 404


class TestAttendance:

    def test_head_toggles_attendance(self, head_client, app, head_id):
        event_id = create_event(app, event_head_id=head_id)
        registration_id = create_registration(app, create_user(app, 'p@example.com'), event_id)

        url = f'/event-head/registrations/{registration_id}/attendance'
        assert head_client.post(url).get_json()['registration']['attended'] is True
        assert head_client.post(url).get_json()['registration']['attended'] is False
        assert head_client.post(url, json={'attended': True}).get_json()['registration']['attended'] is True

        listing = head_client.get(f'/event-head/events/{event_id}/registrations').get_json()
        assert listing['stats']['attended'] == 1
        assert len(listing['registrations']) == 1

    def test_other_head_cannot_mark_attendance(self, client, app, head_id):
        from techfest.models import UserRole

        event_id = create_event(app, event_head_id=head_id)
        registration_id = create_registration(app, create_user(app, 'p@example.com'), event_id)
        login(client, create_user(app, 'h2@example.com', UserRole.EVENT_HEAD))

        response = client.post(f'/event-head/registrations/{registration_id}/attendance')
        assert response.status_code == 403


class TestParticipantArea:

    def test_registrations_joined_with_events_newest_first(self, client, app):
        user_id = create_user(app, 'p@example.com')
        first = create_event(app, 'First')
        second = create_event(app, 'Second')
        create_registration(app, user_id, first, attended=True)
        create_registration(app, user_id, second)
        login(client, user_id)

        items = client.get('/me/registrations').get_json()['registrations']
        assert [i['event']['title'] for i in items] == ['Second', 'First']
        assert items[1]['attended'] is True

        stats = client.get('/me/stats').get_json()
        assert stats == {'registered': 2, 'attended': 1, 'certificates': 1}
