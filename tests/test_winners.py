"""Winner declaration rules and the public winners board."""

from datetime import datetime, timezone

import pytest

from techfest.models import Announcement, Winner

from conftest import create_event, create_registration, create_user

ENDED = datetime(2025, 3, 14, 18, 0, tzinfo=timezone.utc)


@pytest.fixture
def podium(app, head_id):
    """An ended event headed by ``head_id`` with three attended and one absent registrant."""
    event_id = create_event(app, 'Code Sprint', event_head_id=head_id, ended_at=ENDED)
    attended = [
        create_user(app, f'winner{i}@example.com', name=f'Winner {i}')
        for i in range(1, 4)
    ]
    for user_id in attended:
        create_registration(app, user_id, event_id, attended=True)
    absent = create_user(app, 'absent@example.com', name='Absent')
    create_registration(app, absent, event_id)
    return event_id, attended, absent


def choose(first, second, third):
    return {'first': first, 'second': second, 'third': third}


class TestDeclareWinners:

    def test_valid_declaration(self, head_client, app, podium):
        event_id, (first, second, third), _ = podium

        response = head_client.post(f'/event-head/events/{event_id}/winners', json=choose(first, second, third))
        assert response.status_code == 201
        winners = response.get_json()['winners']
        assert [(w['position'], w['user_id']) for w in winners] == [(1, first), (2, second), (3, third)]
        assert winners[0]['approved_by'] == 'Event Head'

        with app.app_context():
            assert Winner.query.filter_by(event_id=event_id).count() == 3
            announcements = Announcement.query.all()
            assert len(announcements) == 1
            assert announcements[0].title == 'Winners announced: Code Sprint'
            assert announcements[0].priority.value == 'high'
            assert 'Winner 1' in announcements[0].content

        assert head_client.get(f'/events/{event_id}').get_json()['event']['status'] == 'winners_declared'

    def test_second_declaration_conflicts(self, head_client, app, podium):
        event_id, (first, second, third), _ = podium
        url = f'/event-head/events/{event_id}/winners'

        assert head_client.post(url, json=choose(first, second, third)).status_code == 201
        again = head_client.post(url, json=choose(third, second, first))
        assert again.status_code == 409

        with app.app_context():
            assert Winner.query.count() == 3
            assert Announcement.query.count() == 1

    def test_duplicate_choice_rejected(self, head_client, app, podium):
        event_id, (first, second, _), _ = podium
        response = head_client.post(f'/event-head/events/{event_id}/winners', json=choose(first, first, second))
        assert response.status_code == 400
        with app.app_context():
            assert Winner.query.count() == 0

    def test_absent_participant_rejected(self, head_client, app, podium):
        event_id, (first, second, _), absent = podium
        response = head_client.post(f'/event-head/events/{event_id}/winners', json=choose(first, second, absent))
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Winners must be chosen from attended participants'

    def test_fewer_than_three_attended_rejected(self, head_client, app, head_id):
        event_id = create_event(app, 'Small Event', event_head_id=head_id, ended_at=ENDED)
        users = [create_user(app, f'u{i}@example.com') for i in range(3)]
        create_registration(app, users[0], event_id, attended=True)
        create_registration(app, users[1], event_id, attended=True)
        create_registration(app, users[2], event_id)

        response = head_client.post(f'/event-head/events/{event_id}/winners', json=choose(*users))
        assert response.status_code == 400
        with app.app_context():
            assert Winner.query.count() == 0
            assert Announcement.query.count() == 0

    def test_only_assigned_head(self, admin_client, podium):
        event_id, (first, second, third), _ = podium
        response = admin_client.post(f'/event-head/events/{event_id}/winners', json=choose(first, second, third))
        assert response.status_code == 403


class TestWinnersBoard:

    def test_grouped_by_event(self, head_client, client, podium):
        event_id, (first, second, third), _ = podium
        head_client.post(f'/event-head/events/{event_id}/winners', json=choose(third, first, second))

        groups = client.get('/winners').get_json()['events']
        assert len(groups) == 1
        assert groups[0]['event_title'] == 'Code Sprint'
        assert groups[0]['event_date'] is not None
        assert [w['user_id'] for w in groups[0]['winners']] == [third, first, second]
        assert [w['position'] for w in groups[0]['winners']] == [1, 2, 3]


def attended_event(app, head_id, **state):
    event_id = create_event(app, 'Hack Night', event_head_id=head_id, **state)
    users = [create_user(app, f'p{i}@example.com', name=f'P{i}') for i in range(3)]
    for user_id in users:
        create_registration(app, user_id, event_id, attended=True)
    return event_id, users


class TestLifecycle:

    def test_scheduled_event_cannot_have_winners(self, head_client, app, head_id):
        event_id, users = attended_event(app, head_id)
        response = head_client.post(f'/event-head/events/{event_id}/winners', json=choose(*users))
        assert response.status_code == 409
        assert response.get_json()['error'] == 'Winners can only be declared after the event has ended'
        with app.app_context():
            assert Winner.query.count() == 0
            assert Announcement.query.count() == 0

    def test_live_event_cannot_have_winners(self, head_client, app, head_id):
        event_id, users = attended_event(app, head_id, is_live=True, started_at=ENDED)
        response = head_client.post(f'/event-head/events/{event_id}/winners', json=choose(*users))
        assert response.status_code == 409

    def test_started_and_ended_event_accepts_winners(self, head_client, app, head_id):
        event_id, users = attended_event(app, head_id)
        head_client.post(f'/event-head/events/{event_id}/live')
        head_client.post(f'/event-head/events/{event_id}/live')

        response = head_client.post(f'/event-head/events/{event_id}/winners', json=choose(*users))
        assert response.status_code == 201

    def test_cannot_restart_after_winners(self, head_client, app, podium):
        event_id, (first, second, third), _ = podium
        head_client.post(f'/event-head/events/{event_id}/winners', json=choose(first, second, third))

        restart = head_client.post(f'/event-head/events/{event_id}/live')
        assert restart.status_code == 409
        assert restart.get_json()['error'] == 'Winners have already been declared for this event'

        event = head_client.get(f'/events/{event_id}').get_json()['event']
        assert event['is_live'] is False
        assert event['status'] == 'winners_declared'
        with app.app_context():
            titles = [a.title for a in Announcement.query.all()]
            assert titles == ['Winners announced: Code Sprint']
