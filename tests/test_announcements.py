"""Announcement feed and its Server-Sent Events stream."""

import json

from techfest.models import UserRole

from conftest import create_user, login


def post(client, title='Schedule change', content='Hack Night moves to 9 PM', priority='high'):
    return client.post('/announcements', json={'title': title, 'content': content, 'priority': priority})


class TestAnnouncements:

    def test_admin_posts_and_feed_is_newest_first(self, admin_client, client):
        assert post(admin_client, title='First notice').status_code == 201
        assert post(admin_client, title='Second notice', priority='low').status_code == 201

        items = client.get('/announcements').get_json()['announcements']
        assert [a['title'] for a in items] == ['Second notice', 'First notice']
        assert items[0]['priority'] == 'low'
        assert items[0]['author'] == 'Admin'

    def test_coordinator_can_post(self, client, app):
        login(client, create_user(app, 'c@example.com', UserRole.COORDINATOR, department='CSE'))
        assert post(client).status_code == 201

    def test_participant_cannot_post(self, client, app):
        login(client, create_user(app, 'p@example.com'))
        assert post(client).status_code == 403

    def test_edit_and_delete_are_admin_only(self, admin_client, make_client, app):
        announcement = post(admin_client).get_json()['announcement']
        url = f"/announcements/{announcement['id']}"

        coordinator = login(make_client(), create_user(app, 'c@example.com', UserRole.COORDINATOR))
        assert coordinator.put(url, json={'title': 'Hijack', 'content': 'x', 'priority': 'low'}).status_code == 403
        assert coordinator.delete(url).status_code == 403

        edited = admin_client.put(url, json={'title': 'Updated', 'content': 'New time', 'priority': 'medium'})
        assert edited.status_code == 200
        assert edited.get_json()['announcement']['title'] == 'Updated'

        assert admin_client.delete(url).status_code == 200
        assert admin_client.get('/announcements').get_json()['announcements'] == []

    def test_bad_priority_rejected(self, admin_client):
        assert post(admin_client, priority='urgent').status_code == 400


class TestStream:

    def test_stream_starts_with_snapshot(self, admin_client, client):
        post(admin_client, title='Opening ceremony')

        response = client.get('/announcements/stream')
        assert response.status_code == 200
        assert response.mimetype == 'text/event-stream'

        body = response.get_data(as_text=True)
        event_line, data_line = body.strip().split('\n')[:2]
        assert event_line == 'event: snapshot'
        payload = json.loads(data_line[len('data: '):])
        assert [a['title'] for a in payload['items']] == ['Opening ceremony']

    def test_stream_generator_keeps_alive_without_changes(self, app):
        from techfest.services.announcements import stream_announcements

        with app.test_request_context():
            chunks = list(stream_announcements(0, max_polls=2))
        assert chunks[0].startswith('event: snapshot')
        assert chunks[1] == ': keep-alive\n\n'
