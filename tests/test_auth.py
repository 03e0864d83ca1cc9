"""Authentication flows: sign-up, sign-in, Google and profile edits."""

from techfest.extensions import db
from techfest.models import AuditLog, Registration, User, UserRole

from conftest import create_event, create_registration, create_user, login


def fake_claims(sub='google-sub-1', email='googler@example.com', name='Google User'):
    return {
        'iss': 'https://accounts.google.com',
        'sub': sub,
        'email': email,
        'email_verified': True,
        'name': name,
        'picture': 'https://example.com/photo.png',
    }


class TestSignUp:

    def test_signup_creates_participant_and_signs_in(self, client, app):
        response = client.post('/auth/signup', json={
            'email': 'New.Student@Example.com',
            'password': 'secret1',
            'name': 'New Student',
        })
        assert response.status_code == 201
        body = response.get_json()['user']
        assert body['role'] == 'participant'
        assert body['email'] == 'new.student@example.com'

        me = client.get('/auth/me').get_json()['user']
        assert me['id'] == body['id']
        assert me['display_name'] == 'New Student'

        with app.app_context():
            user = db.session.get(User, body['id'])
            assert user.check_password('secret1')
            assert AuditLog.query.filter_by(user_id=user.id, action='signup').count() == 1

    def test_signup_duplicate_email_conflicts(self, client, app):
        create_user(app, 'taken@example.com')
        response = client.post('/auth/signup', json={
            'email': 'taken@example.com',
            'password': 'secret1',
            'name': 'Someone',
        })
        assert response.status_code == 409
        assert 'already exists' in response.get_json()['error']

    def test_signup_weak_password_rejected(self, client, app):
        response = client.post('/auth/signup', json={
            'email': 'weak@example.com',
            'password': '123',
            'name': 'Weak',
        })
        assert response.status_code == 400
        with app.app_context():
            assert User.query.filter_by(email='weak@example.com').first() is None

    def test_signup_staff_role_requires_admin(self, client):
        response = client.post('/auth/signup', json={
            'email': 'sneaky@example.com',
            'password': 'secret1',
            'name': 'Sneaky',
            'role': 'admin',
        })
        assert response.status_code == 403

    def test_admin_creates_staff_and_stays_signed_in(self, admin_client, admin_id):
        response = admin_client.post('/admin/users', json={
            'email': 'coord@example.com',
            'password': 'secret1',
            'name': 'Coord',
            'role': 'coordinator',
        })
        assert response.status_code == 201
        assert response.get_json()['user']['role'] == 'coordinator'
        assert admin_client.get('/auth/me').get_json()['user']['id'] == admin_id

    def test_invalid_form_reports_field_errors(self, client):
        response = client.post('/auth/signup', json={'email': 'not-an-email', 'password': 'secret1'})
        assert response.status_code == 400
        details = response.get_json()['details']
        assert 'email' in details
        assert 'name' in details


class TestSignIn:

    def test_login_success_and_logout(self, client, app):
        create_user(app, 'user@example.com', password='secret1')
        response = client.post('/auth/login', json={'email': 'user@example.com', 'password': 'secret1'})
        assert response.status_code == 200
        assert client.get('/auth/me').get_json()['user']['email'] == 'user@example.com'

        assert client.post('/auth/logout').status_code == 200
        assert client.get('/auth/me').get_json() == {'user': None}

    def test_login_wrong_password(self, client, app):
        create_user(app, 'user@example.com', password='secret1')
        response = client.post('/auth/login', json={'email': 'user@example.com', 'password': 'nope'})
        assert response.status_code == 401
        assert response.get_json()['error'] == 'Invalid email or password'

    def test_login_unknown_email(self, client):
        response = client.post('/auth/login', json={'email': 'ghost@example.com', 'password': 'secret1'})
        assert response.status_code == 401

    def test_inactive_account_cannot_login(self, client, app):
        user_id = create_user(app, 'inactive@example.com', password='secret1')
        with app.app_context():
            db.session.get(User, user_id).active = False
            db.session.commit()
        response = client.post('/auth/login', json={'email': 'inactive@example.com', 'password': 'secret1'})
        assert response.status_code == 401

    def test_deleted_profile_leaves_session_anonymous(self, client, app):
        user_id = create_user(app, 'gone@example.com')
        login(client, user_id)
        assert client.get('/auth/me').get_json()['user']['id'] == user_id

        with app.app_context():
            db.session.delete(db.session.get(User, user_id))
            db.session.commit()

        assert client.get('/auth/me').get_json() == {'user': None}
        assert client.get('/dashboard').status_code == 401


class TestGoogleSignIn:

    def test_first_google_sign_in_creates_participant(self, client, app, monkeypatch):
        monkeypatch.setattr(
            'techfest.services.auth_session.verify_google_token',
            lambda token: fake_claims(),
        )
        response = client.post('/auth/google', json={'id_token': 'token'})
        assert response.status_code == 200
        user = response.get_json()['user']
        assert user['role'] == 'participant'
        assert user['display_name'] == 'Google User'

        # Second sign-in reuses the same profile
        client.post('/auth/logout')
        again = client.post('/auth/google', json={'id_token': 'token'}).get_json()['user']
        assert again['id'] == user['id']
        with app.app_context():
            assert User.query.filter_by(email='googler@example.com').count() == 1

    def test_google_links_existing_email_account(self, client, app, monkeypatch):
        user_id = create_user(app, 'googler@example.com', UserRole.COORDINATOR, department='CSE')
        monkeypatch.setattr(
            'techfest.services.auth_session.verify_google_token',
            lambda token: fake_claims(),
        )
        user = client.post('/auth/google', json={'id_token': 'token'}).get_json()['user']
        assert user['id'] == user_id
        assert user['role'] == 'coordinator'
        with app.app_context():
            assert db.session.get(User, user_id).google_sub == 'google-sub-1'

    def test_cancelled_popup_is_not_an_error(self, client):
        assert client.post('/auth/google', json={'cancelled': True}).status_code == 204
        response = client.post('/auth/google', json={'error': 'popup_closed_by_user'})
        assert response.status_code == 204
        assert client.get('/auth/me').get_json() == {'user': None}

    def test_invalid_google_token(self, client, monkeypatch):
        def reject(token, request, audience):
            raise ValueError('Wrong number of segments')

        monkeypatch.setattr('google.oauth2.id_token.verify_oauth2_token', reject)
        response = client.post('/auth/google', json={'id_token': 'not-a-jwt'})
        assert response.status_code == 401

    def test_unverified_email_cannot_take_over_account(self, client, app, monkeypatch):
        admin_id = create_user(app, 'boss@example.com', UserRole.ADMIN, name='Boss')
        claims = dict(fake_claims(sub='someone-else', email='boss@example.com'), email_verified=False)
        monkeypatch.setattr(
            'google.oauth2.id_token.verify_oauth2_token',
            lambda token, request, audience: claims,
        )

        response = client.post('/auth/google', json={'id_token': 'token'})
        assert response.status_code == 401
        assert response.get_json()['error'] == 'Google account email is not verified'
        assert client.get('/auth/me').get_json() == {'user': None}
        with app.app_context():
            assert db.session.get(User, admin_id).google_sub is None


class TestProfile:

    def test_profile_update_refreshes_cached_names(self, client, app):
        user_id = create_user(app, 'renamed@example.com', name='Old Name')
        event_id = create_event(app)
        registration_id = create_registration(app, user_id, event_id)
        login(client, user_id)

        response = client.patch('/auth/profile', json={'display_name': 'New Name'})
        assert response.status_code == 200
        assert response.get_json()['user']['display_name'] == 'New Name'

        with app.app_context():
            assert db.session.get(Registration, registration_id).user_name == 'New Name'

    def test_profile_requires_login(self, client):
        assert client.patch('/auth/profile', json={'display_name': 'X'}).status_code == 401
