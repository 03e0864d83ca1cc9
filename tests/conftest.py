"""Shared fixtures for the TechFest test suite.

Fixtures never keep an application context pushed while the test client
is used, so every request gets a fresh ``g`` and Flask-Login reloads the
user from the session cookie.
"""

from datetime import date, timedelta

import pytest

from techfest import create_app
from techfest.config import Config
from techfest.extensions import db
from techfest.models import Event, Registration, User, UserRole


class TechFestTestConfig(Config):
    TESTING = True
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SECRET_KEY = 'test-secret-key'
    SESSION_COOKIE_SECURE = False
    REMEMBER_COOKIE_SECURE = False
    GOOGLE_CLIENT_ID = 'test-client-id'
    ANNOUNCEMENT_POLL_SECONDS = 0
    ANNOUNCEMENT_STREAM_MAX_POLLS = 1
    COLLEGE_NAME = 'SPK COLLEGE'


@pytest.fixture
def app(tmp_path):
    """Create and configure a test application instance."""
    app = create_app(TechFestTestConfig)
    app.config['UPLOAD_FOLDER'] = str(tmp_path / 'uploads')

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create a test client for the app."""
    return app.test_client()


@pytest.fixture
def make_client(app):
    """Factory for extra clients, one per simultaneously signed-in user."""
    return app.test_client


def create_user(app, email, role=UserRole.PARTICIPANT, name=None, department=None, password=None):
    with app.app_context():
        user = User(
            email=email,
            display_name=name or email.split('@')[0].title(),
            role=role,
            department=department,
        )
        if password:
            user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user.id


def create_event(app, title='Code Sprint', max_participants=50, department='General', event_head_id=None, **extra):
    with app.app_context():
        head_name = db.session.get(User, event_head_id).display_name if event_head_id else None
        event = Event(
            title=title,
            description=extra.pop('description', f'{title} description'),
            max_participants=max_participants,
            event_date=extra.pop('event_date', date.today() + timedelta(days=7)),
            event_time=extra.pop('event_time', '10:00 AM - 1:00 PM'),
            location=extra.pop('location', 'Main Hall'),
            category=extra.pop('category', 'Technical'),
            department=department,
            event_head_id=event_head_id,
            event_head_name=head_name,
            **extra,
        )
        db.session.add(event)
        db.session.commit()
        return event.id


def create_registration(app, user_id, event_id, attended=False):
    with app.app_context():
        user = db.session.get(User, user_id)
        event = db.session.get(Event, event_id)
        registration = Registration(
            event_id=event.id,
            event_title=event.title,
            user_id=user.id,
            user_name=user.display_name,
            user_email=user.email,
            attended=attended,
        )
        event.current_participants += 1
        db.session.add(registration)
        db.session.commit()
        return registration.id


def login(client, user_id):
    """Sign ``client`` in as ``user_id`` without going through bcrypt."""
    with client.session_transaction() as sess:
        sess['_user_id'] = user_id
        sess['_fresh'] = True
    return client


@pytest.fixture
def admin_id(app):
    return create_user(app, 'admin@techfest.local', UserRole.ADMIN, name='Admin')


@pytest.fixture
def admin_client(client, admin_id):
    return login(client, admin_id)


@pytest.fixture
def head_id(app):
    return create_user(app, 'head@techfest.local', UserRole.EVENT_HEAD, name='Event Head', department='CSE')


@pytest.fixture
def head_client(make_client, head_id):
    return login(make_client(), head_id)
