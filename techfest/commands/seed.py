"""Data seeding CLI commands."""

from datetime import date, timedelta

import click
from flask.cli import with_appcontext

from techfest.extensions import db
from techfest.models import (
    GENERAL_DEPARTMENT,
    Announcement,
    AnnouncementPriority,
    Event,
    EventCategory,
    User,
    UserRole,
)

DEMO_PASSWORD = 'techfest123'

DEMO_USERS = [
    ('admin@techfest.local', 'TechFest Admin', UserRole.ADMIN, None),
    ('coordinator@techfest.local', 'CSE Coordinator', UserRole.COORDINATOR, 'CSE'),
    ('head@techfest.local', 'CSE Event Head', UserRole.EVENT_HEAD, 'CSE'),
    ('student1@techfest.local', 'Asha Student', UserRole.PARTICIPANT, None),
    ('student2@techfest.local', 'Ravi Student', UserRole.PARTICIPANT, None),
    ('student3@techfest.local', 'Meera Student', UserRole.PARTICIPANT, None),
]

DEMO_EVENTS = [
    {
        'title': 'Code Sprint',
        'description': 'A three hour competitive programming contest.',
        'category': EventCategory.TECHNICAL.value,
        'location': 'Lab 3',
        'event_time': '10:00 AM - 1:00 PM',
        'max_participants': 60,
        'rules': ['Individual participation', 'No internet access'],
        'eligibility': 'All undergraduate students',
        'department': 'CSE',
        'days_ahead': 7,
    },
    {
        'title': 'Hack Night',
        'description': 'Overnight hackathon for small teams.',
        'category': EventCategory.TECHNICAL.value,
        'location': 'Innovation Hub',
        'event_time': '8:00 PM - 8:00 AM',
        'max_participants': 2,
        'rules': ['Bring your own laptop'],
        'eligibility': 'Second year and above',
        'department': 'CSE',
        'days_ahead': 10,
    },
    {
        'title': 'Treasure Hunt',
        'description': 'Campus-wide treasure hunt.',
        'category': EventCategory.NON_TECHNICAL.value,
        'location': 'Main Quad',
        'event_time': '3:00 PM - 5:00 PM',
        'max_participants': 40,
        'rules': ['Teams of up to four'],
        'eligibility': 'Open to all',
        'department': GENERAL_DEPARTMENT,
        'days_ahead': 12,
    },
]


@click.group('seed')
def seed_commands():
    """Data seeding commands."""
    pass


@seed_commands.command('demo')
@click.option('--password', default=DEMO_PASSWORD, show_default=True, help='Password for every demo account')
@with_appcontext
def seed_demo(password):
    """Seed demo accounts, events and a welcome announcement.

    Safe to re-run: existing accounts and events (matched by email/title)
    are left alone.

    Example:
        flask seed demo
    """
    click.echo('Creating demo users...')
    users = {}
    for email, name, role, department in DEMO_USERS:
        user = db.session.query(User).filter_by(email=email).first()
        if user is None:
            user = User(email=email, display_name=name, role=role, department=department)
            user.set_password(password)
            db.session.add(user)
        users[role] = user
    db.session.flush()

    click.echo('Creating demo events...')
    coordinator = users[UserRole.COORDINATOR]
    head = users[UserRole.EVENT_HEAD]
    created_events = 0
    for demo in DEMO_EVENTS:
        if db.session.query(Event).filter_by(title=demo['title']).first():
            continue
        data = dict(demo)
        days_ahead = data.pop('days_ahead')
        event = Event(
            **data,
            event_date=date.today() + timedelta(days=days_ahead),
            coordinator_id=coordinator.id if data['department'] == coordinator.department else None,
            coordinator_name=coordinator.display_name if data['department'] == coordinator.department else None,
            event_head_id=head.id,
            event_head_name=head.display_name,
        )
        db.session.add(event)
        created_events += 1

    if not db.session.query(Announcement).first():
        admin = users[UserRole.ADMIN]
        db.session.add(Announcement(
            title='Welcome to TechFest!',
            content='Registrations are open. Browse the events and sign up early.',
            author=admin.display_name,
            author_id=admin.id,
            priority=AnnouncementPriority.HIGH,
        ))

    db.session.commit()
    click.echo(click.style('✓ Demo data seeded successfully!', fg='green'))
    click.echo(f'  Users: {len(DEMO_USERS)} (password: {password})')
    click.echo(f'  New events: {created_events}')
