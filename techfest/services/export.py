"""CSV export of registrations."""

from __future__ import annotations

import csv
import io
from datetime import date, datetime

from techfest.extensions import db
from techfest.models import Event, Registration

CSV_HEADER = [
    'Name',
    'Email',
    'Event',
    'Registration Date',
    'Attended',
    'Event Date',
    'Event Time',
    'Location',
]


def export_filename(today: date | None = None) -> str:
    today = today or date.today()
    return f"techfest-participants-{today.isoformat()}.csv"


def _iso_date(value: date | datetime | None) -> str:
    if value is None:
        return ''
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def registration_rows() -> list[list[str]]:
    rows = db.session.execute(
        db.select(Registration, Event)
        .outerjoin(Event, Event.id == Registration.event_id)
        .order_by(Registration.registered_at.asc())
    ).all()

    return [
        [
            registration.user_name,
            registration.user_email,
            event.title if event else registration.event_title,
            _iso_date(registration.registered_at),
            'Yes' if registration.attended else 'No',
            _iso_date(event.event_date) if event else '',
            event.event_time if event else '',
            event.location if event else '',
        ]
        for registration, event in rows
    ]


def registrations_csv() -> str:
    """Every registration as CSV text, header first."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADER)
    writer.writerows(registration_rows())
    return buffer.getvalue()


__all__ = ['registrations_csv', 'registration_rows', 'export_filename', 'CSV_HEADER']
