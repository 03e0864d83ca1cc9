"""Participation certificates rendered with reportlab."""

from __future__ import annotations

import io
from datetime import date
from typing import Any

from flask import current_app
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from techfest.errors import NotFound, ValidationError
from techfest.models import Event, Registration, User
from techfest.services.store import get_or_404

DEFAULT_COLLEGE_NAME = 'SPK COLLEGE'
NOT_AVAILABLE = 'Certificate not available. Event attendance required.'

BACKGROUND = colors.Color(10 / 255, 10 / 255, 20 / 255)
BLUE = colors.Color(59 / 255, 130 / 255, 246 / 255)
PURPLE = colors.Color(168 / 255, 85 / 255, 247 / 255)
LIGHT_GREY = colors.Color(200 / 255, 200 / 255, 200 / 255)
MID_GREY = colors.Color(150 / 255, 150 / 255, 150 / 255)
DARK_GREY = colors.Color(100 / 255, 100 / 255, 100 / 255)


def format_event_date(value: date) -> str:
    return f"{value:%B} {value.day}, {value.year}"


def certificate_filename(participant_name: str, event_title: str) -> str:
    return f"{participant_name}_{event_title}_Certificate.pdf"


def render_certificate(
    participant_name: str,
    event_title: str,
    event_date: date,
    verification_id: str,
    college_name: str = DEFAULT_COLLEGE_NAME,
) -> bytes:
    """Render a landscape A4 certificate of participation.

    Identical inputs give identical bytes: the canvas runs in invariant
    mode, which pins the creation date and document id.
    """
    buffer = io.BytesIO()
    page_width, page_height = landscape(A4)
    pdf = canvas.Canvas(buffer, pagesize=(page_width, page_height), invariant=1)
    pdf.setTitle(f"{participant_name} - {event_title}")
    centre = page_width / 2

    def top(offset_mm: float) -> float:
        # Layout is measured from the top edge
        return page_height - offset_mm * mm

    pdf.setFillColor(BACKGROUND)
    pdf.rect(0, 0, page_width, page_height, stroke=0, fill=1)

    pdf.setStrokeColor(BLUE)
    pdf.setLineWidth(2 * mm)
    pdf.rect(10 * mm, 10 * mm, page_width - 20 * mm, page_height - 20 * mm, stroke=1, fill=0)
    pdf.setStrokeColor(PURPLE)
    pdf.setLineWidth(1 * mm)
    pdf.rect(12 * mm, 12 * mm, page_width - 24 * mm, page_height - 24 * mm, stroke=1, fill=0)

    pdf.setFillColor(BLUE)
    pdf.setFont('Helvetica-Bold', 48)
    pdf.drawCentredString(centre, top(40), 'CERTIFICATE')
    pdf.setFillColor(PURPLE)
    pdf.setFont('Helvetica-Bold', 20)
    pdf.drawCentredString(centre, top(52), 'OF PARTICIPATION')

    pdf.setFillColor(LIGHT_GREY)
    pdf.setFont('Helvetica', 14)
    pdf.drawCentredString(centre, top(75), 'This is to certify that')

    pdf.setFillColor(colors.white)
    pdf.setFont('Helvetica-Bold', 32)
    pdf.drawCentredString(centre, top(90), participant_name)

    pdf.setFillColor(LIGHT_GREY)
    pdf.setFont('Helvetica', 14)
    pdf.drawCentredString(centre, top(105), 'has successfully participated in')

    pdf.setFillColor(BLUE)
    pdf.setFont('Helvetica-Bold', 24)
    pdf.drawCentredString(centre, top(120), event_title)

    pdf.setFillColor(LIGHT_GREY)
    pdf.setFont('Helvetica', 14)
    pdf.drawCentredString(centre, top(135), f"held on {format_event_date(event_date)}")

    pdf.setFillColor(PURPLE)
    pdf.setFont('Helvetica-Bold', 16)
    pdf.drawCentredString(centre, top(155), college_name)

    pdf.setStrokeColor(DARK_GREY)
    pdf.setLineWidth(0.5 * mm)
    pdf.line(40 * mm, top(170), 90 * mm, top(170))
    pdf.line(page_width - 90 * mm, top(170), page_width - 40 * mm, top(170))
    pdf.setFillColor(MID_GREY)
    pdf.setFont('Helvetica', 10)
    pdf.drawCentredString(65 * mm, top(177), 'Event Coordinator')
    pdf.drawCentredString(page_width - 65 * mm, top(177), f"Director, {college_name}")

    pdf.setFillColor(DARK_GREY)
    pdf.drawCentredString(centre, 20 * mm, f"Verification ID: {verification_id}")

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def verification_id_for(registration: Registration) -> str:
    return registration.certificate_id or registration.id


def certificate_for_registration(user: User, registration_id: str) -> tuple[str, bytes]:
    """Return ``(filename, pdf_bytes)`` for one of the user's attended registrations."""
    registration = get_or_404(Registration, registration_id, 'Registration')
    if registration.user_id != user.id:
        raise NotFound('Registration not found')
    if not registration.attended:
        raise ValidationError(NOT_AVAILABLE)

    event = registration.event
    pdf = render_certificate(
        user.display_name,
        event.title,
        event.event_date,
        verification_id_for(registration),
        current_app.config.get('COLLEGE_NAME', DEFAULT_COLLEGE_NAME),
    )
    current_app.logger.info(f"Certificate issued for registration {registration.id}")
    return certificate_filename(user.display_name, event.title), pdf


def verify_certificate(verification_id: str) -> dict[str, Any]:
    registration = Registration.query.filter(
        (Registration.id == verification_id) | (Registration.certificate_id == verification_id)
    ).first()
    if registration is None or not registration.attended:
        raise NotFound('Certificate not found')
    event: Event = registration.event
    return {
        'valid': True,
        'verification_id': verification_id,
        'participant_name': registration.user_name,
        'event_title': event.title,
        'event_date': event.event_date.isoformat(),
    }


__all__ = [
    'render_certificate',
    'certificate_filename',
    'certificate_for_registration',
    'verify_certificate',
    'format_event_date',
    'NOT_AVAILABLE',
]
