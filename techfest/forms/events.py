"""Event management forms."""

from __future__ import annotations

from wtforms import DateField, IntegerField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, NumberRange, Optional

from techfest.forms import APIForm, ListField
from techfest.models import EventCategory


class EventForm(APIForm):
    """Full event form used by admins and coordinators."""

    title = StringField("Event Title", validators=[DataRequired(), Length(min=2, max=255)])
    description = TextAreaField("Description", validators=[DataRequired()])
    category = SelectField(
        "Category",
        choices=[(c.value, c.value) for c in EventCategory],
        default=EventCategory.TECHNICAL.value,
    )
    location = StringField("Location", validators=[DataRequired(), Length(max=255)])
    event_date = DateField("Event Date", format='%Y-%m-%d', validators=[DataRequired()])
    event_time = StringField(
        "Event Time",
        validators=[DataRequired(), Length(max=64)],
        render_kw={"placeholder": "10:00 AM - 2:00 PM"},
    )
    max_participants = IntegerField(
        "Max Participants",
        default=50,
        validators=[DataRequired(), NumberRange(min=1, max=100000)],
    )
    rules = ListField("Rules")
    eligibility = TextAreaField("Eligibility", validators=[Optional()])
    banner = StringField("Banner Image URL", validators=[Optional(), Length(max=1024)])
    # Only honoured for admins; coordinators always get their own department
    department = StringField("Department", validators=[Optional(), Length(max=64)])


class EventHeadEditForm(APIForm):
    """Event heads may only touch the description and banner."""

    description = TextAreaField("Description", validators=[DataRequired()])
    banner = StringField("Banner Image URL", validators=[Optional(), Length(max=1024)])


class AssignEventHeadForm(APIForm):
    # Empty string unassigns
    user_id = StringField("Event Head", validators=[Optional(), Length(max=36)])
