from __future__ import annotations

from wtforms import SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length

from techfest.forms import APIForm
from techfest.models import AnnouncementPriority


class AnnouncementForm(APIForm):
    title = StringField("Title", validators=[DataRequired(), Length(min=2, max=255)])
    content = TextAreaField("Content", validators=[DataRequired()])
    priority = SelectField(
        "Priority",
        choices=[(p.value, p.value.title()) for p in AnnouncementPriority],
        default=AnnouncementPriority.MEDIUM.value,
    )
