"""User administration and winner selection forms."""

from __future__ import annotations

from wtforms import SelectField, StringField
from wtforms.validators import DataRequired, Length, Optional

from techfest.forms import APIForm
from techfest.models import UserRole


class UserUpdateForm(APIForm):
    role = SelectField(
        "Role",
        choices=[('', 'Unchanged')] + [(r.value, r.value) for r in UserRole],
        default='',
        validators=[Optional()],
    )
    department = StringField("Department", validators=[Optional(), Length(max=64)])


class WinnerSelectionForm(APIForm):
    first = StringField("1st Place", validators=[DataRequired(), Length(max=36)])
    second = StringField("2nd Place", validators=[DataRequired(), Length(max=36)])
    third = StringField("3rd Place", validators=[DataRequired(), Length(max=36)])
