"""Input forms. Flask-WTF feeds them from JSON bodies as well as form posts."""

from __future__ import annotations

from flask_wtf import FlaskForm
from wtforms import Field

from techfest.errors import ValidationError


class ListField(Field):
    """Accepts a repeated form key or a JSON array of strings."""

    def _value(self):
        return '\n'.join(self.data or [])

    def process_formdata(self, valuelist):
        self.data = [str(v).strip() for v in valuelist if v is not None and str(v).strip()]

    def process_data(self, value):
        self.data = list(value or [])


class APIForm(FlaskForm):
    """Base form that raises ``ValidationError`` instead of re-rendering."""

    def validate_or_raise(self) -> None:
        if not self.validate_on_submit():
            raise ValidationError('Invalid input', details=self.errors)


from .auth import GoogleSignInForm, LoginForm, ProfileForm, SignUpForm  # noqa: E402
from .events import AssignEventHeadForm, EventForm, EventHeadEditForm  # noqa: E402
from .announcements import AnnouncementForm  # noqa: E402
from .users import UserUpdateForm, WinnerSelectionForm  # noqa: E402

__all__ = [
    'APIForm',
    'ListField',
    'SignUpForm',
    'LoginForm',
    'GoogleSignInForm',
    'ProfileForm',
    'EventForm',
    'EventHeadEditForm',
    'AssignEventHeadForm',
    'AnnouncementForm',
    'UserUpdateForm',
    'WinnerSelectionForm',
]
