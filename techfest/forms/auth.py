"""Authentication and profile forms."""

from __future__ import annotations

from wtforms import BooleanField, EmailField, PasswordField, SelectField, StringField
from wtforms.validators import DataRequired, Email, Length, Optional

from techfest.forms import APIForm
from techfest.models import UserRole


class SignUpForm(APIForm):
    email = EmailField("Email", validators=[DataRequired(), Email()])
    # Strength is checked by the session service so it surfaces as an AuthError
    password = PasswordField("Password", validators=[DataRequired()])
    name = StringField("Full Name", validators=[DataRequired(), Length(min=1, max=255)])
    role = SelectField(
        "Role",
        choices=[(r.value, r.value) for r in UserRole],
        default=UserRole.PARTICIPANT.value,
        validators=[Optional()],
    )


class LoginForm(APIForm):
    email = EmailField("Email", validators=[DataRequired(), Email()])
    password = PasswordField("Password", validators=[DataRequired()])
    remember_me = BooleanField("Remember me")


class GoogleSignInForm(APIForm):
    id_token = StringField("ID Token", validators=[Optional()])
    cancelled = BooleanField("Cancelled")
    error = StringField("Error", validators=[Optional()])


class ProfileForm(APIForm):
    display_name = StringField("Display Name", validators=[DataRequired(), Length(min=1, max=255)])
    photo_url = StringField("Photo URL", validators=[Optional(), Length(max=1024)])
