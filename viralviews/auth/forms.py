"""Request schemas for the auth blueprint."""

from flask_wtf import FlaskForm  # type: ignore
from wtforms.validators import DataRequired, Email, EqualTo, Length, Regexp

from viralviews.constants import (
    MAX_DISPLAY_NAME_LENGTH,
    MAX_USERNAME_LENGTH,
    MIN_PASSWORD_LENGTH,
    MIN_USERNAME_LENGTH,
)
from viralviews.core.forms import SecretField, TextField


class SignInForm(FlaskForm):
    """Sign-in payload."""

    email = TextField("Email", validators=[DataRequired(), Email()])
    password = SecretField(
        "Password", validators=[DataRequired(message="Password is required.")]
    )


class SignUpForm(FlaskForm):
    """Sign-up payload."""

    email = TextField("Email", validators=[DataRequired(), Email()])
    password = SecretField(
        "Password",
        validators=[
            DataRequired(),
            Length(min=MIN_PASSWORD_LENGTH),
        ],
    )
    confirmPassword = SecretField(
        "Confirm Password",
        validators=[
            DataRequired(),
            EqualTo("password", message="Passwords must match."),
        ],
    )
    username = TextField(
        "Username",
        validators=[
            DataRequired(),
            Length(min=MIN_USERNAME_LENGTH, max=MAX_USERNAME_LENGTH),
            Regexp(
                r"^[A-Za-z0-9_]+$",
                message="Username must have only letters, numbers or underscores",
            ),
        ],
    )
    displayName = TextField(
        "Display Name",
        validators=[DataRequired(), Length(min=1, max=MAX_DISPLAY_NAME_LENGTH)],
    )
