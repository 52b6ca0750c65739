"""Forms for the users blueprint."""

from urllib.parse import urlparse

from flask_wtf import FlaskForm  # type: ignore
from wtforms import ValidationError
from wtforms.validators import Length, Optional

from viralviews.constants import MAX_DISPLAY_NAME_LENGTH, SOCIAL_NETWORKS
from viralviews.core.forms import MappingField, TextField


class ProfileForm(FlaskForm):
    """Owner-editable profile fields. Every field is optional."""

    displayName = TextField(
        "Display Name",
        validators=[Optional(), Length(min=1, max=MAX_DISPLAY_NAME_LENGTH)],
    )
    bio = TextField("Bio", validators=[Optional(), Length(max=500)])
    location = TextField("Location", validators=[Optional(), Length(max=100)])
    photoURL = TextField("Photo URL", validators=[Optional(), Length(max=2048)])
    socialLinks = MappingField("Social Links")

    def validate_socialLinks(self, field):
        """Only known networks, each an empty string or an http(s) URL."""
        if not field.data:
            return
        unknown = set(field.data) - set(SOCIAL_NETWORKS)
        if unknown:
            raise ValidationError(f"Unknown social networks: {', '.join(sorted(unknown))}")
        for network, url in field.data.items():
            if url and urlparse(url).scheme not in ("http", "https"):
                raise ValidationError(f"{network} must be an http(s) URL.")

    def changes(self):
        """Return only the submitted fields, keyed by document field."""
        return {
            name: field.data
            for name, field in self._fields.items()
            if field.raw_data and field.data is not None
        }
