"""Forms for the media blueprint."""

from flask_wtf import FlaskForm  # type: ignore
from wtforms import SelectField, ValidationError
from wtforms.validators import URL, DataRequired, Length, Optional

from viralviews.constants import (
    MAX_TAG_LENGTH,
    MAX_TAGS,
    MAX_TITLE_LENGTH,
    MEDIA_CATEGORIES,
    MEDIA_PRIVACY,
)
from viralviews.core.forms import StringListField, TextField


def _check_tags(field):
    for tag in field.data or []:
        if not tag or len(tag) > MAX_TAG_LENGTH:
            raise ValidationError(f"Each tag must be 1 to {MAX_TAG_LENGTH} characters.")


class MediaUploadForm(FlaskForm):
    """Payload for uploading a media item."""

    title = TextField(
        "Title", validators=[DataRequired(), Length(min=1, max=MAX_TITLE_LENGTH)]
    )
    description = TextField("Description", validators=[Optional(), Length(max=1000)])
    tags = StringListField(
        "Tags",
        validators=[Length(max=MAX_TAGS, message=f"At most {MAX_TAGS} tags.")],
    )
    category = SelectField("Category", choices=[(c, c) for c in MEDIA_CATEGORIES])
    privacy = SelectField(
        "Privacy", choices=[(p, p) for p in MEDIA_PRIVACY], default="public"
    )
    mediaUrl = TextField("Media URL", validators=[Optional(), URL()])

    def validate_tags(self, field):
        _check_tags(field)


class MediaUpdateForm(FlaskForm):
    """Owner-editable media fields. Every field is optional."""

    title = TextField(
        "Title", validators=[Optional(), Length(min=1, max=MAX_TITLE_LENGTH)]
    )
    description = TextField("Description", validators=[Optional(), Length(max=1000)])
    tags = StringListField(
        "Tags",
        validators=[Length(max=MAX_TAGS, message=f"At most {MAX_TAGS} tags.")],
    )
    category = SelectField(
        "Category", choices=[(c, c) for c in MEDIA_CATEGORIES], validate_choice=False
    )
    privacy = SelectField(
        "Privacy", choices=[(p, p) for p in MEDIA_PRIVACY], validate_choice=False
    )

    def validate_tags(self, field):
        _check_tags(field)

    def validate_category(self, field):
        if field.raw_data and field.data not in MEDIA_CATEGORIES:
            raise ValidationError("Not a valid choice.")

    def validate_privacy(self, field):
        if field.raw_data and field.data not in MEDIA_PRIVACY:
            raise ValidationError("Not a valid choice.")

    def changes(self):
        """Return only the submitted fields."""
        return {
            name: field.data
            for name, field in self._fields.items()
            if field.raw_data and field.data is not None
        }
