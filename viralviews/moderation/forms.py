"""Forms for the moderation blueprint."""

from flask_wtf import FlaskForm  # type: ignore
from wtforms import SelectField
from wtforms.validators import Length, Optional

from viralviews.constants import MODERATION_ACTIONS
from viralviews.core.forms import TextField


class ModerationActionForm(FlaskForm):
    """A moderator's decision on one media item."""

    action = SelectField("Action", choices=[(a, a) for a in MODERATION_ACTIONS])
    reason = TextField("Reason", validators=[Optional(), Length(max=500)])
