"""Forms for the battles blueprint."""

from flask_wtf import FlaskForm  # type: ignore
from wtforms import BooleanField, SelectField
from wtforms.validators import DataRequired, Length, NumberRange, Optional

from viralviews.constants import (
    BATTLE_FORMATS,
    CHAT_MESSAGE_TYPES,
    MAX_CHAT_MESSAGE_LENGTH,
    MAX_PARTICIPANTS,
    MAX_PERFORMANCE_LENGTH,
    MAX_TIME_LIMIT,
    MAX_TITLE_LENGTH,
    MIN_PARTICIPANTS,
    MIN_TIME_LIMIT,
)
from viralviews.core.forms import StrictIntegerField, TextField


class BattleCreateForm(FlaskForm):
    """Payload for creating a battle."""

    title = TextField(
        "Title", validators=[DataRequired(), Length(min=1, max=MAX_TITLE_LENGTH)]
    )
    description = TextField("Description", validators=[Optional(), Length(max=500)])
    format = SelectField(
        "Format",
        choices=[(f, f.title()) for f in BATTLE_FORMATS],
        default="freestyle",
    )
    maxParticipants = StrictIntegerField(
        "Max Participants",
        default=MIN_PARTICIPANTS,
        validators=[NumberRange(min=MIN_PARTICIPANTS, max=MAX_PARTICIPANTS)],
    )
    timeLimit = StrictIntegerField(
        "Time Limit",
        default=120,
        validators=[NumberRange(min=MIN_TIME_LIMIT, max=MAX_TIME_LIMIT)],
    )
    isPrivate = BooleanField("Private")
    joinAsCreator = BooleanField("Join as creator")


class PerformanceForm(FlaskForm):
    """Payload for submitting a performance."""

    content = TextField(
        "Content",
        validators=[DataRequired(), Length(min=1, max=MAX_PERFORMANCE_LENGTH)],
    )


class VoteForm(FlaskForm):
    """Payload for voting in a battle."""

    participantId = TextField("Participant", validators=[DataRequired()])


class ChatMessageForm(FlaskForm):
    """Payload for posting a chat message."""

    message = TextField(
        "Message",
        validators=[DataRequired(), Length(min=1, max=MAX_CHAT_MESSAGE_LENGTH)],
    )
    battleId = TextField("Battle", validators=[DataRequired()])
    type = SelectField(
        "Type", choices=[(t, t) for t in CHAT_MESSAGE_TYPES], default="message"
    )
