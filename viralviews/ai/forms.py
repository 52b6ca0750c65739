"""Forms for the AI analysis blueprint."""

from flask_wtf import FlaskForm  # type: ignore
from wtforms import SelectField
from wtforms.validators import URL, DataRequired, Length, Optional

from viralviews.constants import MAX_PERFORMANCE_LENGTH
from viralviews.core.forms import StringListField, TextField


class JudgeForm(FlaskForm):
    """Two performances to judge, or the battle to take them from."""

    battleId = TextField("Battle", validators=[Optional()])
    participant1 = TextField("Participant 1", validators=[Optional(), Length(max=100)])
    performance1 = TextField(
        "Performance 1", validators=[Optional(), Length(max=MAX_PERFORMANCE_LENGTH)]
    )
    participant2 = TextField("Participant 2", validators=[Optional(), Length(max=100)])
    performance2 = TextField(
        "Performance 2", validators=[Optional(), Length(max=MAX_PERFORMANCE_LENGTH)]
    )

    def validate(self, extra_validators=None):
        if not super().validate(extra_validators):
            return False
        if self.battleId.data:
            return True
        missing = [
            name
            for name in ("participant1", "performance1", "participant2", "performance2")
            if not self[name].data
        ]
        for name in missing:
            self[name].errors.append("Required when no battleId is given.")
        return not missing


class AudioAnalysisForm(FlaskForm):
    audioUrl = TextField("Audio URL", validators=[DataRequired(), URL()])
    transcript = TextField(
        "Transcript", validators=[Optional(), Length(max=MAX_PERFORMANCE_LENGTH)]
    )


class ModerationForm(FlaskForm):
    content = TextField(
        "Content", validators=[DataRequired(), Length(max=MAX_PERFORMANCE_LENGTH)]
    )
    type = SelectField(
        "Type",
        choices=[("text", "text"), ("audio_transcript", "audio_transcript")],
        default="text",
    )


class CypherAnalysisForm(FlaskForm):
    participantName = TextField(
        "Participant", validators=[DataRequired(), Length(max=100)]
    )
    performance = TextField(
        "Performance", validators=[DataRequired(), Length(max=MAX_PERFORMANCE_LENGTH)]
    )
    theme = TextField("Theme", validators=[Optional(), Length(max=200)])
    previousParticipants = StringListField("Previous Participants")
    beatInfo = TextField("Beat", validators=[Optional(), Length(max=200)])


class BeatSuggestionForm(FlaskForm):
    style = TextField("Style", validators=[DataRequired(), Length(max=100)])
    mood = TextField("Mood", validators=[DataRequired(), Length(max=100)])
