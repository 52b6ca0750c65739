"""Shared form fields and the JSON payload validation helper."""

from __future__ import annotations

from typing import Any, TypeVar

from flask_wtf import FlaskForm  # type: ignore
from werkzeug.datastructures import MultiDict
from wtforms import Field, IntegerField, StringField
from wtforms.widgets import PasswordInput

from viralviews.errors import ValidationError

FormT = TypeVar("FormT", bound=FlaskForm)


class TextField(StringField):
    """String field that rejects non-string JSON values."""

    def process_formdata(self, valuelist: list[Any]) -> None:
        if valuelist and not isinstance(valuelist[0], str):
            raise ValueError(self.gettext("Not a valid string value."))
        super().process_formdata(valuelist)


class SecretField(TextField):
    """Password field that rejects non-string JSON values."""

    widget = PasswordInput()


class StrictIntegerField(IntegerField):
    """Integer field that rejects booleans, floats and other non-integer JSON values."""

    def process_formdata(self, valuelist: list[Any]) -> None:
        if not valuelist:
            return
        value = valuelist[0]
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            self.data = None
            raise ValueError(self.gettext("Not a valid integer value."))
        super().process_formdata(valuelist)


class StringListField(Field):
    """A JSON array of strings, e.g. tags."""

    def process_data(self, value: Any) -> None:
        self.data = list(value) if value else []

    def process_formdata(self, valuelist: list[Any]) -> None:
        if any(not isinstance(v, str) for v in valuelist):
            raise ValueError(self.gettext("Every entry must be a string."))
        self.data = [v.strip() for v in valuelist]


class MappingField(Field):
    """A JSON object of string values, e.g. social links."""

    def process_data(self, value: Any) -> None:
        self.data = dict(value) if value else None

    def process_formdata(self, valuelist: list[Any]) -> None:
        if not valuelist:
            return
        value = valuelist[0]
        if not isinstance(value, dict) or any(
            not isinstance(v, str) for v in value.values()
        ):
            raise ValueError(self.gettext("Expected an object of strings."))
        self.data = value


def validate_payload(form_class: type[FormT], payload: Any) -> FormT:
    """Validate a decoded JSON body against a form.

    JSON keys are fed to the form the same way Flask-WTF wraps a JSON request
    body, so list values become multi-valued keys.

    Raises:
        ValidationError: with one ``{"path": [field], "message": msg}`` entry
            per failing field.
    """
    if not isinstance(payload, dict):
        raise ValidationError(
            details=[{"path": [], "message": "Expected a JSON object."}]
        )

    if isinstance(payload, MultiDict):
        formdata = payload
    else:
        # JSON null is treated as an absent key.
        formdata = MultiDict({k: v for k, v in payload.items() if v is not None})
    form = form_class(formdata=formdata, meta={"csrf": False})
    if not form.validate():
        details = [
            {"path": [name], "message": message}
            for name, messages in form.errors.items()
            for message in messages
        ]
        raise ValidationError(details=details)
    return form
