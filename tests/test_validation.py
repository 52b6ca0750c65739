"""Tests for JSON payload validation through the request forms."""

from __future__ import annotations

import unittest
from typing import Any
from unittest.mock import patch

from viralviews import create_app
from viralviews.auth.forms import SignInForm, SignUpForm
from viralviews.battles.forms import BattleCreateForm, ChatMessageForm
from viralviews.core.forms import validate_payload
from viralviews.errors import ValidationError
from viralviews.media.forms import MediaUploadForm

VALID_SIGNUP = {
    "email": "alice@viralviews.app",
    "password": "hunter2hunter2",
    "confirmPassword": "hunter2hunter2",
    "username": "alice_01",
    "displayName": "Alice",
}


class ValidationTestCase(unittest.TestCase):
    """Each schema accepts a valid payload and names the failing field."""

    def setUp(self) -> None:
        patcher = patch("firebase_admin.initialize_app")
        patcher.start()
        self.addCleanup(patcher.stop)
        self.app = create_app({"TESTING": True})
        ctx = self.app.test_request_context()
        ctx.push()
        self.addCleanup(ctx.pop)

    def assertFailsOn(self, form_class: Any, payload: Any, field: str) -> None:
        with self.assertRaises(ValidationError) as ctx:
            validate_payload(form_class, payload)
        paths = [d["path"] for d in ctx.exception.details]
        self.assertIn([field], paths)

    def test_sign_in(self) -> None:
        form = validate_payload(
            SignInForm, {"email": "alice@viralviews.app", "password": "x"}
        )
        self.assertEqual(form.email.data, "alice@viralviews.app")

        self.assertFailsOn(SignInForm, {"email": "nope", "password": "x"}, "email")
        self.assertFailsOn(
            SignInForm, {"email": "alice@viralviews.app", "password": ""}, "password"
        )

    def test_sign_up(self) -> None:
        form = validate_payload(SignUpForm, VALID_SIGNUP)
        self.assertEqual(form.username.data, "alice_01")

        self.assertFailsOn(SignUpForm, {**VALID_SIGNUP, "username": "a b"}, "username")
        self.assertFailsOn(SignUpForm, {**VALID_SIGNUP, "username": "ab"}, "username")
        self.assertFailsOn(
            SignUpForm,
            {**VALID_SIGNUP, "password": "short", "confirmPassword": "short"},
            "password",
        )
        self.assertFailsOn(
            SignUpForm, {**VALID_SIGNUP, "confirmPassword": "different1"}, "confirmPassword"
        )
        self.assertFailsOn(
            SignUpForm, {**VALID_SIGNUP, "displayName": "x" * 51}, "displayName"
        )

    def test_battle_create(self) -> None:
        form = validate_payload(BattleCreateForm, {"title": "Bars", "timeLimit": 60})
        self.assertEqual(form.maxParticipants.data, 2)
        self.assertEqual(form.format.data, "freestyle")
        self.assertFalse(form.isPrivate.data)

        self.assertFailsOn(BattleCreateForm, {"title": "x" * 101}, "title")
        self.assertFailsOn(BattleCreateForm, {"title": 42}, "title")
        self.assertFailsOn(
            BattleCreateForm, {"title": "Bars", "maxParticipants": 11}, "maxParticipants"
        )
        self.assertFailsOn(BattleCreateForm, {"title": "Bars", "timeLimit": 10}, "timeLimit")
        self.assertFailsOn(BattleCreateForm, {"title": "Bars", "format": "opera"}, "format")

    def test_battle_create_rejects_non_integer_numbers(self) -> None:
        for value in ({"n": 4}, 4.9, True, "four"):
            with self.subTest(value=value):
                self.assertFailsOn(
                    BattleCreateForm,
                    {"title": "Bars", "maxParticipants": value},
                    "maxParticipants",
                )
        self.assertFailsOn(BattleCreateForm, {"title": "Bars", "timeLimit": 90.5}, "timeLimit")

        form = validate_payload(BattleCreateForm, {"title": "Bars", "maxParticipants": "4"})
        self.assertEqual(form.maxParticipants.data, 4)

    def test_passwords_must_be_strings(self) -> None:
        self.assertFailsOn(
            SignInForm, {"email": "alice@viralviews.app", "password": 12345678}, "password"
        )
        self.assertFailsOn(
            SignUpForm,
            {**VALID_SIGNUP, "password": 12345678, "confirmPassword": 12345678},
            "password",
        )

    def test_media_upload(self) -> None:
        form = validate_payload(
            MediaUploadForm,
            {"title": "Clip", "category": "cypher", "tags": ["a", "b"], "privacy": "public"},
        )
        self.assertEqual(form.tags.data, ["a", "b"])

        self.assertFailsOn(
            MediaUploadForm, {"title": "Clip", "category": "movie"}, "category"
        )
        self.assertFailsOn(
            MediaUploadForm,
            {"title": "Clip", "category": "battle", "tags": [str(i) for i in range(11)]},
            "tags",
        )
        self.assertFailsOn(
            MediaUploadForm, {"title": "Clip", "category": "battle", "tags": ["x" * 31]}, "tags"
        )
        self.assertFailsOn(
            MediaUploadForm,
            {"title": "Clip", "category": "battle", "privacy": "secret"},
            "privacy",
        )

    def test_chat_message(self) -> None:
        form = validate_payload(ChatMessageForm, {"message": "yo", "battleId": "b1"})
        self.assertEqual(form.type.data, "message")

        self.assertFailsOn(ChatMessageForm, {"message": "", "battleId": "b1"}, "message")
        self.assertFailsOn(
            ChatMessageForm, {"message": "x" * 501, "battleId": "b1"}, "message"
        )
        self.assertFailsOn(ChatMessageForm, {"message": "yo"}, "battleId")

    def test_non_object_payload(self) -> None:
        with self.assertRaises(ValidationError):
            validate_payload(SignInForm, ["not", "an", "object"])
