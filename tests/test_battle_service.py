"""Tests for the battle lifecycle service."""

from __future__ import annotations

import unittest
from typing import Any
from unittest.mock import MagicMock, patch

from viralviews.battles.services import BattleService, run_transaction
from viralviews.battles.utils import determine_winner, tally_votes
from viralviews.errors import (
    BattleStateError,
    DuplicateResourceError,
    NotFoundError,
    PermissionDeniedError,
)

from tests.mock_utils import FirestoreTestCase

CREATOR = {"uid": "creator", "email": "creator@example.com", "displayName": "Creator"}
ALICE = {"uid": "alice", "email": "alice@example.com", "displayName": "Alice"}
BOB = {"uid": "bob", "email": "bob@example.com", "displayName": "Bob"}
CAROL = {"uid": "carol", "email": "carol@example.com", "displayName": "Carol"}
DAVE = {"uid": "dave", "email": "dave@example.com", "displayName": "Dave"}


def battle_data(**overrides: Any) -> dict[str, Any]:
    data = {
        "title": "Friday Night Bars",
        "description": "",
        "format": "freestyle",
        "maxParticipants": 2,
        "timeLimit": 120,
        "isPrivate": False,
        "joinAsCreator": False,
    }
    data.update(overrides)
    return data


class BattleServiceTestCase(FirestoreTestCase):
    """Test case for BattleService against a mock Firestore."""

    def _create(self, **overrides: Any) -> str:
        battle_id, _ = BattleService.create_battle(
            self.mock_db, battle_data(**overrides), CREATOR
        )
        return battle_id

    def _voting_battle(self) -> str:
        battle_id = self._create()
        BattleService.join_battle(self.mock_db, battle_id, ALICE)
        BattleService.join_battle(self.mock_db, battle_id, BOB)
        BattleService.submit_performance(self.mock_db, battle_id, ALICE, "alice bars")
        BattleService.submit_performance(self.mock_db, battle_id, BOB, "bob bars")
        return battle_id

    def test_create_battle_defaults(self) -> None:
        battle_id, battle = BattleService.create_battle(
            self.mock_db, battle_data(), CREATOR
        )

        stored = self.doc("battles", battle_id)
        self.assertEqual(stored["status"], "waiting")
        self.assertEqual(stored["participants"], [])
        self.assertEqual(stored["votes"], [])
        self.assertIsNone(stored["winner"])
        self.assertEqual(stored["createdBy"], "creator")
        self.assertTrue(stored["isPublic"])
        self.assertEqual(stored["version"], 1)
        self.assertEqual(battle["id"], battle_id)

    def test_create_battle_join_as_creator(self) -> None:
        battle_id = self._create(joinAsCreator=True)

        stored = self.doc("battles", battle_id)
        self.assertEqual([p["userId"] for p in stored["participants"]], ["creator"])
        self.assertEqual(stored["participantIds"], ["creator"])

    def test_get_missing_battle(self) -> None:
        with self.assertRaises(NotFoundError):
            BattleService.get_battle(self.mock_db, "missing")

    def test_list_battles_newest_first_with_status_filter(self) -> None:
        for i, status in enumerate(["waiting", "active", "waiting"]):
            self.seed(
                "battles",
                f"b{i}",
                {"title": f"B{i}", "status": status, "isPublic": True, "createdAt": i},
            )
        self.seed(
            "battles",
            "private",
            {"title": "P", "status": "waiting", "isPublic": False, "createdAt": 9},
        )

        battles = BattleService.list_battles(self.mock_db)
        self.assertEqual([b["id"] for b in battles], ["b2", "b1", "b0"])

        waiting = BattleService.list_battles(self.mock_db, status="waiting", limit=1)
        self.assertEqual([b["id"] for b in waiting], ["b2"])

    def test_join_battle(self) -> None:
        battle_id = self._create(maxParticipants=3)

        battle = BattleService.join_battle(self.mock_db, battle_id, ALICE)

        self.assertEqual(battle["status"], "waiting")
        stored = self.doc("battles", battle_id)
        self.assertEqual(stored["participantIds"], ["alice"])
        self.assertEqual(stored["participants"][0]["displayName"], "Alice")
        self.assertEqual(stored["version"], 2)

    def test_duplicate_join_leaves_participants_unchanged(self) -> None:
        battle_id = self._create(maxParticipants=3)
        BattleService.join_battle(self.mock_db, battle_id, ALICE)

        with self.assertRaises(DuplicateResourceError):
            BattleService.join_battle(self.mock_db, battle_id, ALICE)

        self.assertEqual(len(self.doc("battles", battle_id)["participants"]), 1)

    def test_last_slot_activates_and_full_battle_rejects(self) -> None:
        battle_id = self._create(maxParticipants=2)
        BattleService.join_battle(self.mock_db, battle_id, ALICE)

        battle = BattleService.join_battle(self.mock_db, battle_id, BOB)
        self.assertEqual(battle["status"], "active")

        with self.assertRaises(BattleStateError):
            BattleService.join_battle(self.mock_db, battle_id, CAROL)
        self.assertEqual(len(self.doc("battles", battle_id)["participants"]), 2)

    def test_full_waiting_battle_rejects_joiner(self) -> None:
        self.seed(
            "battles",
            "full",
            {
                "title": "Full",
                "createdBy": "creator",
                "status": "waiting",
                "maxParticipants": 2,
                "participants": [{"userId": "alice"}, {"userId": "bob"}],
                "participantIds": ["alice", "bob"],
                "votes": [],
                "version": 3,
            },
        )

        with self.assertRaises(BattleStateError) as ctx:
            BattleService.join_battle(self.mock_db, "full", CAROL)
        self.assertEqual(ctx.exception.message, "This battle is full!")

    def test_participant_rejoining_active_battle_is_a_duplicate(self) -> None:
        battle_id = self._create(maxParticipants=2)
        BattleService.join_battle(self.mock_db, battle_id, ALICE)
        BattleService.join_battle(self.mock_db, battle_id, BOB)

        with self.assertRaises(DuplicateResourceError):
            BattleService.join_battle(self.mock_db, battle_id, ALICE)

        with self.assertRaises(BattleStateError) as ctx:
            BattleService.join_battle(self.mock_db, battle_id, CAROL)
        self.assertEqual(ctx.exception.message, "This battle is full!")

    def test_join_rejects_closed_battle_with_open_slots(self) -> None:
        self.seed(
            "battles",
            "closed",
            {
                "title": "Closed",
                "createdBy": "creator",
                "status": "completed",
                "maxParticipants": 4,
                "participants": [{"userId": "alice"}],
                "participantIds": ["alice"],
                "votes": [],
                "version": 5,
            },
        )

        with self.assertRaises(BattleStateError) as ctx:
            BattleService.join_battle(self.mock_db, "closed", CAROL)
        self.assertEqual(
            ctx.exception.message, "This battle is no longer accepting participants."
        )
        self.assertEqual(self.doc("battles", "closed")["participantIds"], ["alice"])

    def test_join_runs_in_a_transaction(self) -> None:
        battle_id = self._create()

        BattleService.join_battle(self.mock_db, battle_id, ALICE)

        self.mock_db.transaction.assert_called_once()

    def test_run_transaction_passes_transaction_first(self) -> None:
        func = MagicMock(return_value="done")

        result = run_transaction(self.mock_db, func, "a", "b")

        self.assertEqual(result, "done")
        transaction = func.call_args[0][0]
        self.assertEqual(func.call_args[0][1:], ("a", "b"))
        self.assertTrue(hasattr(transaction, "update"))

    def test_submit_requires_active_battle(self) -> None:
        battle_id = self._create()
        BattleService.join_battle(self.mock_db, battle_id, ALICE)

        with self.assertRaises(BattleStateError):
            BattleService.submit_performance(self.mock_db, battle_id, ALICE, "bars")

    def test_submit_by_non_participant_rejected(self) -> None:
        battle_id = self._create()
        BattleService.join_battle(self.mock_db, battle_id, ALICE)
        BattleService.join_battle(self.mock_db, battle_id, BOB)

        with self.assertRaises(PermissionDeniedError):
            BattleService.submit_performance(self.mock_db, battle_id, CAROL, "bars")

    def test_submissions_open_voting(self) -> None:
        battle_id = self._create()
        BattleService.join_battle(self.mock_db, battle_id, ALICE)
        BattleService.join_battle(self.mock_db, battle_id, BOB)

        battle = BattleService.submit_performance(
            self.mock_db, battle_id, ALICE, "alice bars"
        )
        self.assertEqual(battle["status"], "active")

        with self.assertRaises(DuplicateResourceError):
            BattleService.submit_performance(self.mock_db, battle_id, ALICE, "again")

        battle = BattleService.submit_performance(
            self.mock_db, battle_id, BOB, "bob bars"
        )
        self.assertEqual(battle["status"], "voting")
        stored = self.doc("battles", battle_id)
        self.assertEqual(stored["participants"][0]["performance"]["content"], "alice bars")
        self.assertEqual(stored["participants"][0]["performance"]["votes"], 0)

    def test_vote_records_and_increments(self) -> None:
        battle_id = self._voting_battle()

        BattleService.vote(self.mock_db, battle_id, CAROL, "alice")

        stored = self.doc("battles", battle_id)
        self.assertEqual(len(stored["votes"]), 1)
        self.assertEqual(stored["votes"][0]["voterId"], "carol")
        self.assertEqual(stored["voterIds"], ["carol"])
        self.assertEqual(stored["participants"][0]["performance"]["votes"], 1)

    def test_participants_cannot_vote(self) -> None:
        battle_id = self._voting_battle()

        with self.assertRaises(PermissionDeniedError):
            BattleService.vote(self.mock_db, battle_id, ALICE, "bob")
        self.assertEqual(self.doc("battles", battle_id)["votes"], [])

    def test_second_vote_rejected(self) -> None:
        battle_id = self._voting_battle()
        BattleService.vote(self.mock_db, battle_id, CAROL, "alice")

        with self.assertRaises(DuplicateResourceError):
            BattleService.vote(self.mock_db, battle_id, CAROL, "bob")
        self.assertEqual(len(self.doc("battles", battle_id)["votes"]), 1)

    def test_vote_for_unknown_participant(self) -> None:
        battle_id = self._voting_battle()

        with self.assertRaises(NotFoundError):
            BattleService.vote(self.mock_db, battle_id, CAROL, "nobody")

    def test_vote_outside_voting_rejected(self) -> None:
        battle_id = self._create()

        with self.assertRaises(BattleStateError):
            BattleService.vote(self.mock_db, battle_id, CAROL, "alice")

    def test_complete_battle_sets_winner_and_stats(self) -> None:
        for user in (ALICE, BOB):
            self.seed(
                "users",
                user["uid"],
                {"username": user["uid"], "stats": {"totalBattles": 1, "battlesWon": 0}},
            )
        battle_id = self._voting_battle()
        BattleService.vote(self.mock_db, battle_id, CAROL, "alice")
        BattleService.vote(self.mock_db, battle_id, DAVE, "alice")

        battle = BattleService.complete_battle(self.mock_db, battle_id, CREATOR)

        self.assertEqual(battle["winner"], "alice")
        self.assertEqual(battle["voteTally"], {"alice": 2, "bob": 0})
        self.assertEqual(self.doc("battles", battle_id)["status"], "completed")
        alice_stats = self.doc("users", "alice")["stats"]
        self.assertEqual(alice_stats["totalBattles"], 2)
        self.assertEqual(alice_stats["battlesWon"], 1)
        self.assertEqual(self.doc("users", "bob")["stats"]["battlesLost"], 1)

    def test_complete_battle_tie_has_no_winner(self) -> None:
        battle_id = self._voting_battle()
        BattleService.vote(self.mock_db, battle_id, CAROL, "alice")
        BattleService.vote(self.mock_db, battle_id, DAVE, "bob")

        battle = BattleService.complete_battle(self.mock_db, battle_id, CREATOR)

        self.assertIsNone(battle["winner"])
        self.assertEqual(battle["status"], "completed")

    def test_only_creator_completes(self) -> None:
        battle_id = self._voting_battle()

        with self.assertRaises(PermissionDeniedError):
            BattleService.complete_battle(self.mock_db, battle_id, ALICE)

    def test_delete_battle_creator_only(self) -> None:
        battle_id = self._create()

        with self.assertRaises(PermissionDeniedError):
            BattleService.delete_battle(self.mock_db, battle_id, ALICE)

        BattleService.delete_battle(self.mock_db, battle_id, CREATOR)
        with self.assertRaises(NotFoundError):
            BattleService.get_battle(self.mock_db, battle_id)

    def test_delete_battle_removes_chat_messages(self) -> None:
        battle_id = self._create()
        message_ids = [
            BattleService.post_message(self.mock_db, battle_id, ALICE, f"bar {i}")["id"]
            for i in range(3)
        ]
        batches: list[MagicMock] = []

        def new_batch() -> MagicMock:
            batches.append(MagicMock())
            return batches[-1]

        self.mock_db.batch = MagicMock(side_effect=new_batch)
        with patch("viralviews.battles.services.BATCH_WRITE_LIMIT", 3):
            BattleService.delete_battle(self.mock_db, battle_id, CREATOR)

        self.assertEqual(len(batches), 2)
        deleted = [
            call.args[0].id for batch in batches for call in batch.delete.call_args_list
        ]
        self.assertCountEqual(deleted, [*message_ids, battle_id])
        self.assertEqual(deleted[-1], battle_id)
        for batch in batches:
            batch.commit.assert_called_once()

    def test_chat_messages_oldest_first(self) -> None:
        battle_id = self._create()
        for i in range(3):
            self.mock_db.collection("battles").document(battle_id).collection(
                "messages"
            ).document(f"m{i}").set({"message": f"msg {i}", "timestamp": i})

        messages = BattleService.list_messages(self.mock_db, battle_id, limit=2)

        self.assertEqual([m["message"] for m in messages], ["msg 1", "msg 2"])

    def test_post_message(self) -> None:
        battle_id = self._create()

        message = BattleService.post_message(self.mock_db, battle_id, ALICE, "yo")

        self.assertEqual(message["userId"], "alice")
        self.assertEqual(message["username"], "Alice")
        self.assertEqual(message["type"], "message")


class VoteTallyTestCase(unittest.TestCase):
    """Pure tally and winner helpers."""

    def test_tally_includes_every_participant(self) -> None:
        battle = {
            "participants": [{"userId": "a"}, {"userId": "b"}],
            "votes": [{"voterId": "x", "participantId": "a"}],
        }
        self.assertEqual(tally_votes(battle), {"a": 1, "b": 0})

    def test_winner_rules(self) -> None:
        self.assertEqual(determine_winner({"a": 2, "b": 1}), "a")
        self.assertIsNone(determine_winner({"a": 1, "b": 1}))
        self.assertIsNone(determine_winner({"a": 0, "b": 0}))
        self.assertIsNone(determine_winner({}))
