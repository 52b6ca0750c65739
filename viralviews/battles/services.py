"""Service layer for battle lifecycle logic."""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any, Callable, Optional, cast

from firebase_admin import firestore

from viralviews import rules
from viralviews.constants import (
    BATTLE_ACTIVE,
    BATTLE_COMPLETED,
    BATTLE_VOTING,
    BATTLE_WAITING,
    BATCH_WRITE_LIMIT,
    BATTLES_COLLECTION,
    CHAT_HISTORY_LIMIT,
    MESSAGES_COLLECTION,
    USERS_COLLECTION,
)
from viralviews.errors import (
    BattleStateError,
    DuplicateResourceError,
    NotFoundError,
    PermissionDeniedError,
)

from .models import Battle, ChatMessage
from .utils import (
    all_submitted,
    determine_winner,
    find_participant,
    make_participant,
    participant_ids,
    tally_votes,
    utcnow,
)

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction

    from viralviews.core.types import AuthContext

logger = logging.getLogger(__name__)


def run_transaction(db: Client, func: Callable[..., Any], *args: Any) -> Any:
    """Run ``func(transaction, *args)`` in a Firestore transaction.

    Firestore re-runs the function when a document it read changes before
    commit, so checks made against the transactional read hold at write time.
    """
    return firestore.transactional(func)(db.transaction(), *args)


class BattleService:
    """Handles business logic and data access for battles."""

    @staticmethod
    def _battle_ref(db: Client, battle_id: str) -> DocumentReference:
        return db.collection(BATTLES_COLLECTION).document(battle_id)

    @staticmethod
    def _read_battle(
        battle_ref: DocumentReference, transaction: Optional[Transaction] = None
    ) -> Battle:
        snapshot = cast(
            "DocumentSnapshot",
            battle_ref.get(transaction=transaction) if transaction else battle_ref.get(),
        )
        if not snapshot.exists:
            raise NotFoundError("Battle not found.")
        data = cast("Battle", snapshot.to_dict() or {})
        data["id"] = snapshot.id
        return data

    @staticmethod
    def _write_battle(
        transaction: Transaction,
        battle_ref: DocumentReference,
        user: AuthContext,
        before: Battle,
        updates: dict[str, Any],
    ) -> Battle:
        """Check the update rule, then queue the update with a version bump."""
        updates = {**updates, "version": before.get("version", 0) + 1}
        after = cast("Battle", {**before, **updates})
        rules.enforce(rules.can_update_battle(user, dict(before), dict(after)))
        transaction.update(
            battle_ref, {**updates, "updatedAt": firestore.SERVER_TIMESTAMP}
        )
        return after

    # Battle records

    @staticmethod
    def create_battle(
        db: Client, data: dict[str, Any], user: AuthContext
    ) -> tuple[str, Battle]:
        """Create a battle in the waiting state and return its ID and document."""
        participants = [make_participant(user)] if data.get("joinAsCreator") else []
        battle_payload: dict[str, Any] = {
            "title": data["title"],
            "description": data.get("description") or "",
            "format": data.get("format") or "freestyle",
            "timeLimit": data["timeLimit"],
            "maxParticipants": data["maxParticipants"],
            "isPublic": not data.get("isPrivate", False),
            "createdBy": user["uid"],
            "status": BATTLE_WAITING,
            "participants": participants,
            "participantIds": [p["userId"] for p in participants],
            "votes": [],
            "voterIds": [],
            "winner": None,
            "version": 1,
            "createdAt": firestore.SERVER_TIMESTAMP,
        }
        rules.enforce(rules.can_create_battle(user, battle_payload))

        _, ref = db.collection(BATTLES_COLLECTION).add(battle_payload)
        logger.info(f"Battle {ref.id} created by {user['uid']}")
        return str(ref.id), BattleService._read_battle(ref)

    @staticmethod
    def get_battle(db: Client, battle_id: str) -> Battle:
        """Fetch a single battle by its ID."""
        return BattleService._read_battle(BattleService._battle_ref(db, battle_id))

    @staticmethod
    def list_battles(
        db: Client, status: Optional[str] = None, limit: int = 20
    ) -> list[Battle]:
        """List public battles, newest first, optionally filtered by status."""
        query = db.collection(BATTLES_COLLECTION).where(
            filter=firestore.FieldFilter("isPublic", "==", True)
        )
        if status:
            query = query.where(filter=firestore.FieldFilter("status", "==", status))
        query = query.order_by("createdAt", direction=firestore.Query.DESCENDING).limit(
            limit
        )

        battles: list[Battle] = []
        for doc in query.stream():
            data = cast("Battle", doc.to_dict() or {})
            data["id"] = doc.id
            battles.append(data)
        return battles

    @staticmethod
    def delete_battle(db: Client, battle_id: str, user: AuthContext) -> None:
        """Delete a battle and its chat. Only its creator may do this."""
        ref = BattleService._battle_ref(db, battle_id)
        battle = BattleService._read_battle(ref)
        rules.enforce(rules.can_delete_battle(user, dict(battle)))

        # Firestore keeps sub-collections after their parent is deleted.
        batch = db.batch()
        pending = 0
        for message in ref.collection(MESSAGES_COLLECTION).stream():
            batch.delete(message.reference)
            pending += 1
            if pending == BATCH_WRITE_LIMIT - 1:
                batch.commit()
                batch = db.batch()
                pending = 0
        batch.delete(ref)
        batch.commit()
        logger.info(f"Battle {battle_id} deleted by {user['uid']}")

    # Participation

    @staticmethod
    def _join_in_transaction(
        transaction: Transaction, battle_ref: DocumentReference, user: AuthContext
    ) -> Battle:
        battle = BattleService._read_battle(battle_ref, transaction)
        uid = user["uid"]

        if uid in participant_ids(battle):
            raise DuplicateResourceError("You have already joined this battle!")

        participants = list(battle.get("participants", []))
        if len(participants) >= battle.get("maxParticipants", 0):
            raise BattleStateError("This battle is full!")
        if battle.get("status") != BATTLE_WAITING:
            raise BattleStateError("This battle is no longer accepting participants.")

        participants.append(make_participant(user))
        status = (
            BATTLE_ACTIVE
            if len(participants) >= battle["maxParticipants"]
            else BATTLE_WAITING
        )
        return BattleService._write_battle(
            transaction,
            battle_ref,
            user,
            battle,
            {
                "participants": participants,
                "participantIds": [p["userId"] for p in participants],
                "status": status,
            },
        )

    @staticmethod
    def join_battle(db: Client, battle_id: str, user: AuthContext) -> Battle:
        """Add the caller as a participant; a full battle becomes active."""
        battle = run_transaction(
            db,
            BattleService._join_in_transaction,
            BattleService._battle_ref(db, battle_id),
            user,
        )
        logger.info(f"{user['uid']} joined battle {battle_id} ({battle['status']})")
        return battle

    # Submissions

    @staticmethod
    def _submit_in_transaction(
        transaction: Transaction,
        battle_ref: DocumentReference,
        user: AuthContext,
        content: str,
    ) -> Battle:
        battle = BattleService._read_battle(battle_ref, transaction)

        if battle.get("status") != BATTLE_ACTIVE:
            raise BattleStateError("This battle is not accepting performances.")

        participants = copy.deepcopy(list(battle.get("participants", [])))
        participant = find_participant({"participants": participants}, user["uid"])
        if participant is None:
            raise PermissionDeniedError("Only participants can submit a performance.")
        if participant.get("performance"):
            raise DuplicateResourceError("You have already submitted a performance.")

        participant["performance"] = {
            "content": content,
            "submittedAt": utcnow(),
            "votes": 0,
        }
        status = BATTLE_VOTING if all_submitted(participants) else BATTLE_ACTIVE
        return BattleService._write_battle(
            transaction,
            battle_ref,
            user,
            battle,
            {"participants": participants, "status": status},
        )

    @staticmethod
    def submit_performance(
        db: Client, battle_id: str, user: AuthContext, content: str
    ) -> Battle:
        """Record the caller's performance; the last submission opens voting."""
        battle = run_transaction(
            db,
            BattleService._submit_in_transaction,
            BattleService._battle_ref(db, battle_id),
            user,
            content,
        )
        logger.info(f"{user['uid']} submitted to battle {battle_id} ({battle['status']})")
        return battle

    # Voting

    @staticmethod
    def _vote_in_transaction(
        transaction: Transaction,
        battle_ref: DocumentReference,
        voter: AuthContext,
        participant_id: str,
    ) -> Battle:
        battle = BattleService._read_battle(battle_ref, transaction)
        voter_id = voter["uid"]

        if battle.get("status") != BATTLE_VOTING:
            raise BattleStateError("Voting is not open for this battle.")
        if any(v.get("voterId") == voter_id for v in battle.get("votes", [])):
            raise DuplicateResourceError("You have already voted!")
        if voter_id in participant_ids(battle):
            raise PermissionDeniedError("Participants cannot vote!")

        participants = copy.deepcopy(list(battle.get("participants", [])))
        target = find_participant({"participants": participants}, participant_id)
        if target is None:
            raise NotFoundError("Participant not found in this battle.")

        performance = target.setdefault("performance", {"votes": 0})
        performance["votes"] = performance.get("votes", 0) + 1

        votes = list(battle.get("votes", []))
        votes.append(
            {"voterId": voter_id, "participantId": participant_id, "createdAt": utcnow()}
        )
        return BattleService._write_battle(
            transaction,
            battle_ref,
            voter,
            battle,
            {
                "votes": votes,
                "voterIds": [v["voterId"] for v in votes],
                "participants": participants,
            },
        )

    @staticmethod
    def vote(
        db: Client, battle_id: str, voter: AuthContext, participant_id: str
    ) -> Battle:
        """Record a spectator's vote for one participant."""
        battle = run_transaction(
            db,
            BattleService._vote_in_transaction,
            BattleService._battle_ref(db, battle_id),
            voter,
            participant_id,
        )
        logger.info(f"{voter['uid']} voted in battle {battle_id}")
        return battle

    # Completion

    @staticmethod
    def _complete_in_transaction(
        transaction: Transaction,
        db: Client,
        battle_ref: DocumentReference,
        user: AuthContext,
    ) -> Battle:
        battle = BattleService._read_battle(battle_ref, transaction)

        if battle.get("createdBy") != user["uid"]:
            raise PermissionDeniedError("Only the creator can complete the battle.")
        if battle.get("status") != BATTLE_VOTING:
            raise BattleStateError("Only a battle in voting can be completed.")

        tally = tally_votes(battle)
        winner = determine_winner(tally)

        # All transactional reads must happen before the first write.
        user_refs = {
            uid: db.collection(USERS_COLLECTION).document(uid)
            for uid in participant_ids(battle)
        }
        existing = {
            uid
            for uid, ref in user_refs.items()
            if cast("DocumentSnapshot", ref.get(transaction=transaction)).exists
        }

        after = BattleService._write_battle(
            transaction,
            battle_ref,
            user,
            battle,
            {"status": BATTLE_COMPLETED, "winner": winner, "voteTally": tally},
        )

        for uid in existing:
            stats: dict[str, Any] = {"stats.totalBattles": firestore.Increment(1)}
            if winner is not None:
                key = "stats.battlesWon" if uid == winner else "stats.battlesLost"
                stats[key] = firestore.Increment(1)
            transaction.update(user_refs[uid], stats)

        return after

    @staticmethod
    def complete_battle(db: Client, battle_id: str, user: AuthContext) -> Battle:
        """Close voting, tally the votes and record the winner, if there is one."""
        battle = run_transaction(
            db,
            BattleService._complete_in_transaction,
            db,
            BattleService._battle_ref(db, battle_id),
            user,
        )
        logger.info(f"Battle {battle_id} completed, winner: {battle.get('winner')}")
        return battle

    # Chat

    @staticmethod
    def post_message(
        db: Client,
        battle_id: str,
        user: AuthContext,
        message: str,
        message_type: str = "message",
    ) -> ChatMessage:
        """Store a chat message under the battle."""
        battle_ref = BattleService._battle_ref(db, battle_id)
        BattleService._read_battle(battle_ref)

        payload: dict[str, Any] = {
            "battleId": battle_id,
            "userId": user["uid"],
            "username": user.get("displayName") or "Anonymous",
            "message": message,
            "type": message_type,
            "timestamp": utcnow(),
        }
        _, ref = battle_ref.collection(MESSAGES_COLLECTION).add(payload)
        return cast("ChatMessage", {**payload, "id": str(ref.id)})

    @staticmethod
    def list_messages(
        db: Client, battle_id: str, limit: int = CHAT_HISTORY_LIMIT
    ) -> list[ChatMessage]:
        """Return the newest messages, oldest first."""
        battle_ref = BattleService._battle_ref(db, battle_id)
        BattleService._read_battle(battle_ref)

        query = (
            battle_ref.collection(MESSAGES_COLLECTION)
            .order_by("timestamp", direction=firestore.Query.DESCENDING)
            .limit(limit)
        )
        messages: list[ChatMessage] = []
        for doc in query.stream():
            data = cast("ChatMessage", doc.to_dict() or {})
            data["id"] = doc.id
            messages.append(data)
        messages.reverse()
        return messages
