"""Mock utilities for Firestore, Auth and the test app."""

import copy
import datetime
import unittest
import unittest.mock
from typing import Any, Optional

from mockfirestore import CollectionReference, MockFirestore, Query
from mockfirestore.document import DocumentReference

FIXED_NOW = datetime.datetime(2024, 6, 1, 12, 0, tzinfo=datetime.timezone.utc)


class MockIncrement:
    def __init__(self, value: int) -> None:
        self.value = value


class MockFieldFilter:
    def __init__(self, field_path: str, op_string: str, value: Any) -> None:
        self.field_path = field_path
        self.op_string = op_string
        self.value = value


def _apply_path(document: dict[str, Any], key: str, value: Any) -> None:
    """Write ``value`` at a dotted field path, resolving sentinels."""
    *parents, leaf = key.split(".")
    node = document
    for part in parents:
        if not isinstance(node.get(part), dict):
            node[part] = {}
        node = node[part]

    if isinstance(value, MockIncrement):
        node[leaf] = (node.get(leaf) or 0) + value.value
    else:
        node[leaf] = value


def patch_mockfirestore() -> None:
    """Apply monkeypatches to mockfirestore to support FieldFilter and sentinels."""

    def collection_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(CollectionReference, "_where"):
        CollectionReference._where = CollectionReference.where
        CollectionReference.where = collection_where

    def query_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(Query, "_where"):
        Query._where = Query.where
        Query.where = query_where

    if not hasattr(DocumentReference, "_orig_get"):
        DocumentReference._orig_get = DocumentReference.get

        def doc_ref_get(self: Any, transaction: Any = None) -> Any:
            """Handle transaction argument in get."""
            return self._orig_get()

        DocumentReference.get = doc_ref_get

    if not hasattr(DocumentReference, "_orig_update"):
        DocumentReference._orig_update = DocumentReference.update

        def patched_update(self: Any, data: dict[str, Any]) -> Any:
            snapshot = self._orig_get()
            if not snapshot.exists:
                # Let mockfirestore raise its NotFound.
                return self._orig_update(data)
            document = copy.deepcopy(snapshot.to_dict() or {})
            for key, value in data.items():
                _apply_path(document, key, value)
            return self.set(document)

        DocumentReference.update = patched_update


class MockTransaction:
    """Applies transactional writes immediately."""

    def set(self, ref: Any, data: Any, merge: bool = False) -> None:
        if merge:
            ref.update(data)
        else:
            ref.set(data)

    def update(self, ref: Any, data: Any) -> None:
        ref.update(data)

    def delete(self, ref: Any) -> None:
        ref.delete()


class MockBatch(MockTransaction):
    def __init__(self, db: Any) -> None:
        self.db = db
        self.updates: list[tuple[Any, Any]] = []
        self.commit = unittest.mock.MagicMock(side_effect=self._real_commit)

    def update(self, ref: Any, data: Any) -> None:
        self.updates.append((ref, data))

    def _real_commit(self) -> None:
        for ref, data in self.updates:
            ref.update(data)


def make_firestore_module(db: MockFirestore) -> unittest.mock.MagicMock:
    """Stand-in for ``firebase_admin.firestore`` bound to a mock database."""
    module = unittest.mock.MagicMock()
    module.client.return_value = db
    module.FieldFilter = MockFieldFilter
    module.Increment = MockIncrement
    module.SERVER_TIMESTAMP = FIXED_NOW
    module.Query.DESCENDING = "DESCENDING"
    module.Query.ASCENDING = "ASCENDING"
    module.transactional = lambda func: func
    return module


# Every module that reaches Firestore through the firebase_admin module object.
FIRESTORE_MODULES = (
    "viralviews.auth.decorators",
    "viralviews.auth.routes",
    "viralviews.users.routes",
    "viralviews.users.services",
    "viralviews.battles.routes",
    "viralviews.battles.services",
    "viralviews.media.routes",
    "viralviews.media.services",
    "viralviews.moderation.routes",
    "viralviews.moderation.services",
    "viralviews.ai.routes",
)

patch_mockfirestore()


class FirestoreTestCase(unittest.TestCase):
    """Base case wiring a fresh mock Firestore into every service module."""

    def setUp(self) -> None:
        self.mock_db = MockFirestore()
        self.mock_db.transaction = unittest.mock.MagicMock(
            side_effect=lambda **kwargs: MockTransaction()
        )
        self.mock_db.batch = unittest.mock.MagicMock(
            side_effect=lambda: MockBatch(self.mock_db)
        )
        self.mock_firestore_module = make_firestore_module(self.mock_db)

        for target in FIRESTORE_MODULES:
            patcher = unittest.mock.patch(
                f"{target}.firestore", new=self.mock_firestore_module
            )
            patcher.start()
            self.addCleanup(patcher.stop)

    def seed(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        self.mock_db.collection(collection).document(doc_id).set(data)

    def doc(self, collection: str, doc_id: str) -> dict[str, Any]:
        return self.mock_db.collection(collection).document(doc_id).get().to_dict()


class ApiTestCase(FirestoreTestCase):
    """Base case with an app, a test client and a patchable token verifier."""

    test_config: dict[str, Any] = {}

    def setUp(self) -> None:
        super().setUp()
        patchers = {
            "init_app": unittest.mock.patch("firebase_admin.initialize_app"),
            "verify_id_token": unittest.mock.patch(
                "firebase_admin.auth.verify_id_token"
            ),
        }
        self.mocks = {name: p.start() for name, p in patchers.items()}
        for p in patchers.values():
            self.addCleanup(p.stop)

        from viralviews import create_app

        self.app = create_app(
            {
                "TESTING": True,
                "RATELIMIT_ENABLED": False,
                "SERVER_NAME": "localhost",
                **self.test_config,
            }
        )
        self.client = self.app.test_client()
        self.app_context = self.app.app_context()
        self.app_context.push()
        self.addCleanup(self.app_context.pop)

    def login_as(self, uid: str, **claims: Any) -> dict[str, str]:
        """Make the mocked verifier accept a token for ``uid``."""
        self.mocks["verify_id_token"].return_value = {
            "uid": uid,
            "email": claims.pop("email", f"{uid}@example.com"),
            **claims,
        }
        return {"Authorization": f"Bearer token-{uid}"}


def media_doc(**overrides: Any) -> dict[str, Any]:
    """A stored, approved public media item owned by alice."""
    data = {
        "title": "Clip",
        "description": "",
        "category": "cypher",
        "tags": [],
        "privacy": "public",
        "userId": "alice",
        "uploadedAt": 1,
        "status": "approved",
        "stats": {"views": 0, "likes": 0, "comments": 0, "shares": 0},
    }
    data.update(overrides)
    return data
