import pytest

from database import storage
from database.models import Collection, SuperCollection
from models.api_models import CollectionRequest
from operators.access_operator import Identity
from operators.collection_operator import delete_collection, put_collection_name
from operators.errors import AuthorizationError, ErrorKind, TreeError
from utils.identity import derive_collection_id, derive_id

ALICE = Identity(name_identifier="alice", identity_provider="live")
BOB = Identity(name_identifier="bob", identity_provider="google")


@pytest.fixture
def alice(tree):
    return tree.user(ALICE, "Alice")


class TestPutCollectionName:
    def test_creates_super_collection_and_collection(self, db, alice):
        collection_id = put_collection_name(
            db, ALICE, "Alice", "History", CollectionRequest(title="History")
        )

        assert collection_id == derive_collection_id("Alice", "History")
        collection = storage.find_collection(db, collection_id)
        assert collection.owner_id == alice.user_id
        assert collection.super_collection.super_collection_id == derive_id("Alice")
        assert collection.super_collection.owner_id == alice.user_id

    def test_body_title_is_used_when_it_derives_the_same_id(self, db, alice):
        collection_id = put_collection_name(
            db, ALICE, "Alice", "big-history", CollectionRequest(title="Big History")
        )

        assert storage.find_collection(db, collection_id).title == "Big History"

    def test_unrelated_body_title_is_ignored(self, db, alice):
        collection_id = put_collection_name(
            db, ALICE, "Alice", "History", CollectionRequest(title="Something Else")
        )

        assert storage.find_collection(db, collection_id).title == "History"

    def test_existing_collection_is_returned_unchanged(self, db, tree, alice):
        tree.collection("Alice", "History", owner=alice)

        collection_id = put_collection_name(
            db, ALICE, "Alice", "History", CollectionRequest(title="HISTORY")
        )

        assert collection_id == derive_collection_id("Alice", "History")
        assert storage.find_collection(db, collection_id).title == "History"
        assert db.query(Collection).count() == 1

    def test_super_collection_of_other_user(self, db, tree, alice):
        tree.collection("Alice", "History", owner=alice)
        tree.user(BOB, "Bob")

        with pytest.raises(AuthorizationError):
            put_collection_name(db, BOB, "Alice", "Mine", CollectionRequest())

        put_collection_name(db, ALICE, "Alice", "Mine", CollectionRequest())
        assert db.query(SuperCollection).count() == 1

    def test_requires_identity(self, db):
        with pytest.raises(TreeError) as exc_info:
            put_collection_name(db, None, "Alice", "Mine", CollectionRequest())

        assert exc_info.value.kind == ErrorKind.UNAUTHENTICATED

    def test_requires_body(self, db, alice):
        with pytest.raises(TreeError) as exc_info:
            put_collection_name(db, ALICE, "Alice", "Mine", None)

        assert exc_info.value.kind == ErrorKind.REQUEST_BODY_EMPTY

    def test_requires_known_user(self, db):
        with pytest.raises(TreeError) as exc_info:
            put_collection_name(db, BOB, "Bob", "Mine", CollectionRequest())

        assert exc_info.value.kind == ErrorKind.USER_NOT_FOUND


class TestDeleteCollection:
    def test_owner_deletes_collection_and_tree(self, db, tree, alice):
        collection = tree.collection("Alice", "History", owner=alice)
        root = tree.timeline(collection, "Root", 0, 100)
        tree.exhibit(root, "Founding", 50)

        delete_collection(db, ALICE, "Alice", "History")

        assert storage.find_collection(db, collection.collection_id) is None
        assert storage.find_timeline(db, root.timeline_id) is None

    def test_other_user_is_unauthorized(self, db, tree, alice):
        tree.collection("Alice", "History", owner=alice)

        with pytest.raises(AuthorizationError):
            delete_collection(db, BOB, "Alice", "History")

    def test_sandbox_cannot_be_deleted(self, db, tree):
        tree.collection("Sandbox")

        with pytest.raises(AuthorizationError):
            delete_collection(db, ALICE, "Sandbox", "Sandbox")

    def test_unknown_collection(self, db):
        with pytest.raises(TreeError) as exc_info:
            delete_collection(db, ALICE, "Nope", "Nope")

        assert exc_info.value.kind == ErrorKind.COLLECTION_NOT_FOUND
