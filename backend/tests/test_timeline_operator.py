from uuid import uuid4

import pytest

from database import storage
from database.models import Timeline
from models.api_models import EntityReference, TimelineRequest
from operators.access_operator import Identity
from operators.errors import (
    AuthorizationError,
    ErrorKind,
    TreeError,
)
from operators.timeline_operator import delete_timeline, put_timeline
from settings import MAX_YEAR, MIN_YEAR

ALICE = Identity(name_identifier="alice", identity_provider="live")
BOB = Identity(name_identifier="bob", identity_provider="google")


def _timeline_count(db):
    return db.query(Timeline).count()


class TestAcmeScenario:
    @pytest.fixture(autouse=True)
    def _acme(self, tree):
        tree.collection("Acme")

    def test_root_then_child(self, db):
        root_id = put_timeline(
            db,
            None,
            "Acme",
            "Acme",
            TimelineRequest(title="Cosmos", from_year=MIN_YEAR, to_year=MAX_YEAR),
        )
        era_id = put_timeline(
            db,
            None,
            "Acme",
            "Acme",
            TimelineRequest(parent_id=root_id, title="Era", from_year=0, to_year=100),
        )

        root = storage.find_timeline(db, root_id)
        era = storage.find_timeline(db, era_id)
        assert root.depth == 0
        assert root.parent_id is None
        assert era.depth == 1
        assert era.parent_id == root_id

    def test_child_outside_parent_is_rejected(self, db):
        era_id = put_timeline(
            db, None, "Acme", "Acme", TimelineRequest(title="Era", from_year=0, to_year=100)
        )

        with pytest.raises(TreeError) as exc_info:
            put_timeline(
                db,
                None,
                "Acme",
                "Acme",
                TimelineRequest(parent_id=era_id, from_year=-1, to_year=100),
            )

        assert exc_info.value.kind == ErrorKind.TIMELINE_RANGE_INVALID
        assert _timeline_count(db) == 1

    def test_child_one_year_past_parent_end_is_rejected(self, db):
        era_id = put_timeline(
            db, None, "Acme", "Acme", TimelineRequest(title="Era", from_year=0, to_year=100)
        )

        with pytest.raises(TreeError) as exc_info:
            put_timeline(
                db,
                None,
                "Acme",
                "Acme",
                TimelineRequest(parent_id=era_id, from_year=50, to_year=101),
            )

        assert exc_info.value.kind == ErrorKind.TIMELINE_RANGE_INVALID


def test_depth_follows_nesting(db, tree):
    tree.collection("Acme")
    parent_id = None
    for level in range(3):
        parent_id = put_timeline(
            db,
            None,
            "Acme",
            "Acme",
            TimelineRequest(parent_id=parent_id, title=f"L{level}", from_year=0, to_year=100),
        )

    leaf = storage.find_timeline(db, parent_id)
    assert leaf.depth == 2
    assert leaf.parent.depth == 1
    assert leaf.parent.parent.depth == 0


def test_missing_body(db, tree):
    tree.collection("Acme")

    with pytest.raises(TreeError) as exc_info:
        put_timeline(db, None, "Acme", "Acme", None)

    assert exc_info.value.kind == ErrorKind.REQUEST_BODY_EMPTY


def test_unknown_collection(db):
    with pytest.raises(TreeError) as exc_info:
        put_timeline(db, None, "Nope", "Nope", TimelineRequest(from_year=0, to_year=1))

    assert exc_info.value.kind == ErrorKind.COLLECTION_NOT_FOUND


def test_missing_parent(db, tree):
    tree.collection("Acme")

    with pytest.raises(TreeError) as exc_info:
        put_timeline(
            db,
            None,
            "Acme",
            "Acme",
            TimelineRequest(parent_id=uuid4(), from_year=0, to_year=1),
        )

    assert exc_info.value.kind == ErrorKind.PARENT_TIMELINE_NOT_FOUND


def test_parent_in_other_collection_is_not_found(db, tree):
    tree.collection("Acme")
    elsewhere = tree.timeline(tree.collection("Other"), "Root", 0, 100)

    with pytest.raises(TreeError) as exc_info:
        put_timeline(
            db,
            None,
            "Acme",
            "Acme",
            TimelineRequest(parent_id=elsewhere.timeline_id, from_year=0, to_year=1),
        )

    assert exc_info.value.kind == ErrorKind.PARENT_TIMELINE_NOT_FOUND


class TestOwnership:
    @pytest.fixture
    def owned(self, tree):
        owner = tree.user(ALICE, "Alice")
        return tree.collection("Alice", owner=owner)

    def test_other_user_is_unauthorized(self, db, owned):
        with pytest.raises(AuthorizationError):
            put_timeline(db, BOB, "Alice", "Alice", TimelineRequest(from_year=0, to_year=1))

        assert _timeline_count(db) == 0

    def test_anonymous_is_unauthorized(self, db, owned):
        with pytest.raises(TreeError) as exc_info:
            put_timeline(db, None, "Alice", "Alice", TimelineRequest(from_year=0, to_year=1))

        assert exc_info.value.kind == ErrorKind.UNAUTHORIZED_USER

    def test_owner_may_write(self, db, owned):
        timeline_id = put_timeline(
            db, ALICE, "Alice", "Alice", TimelineRequest(from_year=0, to_year=1)
        )

        assert storage.find_timeline(db, timeline_id) is not None


def test_anyone_may_write_to_sandbox(db, tree):
    tree.collection("Sandbox")

    anonymous_id = put_timeline(
        db, None, "Sandbox", "Sandbox", TimelineRequest(from_year=0, to_year=1)
    )
    identified_id = put_timeline(
        db, BOB, "Sandbox", "Sandbox", TimelineRequest(from_year=0, to_year=1)
    )

    assert anonymous_id != identified_id
    assert _timeline_count(db) == 2


class TestUpdate:
    def test_overwrites_fields(self, db, tree):
        collection = tree.collection("Acme")
        root = tree.timeline(collection, "Root", 0, 100)
        child = tree.timeline(collection, "Child", 10, 20, parent=root)

        put_timeline(
            db,
            None,
            "Acme",
            "Acme",
            TimelineRequest(
                id=child.timeline_id,
                title="Renamed",
                regime="Humanity",
                from_year=5,
                to_year=95,
            ),
        )

        db.expire_all()
        updated = storage.find_timeline(db, child.timeline_id)
        assert (updated.title, updated.regime) == ("Renamed", "Humanity")
        assert (updated.from_year, updated.to_year) == (5, 95)
        assert updated.parent_id == root.timeline_id

    def test_range_is_checked_against_stored_parent(self, db, tree):
        collection = tree.collection("Acme")
        root = tree.timeline(collection, "Root", 0, 100)
        child = tree.timeline(collection, "Child", 10, 20, parent=root)

        with pytest.raises(TreeError) as exc_info:
            put_timeline(
                db,
                None,
                "Acme",
                "Acme",
                TimelineRequest(id=child.timeline_id, from_year=10, to_year=200),
            )

        assert exc_info.value.kind == ErrorKind.TIMELINE_RANGE_INVALID

    def test_unknown_timeline(self, db, tree):
        tree.collection("Acme")

        with pytest.raises(TreeError) as exc_info:
            put_timeline(
                db, None, "Acme", "Acme", TimelineRequest(id=uuid4(), from_year=0, to_year=1)
            )

        assert exc_info.value.kind == ErrorKind.TIMELINE_NOT_FOUND

    def test_timeline_of_other_collection(self, db, tree):
        tree.collection("Acme")
        elsewhere = tree.timeline(tree.collection("Other"), "Root", 0, 100)

        with pytest.raises(TreeError) as exc_info:
            put_timeline(
                db,
                None,
                "Acme",
                "Acme",
                TimelineRequest(id=elsewhere.timeline_id, from_year=0, to_year=1),
            )

        assert exc_info.value.kind == ErrorKind.COLLECTION_ID_MISMATCH


class TestDelete:
    def test_removes_subtree(self, db, tree):
        collection = tree.collection("Acme")
        root = tree.timeline(collection, "Root", 0, 100)
        child = tree.timeline(collection, "Child", 10, 20, parent=root)
        tree.timeline(collection, "Grandchild", 12, 15, parent=child)

        delete_timeline(db, None, "Acme", "Acme", EntityReference(id=child.timeline_id))

        assert _timeline_count(db) == 1
        assert storage.find_timeline(db, root.timeline_id) is not None

    def test_requires_id(self, db, tree):
        tree.collection("Acme")

        with pytest.raises(TreeError) as exc_info:
            delete_timeline(db, None, "Acme", "Acme", EntityReference())

        assert exc_info.value.kind == ErrorKind.TIMELINE_NOT_FOUND

    def test_requires_body(self, db, tree):
        tree.collection("Acme")

        with pytest.raises(TreeError) as exc_info:
            delete_timeline(db, None, "Acme", "Acme", None)

        assert exc_info.value.kind == ErrorKind.REQUEST_BODY_EMPTY

    def test_timeline_of_other_collection(self, db, tree):
        tree.collection("Acme")
        elsewhere = tree.timeline(tree.collection("Other"), "Root", 0, 100)

        with pytest.raises(TreeError) as exc_info:
            delete_timeline(
                db, None, "Acme", "Acme", EntityReference(id=elsewhere.timeline_id)
            )

        assert exc_info.value.kind == ErrorKind.COLLECTION_ID_MISMATCH
        assert storage.find_timeline(db, elsewhere.timeline_id) is not None
