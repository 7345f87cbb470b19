# tests/test_registry.py
"""Tests for the registry primitives: sequence, stores and access."""

import pytest

from contentledger.errors import DuplicateId, NotFound
from contentledger.registry import (
    AccessController,
    ContentRecord,
    ContentStore,
    LedgerHeight,
    PermissionStore,
    SequenceAllocator,
)


def make_record(content_id: int = 1, owner: str = "alice") -> ContentRecord:
    return ContentRecord(
        id=content_id,
        title="Report",
        owner=owner,
        size_bytes=100,
        registered_at=0,
        summary="Q1 report",
        labels=("finance",),
    )


@pytest.fixture
def store():
    return ContentStore()


@pytest.fixture
def permissions():
    return PermissionStore()


class TestSequenceAllocator:
    """Tests for id allocation."""

    def test_starts_at_zero(self):
        seq = SequenceAllocator()
        assert seq.current == 0
        assert seq.next_id() == 1

    def test_next_id_does_not_advance(self):
        """Peeking twice yields the same id until commit."""
        seq = SequenceAllocator()
        assert seq.next_id() == seq.next_id() == 1
        assert seq.current == 0

    def test_commit_advances(self):
        seq = SequenceAllocator()
        seq.commit(seq.next_id())
        seq.commit(seq.next_id())
        assert seq.current == 2
        assert seq.next_id() == 3

    def test_commit_out_of_order_rejected(self):
        seq = SequenceAllocator()
        with pytest.raises(ValueError):
            seq.commit(5)

    def test_rollback(self):
        seq = SequenceAllocator(3)
        seq.commit(4)
        seq.rollback(4)
        assert seq.current == 3

    def test_negative_start_rejected(self):
        with pytest.raises(ValueError):
            SequenceAllocator(-1)


class TestLedgerHeight:
    """Tests for the default height source."""

    def test_callable_returns_height(self):
        height = LedgerHeight(7)
        assert height() == 7

    def test_advance(self):
        height = LedgerHeight()
        assert height.advance() == 1
        assert height() == 1


class TestContentStore:
    """Tests for ContentStore."""

    def test_insert_and_get(self, store):
        record = make_record()
        store.insert(1, record)

        assert store.exists(1)
        assert 1 in store
        assert store.get(1) == record
        assert len(store) == 1

    def test_get_missing_raises(self, store):
        with pytest.raises(NotFound):
            store.get(42)

    def test_duplicate_insert_raises(self, store):
        store.insert(1, make_record())
        with pytest.raises(DuplicateId):
            store.insert(1, make_record(owner="bob"))
        assert store.get(1).owner == "alice"

    def test_set_owner_changes_only_owner(self, store):
        store.insert(1, make_record())
        previous = store.set_owner(1, "bob")

        updated = store.get(1)
        assert previous.owner == "alice"
        assert updated.owner == "bob"
        assert updated.title == previous.title
        assert updated.labels == previous.labels
        assert updated.registered_at == previous.registered_at

    def test_set_owner_missing_raises(self, store):
        with pytest.raises(NotFound):
            store.set_owner(1, "bob")

    def test_remove(self, store):
        store.insert(1, make_record())
        store.remove(1)
        assert not store.exists(1)
        with pytest.raises(NotFound):
            store.remove(1)

    def test_list_sorted_by_id(self, store):
        store.insert(3, make_record(3))
        store.insert(1, make_record(1))
        assert [r.id for r in store.list()] == [1, 3]
        assert [r.id for r in store] == [1, 3]

    def test_record_serialization(self):
        record = make_record()
        restored = ContentRecord.from_dict(record.to_dict())
        assert restored == record
        assert isinstance(restored.labels, tuple)


class TestPermissionStore:
    """Tests for PermissionStore."""

    def test_absent_grant_is_false(self, permissions):
        assert permissions.has_explicit_grant(1, "alice") is False

    def test_grant_is_idempotent(self, permissions):
        permissions.grant_read(1, "alice")
        permissions.grant_read(1, "alice")
        assert permissions.has_explicit_grant(1, "alice") is True
        assert len(permissions) == 1

    def test_grants_are_per_content_and_principal(self, permissions):
        permissions.grant_read(1, "alice")
        assert not permissions.has_explicit_grant(2, "alice")
        assert not permissions.has_explicit_grant(1, "bob")

    def test_list(self, permissions):
        permissions.grant_read(2, "bob")
        permissions.grant_read(1, "alice")
        assert permissions.list() == [(1, "alice"), (2, "bob")]


class TestAccessController:
    """Tests for effective access evaluation."""

    def test_owner_can_read_without_grant(self, permissions):
        access = AccessController(permissions)
        assert access.can_read(make_record(owner="alice"), "alice")

    def test_explicit_grant_can_read(self, permissions):
        access = AccessController(permissions)
        permissions.grant_read(1, "carol")
        assert access.can_read(make_record(), "carol")

    def test_stranger_cannot_read(self, permissions):
        access = AccessController(permissions)
        assert not access.can_read(make_record(), "mallory")

    def test_does_not_mutate(self, permissions):
        access = AccessController(permissions)
        access.can_read(make_record(), "mallory")
        assert len(permissions) == 0
