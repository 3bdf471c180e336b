"""Tests for the descriptor store."""

import numpy as np
import pytest

from facepay.db import DescriptorStore
from facepay.errors import (
    DescriptorMismatch,
    DuplicateFace,
    DuplicateIdentity,
    InvalidDescriptor,
    PersistenceWriteFailure,
    WalletUnavailable,
)
from facepay.storage import MemoryStorage

from conftest import WALLET_A, WALLET_B, WALLET_C, at_distance, make_descriptor


class FailingStorage(MemoryStorage):
    """Storage whose saves fail after the first `allowed` calls."""

    def __init__(self, allowed=0):
        super().__init__()
        self.allowed = allowed

    def save(self, name, document):
        if self.allowed <= 0:
            raise PersistenceWriteFailure("disk full")
        self.allowed -= 1
        super().save(name, document)


class TestEnroll:
    """Test suite for DescriptorStore.enroll."""

    def test_enroll_appends_and_persists(self, store, storage):
        record = store.enroll(WALLET_A, make_descriptor(1), {"linkedin": "https://linkedin.com/in/a"})

        assert record.identifier == WALLET_A
        assert len(store) == 1
        saved = storage.load("face-users")
        assert saved[0]["walletAddress"] == WALLET_A
        assert saved[0]["linkedin"] == "https://linkedin.com/in/a"
        assert "instagram" not in saved[0]
        assert len(saved[0]["descriptor"]) == 128

    def test_duplicate_face_at_half_distance(self, store):
        """Enrolling B at distance 0.5 from A fails naming A."""
        va = make_descriptor(1)
        store.enroll(WALLET_A, va)

        with pytest.raises(DuplicateFace) as exc_info:
            store.enroll(WALLET_B, at_distance(va, 0.5))

        assert exc_info.value.existing_identifier == WALLET_A
        assert exc_info.value.distance == pytest.approx(0.5)
        assert len(store) == 1

    @pytest.mark.parametrize("distance", [0.0, 0.1, 0.45, 0.59])
    def test_any_distance_below_threshold_is_duplicate(self, store, distance):
        va = make_descriptor(2)
        store.enroll(WALLET_A, va)

        with pytest.raises(DuplicateFace):
            store.enroll(WALLET_B, at_distance(va, distance))

    def test_threshold_distance_is_not_duplicate(self, store):
        va = make_descriptor(3)
        store.enroll(WALLET_A, va)

        store.enroll(WALLET_B, at_distance(va, 0.6))
        assert [r.identifier for r in store.records] == [WALLET_A, WALLET_B]

    def test_distinct_faces_enroll(self, store):
        store.enroll(WALLET_A, make_descriptor(1))
        store.enroll(WALLET_B, make_descriptor(2))
        store.enroll(WALLET_C, make_descriptor(3))
        assert len(store) == 3

    def test_same_wallet_twice_rejected(self, store):
        store.enroll(WALLET_A, make_descriptor(1))
        with pytest.raises(DuplicateIdentity):
            store.enroll(WALLET_A, make_descriptor(2))
        assert len(store) == 1

    def test_empty_identifier_rejected(self, store):
        with pytest.raises(WalletUnavailable):
            store.enroll("", make_descriptor(1))
        with pytest.raises(WalletUnavailable):
            store.enroll("   ", make_descriptor(1))

    def test_descriptor_length_mismatch(self, store):
        store.enroll(WALLET_A, make_descriptor(1))
        with pytest.raises(DescriptorMismatch):
            store.enroll(WALLET_B, make_descriptor(2, size=64))

    def test_failed_save_leaves_store_unchanged(self):
        store = DescriptorStore(FailingStorage(allowed=1))
        store.enroll(WALLET_A, make_descriptor(1))

        with pytest.raises(PersistenceWriteFailure):
            store.enroll(WALLET_B, make_descriptor(2))

        assert [r.identifier for r in store.records] == [WALLET_A]

    def test_records_are_read_only(self, store):
        record = store.enroll(WALLET_A, make_descriptor(1))
        with pytest.raises(ValueError):
            record.descriptor[0] = 1.0
        assert isinstance(store.records, tuple)

    def test_unknown_profile_platforms_dropped(self, store):
        record = store.enroll(WALLET_A, make_descriptor(1),
                              {"instagram": "https://instagram.com/a", "myspace": "x", "linkedin": ""})
        assert record.profile == {"instagram": "https://instagram.com/a"}

    def test_profile_cannot_be_changed_through_store(self, store):
        links = {"linkedin": "https://linkedin.com/in/a"}
        store.enroll(WALLET_A, make_descriptor(1), links)
        links["linkedin"] = "https://linkedin.com/in/changed"

        record = store.get(WALLET_A)
        assert record.link("linkedin") == "https://linkedin.com/in/a"
        with pytest.raises(TypeError):
            record.profile["instagram"] = "https://instagram.com/x"
        assert record.link("instagram") == ""

    @pytest.mark.parametrize("value", [np.nan, np.inf, -np.inf])
    def test_non_finite_descriptor_rejected(self, store, storage, value):
        va = make_descriptor(1)
        store.enroll(WALLET_A, va)
        bad = make_descriptor(2)
        bad[3] = value

        with pytest.raises(InvalidDescriptor):
            store.enroll(WALLET_B, bad)

        assert [r.identifier for r in store.records] == [WALLET_A]
        reloaded = DescriptorStore(storage).load()
        assert [r.identifier for r in reloaded] == [WALLET_A]

    def test_empty_descriptor_rejected(self, store):
        with pytest.raises(InvalidDescriptor):
            store.enroll(WALLET_A, [])

        assert len(store) == 0
        assert store.descriptor_size is None
        store.enroll(WALLET_B, make_descriptor(1))
        assert store.descriptor_size == 128

    def test_non_finite_duplicate_check_rejected(self, store):
        store.enroll(WALLET_A, make_descriptor(1))
        with pytest.raises(InvalidDescriptor):
            store.find_duplicate(np.full(128, np.nan))


class TestLoadAndClear:
    """Test suite for persistence round-trips and tolerant loading."""

    def test_round_trip(self, storage):
        store = DescriptorStore(storage)
        va, vb = make_descriptor(1), make_descriptor(2)
        store.enroll(WALLET_A, va, {"linkedin": "https://linkedin.com/in/a"})
        store.enroll(WALLET_B, vb, {"instagram": "https://instagram.com/b"})

        reloaded = DescriptorStore(storage)
        records = reloaded.load()

        assert [r.identifier for r in records] == [WALLET_A, WALLET_B]
        np.testing.assert_array_equal(records[0].descriptor, va)
        np.testing.assert_array_equal(records[1].descriptor, vb)
        assert records[0].link("linkedin") == "https://linkedin.com/in/a"
        assert records[0].link("instagram") == ""
        assert records[1].link("instagram") == "https://instagram.com/b"

    def test_clear_all_then_load_is_empty(self, storage):
        store = DescriptorStore(storage)
        store.enroll(WALLET_A, make_descriptor(1))
        store.clear_all()

        assert len(store) == 0
        assert storage.load("face-users") is None
        assert DescriptorStore(storage).load() == []

    def test_missing_document_is_empty(self, store):
        assert store.load() == []

    def test_corrupt_document_is_empty(self):
        storage = MemoryStorage()
        storage.documents["face-users"] = "{not json"
        assert DescriptorStore(storage).load() == []

    def test_wrong_shape_document_is_empty(self):
        storage = MemoryStorage({"face-users": {"walletAddress": WALLET_A}})
        assert DescriptorStore(storage).load() == []

    def test_bad_entries_skipped(self):
        good = {"walletAddress": WALLET_A, "descriptor": list(make_descriptor(1))}
        storage = MemoryStorage({"face-users": [
            good,
            {"walletAddress": WALLET_B},
            {"walletAddress": WALLET_C, "descriptor": ["x"] * 128},
            {"walletAddress": WALLET_B, "descriptor": [0.1] * 64},
            {"walletAddress": WALLET_C, "descriptor": [float("nan")] * 128},
            {"walletAddress": WALLET_C, "descriptor": []},
            dict(good),
            "garbage",
        ]})

        records = DescriptorStore(storage).load()
        assert [r.identifier for r in records] == [WALLET_A]

    def test_empty_socials_read_back_as_empty(self):
        storage = MemoryStorage({"face-users": [
            {"walletAddress": WALLET_A, "descriptor": [0.0] * 128, "linkedin": "", "instagram": ""},
        ]})
        record = DescriptorStore(storage).load()[0]
        assert record.profile == {}
        assert record.link("linkedin") == ""
