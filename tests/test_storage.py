"""Tests for storage backends."""

import pytest

from facepay.errors import PersistenceReadFailure, PersistenceWriteFailure
from facepay.storage import JsonFileStorage, MemoryStorage


class TestJsonFileStorage:
    """Test suite for JsonFileStorage."""

    @pytest.fixture
    def storage(self, tmp_path):
        return JsonFileStorage(tmp_path / "data")

    def test_missing_document(self, storage):
        assert storage.load("face-users") is None

    def test_save_creates_directory_and_loads(self, storage):
        storage.save("face-users", [{"walletAddress": "0x1", "descriptor": [0.5, -0.25]}])

        assert storage.path_for("face-users").exists()
        assert storage.load("face-users") == [{"walletAddress": "0x1", "descriptor": [0.5, -0.25]}]
        assert not storage.path_for("face-users").with_suffix(".json.tmp").exists()

    def test_corrupt_file_raises_read_failure(self, storage):
        storage.base_dir.mkdir(parents=True)
        storage.path_for("face-users").write_text("{oops", encoding="utf-8")

        with pytest.raises(PersistenceReadFailure):
            storage.load("face-users")

    def test_remove(self, storage):
        storage.save("payment-history", [])
        storage.remove("payment-history")
        assert storage.load("payment-history") is None
        # Removing twice is fine
        storage.remove("payment-history")

    def test_unserializable_raises_write_failure(self, storage):
        with pytest.raises(PersistenceWriteFailure):
            storage.save("face-users", [object()])


class TestMemoryStorage:
    """Test suite for MemoryStorage."""

    def test_documents_are_copied(self):
        storage = MemoryStorage()
        doc = [{"walletAddress": "0x1"}]
        storage.save("face-users", doc)
        doc.append("mutated")

        assert storage.load("face-users") == [{"walletAddress": "0x1"}]

    def test_initial_documents(self):
        storage = MemoryStorage({"face-users": []})
        assert storage.load("face-users") == []
        assert storage.load("payment-history") is None
