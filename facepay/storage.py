"""Storage backends for persisting named JSON documents."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from facepay.config import DATA_DIR
from facepay.errors import PersistenceReadFailure, PersistenceWriteFailure

logger = logging.getLogger(__name__)


class Storage:
    """Load, save and remove JSON-serializable documents by name."""

    def load(self, name: str) -> Optional[Any]:
        """
        Load a document.

        Returns:
            The decoded document, or None if it was never saved

        Raises:
            PersistenceReadFailure: if the document exists but cannot be decoded
        """
        raise NotImplementedError

    def save(self, name: str, document: Any) -> None:
        raise NotImplementedError

    def remove(self, name: str) -> None:
        raise NotImplementedError


class JsonFileStorage(Storage):
    """Stores each document as ``<name>.json`` inside a directory."""

    def __init__(self, base_dir: Optional[Path] = None):
        if base_dir is None:
            base_dir = DATA_DIR
        self.base_dir = Path(base_dir)

    def path_for(self, name: str) -> Path:
        return self.base_dir / f"{name}.json"

    def load(self, name):
        path = self.path_for(name)
        if not path.exists():
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceReadFailure(f"Error loading {path}: {e}") from e

    def save(self, name, document):
        # Ensure directory exists
        self.base_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(name)
        tmp_path = path.with_suffix(".json.tmp")

        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            tmp_path.replace(path)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceWriteFailure(f"Error saving {path}: {e}") from e

    def remove(self, name):
        path = self.path_for(name)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise PersistenceWriteFailure(f"Error removing {path}: {e}") from e


class MemoryStorage(Storage):
    """In-memory storage, used by tests and throwaway sessions."""

    def __init__(self, documents: Optional[Dict[str, Any]] = None):
        self.documents: Dict[str, str] = {}
        for name, document in (documents or {}).items():
            self.save(name, document)

    def load(self, name):
        if name not in self.documents:
            return None
        try:
            return json.loads(self.documents[name])
        except ValueError as e:
            raise PersistenceReadFailure(f"Error loading {name}: {e}") from e

    def save(self, name, document):
        try:
            self.documents[name] = json.dumps(document)
        except (TypeError, ValueError) as e:
            raise PersistenceWriteFailure(f"Error saving {name}: {e}") from e

    def remove(self, name):
        self.documents.pop(name, None)
