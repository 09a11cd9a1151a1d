"""
backend/features/usage/service.py

Local usage store.

Handles:
- The registered identity document
- The feature -> count usage document
- Monotonic usage increments (+1 per successful generation, never down)

Both documents are read and written whole; there are no partial updates at
the storage layer. Two backends share the same semantics: JSON files in a
per-session directory, or plain dicts in memory.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from backend.models.lead import Identity
from backend.models.usage import UsageRecord

logger = logging.getLogger("codeprompt.usage")

USER_DATA_KEY = "user_data"
USAGE_DATA_KEY = "usage_data"


class DocumentStore(Protocol):
    def read(self, key: str) -> Optional[Dict[str, Any]]: ...

    def write(self, key: str, document: Dict[str, Any]) -> None: ...


class MemoryDocumentStore:
    def __init__(self):
        self._documents: Dict[str, str] = {}

    def read(self, key: str) -> Optional[Dict[str, Any]]:
        raw = self._documents.get(key)
        return json.loads(raw) if raw is not None else None

    def write(self, key: str, document: Dict[str, Any]) -> None:
        # Serialized so callers never share a mutable dict with the store
        self._documents[key] = json.dumps(document)


class FileDocumentStore:
    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[Dict[str, Any]]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("[usage] unreadable document, treating as empty", extra={"path": str(path)})
            return None

    def write(self, key: str, document: Dict[str, Any]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, ensure_ascii=False)
            os.replace(tmp_name, self._path(key))
        except Exception:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise


class LocalUsageStore:
    """Identity + usage counters for one client session."""

    def __init__(self, documents: Optional[DocumentStore] = None):
        self.documents = documents or MemoryDocumentStore()

    def get_identity(self) -> Optional[Identity]:
        data = self.documents.read(USER_DATA_KEY)
        return Identity(**data) if data else None

    def save_identity(self, identity: Identity) -> None:
        self.documents.write(USER_DATA_KEY, identity.model_dump())

    def get_usage(self) -> UsageRecord:
        data = self.documents.read(USAGE_DATA_KEY) or {}
        return UsageRecord(counts={str(k): int(v) for k, v in data.items()})

    def get_usage_count(self, feature: str) -> int:
        return self.get_usage().count(feature)

    def increment_usage_count(self, feature: str) -> int:
        """Add exactly one use for `feature` and return the new count."""
        usage = self.get_usage()
        counts = dict(usage.counts)
        counts[feature] = counts.get(feature, 0) + 1
        self.documents.write(USAGE_DATA_KEY, counts)
        return counts[feature]

    def has_reached_limit(self, feature: str, free_uses: int = 1) -> bool:
        return self.get_usage_count(feature) >= free_uses


def build_local_store(base_dir: Optional[str], session_id: str) -> LocalUsageStore:
    """File-backed store under `base_dir/<session_id>`, or in-memory when unset."""
    if not base_dir:
        return LocalUsageStore(MemoryDocumentStore())
    return LocalUsageStore(FileDocumentStore(Path(base_dir) / session_id))
