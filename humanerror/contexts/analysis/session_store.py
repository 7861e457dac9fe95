"""
Session stores for precomputed resolutions.

The analysis step can resolve a job title ahead of time and park the result
under a session key; the result step consumes it exactly once. Two stores:

- InMemorySessionStore: process-local dict
- JsonFileSessionStore: one JSON document on disk mapping session ids to entries

Temporary solution until the surrounding app provides its own key-value store.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional


class SessionStoreError(Exception):
    """Raised when a session store cannot be read or written."""


class SessionStore(ABC):
    """Minimal key-value interface the engine needs."""

    @abstractmethod
    def get(self, session_id: str) -> Optional[Dict[str, Any]]:
        """Return the stored entry, or None."""

    @abstractmethod
    def put(self, session_id: str, entry: Dict[str, Any]) -> None:
        """Store an entry, replacing any previous one."""

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """Remove an entry. Returns True if something was removed."""

    def pop(self, session_id: str) -> Optional[Dict[str, Any]]:
        """Return and remove an entry in one step."""
        entry = self.get(session_id)
        if entry is not None:
            self.delete(session_id)
        return entry


class InMemorySessionStore(SessionStore):
    """Session store backed by a dict."""

    def __init__(self):
        self._entries: Dict[str, Dict[str, Any]] = {}

    def get(self, session_id: str) -> Optional[Dict[str, Any]]:
        return self._entries.get(session_id)

    def put(self, session_id: str, entry: Dict[str, Any]) -> None:
        self._entries[session_id] = entry

    def delete(self, session_id: str) -> bool:
        return self._entries.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._entries)


class JsonFileSessionStore(SessionStore):
    """
    Session store kept in a single JSON file.

    The file is rewritten on every change. Entries are read fresh on every call,
    so separate processes sharing the file see each other's writes.

    Args:
        path: JSON file location (created on first write)
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SessionStoreError(f"Could not read session store {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise SessionStoreError(f"Session store {self.path} does not hold a JSON object")
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        tmp_path.replace(self.path)

    def get(self, session_id: str) -> Optional[Dict[str, Any]]:
        return self._read().get(session_id)

    def put(self, session_id: str, entry: Dict[str, Any]) -> None:
        data = self._read()
        data[session_id] = entry
        self._write(data)

    def delete(self, session_id: str) -> bool:
        data = self._read()
        if session_id not in data:
            return False
        del data[session_id]
        self._write(data)
        return True
