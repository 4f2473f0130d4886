"""In-memory library of generated study material.

Process-local and not durable: entries disappear on restart.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from uuid import uuid4

from app.services.response_contract import GeneratedContent

_MAX_ENTRIES = 100


@dataclass(frozen=True)
class LibraryEntry:
    id: str
    date: str
    content: GeneratedContent
    created_at: datetime = field(compare=False)


def export_filename(title: str) -> str:
    """Filesystem-friendly JSON filename derived from a title."""

    stem = re.sub(r"[^a-z0-9]", "_", title, flags=re.IGNORECASE).lower()
    return f"{stem or 'study_notes'}.json"


class LibraryStore:
    """Keeps the most recent generated results, newest first."""

    def __init__(self, max_entries: int = _MAX_ENTRIES) -> None:
        self._max_entries = max_entries
        self._entries: dict[str, LibraryEntry] = {}
        self._lock = Lock()

    def save(self, content: GeneratedContent) -> LibraryEntry:
        """Stamp the content with an id and display date and store it."""

        now = datetime.now(timezone.utc)
        entry = LibraryEntry(
            id=uuid4().hex,
            date=now.strftime("%b %d, %Y"),
            content=content,
            created_at=now,
        )
        with self._lock:
            self._entries[entry.id] = entry
            overflow = len(self._entries) - self._max_entries
            if overflow > 0:
                for stale_id in list(self._entries)[:overflow]:
                    del self._entries[stale_id]
        return entry

    def list(self) -> list[LibraryEntry]:
        with self._lock:
            return list(reversed(self._entries.values()))

    def get(self, entry_id: str) -> LibraryEntry | None:
        with self._lock:
            return self._entries.get(entry_id)

    def delete(self, entry_id: str) -> bool:
        with self._lock:
            return self._entries.pop(entry_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


_DEFAULT_STORE = LibraryStore()


def get_library_store() -> LibraryStore:
    """Return the process-wide library store."""

    return _DEFAULT_STORE


__all__ = ["LibraryEntry", "LibraryStore", "export_filename", "get_library_store"]
