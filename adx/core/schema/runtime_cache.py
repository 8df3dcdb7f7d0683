from __future__ import annotations

from threading import Lock
from typing import Dict, Optional

from .models import SchemaRecord


class SchemaRuntimeCache:
    """In-memory schema records for the lifetime of the process.

    Many readers (every Attribute construction), one writer at a time.
    Absent names are never cached.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._store: Dict[str, SchemaRecord] = {}
        self.hits = 0
        self.misses = 0

    def get(self, name: str) -> Optional[SchemaRecord]:
        with self._lock:
            record = self._store.get(name)
            if record is None:
                self.misses += 1
                return None
            self.hits += 1
            return record

    def put(self, name: str, record: SchemaRecord) -> None:
        with self._lock:
            self._store[name] = record

    def discard(self, name: str) -> None:
        with self._lock:
            self._store.pop(name, None)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._store

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
