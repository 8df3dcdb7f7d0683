from __future__ import annotations

import json
import logging
import re
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from threading import RLock
from typing import Generator, Optional

from ..config import DEFAULT_PAGE_SIZE, SchemaConfig
from ..contracts import PagedTask, SchemaSource
from ..enums import Operation
from ..errors import ReferralLimitExceededError, SchemaBuildError
from ..observability.metrics import inc_build, inc_lookup, inc_records_written
from .models import ATTRIBUTE_PROPERTIES, CLASS_PROPERTIES, SchemaRecord, parse_schema_record
from .runtime_cache import SchemaRuntimeCache

try:
    import fcntl as _fcntl
    _HAS_FCNTL = True
except ImportError:
    _HAS_FCNTL = False
    logging.getLogger("adx.locking").warning(
        "fcntl not available (non-POSIX). Schema store file locking is disabled. "
        "Do not rebuild the schema while other processes read it on this platform."
    )

_log = logging.getLogger("adx.schema")

READY_MARKER = ".ready"
LOCK_FILE = ".build.lock"
RECORD_SUFFIX = ".json"

ATTRIBUTE_FILTER = "(objectclass=attributeschema)"
CLASS_FILTER = "(objectclass=classschema)"

_SAFE_NAME = re.compile(r"^[a-z0-9][a-z0-9_.;-]*$")


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _canonical(name: str) -> str:
    return (name or "").strip().lower()


def _atomic_write(path: Path, text: str) -> None:
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(text, encoding="utf-8")
    tmp.replace(path)


@contextmanager
def _locked_file(path: Path, mode: str, *, exclusive: bool) -> Generator:
    """Open path and hold a flock on it (POSIX only). No-op on Windows."""
    with open(path, mode, encoding="utf-8") as fh:
        if _HAS_FCNTL:
            _fcntl.flock(fh, _fcntl.LOCK_EX if exclusive else _fcntl.LOCK_SH)
        try:
            yield fh
        finally:
            if _HAS_FCNTL:
                _fcntl.flock(fh, _fcntl.LOCK_UN)


class SchemaStore:
    """File-backed schema store with a runtime cache in front of it.

    Path: <schema_dir>/<lower-cased name>.json, one document per attribute
    or class definition, plus <schema_dir>/.ready once a build completed.

    flush() and build() leave records already held by the runtime cache in
    place for the lifetime of the process; call invalidate() to drop them.
    """

    def __init__(
        self,
        schema_dir: Path,
        *,
        runtime_cache: Optional[SchemaRuntimeCache] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self.schema_dir = Path(schema_dir)
        self.runtime_cache = runtime_cache if runtime_cache is not None else SchemaRuntimeCache()
        self.page_size = page_size
        self._build_lock = RLock()
        self._building = False

    @classmethod
    def from_config(cls, config: SchemaConfig, *, runtime_cache: Optional[SchemaRuntimeCache] = None) -> "SchemaStore":
        return cls(config.schema_dir, runtime_cache=runtime_cache, page_size=config.page_size)

    def _record_path(self, name: str) -> Path:
        return self.schema_dir / f"{name}{RECORD_SUFFIX}"

    def _marker_path(self) -> Path:
        return self.schema_dir / READY_MARKER

    def _lock_path(self) -> Path:
        return self.schema_dir / LOCK_FILE

    def is_ready(self) -> bool:
        return self._marker_path().exists()

    def ready_since(self) -> Optional[str]:
        """Timestamp written by the last completed build, if any."""
        p = self._marker_path()
        if not p.exists():
            return None
        return p.read_text(encoding="utf-8").strip() or None

    def flush(self) -> None:
        """Delete every persisted record. The readiness marker is managed by build()."""
        if not self.schema_dir.exists():
            return
        with self._build_lock, _locked_file(self._lock_path(), "a", exclusive=True):
            self._flush_records()

    def _flush_records(self) -> None:
        removed = 0
        for p in self.schema_dir.glob(f"*{RECORD_SUFFIX}"):
            p.unlink(missing_ok=True)
            removed += 1
        for p in self.schema_dir.glob("*.tmp"):
            p.unlink(missing_ok=True)
        _log.debug("Flushed %d schema records from %s", removed, self.schema_dir)

    def build(self, source: SchemaSource) -> int:
        """
        Rebuild the store from the directory schema.

        Attribute definitions are fetched first, class definitions second,
        one page at a time. The readiness marker is written only after both
        retrievals completed; a failed build leaves the records it already
        wrote on disk and the store not ready.

        Returns the number of records written.
        """
        existed = self.schema_dir.exists()
        self.schema_dir.mkdir(mode=0o755, parents=True, exist_ok=True)

        with self._build_lock, _locked_file(self._lock_path(), "a", exclusive=True):
            self._building = True
            try:
                written = self._build_locked(source, existed=existed)
            except SchemaBuildError:
                inc_build("failed")
                _log.error("Schema build into %s failed; store is not ready", self.schema_dir)
                raise
            except Exception:
                inc_build("failed")
                _log.exception("Schema build into %s failed unexpectedly", self.schema_dir)
                raise
            finally:
                self._building = False

        inc_build("succeeded")
        _log.info("Schema build complete: %d records in %s", written, self.schema_dir)
        return written

    def _build_locked(self, source: SchemaSource, *, existed: bool) -> int:
        self._marker_path().unlink(missing_ok=True)
        if existed:
            self._flush_records()

        base = source.schema_naming_context()
        _log.info("Building schema store from %s (page_size=%d)", base, self.page_size)

        tasks = [
            (ATTRIBUTE_FILTER, ATTRIBUTE_PROPERTIES),
            (CLASS_FILTER, CLASS_PROPERTIES),
        ]

        written = 0
        for filter_expr, attributes in tasks:
            task = source.paged_task(
                operation=Operation.LIST,
                base=base,
                filter=filter_expr,
                attributes=list(attributes),
                page_size=self.page_size,
            )
            written += self._drain(task, base=base, filter_expr=filter_expr)

        _atomic_write(self._marker_path(), _utc_now_iso())
        return written

    def _drain(self, task: PagedTask, *, base: str, filter_expr: str) -> int:
        # Page by page; the whole result set never sits in memory
        pages = 0
        written = 0
        while True:
            objects = task.run()
            if not objects:
                raise ReferralLimitExceededError(base=base, filter=filter_expr, pages_read=pages)
            pages += 1

            page_written = 0
            for obj in objects:
                name = _canonical(obj.display_name())
                if not _SAFE_NAME.match(name):
                    _log.warning("Skipping schema object with unusable display name %r", obj.display_name())
                    continue
                _atomic_write(
                    self._record_path(name),
                    json.dumps({str(k).lower(): v for k, v in obj.to_dict().items()}, indent=2, sort_keys=True, default=str),
                )
                page_written += 1
            written += page_written
            inc_records_written(page_written)
            _log.debug("%s: page %d, %d objects", filter_expr, pages, len(objects))

            if task.complete:
                return written

    def get(self, name: str) -> Optional[SchemaRecord]:
        """
        Return the schema record for name, or None when it is not cached.
        A miss is not remembered: a later build can still provide the record.
        """
        key = _canonical(name)

        record = self.runtime_cache.get(key)
        if record is not None:
            inc_lookup("hit")
            return record

        if not _SAFE_NAME.match(key):
            inc_lookup("absent")
            return None

        data = self._read_record(key)
        if data is None:
            inc_lookup("absent")
            return None

        record = parse_schema_record(data)
        self.runtime_cache.put(key, record)
        inc_lookup("miss")
        return record

    def _read_record(self, key: str) -> Optional[dict]:
        p = self._record_path(key)
        with self._build_lock:
            if not p.exists():
                return None
            lock = self._lock_path()
            if self._building or not lock.exists():
                return json.loads(p.read_text(encoding="utf-8"))
            with _locked_file(lock, "r", exclusive=False):
                if not p.exists():
                    return None
                return json.loads(p.read_text(encoding="utf-8"))

    def invalidate(self, name: Optional[str] = None) -> None:
        """Drop one name (or everything) from the runtime cache."""
        if name is None:
            self.runtime_cache.clear()
            return
        self.runtime_cache.discard(_canonical(name))
