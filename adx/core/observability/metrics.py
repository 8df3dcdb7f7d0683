from __future__ import annotations

from collections import Counter
from typing import Dict

from prometheus_client import Counter as PromCounter

# Named counters (in-process snapshot)
_NAMED = Counter()

_PROM_LOOKUPS = PromCounter(
    "adx_schema_lookups_total",
    "Schema lookups by result",
    ["result"],
)

_PROM_RECORDS_WRITTEN = PromCounter(
    "adx_schema_records_written_total",
    "Schema records persisted by build",
)

_PROM_BUILDS = PromCounter(
    "adx_schema_builds_total",
    "Schema builds by outcome",
    ["outcome"],
)


def reset_metrics() -> None:
    """
    Test helper: clears the in-process counters to avoid cross-test leakage.
    Prometheus counters are monotonic and are left alone.
    """
    _NAMED.clear()


def inc_lookup(result: str) -> None:
    """result is one of: hit (runtime cache), miss (read from disk), absent."""
    _NAMED[f"schema_lookup_{result}"] += 1
    _PROM_LOOKUPS.labels(result=result).inc()


def inc_records_written(value: int = 1) -> None:
    _NAMED["schema_records_written"] += int(value)
    _PROM_RECORDS_WRITTEN.inc(value)


def inc_build(outcome: str) -> None:
    _NAMED[f"schema_build_{outcome}"] += 1
    _PROM_BUILDS.labels(outcome=outcome).inc()


def snapshot_named() -> Dict[str, int]:
    return dict(_NAMED)
