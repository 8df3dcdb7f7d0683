from __future__ import annotations

from pathlib import Path

import pytest

from adx.core.observability.metrics import reset_metrics
from adx.core.schema import SchemaStore
from fakes import RecordingOwner, standard_source


@pytest.fixture(autouse=True)
def _reset_metrics():
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture()
def schema_dir(tmp_path: Path) -> Path:
    return tmp_path / "schema"


@pytest.fixture()
def store(schema_dir: Path) -> SchemaStore:
    s = SchemaStore(schema_dir)
    s.build(standard_source())
    return s


@pytest.fixture()
def owner() -> RecordingOwner:
    return RecordingOwner()
