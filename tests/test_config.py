from __future__ import annotations

import json
from pathlib import Path

from adx.core.config import DEFAULT_PAGE_SIZE, load_schema_config
from adx.core.schema import SchemaStore


def _clear_env(monkeypatch):
    for key in ("ADX_CONFIG_FILE", "ADX_SCHEMA_DIR", "ADX_SCHEMA_PAGE_SIZE"):
        monkeypatch.delenv(key, raising=False)


def test_defaults(monkeypatch):
    _clear_env(monkeypatch)
    cfg = load_schema_config()
    assert cfg.page_size == DEFAULT_PAGE_SIZE == 500
    assert cfg.schema_dir == Path.home() / ".adx" / "schema"


def test_yaml_file(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    f = tmp_path / "adx.yaml"
    f.write_text(f"schema_dir: {tmp_path / 'cache'}\npage_size: 100\n", encoding="utf-8")
    cfg = load_schema_config(f)
    assert cfg.schema_dir == tmp_path / "cache"
    assert cfg.page_size == 100


def test_json_file_from_env_var(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    f = tmp_path / "adx.json"
    f.write_text(json.dumps({"schema_dir": str(tmp_path / "j"), "page_size": 42}), encoding="utf-8")
    monkeypatch.setenv("ADX_CONFIG_FILE", str(f))
    cfg = load_schema_config()
    assert cfg.schema_dir == tmp_path / "j"
    assert cfg.page_size == 42


def test_env_overrides_file(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    f = tmp_path / "adx.yaml"
    f.write_text("page_size: 100\n", encoding="utf-8")
    monkeypatch.setenv("ADX_SCHEMA_DIR", str(tmp_path / "env"))
    monkeypatch.setenv("ADX_SCHEMA_PAGE_SIZE", "25")
    cfg = load_schema_config(f)
    assert cfg.schema_dir == tmp_path / "env"
    assert cfg.page_size == 25


def test_invalid_page_size_falls_back(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("ADX_SCHEMA_PAGE_SIZE", "-3")
    assert load_schema_config().page_size == DEFAULT_PAGE_SIZE


def test_malformed_or_non_mapping_file_is_ignored(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    bad = tmp_path / "bad.yaml"
    bad.write_text("this: is: not: valid: yaml:\n  {{{{", encoding="utf-8")
    assert load_schema_config(bad).page_size == DEFAULT_PAGE_SIZE

    listing = tmp_path / "list.json"
    listing.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    assert load_schema_config(listing).page_size == DEFAULT_PAGE_SIZE


def test_missing_file_is_ignored(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    assert load_schema_config(tmp_path / "nope.yaml").page_size == DEFAULT_PAGE_SIZE


def test_store_from_config(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("ADX_SCHEMA_DIR", str(tmp_path / "s"))
    monkeypatch.setenv("ADX_SCHEMA_PAGE_SIZE", "10")
    store = SchemaStore.from_config(load_schema_config())
    assert store.schema_dir == tmp_path / "s"
    assert store.page_size == 10
    assert store.is_ready() is False
