"""Tests for rubydb.config — env expansion, validation, load_config."""

import logging

import pytest
from pydantic import ValidationError

from rubydb.config import (
    AppConfig,
    LoggingConfig,
    StoreConfig,
    _expand_env,
    _walk_expand,
    load_config,
    open_store,
    setup_logging,
)


# --- _expand_env ---

class TestExpandEnv:
    def test_simple_var(self, monkeypatch):
        monkeypatch.setenv("FOO", "bar")
        assert _expand_env("${FOO}") == "bar"

    def test_missing_var_returns_empty(self, monkeypatch):
        monkeypatch.delenv("NONEXISTENT", raising=False)
        assert _expand_env("${NONEXISTENT}") == ""

    def test_mixed_content(self, monkeypatch):
        monkeypatch.setenv("KEY", "data")
        assert _expand_env("./${KEY}/db.json") == "./data/db.json"

    def test_no_vars(self):
        assert _expand_env("plain text") == "plain text"


# --- _walk_expand ---

class TestWalkExpand:
    def test_nested_dict(self, monkeypatch):
        monkeypatch.setenv("X", "val")
        assert _walk_expand({"a": {"b": "${X}"}}) == {"a": {"b": "val"}}

    def test_list(self, monkeypatch):
        monkeypatch.setenv("Y", "item")
        assert _walk_expand(["${Y}", "static"]) == ["item", "static"]

    def test_non_string_passthrough(self):
        assert _walk_expand(42) == 42
        assert _walk_expand(True) is True
        assert _walk_expand(None) is None


# --- Pydantic model validation ---

class TestStoreConfig:
    def test_defaults(self):
        cfg = StoreConfig()
        assert cfg.path == "./data/rubydb.json"
        assert cfg.prettify is False
        assert cfg.seed_default is True
        assert cfg.atomic is True

    def test_empty_path_rejected(self):
        with pytest.raises(ValidationError, match="path"):
            StoreConfig(path="   ")


class TestLoggingConfig:
    def test_default(self):
        assert LoggingConfig().level == "INFO"

    def test_uppercased(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_invalid_level(self):
        with pytest.raises(ValidationError, match="logging level"):
            LoggingConfig(level="LOUD")


# --- load_config ---

class TestLoadConfig:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.yaml"))

    def test_empty_file_gives_defaults(self, tmp_path):
        p = tmp_path / "config.yaml"
        p.write_text("")
        assert load_config(str(p)) == AppConfig()

    def test_full_file_with_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DB_DIR", str(tmp_path))
        p = tmp_path / "config.yaml"
        p.write_text(
            "store:\n"
            "  path: \"${DB_DIR}/app.json\"\n"
            "  prettify: true\n"
            "  atomic: false\n"
            "logging:\n"
            "  level: warning\n"
        )
        cfg = load_config(str(p))
        assert cfg.store.path == f"{tmp_path}/app.json"
        assert cfg.store.prettify is True
        assert cfg.store.atomic is False
        assert cfg.logging.level == "WARNING"

    def test_unset_env_path_rejected(self, tmp_path, monkeypatch):
        monkeypatch.delenv("UNSET_DB_PATH", raising=False)
        p = tmp_path / "config.yaml"
        p.write_text("store:\n  path: \"${UNSET_DB_PATH}\"\n")
        with pytest.raises(ValidationError):
            load_config(str(p))


class TestOpenStore:
    def test_builds_store_from_config(self, app_config):
        store = open_store(app_config.store)
        assert str(store.path) == app_config.store.path
        assert store.prettify is True
        assert store.get_collection("default")


class TestSetupLogging:
    def test_uses_configured_level(self, app_config, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
        setup_logging(app_config)
        assert calls["level"] == logging.DEBUG
        assert "%(name)s" in calls["format"]
