"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

from rubydb.config import AppConfig, LoggingConfig, StoreConfig
from rubydb.store import DocumentStore


@pytest.fixture
def store_path(tmp_path) -> Path:
    return tmp_path / "db.json"


@pytest.fixture
def store(store_path) -> DocumentStore:
    """Empty, unseeded store over a fresh path."""
    return DocumentStore(store_path, seed_default=False)


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    """Full config with temp store path."""
    return AppConfig(
        store=StoreConfig(path=str(tmp_path / "data" / "app.json"), prettify=True),
        logging=LoggingConfig(level="debug"),
    )


@pytest.fixture
def json_file(tmp_path):
    """Factory for temp JSON files."""
    def _create(data, filename="test.json") -> Path:
        p = tmp_path / filename
        p.write_text(json.dumps(data))
        return p
    return _create
