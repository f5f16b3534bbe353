"""Tests for container wiring."""

import asyncio
import logging
from pathlib import Path

import pytest

from glucose_tracker.adapters.json_file_store import JsonFileKeyValueStore
from glucose_tracker.config import Settings, parse_storage_backend
from glucose_tracker.containers import build_container, build_key_value_store
from glucose_tracker.services.storage import InMemoryKeyValueStore
from tests.conftest import make_reading


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)

    container.entry_store.save_reading(make_reading(105))

    assert container.insight_service.store is container.entry_store
    assert container.stats_service.store is container.entry_store
    assert len(container.entry_log_service.store.list_readings()) == 1
    asyncio.run(container.close_resources())


def test_file_backend_uses_storage_dir(tmp_path: Path) -> None:
    settings = Settings(fdc_api_key="key", storage_dir=str(tmp_path))

    store = build_key_value_store(settings)

    assert isinstance(store, JsonFileKeyValueStore)
    assert store.directory == tmp_path


def test_memory_backend(settings: Settings) -> None:
    assert isinstance(build_key_value_store(settings), InMemoryKeyValueStore)


def test_supabase_backend_requires_credentials() -> None:
    settings = Settings(fdc_api_key="key", storage_backend="supabase")

    with pytest.raises(ValueError):
        build_key_value_store(settings)


def test_parse_storage_backend() -> None:
    assert parse_storage_backend(None) == "file"
    assert parse_storage_backend(" Memory ") == "memory"
    with pytest.raises(ValueError):
        parse_storage_backend("redis")


def test_build_container_configures_logging(settings: Settings) -> None:
    logger = logging.getLogger("glucose_tracker")
    logger.handlers.clear()

    container = build_container(settings.model_copy(update={"debug": True}))

    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    asyncio.run(container.close_resources())
