"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from glucose_tracker.adapters.fdc_client import HttpxFdcClient
from glucose_tracker.adapters.json_file_store import JsonFileKeyValueStore
from glucose_tracker.adapters.supabase_kv_store import SupabaseKeyValueStore
from glucose_tracker.app_logging import configure_logging
from glucose_tracker.config import Settings, parse_storage_backend
from glucose_tracker.services.insights import InsightService
from glucose_tracker.services.meals import EntryLogService
from glucose_tracker.services.nutrition import NutritionService
from glucose_tracker.services.stats import StatsService
from glucose_tracker.services.storage import (
    EntryStore,
    InMemoryKeyValueStore,
    KeyValueStore,
)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    entry_store: EntryStore
    nutrition_service: NutritionService
    entry_log_service: EntryLogService
    insight_service: InsightService
    stats_service: StatsService
    close_resources: Callable[[], Awaitable[None]]


def build_key_value_store(settings: Settings) -> KeyValueStore:
    """Create the key-value backend selected in settings."""
    backend = parse_storage_backend(settings.storage_backend)
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase storage requires a URL and service key")
        return SupabaseKeyValueStore(
            create_client(settings.supabase_url, settings.supabase_service_key)
        )
    return JsonFileKeyValueStore(Path(settings.storage_dir))


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(logging.DEBUG if resolved_settings.debug else logging.INFO)
    entry_store = EntryStore.create(build_key_value_store(resolved_settings))
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
        timeout=resolved_settings.fdc_timeout_seconds,
    )
    nutrition_service = NutritionService(
        fdc_client=fdc_client,
        debug=resolved_settings.debug,
    )

    async def close_resources() -> None:
        await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        entry_store=entry_store,
        nutrition_service=nutrition_service,
        entry_log_service=EntryLogService(entry_store),
        insight_service=InsightService(entry_store),
        stats_service=StatsService(entry_store),
        close_resources=close_resources,
    )
