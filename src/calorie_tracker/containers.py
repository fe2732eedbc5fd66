"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from supabase import create_client

from calorie_tracker.adapters.json_file_store import JsonFileKeyValueStore
from calorie_tracker.adapters.memory_store import InMemoryKeyValueStore
from calorie_tracker.adapters.openai_recognition_client import (
    OpenAIRecognitionClient,
)
from calorie_tracker.adapters.supabase_store import SupabaseKeyValueStore
from calorie_tracker.config import Settings
from calorie_tracker.services.food_log import FoodLogService
from calorie_tracker.services.recognition import (
    FoodRecognitionService,
    RecognitionClient,
    UnconfiguredRecognitionClient,
)
from calorie_tracker.services.sessions import SessionService
from calorie_tracker.services.stats import StatsService
from calorie_tracker.services.storage import KeyValueStore
from calorie_tracker.services.theme import ThemeService
from calorie_tracker.services.users import UserDataService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: KeyValueStore
    user_data_service: UserDataService
    stats_service: StatsService
    session_service: SessionService
    theme_service: ThemeService
    recognition_service: FoodRecognitionService
    food_log_service: FoodLogService
    close_resources: Callable[[], Awaitable[None]]


def build_store(settings: Settings) -> KeyValueStore:
    """Create the key-value store selected by settings."""
    if settings.storage_backend == "memory":
        return InMemoryKeyValueStore()
    if settings.storage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "Supabase storage needs SUPABASE_URL and SUPABASE_SERVICE_KEY"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStore(client, table=settings.supabase_table)
    return JsonFileKeyValueStore(Path(settings.data_path))


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store = build_store(resolved_settings)
    user_data_service = UserDataService(store)
    session_service = SessionService(
        store=store,
        user_data_service=user_data_service,
        ttl=timedelta(hours=resolved_settings.session_ttl_hours),
        password_iterations=resolved_settings.password_iterations,
    )

    openai_client: OpenAIRecognitionClient | None = None
    recognition_client: RecognitionClient
    if resolved_settings.openai_api_key:
        openai_client = OpenAIRecognitionClient.create(resolved_settings.openai_api_key)
        recognition_client = openai_client
    else:
        recognition_client = UnconfiguredRecognitionClient()
    recognition_service = FoodRecognitionService(
        client=recognition_client,
        model=resolved_settings.openai_model,
        timeout_seconds=resolved_settings.recognition_timeout_seconds,
    )

    async def close_resources() -> None:
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        store=store,
        user_data_service=user_data_service,
        stats_service=StatsService(user_data_service),
        session_service=session_service,
        theme_service=ThemeService(store),
        recognition_service=recognition_service,
        food_log_service=FoodLogService(
            recognition_service=recognition_service,
            user_data_service=user_data_service,
        ),
        close_resources=close_resources,
    )
