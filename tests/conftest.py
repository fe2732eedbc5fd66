"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from calorie_tracker.adapters.memory_store import InMemoryKeyValueStore
from calorie_tracker.config import Settings
from calorie_tracker.containers import AppContainer
from calorie_tracker.services.food_log import FoodLogService
from calorie_tracker.services.recognition import (
    FoodRecognitionService,
    RecognitionClient,
)
from calorie_tracker.services.sessions import SessionService
from calorie_tracker.services.stats import StatsService
from calorie_tracker.services.theme import ThemeService
from calorie_tracker.services.users import UserDataService

TEST_PASSWORD_ITERATIONS = 1_000


@dataclass
class FakeClock:
    """Controllable clock returning aware UTC datetimes."""

    current: datetime = field(
        default_factory=lambda: datetime(2026, 3, 14, 12, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current = self.current + delta


@dataclass
class FakeRecognitionClient(RecognitionClient):
    """Fake recognition client returning a fixed answer."""

    answer: str = (
        '```json\n{"name": "Grilled Chicken Salad", "calories": 420, '
        '"protein": 35, "carbs": 18, "fats": 22}\n```'
    )
    calls: list[dict[str, str]] = field(default_factory=list)

    async def analyze(self, *, model: str, prompt: str, image_data_url: str) -> str:
        self.calls.append(
            {"model": model, "prompt": prompt, "image_data_url": image_data_url}
        )
        return self.answer


@dataclass
class HangingRecognitionClient(RecognitionClient):
    """Recognition client that never answers."""

    async def analyze(self, *, model: str, prompt: str, image_data_url: str) -> str:
        await asyncio.Event().wait()
        return ""


@pytest.fixture
def settings() -> Settings:
    return Settings(
        storage_backend="memory",
        openai_api_key="openai-key",
        password_iterations=TEST_PASSWORD_ITERATIONS,
        timezone="UTC",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def user_data_service(
    store: InMemoryKeyValueStore, clock: FakeClock
) -> UserDataService:
    return UserDataService(store, now=clock)


@pytest.fixture
def session_service(
    store: InMemoryKeyValueStore,
    user_data_service: UserDataService,
    clock: FakeClock,
) -> SessionService:
    return SessionService(
        store=store,
        user_data_service=user_data_service,
        password_iterations=TEST_PASSWORD_ITERATIONS,
        now=clock,
    )


@pytest.fixture
def recognition_client() -> FakeRecognitionClient:
    return FakeRecognitionClient()


@pytest.fixture
def container(
    settings: Settings,
    store: InMemoryKeyValueStore,
    user_data_service: UserDataService,
    session_service: SessionService,
    recognition_client: FakeRecognitionClient,
) -> AppContainer:
    recognition_service = FoodRecognitionService(
        client=recognition_client,
        model=settings.openai_model,
        timeout_seconds=settings.recognition_timeout_seconds,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
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
