from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from pitchlytics.app.main import create_app
from pitchlytics.config.config_manager import Settings
from pitchlytics.core.cache import InMemoryScoreCache
from pitchlytics.models.schemas import PitchData

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

HORROR_PITCH = {
    "title": "The Hollow",
    "logline": (
        "When a grieving mother moves her family into a remote farmhouse, she must confront "
        "the ancient entity hiding in the walls before it claims her youngest son forever."
    ),
    "synopsis": (
        "The story begins as Clara, the protagonist, moves her family to a quiet farmhouse after her husband dies. "
        "However, strange noises in the walls suggest something else lives there. "
        "Her son makes a friend no one else can see, and the character of the house slowly changes. "
        "Clara investigates the history of the land and discovers a dark bargain made a century ago. "
        "She struggles to convince her family that the danger is real. "
        "Finally she confronts the entity in a showdown that forces her to sacrifice everything she has left."
    ),
    "genre": "horror",
    "budget": 3_000_000,
    "director": "Ana Reyes",
    "producer": "Jordan Blake",
    "cast": ["Lead One", "Lead Two", "Support Three"],
    "script_pages": 105,
}

MINIMAL_PITCH = {"title": "Nova", "genre": "drama", "budget": 1_000_000}


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def horror_pitch() -> PitchData:
    return PitchData.model_validate(HORROR_PITCH)


@pytest.fixture
def minimal_pitch() -> PitchData:
    return PitchData.model_validate(MINIMAL_PITCH)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_cache(clock) -> InMemoryScoreCache:
    return InMemoryScoreCache(clock=clock)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        cache_backend="memory",
        cache_ttl_seconds=3600,
        cache_key_prefix="validation_score:",
        redis_url="redis://localhost:6379/0",
        batch_max_items=10,
        log_level="WARNING",
        log_json=False,
    )


@pytest.fixture
def app(memory_cache, settings):
    return create_app(cache=memory_cache, settings=settings)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
