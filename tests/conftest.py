from pathlib import Path

import pytest

from bookstore.app import BookstoreApp
from bookstore.utils.config import SecuritySettings, Settings, StorageSettings


class FakeClock:
    """Callable clock whose time only moves when a test moves it."""

    def __init__(self, now: float = 1_700_000_000):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def settings(data_dir: Path) -> Settings:
    # 4 rounds keeps bcrypt fast in tests; the default of 12 is covered separately
    return Settings(
        storage=StorageSettings(data_dir=str(data_dir)),
        security=SecuritySettings(secret_key="test-secret", bcrypt_rounds=4),
    )


@pytest.fixture
def bookstore(settings: Settings) -> BookstoreApp:
    app = BookstoreApp(settings)
    app.initialize()
    return app


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def book_payload():
    def make(**overrides):
        payload = {"title": "Dune", "author": "Herbert", "genre": "SciFi", "publishedYear": 1965}
        payload.update(overrides)
        return payload
    return make
