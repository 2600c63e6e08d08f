"""Shared test fixtures and configuration for the recipe browser tests.

Every test runs with ``APP_ENV=test``, a fresh settings cache, and a
favorites file inside its own temporary directory.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import pytest

from recipe_browser.core.config import get_settings
from recipe_browser.services.recipe_api import RecipeApiClient


BASE_URL = "http://recipes.test"


@pytest.fixture(autouse=True)
def test_settings(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> Iterator[None]:
    """Isolate settings from the developer's environment."""
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("API__BASE_URL", BASE_URL)
    monkeypatch.setenv("FAVORITES__STORAGE_PATH", str(tmp_path / "favorites.json"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def base_url() -> str:
    """Base URL the API client talks to in tests."""
    return BASE_URL


@pytest.fixture
async def api_client() -> AsyncIterator[RecipeApiClient]:
    """Initialized API client pointed at the mocked base URL."""
    client = RecipeApiClient(base_url=BASE_URL)
    await client.initialize()
    yield client
    await client.shutdown()
