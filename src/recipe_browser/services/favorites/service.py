"""Favorites service.

Resolves favorite ids into recipe records and keeps the backend's
global favorite counts in step with the local store.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from recipe_browser.core.config import get_settings
from recipe_browser.observability.logging import get_logger
from recipe_browser.services.recipe_api.exceptions import RecipeApiError


if TYPE_CHECKING:
    from recipe_browser.schemas.recipe import Recipe
    from recipe_browser.services.favorites.store import FavoritesStore
    from recipe_browser.services.recipe_api.client import RecipeApiClient

logger = get_logger(__name__)


class FavoritesService:
    """Favorites view backed by an injected store and API client."""

    def __init__(
        self,
        client: RecipeApiClient,
        store: FavoritesStore,
        max_concurrent_fetches: int | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            client: Initialized recipe API client.
            store: Favorites store to read and update.
            max_concurrent_fetches: Bound on parallel per-recipe fetches;
                defaults to ``favorites.max_concurrent_fetches``.
        """
        self._client = client
        self._store = store
        self._max_concurrent = (
            max_concurrent_fetches
            or get_settings().favorites.max_concurrent_fetches
        )

    @property
    def store(self) -> FavoritesStore:
        """The favorites store this service updates."""
        return self._store

    async def resolve_favorites(self) -> list[Recipe]:
        """Fetch every favorite recipe concurrently.

        Recipes that fail to load (deleted, malformed, network error) are
        logged and left out; one failure never aborts the batch. Results
        follow the order favorites were added.
        """
        recipe_ids = self._store.ordered()
        if not recipe_ids:
            return []

        semaphore = asyncio.Semaphore(self._max_concurrent)

        async def fetch_with_semaphore(recipe_id: str) -> Recipe | None:
            async with semaphore:
                try:
                    return await self._client.get_recipe(recipe_id)
                except RecipeApiError as e:
                    logger.warning(
                        "Failed to resolve favorite recipe",
                        recipe_id=recipe_id,
                        error_type=type(e).__name__,
                        error=str(e),
                    )
                    return None

        results = await asyncio.gather(
            *[fetch_with_semaphore(recipe_id) for recipe_id in recipe_ids]
        )
        recipes = [recipe for recipe in results if recipe is not None]

        logger.info(
            "Resolved favorites",
            requested=len(recipe_ids),
            resolved=len(recipes),
        )
        return recipes

    async def toggle_favorite(self, recipe_id: str) -> bool:
        """Flip a recipe's favorite status on the server, then locally.

        Returns:
            The new favorite status.

        Raises:
            RecipeApiError: If the server update fails; the store is left
                unchanged.
        """
        is_favorite = self._store.contains(recipe_id)
        await self._client.update_favorite_count(
            recipe_id,
            increment=-1 if is_favorite else 1,
        )

        if is_favorite:
            self._store.remove(recipe_id)
        else:
            self._store.add(recipe_id)

        logger.info(
            "Favorite toggled",
            recipe_id=recipe_id,
            is_favorite=not is_favorite,
        )
        return not is_favorite
