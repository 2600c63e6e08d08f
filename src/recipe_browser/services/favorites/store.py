"""Client-persisted favorites.

Favorite recipe ids are kept in insertion order and written to a JSON
array file after every change. The set has its own lifecycle: it may
reference recipes that are not currently loaded.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import orjson

from recipe_browser.core.config import get_settings
from recipe_browser.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Iterator

logger = get_logger(__name__)


class FavoritesStore:
    """Set of favorite recipe ids with optional file persistence.

    Pass ``path=None`` for an in-memory store.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path is not None else None
        self._ids: dict[str, None] = {}
        self._load()

    @classmethod
    def from_settings(cls) -> FavoritesStore:
        """Create a store persisted at ``favorites.storage_path``."""
        return cls(get_settings().favorites.storage_path)

    @property
    def path(self) -> Path | None:
        """File the store persists to, if any."""
        return self._path

    @property
    def count(self) -> int:
        """Number of favorite recipes."""
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter([*self._ids])

    def __contains__(self, recipe_id: object) -> bool:
        return recipe_id in self._ids

    def contains(self, recipe_id: str) -> bool:
        """Whether ``recipe_id`` is a favorite."""
        return recipe_id in self._ids

    def add(self, recipe_id: str) -> None:
        """Mark a recipe as favorite."""
        if not recipe_id:
            msg = "recipe_id must not be empty"
            raise ValueError(msg)
        if recipe_id in self._ids:
            return
        self._ids[recipe_id] = None
        self._save()

    def remove(self, recipe_id: str) -> None:
        """Unmark a recipe; unknown ids are ignored."""
        if recipe_id not in self._ids:
            return
        del self._ids[recipe_id]
        self._save()

    def toggle(self, recipe_id: str) -> bool:
        """Flip favorite status and return the new status."""
        if recipe_id in self._ids:
            self.remove(recipe_id)
            return False
        self.add(recipe_id)
        return True

    def clear(self) -> None:
        """Remove every favorite."""
        self._ids.clear()
        self._save()

    def ordered(self) -> list[str]:
        """Favorite ids in the order they were added."""
        return [*self._ids]

    def list(self) -> set[str]:
        """Snapshot of the favorite ids."""
        return set(self._ids)

    def _load(self) -> None:
        if self._path is None or not self._path.exists():
            return
        try:
            data = orjson.loads(self._path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as e:
            logger.warning(
                "Could not read favorites, starting empty",
                path=str(self._path),
                error=str(e),
            )
            return
        if not isinstance(data, list):
            logger.warning("Favorites file is not an array", path=str(self._path))
            return
        self._ids = {item: None for item in data if isinstance(item, str) and item}
        logger.debug("Loaded favorites", path=str(self._path), count=len(self._ids))

    def _save(self) -> None:
        if self._path is None:
            return
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(orjson.dumps([*self._ids]))
            os.replace(tmp_path, self._path)
        except OSError as e:
            # In-memory state stays authoritative until the next successful save
            logger.warning(
                "Could not save favorites",
                path=str(self._path),
                error=str(e),
            )
