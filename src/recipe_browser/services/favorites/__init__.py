"""Favorites: client-persisted ids and their resolution into recipes."""

from recipe_browser.services.favorites.service import FavoritesService
from recipe_browser.services.favorites.store import FavoritesStore


__all__ = [
    "FavoritesService",
    "FavoritesStore",
]
