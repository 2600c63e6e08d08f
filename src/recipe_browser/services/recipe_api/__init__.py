"""Recipe API client module."""

from recipe_browser.services.recipe_api.client import RecipeApiClient
from recipe_browser.services.recipe_api.exceptions import (
    MalformedResponseError,
    RecipeApiError,
    RecipeApiNotFoundError,
    RecipeApiResponseError,
    RecipeApiTimeoutError,
    RecipeApiUnavailableError,
    RecipeApiValidationError,
)
from recipe_browser.services.recipe_api.normalizer import (
    normalize_page,
    normalize_recipe,
    normalize_search,
    normalize_stats,
)


__all__ = [
    "MalformedResponseError",
    "RecipeApiClient",
    "RecipeApiError",
    "RecipeApiNotFoundError",
    "RecipeApiResponseError",
    "RecipeApiTimeoutError",
    "RecipeApiUnavailableError",
    "RecipeApiValidationError",
    "normalize_page",
    "normalize_recipe",
    "normalize_search",
    "normalize_stats",
]
