"""Pydantic schemas for the recipe API."""

from recipe_browser.schemas.base import ApiRequest, ApiResponse
from recipe_browser.schemas.recipe import (
    CreateRecipeRequest,
    FavoriteCountRequest,
    Recipe,
    RecipePage,
    RecipeStats,
    ScrapeRecipeRequest,
    ScrapeResult,
    ScreenshotRecipeRequest,
)


__all__ = [
    "ApiRequest",
    "ApiResponse",
    "CreateRecipeRequest",
    "FavoriteCountRequest",
    "Recipe",
    "RecipePage",
    "RecipeStats",
    "ScrapeRecipeRequest",
    "ScrapeResult",
    "ScreenshotRecipeRequest",
]
