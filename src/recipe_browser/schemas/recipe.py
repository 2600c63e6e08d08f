"""Recipe-related schemas.

Records as served by the recipe API, the canonical page envelope used by
the list reconciler, collection statistics, and the request bodies for
adding recipes.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

import orjson
from pydantic import BeforeValidator, Field, field_serializer

from recipe_browser.schemas.base import ApiRequest, ApiResponse


def parse_json_list(value: Any) -> Any:
    """Decode a JSON-serialized list field.

    Ingredients, directions and tags travel as JSON text
    (``'["2 eggs", "1 cup flour"]'``). Already-decoded lists pass through
    so that a validated record can be validated again.
    """
    if isinstance(value, (str, bytes)):
        try:
            return orjson.loads(value)
        except orjson.JSONDecodeError as e:
            msg = f"not valid JSON: {e}"
            raise ValueError(msg) from e
    return value


def coerce_count(value: Any) -> Any:
    """Normalize a count that may arrive as a string, float or int."""
    if isinstance(value, bool):
        msg = "count must be numeric, not boolean"
        raise ValueError(msg)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            msg = "count must not be empty"
            raise ValueError(msg)
        try:
            return int(value)
        except ValueError:
            value = float(value)
    if isinstance(value, float):
        if not value.is_integer():
            msg = f"count must be a whole number, got {value}"
            raise ValueError(msg)
        return int(value)
    return value


JsonStringList = Annotated[list[str], BeforeValidator(parse_json_list)]
Count = Annotated[int, BeforeValidator(coerce_count), Field(ge=0)]


# =============================================================================
# Records
# =============================================================================


class Recipe(ApiResponse):
    """A recipe record.

    ``ingredients`` and ``directions`` must decode to a list; a record
    whose JSON text is broken or null fails validation and is excluded
    from display by the normalizer.
    """

    id: str = Field(min_length=1, description="Opaque unique identifier")
    title: str = Field(description="Recipe title")
    ingredients: JsonStringList = Field(description="Ordered ingredient lines")
    directions: JsonStringList = Field(description="Ordered direction steps")
    source: str = Field(description="Source URL or free-form origin")
    is_auto_scraped: bool = Field(
        default=False,
        description="True when scraped automatically, False when user-added",
    )
    favorite_count: Count = Field(default=0, description="Global favorite count")

    description: str | None = None
    image_url: str | None = None
    category: str | None = None
    cuisine: str | None = None
    difficulty: str | None = None
    prep_time_minutes: int | None = None
    cook_time_minutes: int | None = None
    total_time_minutes: int | None = None
    servings: int | None = None
    tags: JsonStringList | None = None
    scraped_at: str | None = None


# =============================================================================
# Envelopes
# =============================================================================


class RecipePage(ApiResponse):
    """Canonical page envelope for paginated browsing."""

    items: list[Recipe] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    has_more: bool = False


class RecipeStats(ApiResponse):
    """Collection statistics with every count normalized to ``int``.

    The stats endpoint serves ``total`` and ``autoScraped`` as strings and
    ``userAdded`` as a number.
    """

    total: Count
    auto_scraped: Count = 0
    user_added: Count = 0


class ScrapeResult(ApiResponse):
    """Outcome of submitting a URL for scraping.

    ``duplicate`` is set when the backend already had a recipe from the
    same source and returned it instead of creating a new one.
    """

    recipe: Recipe
    duplicate: bool = False
    message: str | None = None


# =============================================================================
# Requests
# =============================================================================


class ScrapeRecipeRequest(ApiRequest):
    """Body for ``POST /api/recipes/scrape``."""

    url: str = Field(min_length=1, description="Recipe page or video URL")


class ScreenshotRecipeRequest(ApiRequest):
    """Body for ``POST /api/recipes/screenshot``."""

    image_data: str = Field(
        min_length=1,
        description="Base64 data URL of the screenshot",
    )


class FavoriteCountRequest(ApiRequest):
    """Body for ``POST /api/recipes/{id}/favorite``."""

    increment: Literal[1, -1]


class CreateRecipeRequest(ApiRequest):
    """Body for manual entry via ``POST /api/recipes``.

    Lists are sent in the same JSON-text form the backend stores.
    """

    title: str = Field(min_length=1, max_length=200)
    ingredients: list[str] = Field(min_length=1)
    directions: list[str] = Field(min_length=1)
    source: str = "Manual Entry"
    description: str | None = None
    image_url: str | None = None
    prep_time_minutes: int | None = Field(default=None, ge=0)
    cook_time_minutes: int | None = Field(default=None, ge=0)
    servings: int | None = Field(default=None, ge=1)

    @field_serializer("ingredients", "directions")
    def _serialize_lines(self, lines: list[str]) -> str:
        return orjson.dumps(lines).decode()
