"""Normalization of recipe API payloads.

The backend wraps list responses inconsistently: the paginated endpoint
answers ``{success, recipes: {recipes, total, hasMore}}`` while search
answers ``{success, recipes: [...]}`` and some deployments return the
inner object directly. Every shape decision lives here so call sites
only ever see canonical models.

All ``normalize_*`` functions are idempotent: feeding them their own
output (or its ``model_dump()``) yields an equal value.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from recipe_browser.observability.logging import get_logger
from recipe_browser.schemas.recipe import Recipe, RecipePage, RecipeStats, coerce_count
from recipe_browser.services.recipe_api.exceptions import MalformedResponseError


logger = get_logger(__name__)

LIST_KEYS = ("items", "recipes")


def unwrap_envelope(payload: Any) -> Any:
    """Strip one level of double wrapping, if present.

    ``{recipes: {recipes: [...], ...}}`` becomes ``{recipes: [...], ...}``;
    anything else is returned unchanged.
    """
    if isinstance(payload, Mapping):
        inner = payload.get("recipes")
        if isinstance(inner, Mapping) and "recipes" in inner:
            return inner
    return payload


def _extract_list(body: Mapping[str, Any]) -> list[Any]:
    for key in LIST_KEYS:
        if key in body:
            raw_items = body[key]
            if not isinstance(raw_items, list):
                msg = f"Expected '{key}' to be an array, got {type(raw_items).__name__}"
                raise MalformedResponseError(msg, payload=body)
            return raw_items
    msg = "Response has no recipe list"
    raise MalformedResponseError(msg, payload=body)


def parse_recipes(raw_items: list[Any]) -> list[Recipe]:
    """Validate raw records, excluding the ones that fail.

    A record whose ingredients or directions do not decode to a list is a
    data-quality defect: it is logged and left out rather than failing
    the whole list.
    """
    recipes: list[Recipe] = []
    for raw in raw_items:
        if isinstance(raw, Recipe):
            recipes.append(raw)
            continue
        try:
            recipes.append(Recipe.model_validate(raw))
        except ValidationError as e:
            recipe_id = raw.get("id") if isinstance(raw, Mapping) else None
            logger.warning(
                "Excluding malformed recipe record",
                recipe_id=recipe_id,
                fields=sorted({".".join(map(str, err["loc"])) for err in e.errors()}),
            )
    return recipes


def normalize_page(payload: Any) -> RecipePage:
    """Extract the canonical page envelope from a paginated response.

    Raises:
        MalformedResponseError: If no recipe array can be found, or the
            pagination metadata has the wrong type.
    """
    if isinstance(payload, RecipePage):
        return payload

    body = unwrap_envelope(payload)
    if not isinstance(body, Mapping):
        msg = f"Expected an object envelope, got {type(body).__name__}"
        raise MalformedResponseError(msg, payload=payload)

    raw_items = _extract_list(body)
    items = parse_recipes(raw_items)

    try:
        total = coerce_count(body.get("total", len(raw_items)))
    except ValueError as e:
        msg = f"Invalid total: {body.get('total')!r}"
        raise MalformedResponseError(msg, payload=payload) from e
    if not isinstance(total, int) or total < 0:
        msg = f"Invalid total: {body.get('total')!r}"
        raise MalformedResponseError(msg, payload=payload)

    has_more = body.get("hasMore", body.get("has_more", False))
    if not isinstance(has_more, bool):
        msg = f"Invalid hasMore flag: {has_more!r}"
        raise MalformedResponseError(msg, payload=payload)

    return RecipePage(items=items, total=total, has_more=has_more)


def normalize_search(payload: Any) -> list[Recipe]:
    """Extract the result sequence from a search response.

    Accepts a bare array, ``{recipes: [...]}`` or the double-wrapped form.
    """
    if isinstance(payload, list):
        return parse_recipes(payload)

    body = unwrap_envelope(payload)
    if not isinstance(body, Mapping):
        msg = f"Expected an object or array, got {type(body).__name__}"
        raise MalformedResponseError(msg, payload=payload)
    return parse_recipes(_extract_list(body))


def normalize_recipe(payload: Any) -> Recipe:
    """Extract a single record from ``{success, recipe}`` or a bare record."""
    if isinstance(payload, Recipe):
        return payload

    body = payload
    if isinstance(payload, Mapping) and isinstance(payload.get("recipe"), Mapping):
        body = payload["recipe"]
    if not isinstance(body, Mapping):
        msg = f"Expected a recipe object, got {type(body).__name__}"
        raise MalformedResponseError(msg, payload=payload)

    try:
        return Recipe.model_validate(body)
    except ValidationError as e:
        msg = f"Malformed recipe record {body.get('id')!r}: {e.error_count()} error(s)"
        raise MalformedResponseError(msg, payload=payload) from e


def normalize_stats(payload: Any) -> RecipeStats:
    """Normalize the stats response so every count is an ``int``.

    ``userAdded`` is derived from the other two counts when missing.
    """
    if isinstance(payload, RecipeStats):
        return payload
    if not isinstance(payload, Mapping):
        msg = f"Expected a stats object, got {type(payload).__name__}"
        raise MalformedResponseError(msg, payload=payload)

    try:
        stats = RecipeStats.model_validate(payload)
    except ValidationError as e:
        msg = f"Malformed stats response: {e.error_count()} error(s)"
        raise MalformedResponseError(msg, payload=payload) from e

    if "userAdded" not in payload and "user_added" not in payload:
        stats = stats.model_copy(
            update={"user_added": max(stats.total - stats.auto_scraped, 0)}
        )
    return stats
