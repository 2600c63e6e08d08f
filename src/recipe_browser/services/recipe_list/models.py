"""State enums for the recipe list reconciler."""

from __future__ import annotations

from enum import StrEnum


class ListMode(StrEnum):
    """Which source feeds the visible list."""

    PAGINATED = "paginated"
    SEARCHING = "searching"


class ViewState(StrEnum):
    """What the visible list should render as.

    ``NO_SEARCH_RESULTS`` and ``EMPTY_COLLECTION`` are both valid empty
    responses and are kept apart from ``ERROR``.
    """

    LOADING = "loading"
    ERROR = "error"
    RECIPES = "recipes"
    SEARCH_RESULTS = "search_results"
    NO_SEARCH_RESULTS = "no_search_results"
    EMPTY_COLLECTION = "empty_collection"
