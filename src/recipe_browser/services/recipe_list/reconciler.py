"""Recipe list reconciliation.

Owns the list a user sees while browsing: the accumulated "Load More"
pages, or the results of the active search. Pages are deduplicated by
recipe id and appended in backend order; a search replaces the view
without touching the accumulated pages.

Each fetch captures a generation token for its slot (``list`` for pages,
``search`` for searches). A response is applied only if no newer request
was issued for the same slot in the meantime, so a slow response can
never overwrite a newer one.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Final

from recipe_browser.core.config import get_settings
from recipe_browser.observability.logging import get_logger
from recipe_browser.services.recipe_api.exceptions import RecipeApiError
from recipe_browser.services.recipe_list.models import ListMode, ViewState


if TYPE_CHECKING:
    from collections.abc import Iterable

    from recipe_browser.schemas.recipe import Recipe, RecipePage
    from recipe_browser.services.recipe_api.client import RecipeApiClient

logger = get_logger(__name__)

LIST_SLOT: Final[str] = "list"
SEARCH_SLOT: Final[str] = "search"


class RecipeListReconciler:
    """Client-side state for paginated browsing and search.

    Example:
        ```python
        reconciler = RecipeListReconciler(client)
        await reconciler.load_first_page()
        await reconciler.load_next_page()
        await reconciler.search("soup")
        recipes = reconciler.visible_list()
        ```
    """

    def __init__(
        self,
        client: RecipeApiClient,
        page_size: int | None = None,
        debounce_seconds: float | None = None,
    ) -> None:
        """Initialize empty state.

        Args:
            client: Initialized recipe API client.
            page_size: Recipes per page; defaults to ``pagination.page_size``.
            debounce_seconds: Default delay for ``search_debounced``.
        """
        config = get_settings().pagination
        self._client = client
        self.page_size = page_size or config.page_size
        self.debounce_seconds = (
            debounce_seconds
            if debounce_seconds is not None
            else config.search_debounce_seconds
        )

        self.mode = ListMode.PAGINATED
        self.current_page = 1
        self.has_more = False
        self.total = 0
        self.search_query = ""

        self._accumulated: list[Recipe] = []
        self._seen_ids: set[str] = set()
        self._search_results: list[Recipe] = []
        self._first_page_loaded = False

        self._generations: dict[str, int] = {LIST_SLOT: 0, SEARCH_SLOT: 0}
        self._in_flight: dict[str, int] = {}
        self._errors: dict[str, RecipeApiError] = {}
        self._debounce_ticket = 0

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def accumulated(self) -> list[Recipe]:
        """Deduplicated pages loaded so far, in first-seen order."""
        return list(self._accumulated)

    @property
    def last_error(self) -> RecipeApiError | None:
        """Failure of the most recent fetch feeding the current mode."""
        slot = SEARCH_SLOT if self.mode is ListMode.SEARCHING else LIST_SLOT
        return self._errors.get(slot)

    def is_loading(self, slot: str | None = None) -> bool:
        """Whether a fetch is in flight, for one slot or for any."""
        if slot is None:
            return bool(self._in_flight)
        return slot in self._in_flight

    def visible_list(self) -> list[Recipe]:
        """Return the authoritative list for the current mode."""
        if self.mode is ListMode.SEARCHING:
            return list(self._search_results)
        return list(self._accumulated)

    def view_state(self) -> ViewState:
        """Classify what the visible list should render as."""
        if self.mode is ListMode.SEARCHING:
            if self.is_loading(SEARCH_SLOT):
                return ViewState.LOADING
            if SEARCH_SLOT in self._errors:
                return ViewState.ERROR
            if self._search_results:
                return ViewState.SEARCH_RESULTS
            return ViewState.NO_SEARCH_RESULTS

        if self._accumulated:
            return ViewState.RECIPES
        if LIST_SLOT in self._errors:
            return ViewState.ERROR
        if self.is_loading(LIST_SLOT) or not self._first_page_loaded:
            return ViewState.LOADING
        return ViewState.EMPTY_COLLECTION

    # =========================================================================
    # Operations
    # =========================================================================

    async def load_first_page(self) -> bool:
        """Fetch page 1 and replace the accumulated list wholesale.

        Supersedes any page fetch still in flight.

        Returns:
            True if the page was applied, False if a newer request
            superseded it while it was in flight.

        Raises:
            RecipeApiError: If the fetch fails; prior state is untouched.
        """
        token = self._issue(LIST_SLOT)
        try:
            page = await self._client.get_page(1, self.page_size)
        except RecipeApiError as e:
            if self._record_failure(LIST_SLOT, token, e):
                raise
            return False

        if not self._settle(LIST_SLOT, token):
            logger.debug("Discarding stale first page")
            return False

        self._accumulated = []
        self._seen_ids = set()
        self._apply_page(page, page_number=1)
        self._first_page_loaded = True
        logger.info(
            "Loaded first page",
            count=len(self._accumulated),
            total=self.total,
            has_more=self.has_more,
        )
        return True

    async def load_next_page(self) -> bool:
        """Fetch the next page and append its unseen recipes.

        A no-op, without any request, when searching, when there are no
        more pages, or while another page fetch is in flight.

        Returns:
            True if a page was appended, False otherwise.

        Raises:
            RecipeApiError: If the fetch fails; prior state is untouched.
        """
        if self.mode is not ListMode.PAGINATED or not self.has_more:
            logger.debug(
                "Skipping next page",
                mode=self.mode.value,
                has_more=self.has_more,
            )
            return False
        if self.is_loading(LIST_SLOT):
            logger.debug("Page fetch already in flight")
            return False

        next_page = self.current_page + 1
        token = self._issue(LIST_SLOT)
        try:
            page = await self._client.get_page(next_page, self.page_size)
        except RecipeApiError as e:
            if self._record_failure(LIST_SLOT, token, e):
                raise
            return False

        if not self._settle(LIST_SLOT, token):
            logger.debug("Discarding stale page", page=next_page)
            return False

        added = self._apply_page(page, page_number=next_page)
        logger.info(
            "Loaded next page",
            page=next_page,
            added=added,
            skipped=len(page.items) - added,
            has_more=self.has_more,
        )
        return True

    async def search(self, query: str) -> bool:
        """Show search results for ``query``, or go back to browsing.

        An empty or whitespace-only query switches to paginated mode and
        reloads page 1. Any other query is sent as typed, and the visible
        list stays empty until exactly its results arrive; results of an
        earlier query are never shown under a new one.

        Returns:
            True if the outcome was applied, False if superseded.

        Raises:
            RecipeApiError: If the fetch fails.
        """
        token = self._issue(SEARCH_SLOT)

        if not query.strip():
            self._settle(SEARCH_SLOT, token)
            self._errors.pop(SEARCH_SLOT, None)
            self.mode = ListMode.PAGINATED
            self.search_query = ""
            self._search_results = []
            return await self.load_first_page()

        self.mode = ListMode.SEARCHING
        self.search_query = query
        self._search_results = []
        try:
            results = await self._client.search(query)
        except RecipeApiError as e:
            if self._record_failure(SEARCH_SLOT, token, e):
                raise
            return False

        if not self._settle(SEARCH_SLOT, token):
            logger.debug("Discarding stale search results", query=query)
            return False

        self._search_results = list(results)
        self._errors.pop(SEARCH_SLOT, None)
        logger.info("Search completed", query=query, count=len(results))
        return True

    async def search_debounced(self, query: str, delay: float | None = None) -> bool:
        """Search after ``delay`` seconds unless a newer call arrives first.

        Meant for per-keystroke input: only the last call in a burst
        reaches the API, and the settled state equals ``search(query)``.

        Returns:
            False if superseded during the delay, else as ``search``.
        """
        self._debounce_ticket += 1
        ticket = self._debounce_ticket
        await asyncio.sleep(self.debounce_seconds if delay is None else delay)
        if ticket != self._debounce_ticket:
            return False
        return await self.search(query)

    def reset(self) -> None:
        """Discard all state; responses still in flight will be ignored."""
        for slot in self._generations:
            self._generations[slot] += 1
        self._in_flight.clear()
        self._errors.clear()
        self._debounce_ticket += 1

        self.mode = ListMode.PAGINATED
        self.current_page = 1
        self.has_more = False
        self.total = 0
        self.search_query = ""
        self._accumulated = []
        self._seen_ids = set()
        self._search_results = []
        self._first_page_loaded = False

    # =========================================================================
    # Internals
    # =========================================================================

    def _issue(self, slot: str) -> int:
        self._generations[slot] += 1
        token = self._generations[slot]
        self._in_flight[slot] = token
        return token

    def _settle(self, slot: str, token: int) -> bool:
        """Mark the request done; True if it is still the latest for its slot."""
        if self._generations[slot] != token:
            return False
        self._in_flight.pop(slot, None)
        return True

    def _record_failure(self, slot: str, token: int, error: RecipeApiError) -> bool:
        """Record a failed fetch; False if the request was already superseded."""
        if not self._settle(slot, token):
            logger.debug("Ignoring failure of superseded request", slot=slot)
            return False
        self._errors[slot] = error
        logger.warning(
            "Recipe list fetch failed",
            slot=slot,
            error_type=type(error).__name__,
            error=str(error),
        )
        return True

    def _apply_page(self, page: RecipePage, page_number: int) -> int:
        added = self._append_unseen(page.items)
        self.current_page = page_number
        self.has_more = page.has_more
        self.total = page.total
        self._errors.pop(LIST_SLOT, None)
        return added

    def _append_unseen(self, recipes: Iterable[Recipe]) -> int:
        added = 0
        for recipe in recipes:
            if recipe.id in self._seen_ids:
                continue
            self._seen_ids.add(recipe.id)
            self._accumulated.append(recipe)
            added += 1
        return added
