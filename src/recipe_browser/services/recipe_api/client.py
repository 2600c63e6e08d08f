"""Recipe API HTTP client.

This module provides an async HTTP client for the recipe collection's
REST API. Every response passes through the normalizer, so callers get
canonical models regardless of how the backend wrapped them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

import httpx
import orjson

from recipe_browser.core.config import get_settings
from recipe_browser.observability.logging import get_logger
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
from recipe_browser.services.recipe_api.exceptions import (
    MalformedResponseError,
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


if TYPE_CHECKING:
    from types import TracebackType

    from recipe_browser.schemas.base import ApiRequest

logger = get_logger(__name__)


class RecipeApiClient:
    """HTTP client for the recipe API.

    Example:
        ```python
        async with RecipeApiClient() as client:
            page = await client.get_page(1, limit=12)
            results = await client.search("lasagna")
        ```
    """

    RECIPES_PATH: Final[str] = "/api/recipes"
    PAGINATED_PATH: Final[str] = "/api/recipes/paginated"
    SEARCH_PATH: Final[str] = "/api/recipes/search"
    STATS_PATH: Final[str] = "/api/recipes/stats"
    SCRAPE_PATH: Final[str] = "/api/recipes/scrape"
    SCREENSHOT_PATH: Final[str] = "/api/recipes/screenshot"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root; defaults to ``api.base_url`` from settings.
            timeout: Request timeout in seconds; defaults to ``api.timeout``.
            http_client: Pre-built HTTP client. When given, the caller owns
                its lifecycle and it must already point at the API root.
        """
        settings = get_settings()
        self._base_url = base_url or settings.api.base_url
        self._timeout = timeout if timeout is not None else settings.api.timeout
        self._http_client = http_client
        self._owns_http_client = http_client is None

    @property
    def base_url(self) -> str:
        """Get the base URL of the recipe API."""
        if not self._base_url:
            msg = "Recipe API URL not configured"
            raise RuntimeError(msg)
        return self._base_url.rstrip("/")

    async def initialize(self) -> None:
        """Create the HTTP client if one was not provided."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self._timeout),
                headers={"Accept": "application/json"},
            )
        logger.info("RecipeApiClient initialized", base_url=self.base_url)

    async def shutdown(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_http_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
        logger.debug("RecipeApiClient shutdown")

    async def __aenter__(self) -> RecipeApiClient:
        await self.initialize()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.shutdown()

    # =========================================================================
    # Browsing
    # =========================================================================

    async def get_page(self, page: int, limit: int) -> RecipePage:
        """Fetch one page of the collection, most recent first.

        Raises:
            RecipeApiUnavailableError: If the API is unreachable.
            RecipeApiResponseError: For error statuses.
            MalformedResponseError: If the envelope is not recognized.
        """
        if page < 1 or limit < 1:
            msg = f"page and limit must be positive, got page={page} limit={limit}"
            raise ValueError(msg)

        data = await self._request(
            "GET",
            self.PAGINATED_PATH,
            params={"page": page, "limit": limit},
        )
        result = normalize_page(data)
        logger.debug(
            "Fetched recipe page",
            page=page,
            limit=limit,
            count=len(result.items),
            total=result.total,
            has_more=result.has_more,
        )
        return result

    async def search(self, query: str) -> list[Recipe]:
        """Search recipes by title, ingredients or tags."""
        data = await self._request("GET", self.SEARCH_PATH, params={"q": query})
        results = normalize_search(data)
        logger.debug("Searched recipes", query=query, count=len(results))
        return results

    async def get_recipe(self, recipe_id: str) -> Recipe:
        """Fetch a single recipe.

        Raises:
            RecipeApiNotFoundError: If no recipe has this id.
        """
        data = await self._request("GET", f"{self.RECIPES_PATH}/{recipe_id}")
        return normalize_recipe(data)

    async def get_stats(self) -> RecipeStats:
        """Fetch collection statistics with counts normalized to ``int``."""
        data = await self._request("GET", self.STATS_PATH)
        return normalize_stats(data)

    # =========================================================================
    # Mutations
    # =========================================================================

    async def update_favorite_count(
        self,
        recipe_id: str,
        increment: int,
    ) -> Recipe | None:
        """Adjust the global favorite count of a recipe by +1 or -1.

        Returns:
            The updated record when the backend echoes it, else None.
        """
        data = await self._request(
            "POST",
            f"{self.RECIPES_PATH}/{recipe_id}/favorite",
            body=FavoriteCountRequest(increment=increment),
        )
        if isinstance(data, dict) and isinstance(data.get("recipe"), dict):
            return normalize_recipe(data)
        return None

    async def scrape_recipe(self, url: str) -> ScrapeResult:
        """Submit a recipe URL for scraping.

        A URL whose recipe already exists is not scraped again; the
        existing record comes back with ``duplicate=True``.
        """
        data = await self._request(
            "POST",
            self.SCRAPE_PATH,
            body=ScrapeRecipeRequest(url=url),
        )
        if not isinstance(data, dict):
            msg = f"Expected a scrape result object, got {type(data).__name__}"
            raise MalformedResponseError(msg, payload=data)

        message = data.get("message")
        if isinstance(data.get("existingRecipe"), dict):
            logger.info("Recipe already exists for URL", url=url)
            return ScrapeResult(
                recipe=normalize_recipe(data["existingRecipe"]),
                duplicate=True,
                message=message,
            )

        recipe = normalize_recipe(data)
        logger.info("Recipe scraped", recipe_id=recipe.id, title=recipe.title)
        return ScrapeResult(recipe=recipe, message=message)

    async def submit_screenshot(self, image_data: str) -> Recipe:
        """Submit a screenshot for OCR extraction into a new recipe."""
        data = await self._request(
            "POST",
            self.SCREENSHOT_PATH,
            body=ScreenshotRecipeRequest(image_data=image_data),
        )
        recipe = normalize_recipe(data)
        logger.info("Recipe extracted from screenshot", recipe_id=recipe.id)
        return recipe

    async def create_recipe(self, request: CreateRecipeRequest) -> Recipe:
        """Add a manually entered recipe."""
        data = await self._request("POST", self.RECIPES_PATH, body=request)
        recipe = normalize_recipe(data)
        logger.info("Recipe created", recipe_id=recipe.id, title=recipe.title)
        return recipe

    async def delete_recipe(self, recipe_id: str) -> None:
        """Delete a recipe."""
        await self._request("DELETE", f"{self.RECIPES_PATH}/{recipe_id}")
        logger.info("Recipe deleted", recipe_id=recipe_id)

    # =========================================================================
    # Transport
    # =========================================================================

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: ApiRequest | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            RecipeApiTimeoutError: If the request times out.
            RecipeApiUnavailableError: If the API cannot be reached.
            RecipeApiResponseError: For error statuses or ``success: false``.
            MalformedResponseError: If the body is not JSON.
        """
        if not self._http_client:
            msg = "Client not initialized. Call initialize() first."
            raise RuntimeError(msg)

        content: bytes | None = None
        headers: dict[str, str] | None = None
        if body is not None:
            content = orjson.dumps(body.model_dump(exclude_none=True))
            headers = {"Content-Type": "application/json"}

        try:
            response = await self._http_client.request(
                method,
                path,
                params=params,
                content=content,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            logger.warning("Request to recipe API timed out", method=method, path=path)
            raise RecipeApiTimeoutError(str(e)) from e
        except httpx.RequestError as e:
            logger.warning(
                "Failed to connect to recipe API",
                method=method,
                path=path,
                error=str(e),
            )
            error_msg = f"Failed to connect to recipe API: {e}"
            raise RecipeApiUnavailableError(error_msg) from e

        if not response.is_success:
            self._raise_for_error(response)

        if not response.content:
            return None

        try:
            data = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            msg = f"Response from {path} is not valid JSON"
            raise MalformedResponseError(msg, payload=response.text) from e

        if isinstance(data, dict) and data.get("success") is False:
            message = data.get("message") or "Request was not successful"
            logger.warning("Recipe API reported failure", path=path, message=message)
            raise RecipeApiResponseError(response.status_code, message)

        return data

    def _raise_for_error(self, response: httpx.Response) -> None:
        """Translate an error status into the matching exception.

        Raises:
            RecipeApiNotFoundError: For 404 responses.
            RecipeApiValidationError: For 400 and 422 responses.
            RecipeApiResponseError: For other error responses.
        """
        status_code = response.status_code

        details = None
        try:
            error_body = orjson.loads(response.content)
        except orjson.JSONDecodeError:
            message = response.text or f"HTTP {status_code}"
        else:
            if isinstance(error_body, dict):
                message = error_body.get("message") or f"HTTP {status_code}"
                details = error_body.get("details")
            else:
                message = f"HTTP {status_code}"

        logger.warning(
            "Recipe API returned error",
            status_code=status_code,
            message=message,
        )

        if status_code == 404:
            raise RecipeApiNotFoundError(message)
        if status_code in (400, 422):
            raise RecipeApiValidationError(message, details, status_code=status_code)
        raise RecipeApiResponseError(status_code, message)
