"""Recipe API client exceptions.

Failures split into two families callers treat differently:

- network failures (unreachable service, timeout, non-2xx status), which
  a caller surfaces as a retryable error state and never as "no results";
- malformed responses, where the body arrived but its shape is not one
  the normalizer recognizes.
"""

from __future__ import annotations

from typing import Any


class RecipeApiError(Exception):
    """Base exception for recipe API client errors."""


class RecipeApiUnavailableError(RecipeApiError):
    """Raised when the recipe API cannot be reached."""


class RecipeApiTimeoutError(RecipeApiUnavailableError):
    """Raised when a request to the recipe API times out."""


class RecipeApiResponseError(RecipeApiError):
    """Raised when the recipe API answers with an error status.

    Also raised for a 2xx body that carries ``"success": false``.
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(message)


class RecipeApiValidationError(RecipeApiResponseError):
    """Raised when the recipe API rejects a request body (400/422)."""

    def __init__(
        self,
        message: str,
        details: Any = None,
        status_code: int = 422,
    ) -> None:
        self.details = details
        super().__init__(status_code=status_code, message=message)


class RecipeApiNotFoundError(RecipeApiResponseError):
    """Raised when the requested recipe does not exist (404)."""

    def __init__(self, message: str) -> None:
        super().__init__(status_code=404, message=message)


class MalformedResponseError(RecipeApiError):
    """Raised when a response body does not have a recognized shape.

    ``payload`` keeps the offending value for logging.
    """

    def __init__(self, message: str, payload: Any = None) -> None:
        self.payload = payload
        super().__init__(message)
