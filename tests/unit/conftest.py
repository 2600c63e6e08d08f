"""Unit test configuration.

Unit tests never leave the process: HTTP goes to respx routes or mocks
and favorites live under the test's temp directory.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from recipe_browser.observability.logging import clear_context


pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def isolated_log_context() -> Iterator[None]:
    """Drop logging context bound by the code under test."""
    yield
    clear_context()
