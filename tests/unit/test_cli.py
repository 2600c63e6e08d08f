"""Unit tests for the command-line front end."""

from __future__ import annotations

import base64
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import orjson
import pytest
import respx

from recipe_browser.cli import main
from tests.fixtures.api_responses import (
    ERROR_RESPONSE,
    STATS_RESPONSE,
    create_paginated_response,
    create_recipe_record,
    create_recipe_response,
    create_search_response,
)


pytestmark = pytest.mark.unit

BASE_URL = "http://recipes.test"


@pytest.fixture(autouse=True)
def mock_setup_logging() -> Iterator[MagicMock]:
    """Keep the CLI from reconfiguring global logging sinks."""
    with patch("recipe_browser.cli.setup_logging") as mock:
        yield mock


class TestListCommand:
    """Tests for `recipe-browser list`."""

    @respx.mock
    def test_loads_requested_pages(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should print every loaded page and the running total."""
        route = respx.get(f"{BASE_URL}/api/recipes/paginated").mock(
            side_effect=[
                httpx.Response(
                    200,
                    json=create_paginated_response(
                        [create_recipe_record("a", title="Apple Pie")],
                        total=3,
                        has_more=True,
                    ),
                ),
                httpx.Response(
                    200,
                    json=create_paginated_response(
                        [create_recipe_record("b", title="Banana Bread", isAutoScraped=0)],
                        total=3,
                        has_more=True,
                    ),
                ),
            ]
        )

        assert main(["list", "--pages", "2"]) == 0

        out = capsys.readouterr().out
        assert route.call_count == 2
        assert "a  Apple Pie  [scraped]" in out
        assert "b  Banana Bread  [added]" in out
        assert "2 of 3 recipes (more available)" in out

    @respx.mock
    def test_empty_collection(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should print the empty-collection message."""
        respx.get(f"{BASE_URL}/api/recipes/paginated").mock(
            return_value=httpx.Response(
                200,
                json=create_paginated_response([], total=0, has_more=False),
            )
        )

        assert main(["list"]) == 0

        assert "The collection is empty" in capsys.readouterr().out

    @respx.mock
    def test_marks_favorites(
        self,
        capsys: pytest.CaptureFixture[str],
        tmp_path: Path,
    ) -> None:
        """Should star recipes in the favorites file."""
        (tmp_path / "favorites.json").write_bytes(orjson.dumps(["a"]))
        respx.get(f"{BASE_URL}/api/recipes/paginated").mock(
            return_value=httpx.Response(
                200,
                json=create_paginated_response(
                    [create_recipe_record("a"), create_recipe_record("b")],
                    total=2,
                    has_more=False,
                ),
            )
        )

        main(["list"])

        out = capsys.readouterr().out
        assert "* a  Recipe a" in out
        assert "  b  Recipe b" in out


class TestSearchCommand:
    """Tests for `recipe-browser search`."""

    @respx.mock
    def test_prints_results(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should print matching recipes."""
        respx.get(f"{BASE_URL}/api/recipes/search").mock(
            return_value=httpx.Response(
                200,
                json=create_search_response([create_recipe_record("s", title="Soup")]),
            )
        )

        assert main(["search", "soup"]) == 0

        assert "s  Soup" in capsys.readouterr().out

    @respx.mock
    def test_no_results(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should print the no-results message."""
        respx.get(f"{BASE_URL}/api/recipes/search").mock(
            return_value=httpx.Response(200, json=create_search_response([]))
        )

        assert main(["search", "xyz-no-match"]) == 0

        assert "No recipes found for this search." in capsys.readouterr().out


class TestRecipeCommands:
    """Tests for show, stats, add and screenshot."""

    @respx.mock
    def test_show(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should print ingredients and numbered directions."""
        respx.get(f"{BASE_URL}/api/recipes/r1").mock(
            return_value=httpx.Response(
                200,
                json=create_recipe_response(
                    create_recipe_record("r1", title="Toast", directions=["Slice.", "Toast."])
                ),
            )
        )

        assert main(["show", "r1"]) == 0

        out = capsys.readouterr().out
        assert out.startswith("Toast\n")
        assert "  - 2 eggs" in out
        assert "  2. Toast." in out

    @respx.mock
    def test_show_not_found(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should report API errors on stderr with exit code 1."""
        respx.get(f"{BASE_URL}/api/recipes/missing").mock(
            return_value=httpx.Response(404, json=ERROR_RESPONSE)
        )

        assert main(["show", "missing"]) == 1

        assert "Error: Recipe not found" in capsys.readouterr().err

    @respx.mock
    def test_stats(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should print normalized counts."""
        respx.get(f"{BASE_URL}/api/recipes/stats").mock(
            return_value=httpx.Response(200, json=STATS_RESPONSE)
        )

        assert main(["stats"]) == 0

        out = capsys.readouterr().out
        assert "Recipes:      42" in out
        assert "User-added:   12" in out

    @respx.mock
    def test_add_duplicate(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should say when the URL is already in the collection."""
        respx.post(f"{BASE_URL}/api/recipes/scrape").mock(
            return_value=httpx.Response(
                200,
                json={"success": True, "existingRecipe": create_recipe_record("old")},
            )
        )

        assert main(["add", "https://example.com/pie"]) == 0

        assert "Already in the collection: old" in capsys.readouterr().out

    @respx.mock
    def test_screenshot(
        self,
        capsys: pytest.CaptureFixture[str],
        tmp_path: Path,
    ) -> None:
        """Should upload the image as a base64 data URL."""
        image = tmp_path / "card.jpg"
        image.write_bytes(b"\xff\xd8\xff")
        route = respx.post(f"{BASE_URL}/api/recipes/screenshot").mock(
            return_value=httpx.Response(
                200,
                json=create_recipe_response(create_recipe_record("ocr")),
            )
        )

        assert main(["screenshot", str(image)]) == 0

        body = orjson.loads(route.calls.last.request.content)
        encoded = base64.b64encode(b"\xff\xd8\xff").decode()
        assert body["imageData"] == f"data:image/jpeg;base64,{encoded}"
        assert "Added: ocr" in capsys.readouterr().out

    def test_screenshot_missing_file(
        self,
        capsys: pytest.CaptureFixture[str],
        tmp_path: Path,
    ) -> None:
        """Should report an unreadable image on stderr with exit code 1."""
        assert main(["screenshot", str(tmp_path / "missing.png")]) == 1

        assert "Error:" in capsys.readouterr().err


class TestFavoritesCommands:
    """Tests for favorite and favorites."""

    @respx.mock
    def test_toggle_then_list(
        self,
        capsys: pytest.CaptureFixture[str],
        tmp_path: Path,
    ) -> None:
        """Should persist a toggled favorite and resolve it later."""
        favorite_route = respx.post(f"{BASE_URL}/api/recipes/r1/favorite").mock(
            return_value=httpx.Response(200, json={"success": True})
        )
        respx.get(f"{BASE_URL}/api/recipes/r1").mock(
            return_value=httpx.Response(
                200,
                json=create_recipe_response(create_recipe_record("r1", title="Stew")),
            )
        )

        assert main(["favorite", "r1"]) == 0
        assert main(["favorites"]) == 0

        out = capsys.readouterr().out
        assert orjson.loads(favorite_route.calls.last.request.content) == {"increment": 1}
        assert orjson.loads((tmp_path / "favorites.json").read_bytes()) == ["r1"]
        assert "Added to favorites: r1" in out
        assert "* r1  Stew" in out

    def test_no_favorites(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should say when nothing is favorited."""
        assert main(["favorites"]) == 0

        assert "No favorites yet." in capsys.readouterr().out


class TestArguments:
    """Tests for argument handling."""

    def test_requires_command(self) -> None:
        """Should exit with usage when no command is given."""
        with pytest.raises(SystemExit):
            main([])

    @respx.mock
    def test_base_url_override(self) -> None:
        """Should send requests to --base-url."""
        route = respx.get("http://other.test/api/recipes/stats").mock(
            return_value=httpx.Response(200, json=STATS_RESPONSE)
        )

        assert main(["--base-url", "http://other.test", "stats"]) == 0

        assert route.called

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should print the configured app name and version."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert "Recipe Browser 0.1.0" in capsys.readouterr().out
