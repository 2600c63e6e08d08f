"""Command-line front end for browsing the recipe collection."""

from __future__ import annotations

import argparse
import asyncio
import base64
import mimetypes
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from recipe_browser.core.config import get_settings
from recipe_browser.observability.logging import bind_context, setup_logging
from recipe_browser.services.favorites import FavoritesService, FavoritesStore
from recipe_browser.services.recipe_api import RecipeApiClient, RecipeApiError
from recipe_browser.services.recipe_list import RecipeListReconciler, ViewState


if TYPE_CHECKING:
    from collections.abc import Iterable

    from recipe_browser.schemas.recipe import Recipe


EMPTY_MESSAGES = {
    ViewState.NO_SEARCH_RESULTS: "No recipes found for this search.",
    ViewState.EMPTY_COLLECTION: "The collection is empty. Add your first recipe.",
}


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="recipe-browser",
        description="Browse, search and favorite recipes.",
    )
    app = get_settings().app
    parser.add_argument(
        "--version", action="version", version=f"{app.name} {app.version}"
    )
    parser.add_argument("--base-url", default="", help="Override api.base_url.")
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List recipes, most recent first.")
    list_cmd.add_argument(
        "--pages",
        type=int,
        default=1,
        help="Number of pages to load (Load More clicks + 1).",
    )

    search_cmd = sub.add_parser("search", help="Search recipes.")
    search_cmd.add_argument("query")

    show_cmd = sub.add_parser("show", help="Show one recipe.")
    show_cmd.add_argument("recipe_id")

    sub.add_parser("stats", help="Show collection statistics.")
    sub.add_parser("favorites", help="List favorite recipes.")

    favorite_cmd = sub.add_parser("favorite", help="Toggle a favorite.")
    favorite_cmd.add_argument("recipe_id")

    add_cmd = sub.add_parser("add", help="Add a recipe by scraping a URL.")
    add_cmd.add_argument("url")

    screenshot_cmd = sub.add_parser("screenshot", help="Add a recipe from a screenshot.")
    screenshot_cmd.add_argument("image", type=Path)

    return parser.parse_args(argv)


def _print_recipes(recipes: Iterable[Recipe], favorites: FavoritesStore) -> None:
    for recipe in recipes:
        marker = "*" if favorites.contains(recipe.id) else " "
        origin = "scraped" if recipe.is_auto_scraped else "added"
        print(f"{marker} {recipe.id}  {recipe.title}  [{origin}]")


def _print_recipe(recipe: Recipe) -> None:
    print(recipe.title)
    print(f"Source: {recipe.source}")
    print("\nIngredients:")
    for line in recipe.ingredients:
        print(f"  - {line}")
    print("\nDirections:")
    for number, step in enumerate(recipe.directions, start=1):
        print(f"  {number}. {step}")


def _image_data_url(path: Path) -> str:
    mime_type = mimetypes.guess_type(path.name)[0] or "image/png"
    encoded = base64.b64encode(path.read_bytes()).decode()
    return f"data:{mime_type};base64,{encoded}"


async def _run(args: argparse.Namespace) -> int:
    favorites = FavoritesStore.from_settings()

    async with RecipeApiClient(base_url=args.base_url or None) as client:
        if args.command in ("list", "search"):
            reconciler = RecipeListReconciler(client)
            if args.command == "list":
                await reconciler.load_first_page()
                for _ in range(max(args.pages, 1) - 1):
                    if not await reconciler.load_next_page():
                        break
            else:
                await reconciler.search(args.query)

            state = reconciler.view_state()
            if state in EMPTY_MESSAGES:
                print(EMPTY_MESSAGES[state])
                return 0
            _print_recipes(reconciler.visible_list(), favorites)
            if args.command == "list":
                shown = len(reconciler.visible_list())
                more = " (more available)" if reconciler.has_more else ""
                print(f"\n{shown} of {reconciler.total} recipes{more}")

        elif args.command == "show":
            _print_recipe(await client.get_recipe(args.recipe_id))

        elif args.command == "stats":
            stats = await client.get_stats()
            print(f"Recipes:      {stats.total}")
            print(f"Auto-scraped: {stats.auto_scraped}")
            print(f"User-added:   {stats.user_added}")

        elif args.command == "favorites":
            service = FavoritesService(client, favorites)
            recipes = await service.resolve_favorites()
            if not recipes:
                print("No favorites yet.")
                return 0
            _print_recipes(recipes, favorites)

        elif args.command == "favorite":
            service = FavoritesService(client, favorites)
            is_favorite = await service.toggle_favorite(args.recipe_id)
            verb = "Added to" if is_favorite else "Removed from"
            print(f"{verb} favorites: {args.recipe_id}")

        elif args.command == "add":
            result = await client.scrape_recipe(args.url)
            if result.duplicate:
                print(f"Already in the collection: {result.recipe.id}  {result.recipe.title}")
            else:
                print(f"Added: {result.recipe.id}  {result.recipe.title}")

        elif args.command == "screenshot":
            recipe = await client.submit_screenshot(_image_data_url(args.image))
            print(f"Added: {recipe.id}  {recipe.title}")

    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)

    settings = get_settings()
    setup_logging(
        settings.logging.level,
        settings.logging.format,
        is_development=settings.is_development,
        log_file=settings.logging.file,
    )
    bind_context(command=args.command)

    try:
        return asyncio.run(_run(args))
    except (RecipeApiError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
