"""Recipe list state: paginated browsing, "Load More" and search."""

from recipe_browser.services.recipe_list.models import ListMode, ViewState
from recipe_browser.services.recipe_list.reconciler import RecipeListReconciler


__all__ = [
    "ListMode",
    "RecipeListReconciler",
    "ViewState",
]
