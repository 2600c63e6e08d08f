"""Factory configuration and exports.

This module exports all factories for convenient importing in tests.
"""

from tests.factories.recipe import RecipeFactory, make_page


__all__ = [
    "RecipeFactory",
    "make_page",
]
