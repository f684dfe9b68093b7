# recipe_profile/recipes/__init__.py
"""
Recipe loading, caching and expansion.
"""

from recipe_profile.recipes.cache import RecipeCache
from recipe_profile.recipes.exceptions import (
    BatchFailure,
    CacheWriteError,
    CycleError,
    MalformedRecipeError,
    NotFoundError,
    OperationFailure,
    RecipeError,
)
from recipe_profile.recipes.expander import RecipeExpander, collapse_duplicate_enables
from recipe_profile.recipes.loader import RecipeLoader
from recipe_profile.recipes.models import Operation, OperationKind, RecipeDefinition

__all__ = [
    "BatchFailure",
    "CacheWriteError",
    "CycleError",
    "MalformedRecipeError",
    "NotFoundError",
    "Operation",
    "OperationFailure",
    "OperationKind",
    "RecipeCache",
    "RecipeDefinition",
    "RecipeError",
    "RecipeExpander",
    "RecipeLoader",
    "collapse_duplicate_enables",
]
