# recipe_profile/recipes/exceptions.py
# -*- coding: utf-8 -*-
"""
Exceptions raised while loading, expanding and applying recipes.
"""

from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from recipe_profile.recipes.models import Operation


class RecipeError(Exception):
    """Base class for all recipe errors."""


class NotFoundError(RecipeError):
    """The recipe directory or its recipe.yml does not exist."""

    def __init__(self, recipe_name: str, path: Optional[str] = None):
        self.recipe_name = recipe_name
        self.path = path
        location = f" at {path}" if path else ""
        super().__init__(f"Recipe '{recipe_name}' not found{location}")


class MalformedRecipeError(RecipeError):
    """The recipe definition violates the recipe schema."""

    def __init__(self, recipe_name: str, reason: str):
        self.recipe_name = recipe_name
        self.reason = reason
        super().__init__(f"Recipe '{recipe_name}' is malformed: {reason}")


class CycleError(RecipeError):
    """Recipe composition contains a cycle."""

    def __init__(self, cycle: Sequence[str]):
        self.cycle = list(cycle)
        super().__init__(
            "Recipe composition cycle detected: " + " -> ".join(self.cycle)
        )


class CacheWriteError(RecipeError):
    """A recipe cache entry could not be written. Never fatal to a load."""

    def __init__(self, recipe_name: str, reason: str):
        self.recipe_name = recipe_name
        self.reason = reason
        super().__init__(
            f"Could not write cache entry for recipe '{recipe_name}': {reason}"
        )


class OperationFailure(RecipeError):
    """A single apply-operation failed."""

    def __init__(self, operation: "Operation", cause: BaseException):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation.description} failed: {cause}")


class BatchFailure(RecipeError):
    """
    The batch executor stopped at the first failed operation.

    Carries the index of the failed operation, its OperationFailure, and the
    indices completed before it.
    """

    def __init__(
        self,
        index: int,
        failure: OperationFailure,
        completed: Sequence[int] = (),
    ):
        self.index = index
        self.failure = failure
        self.completed = list(completed)
        super().__init__(
            f"Batch failed at operation {index + 1}"
            f" (recipe '{self.recipe_name}'): {self.operation.description}:"
            f" {failure.cause}"
        )

    @property
    def operation(self) -> "Operation":
        return self.failure.operation

    @property
    def recipe_name(self) -> str:
        return self.failure.operation.recipe
