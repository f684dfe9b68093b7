# recipe_profile/recipes/expander.py
# -*- coding: utf-8 -*-
"""
Expands recipe definitions into flat, ordered operation lists.

Nested recipes are expanded depth-first in declaration order before the
recipe's own operations. A recipe's own operations always come in this
order: extension enables, configuration imports, config actions.
"""

import logging
from typing import Callable, Iterable, List, Optional, Set

from recipe_profile.recipes.exceptions import CycleError
from recipe_profile.recipes.models import Operation, RecipeDefinition

module_logger = logging.getLogger(__name__)

RecipeResolver = Callable[[str], RecipeDefinition]


def collapse_duplicate_enables(operations: Iterable[Operation]) -> List[Operation]:
    """
    Drop repeated enable operations for the same extension.

    The first occurrence keeps its position; all other operations are kept
    as they are.
    """
    seen: Set[tuple] = set()
    result: List[Operation] = []
    for operation in operations:
        key = operation.collapse_key
        if key is not None:
            if key in seen:
                continue
            seen.add(key)
        result.append(operation)
    return result


class RecipeExpander:
    """
    Turns a RecipeDefinition into the operations that apply it.

    Args:
        resolve: Callable returning the definition for a nested recipe name.
    """

    def __init__(
        self,
        resolve: RecipeResolver,
        logger: Optional[logging.Logger] = None,
    ):
        self.resolve = resolve
        self.logger = logger or module_logger

    def expand(self, definition: RecipeDefinition) -> List[Operation]:
        """
        Expand `definition` and its nested recipes.

        Raises:
            CycleError: If recipe composition contains a cycle.
            NotFoundError, MalformedRecipeError: From resolving nested recipes.
        """
        operations: List[Operation] = []
        visited: Set[str] = set()
        path: List[str] = []

        def visit(recipe: RecipeDefinition):
            key = recipe.key
            if key in path:
                raise CycleError(path[path.index(key):] + [key])

            if key in visited:
                return

            path.append(key)

            for nested_name in recipe.recipes:
                if nested_name in path:
                    raise CycleError(path[path.index(nested_name):] + [nested_name])
                if nested_name in visited:
                    continue
                visit(self.resolve(nested_name))

            path.pop()
            visited.add(key)
            operations.extend(self._own_operations(recipe))

        visit(definition)
        collapsed = collapse_duplicate_enables(operations)
        self.logger.debug(
            f"Expanded recipe '{definition.key}' into {len(collapsed)} operations"
        )
        return collapsed

    @staticmethod
    def _own_operations(recipe: RecipeDefinition) -> List[Operation]:
        origin = recipe.key
        own: List[Operation] = [
            Operation.enable(extension, recipe=origin)
            for extension in recipe.install
        ]
        own.extend(
            Operation.import_config(
                config_name, recipe.config_data.get(config_name), recipe=origin
            )
            for config_name in recipe.config.import_
        )
        for config_name, actions in recipe.config.actions.items():
            for action_name, value in actions.items():
                own.append(
                    Operation.config_action(
                        config_name, action_name, value, recipe=origin
                    )
                )
        return own
