# recipe_profile/installer/orchestrator.py
# -*- coding: utf-8 -*-
"""
Orchestrator for recipe application.

This module provides the RecipeOrchestrator class, which is responsible for
loading recipes, expanding them into operations and assembling the batch job
the installer runs. It never executes the job itself.
"""

import functools
import logging
from typing import Iterable, List, Optional, Sequence

from recipe_profile.batch.job import BatchJob
from recipe_profile.common.logging_config import log_performance
from recipe_profile.recipes.expander import RecipeExpander, collapse_duplicate_enables
from recipe_profile.recipes.loader import RecipeLoader
from recipe_profile.recipes.models import Operation
from recipe_profile.setup.config_models import InstallState


class RecipeOrchestrator:
    """Builds a single batch job from an ordered list of recipe names."""

    def __init__(
        self,
        loader: RecipeLoader,
        install_state: Optional[InstallState] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            loader: Loader resolving recipe names against the cookbook.
            install_state: Site parameters passed on to the job.
            logger: Optional logger instance. If not provided, a new logger will be created.
        """
        self.loader = loader
        self.install_state = install_state or InstallState()
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    def expand(self, recipe_name: str, cache_enabled: bool = False) -> List[Operation]:
        """Load one recipe and return its operations."""
        resolve = functools.partial(self.loader.load, use_cache=cache_enabled)
        expander = RecipeExpander(resolve, logger=self.logger)
        return expander.expand(resolve(recipe_name))

    @log_performance
    def apply(
        self,
        recipe_names: Sequence[str],
        cache_enabled: bool = False,
        existing_operations: Iterable[Operation] = (),
        title: str = "Applying recipes",
    ) -> BatchJob:
        """
        Build the batch job that applies `recipe_names` in order.

        Args:
            recipe_names: Recipes to apply. Their operation sequences are
                concatenated in this order.
            cache_enabled: Whether the loader may read and write its cache.
            existing_operations: Operations the caller already queued; they
                run first.
            title: Title of the resulting job.

        Returns:
            A BatchJob at position 0.

        Raises:
            NotFoundError, MalformedRecipeError, CycleError: If any recipe
                cannot be loaded or expanded. No partial job is returned.
        """
        operations: List[Operation] = list(existing_operations)

        self.logger.info(
            f"Applying recipes in order: {', '.join(recipe_names) or '(none)'}"
        )

        for recipe_name in recipe_names:
            recipe_operations = self.expand(recipe_name, cache_enabled)
            self.logger.debug(
                f"Recipe '{recipe_name}' contributes {len(recipe_operations)} operations"
            )
            operations.extend(recipe_operations)

        operations = collapse_duplicate_enables(operations)
        self.logger.info(f"Batch job '{title}' has {len(operations)} operations")

        return BatchJob(
            title=title,
            operations=operations,
            install_state=self.install_state,
        )
