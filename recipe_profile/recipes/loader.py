# recipe_profile/recipes/loader.py
# -*- coding: utf-8 -*-
"""
Loads recipes from a cookbook directory.

A cookbook holds one directory per recipe. Each recipe directory contains a
recipe.yml definition file and, optionally, a config/ directory with one
YAML file per configuration object the recipe imports:

    cookbook/
        blog/
            recipe.yml
            config/
                blog.settings.yml
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from recipe_profile.common.file_utils import fingerprint_directory, read_yaml_file
from recipe_profile.recipes.cache import RecipeCache
from recipe_profile.recipes.exceptions import (
    CacheWriteError,
    MalformedRecipeError,
    NotFoundError,
)
from recipe_profile.recipes.models import RecipeDefinition

module_logger = logging.getLogger(__name__)

RECIPE_FILENAME = "recipe.yml"
CONFIG_DIRNAME = "config"


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(item) for item in detail.get("loc", ()))
        parts.append(f"{location or '<root>'}: {detail.get('msg')}")
    return "; ".join(parts)


class RecipeLoader:
    """
    Resolves recipe names against a cookbook and parses them.

    When a RecipeCache is supplied, loads with use_cache=True read and
    populate it; loads with use_cache=False never touch it.
    """

    def __init__(
        self,
        cookbook_dir: Union[str, Path],
        cache: Optional[RecipeCache] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.cookbook_dir = Path(cookbook_dir)
        self.cache = cache
        self.logger = logger or module_logger

    def recipe_dir(self, recipe_name: str) -> Path:
        """
        Return the directory for `recipe_name`.

        Raises:
            NotFoundError: If the name is empty, absolute, escapes the
                cookbook, or the directory or its recipe.yml is missing.
        """
        if not recipe_name or Path(recipe_name).is_absolute():
            raise NotFoundError(recipe_name)

        root = self.cookbook_dir.resolve()
        candidate = (root / recipe_name).resolve()
        try:
            candidate.relative_to(root)
        except ValueError:
            raise NotFoundError(recipe_name, str(candidate)) from None

        if not candidate.is_dir():
            raise NotFoundError(recipe_name, str(candidate))
        if not (candidate / RECIPE_FILENAME).is_file():
            raise NotFoundError(recipe_name, str(candidate / RECIPE_FILENAME))
        return candidate

    def list_recipes(self) -> List[str]:
        """Return the names of every recipe in the cookbook, sorted."""
        if not self.cookbook_dir.is_dir():
            return []
        root = self.cookbook_dir.resolve()
        names = [
            recipe_file.parent.relative_to(root).as_posix()
            for recipe_file in root.rglob(RECIPE_FILENAME)
            if recipe_file.is_file() and recipe_file.parent != root
        ]
        return sorted(names)

    def load(self, recipe_name: str, use_cache: bool = False) -> RecipeDefinition:
        """
        Load a recipe by name.

        Args:
            recipe_name: Path of the recipe relative to the cookbook.
            use_cache: Read and populate the cache. When False the cache is
                neither read nor written.

        Returns:
            The parsed RecipeDefinition.

        Raises:
            NotFoundError: If the recipe does not exist.
            MalformedRecipeError: If the recipe violates the schema.
        """
        directory = self.recipe_dir(recipe_name)

        if not use_cache or self.cache is None:
            return self._parse(recipe_name, directory)

        try:
            fingerprint = fingerprint_directory(directory, self.logger)
        except OSError as e:
            self.logger.warning(
                f"Could not fingerprint recipe '{recipe_name}', bypassing cache: {e}"
            )
            return self._parse(recipe_name, directory)

        cached = self.cache.get(recipe_name, fingerprint)
        if cached is not None:
            self.logger.debug(f"Loaded recipe '{recipe_name}' from cache")
            return cached

        definition = self._parse(recipe_name, directory)
        try:
            self.cache.set(recipe_name, fingerprint, definition)
        except CacheWriteError as e:
            self.logger.warning(str(e))
        return definition

    def _parse(self, recipe_name: str, directory: Path) -> RecipeDefinition:
        recipe_file = directory / RECIPE_FILENAME
        document = self._read_yaml(recipe_name, recipe_file)

        if not isinstance(document, dict):
            raise MalformedRecipeError(
                recipe_name,
                f"{RECIPE_FILENAME} must contain a mapping, got {type(document).__name__}",
            )

        data: Dict[str, Any] = dict(document)
        data.pop("config_data", None)
        data["source"] = recipe_name

        try:
            definition = RecipeDefinition.model_validate(data)
        except ValidationError as e:
            raise MalformedRecipeError(
                recipe_name, _format_validation_error(e)
            ) from e

        config_data: Dict[str, Any] = {}
        for config_name in definition.config.import_:
            config_file = directory / CONFIG_DIRNAME / f"{config_name}.yml"
            if not config_file.is_file():
                raise MalformedRecipeError(
                    recipe_name,
                    f"imported configuration '{config_name}' has no file at {config_file}",
                )
            config_data[config_name] = self._read_yaml(recipe_name, config_file)

        self.logger.debug(
            f"Parsed recipe '{recipe_name}' ({definition.name}) from {recipe_file}"
        )
        return definition.model_copy(update={"config_data": config_data})

    def _read_yaml(self, recipe_name: str, path: Path) -> Any:
        try:
            return read_yaml_file(path)
        except yaml.YAMLError as e:
            raise MalformedRecipeError(
                recipe_name, f"could not parse {path.name}: {e}"
            ) from e
        except OSError as e:
            raise MalformedRecipeError(
                recipe_name, f"could not read {path.name}: {e}"
            ) from e
