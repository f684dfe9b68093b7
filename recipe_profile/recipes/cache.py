# recipe_profile/recipes/cache.py
# -*- coding: utf-8 -*-
"""
Filesystem-backed cache of parsed recipe definitions.

One YAML file per recipe name holds the serialized RecipeDefinition and the
fingerprint of the recipe directory it was parsed from. Entries are written
atomically, so concurrent installer runs never observe a partial entry; two
runs racing on the same key simply overwrite each other with equally valid
data.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from recipe_profile.common.file_utils import atomic_write_text, dump_yaml, read_yaml_file
from recipe_profile.recipes.exceptions import CacheWriteError
from recipe_profile.recipes.models import RecipeDefinition

module_logger = logging.getLogger(__name__)


class RecipeCache:
    """Keyed store of RecipeDefinition entries validated by fingerprint."""

    def __init__(
        self,
        cache_dir: Union[str, Path],
        logger: Optional[logging.Logger] = None,
    ):
        self.cache_dir = Path(cache_dir)
        self.logger = logger or module_logger

    def entry_path(self, recipe_name: str) -> Path:
        """Return the file that holds the entry for `recipe_name`."""
        safe_name = recipe_name.strip("/").replace("/", "--")
        return self.cache_dir / f"{safe_name}.yml"

    def get(
        self, recipe_name: str, fingerprint: str
    ) -> Optional[RecipeDefinition]:
        """
        Return the cached definition if its fingerprint matches.

        A missing, stale, unreadable or corrupt entry is a miss.
        """
        path = self.entry_path(recipe_name)
        if not path.is_file():
            return None

        try:
            entry = read_yaml_file(path)
        except (OSError, yaml.YAMLError) as e:
            self.logger.warning(
                f"Ignoring unreadable cache entry for recipe '{recipe_name}' at {path}: {e}"
            )
            return None

        if not isinstance(entry, dict) or entry.get("fingerprint") != fingerprint:
            self.logger.debug(f"Cache entry for recipe '{recipe_name}' is stale")
            return None

        try:
            return RecipeDefinition.model_validate(entry.get("definition"))
        except ValidationError as e:
            self.logger.warning(
                f"Ignoring corrupt cache entry for recipe '{recipe_name}': {e}"
            )
            return None

    def set(
        self,
        recipe_name: str,
        fingerprint: str,
        definition: RecipeDefinition,
    ) -> None:
        """
        Write the entry for `recipe_name`.

        Raises:
            CacheWriteError: If the entry could not be written.
        """
        path = self.entry_path(recipe_name)
        entry = {
            "recipe": recipe_name,
            "fingerprint": fingerprint,
            "definition": definition.to_cache_dict(),
        }
        try:
            atomic_write_text(path, dump_yaml(entry))
        except (OSError, yaml.YAMLError) as e:
            raise CacheWriteError(recipe_name, str(e)) from e
        self.logger.debug(f"Wrote cache entry for recipe '{recipe_name}' to {path}")

    def clear(self) -> int:
        """Remove every cache entry. Returns the number of entries removed."""
        if not self.cache_dir.is_dir():
            return 0
        removed = 0
        for entry in self.cache_dir.glob("*.yml"):
            entry.unlink()
            removed += 1
        return removed
