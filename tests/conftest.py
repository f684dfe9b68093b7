# tests/conftest.py
from pathlib import Path
from typing import Any, Dict, Optional

import pytest
import yaml

from recipe_profile.installer.backend import FileSiteBackend
from recipe_profile.installer.messenger import CollectingMessageSink
from recipe_profile.recipes.cache import RecipeCache
from recipe_profile.recipes.loader import RecipeLoader

BLOG_SETTINGS = {
    "dependencies": {"module": ["blog_module"]},
    "title": "Blog",
    "posts_per_page": 10,
}


@pytest.fixture
def cookbook(tmp_path) -> Path:
    root = tmp_path / "cookbook"
    root.mkdir()
    return root


@pytest.fixture
def write_recipe(cookbook):
    """Write a recipe directory. `raw` replaces the recipe.yml content."""

    def _write(
        name: str,
        definition: Optional[Dict[str, Any]] = None,
        config: Optional[Dict[str, Any]] = None,
        raw: Optional[str] = None,
    ) -> Path:
        recipe_dir = cookbook / name
        recipe_dir.mkdir(parents=True, exist_ok=True)
        content = raw if raw is not None else yaml.safe_dump(definition, sort_keys=False)
        (recipe_dir / "recipe.yml").write_text(content, encoding="utf-8")
        for config_name, data in (config or {}).items():
            config_dir = recipe_dir / "config"
            config_dir.mkdir(exist_ok=True)
            payload = data if isinstance(data, str) else yaml.safe_dump(data, sort_keys=False)
            (config_dir / f"{config_name}.yml").write_text(payload, encoding="utf-8")
        return recipe_dir

    return _write


@pytest.fixture
def blog_cookbook(cookbook, write_recipe) -> Path:
    """`base` enables core_content; `blog` composes base and adds its own."""
    write_recipe("base", {"name": "Base", "install": ["core_content"]})
    write_recipe(
        "blog",
        {
            "name": "Blog",
            "recipes": ["base"],
            "install": ["blog_module"],
            "config": {"import": ["blog.settings"]},
        },
        config={"blog.settings": BLOG_SETTINGS},
    )
    return cookbook


@pytest.fixture
def cache_dir(tmp_path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def loader(blog_cookbook, cache_dir) -> RecipeLoader:
    return RecipeLoader(blog_cookbook, cache=RecipeCache(cache_dir))


@pytest.fixture
def messages() -> CollectingMessageSink:
    return CollectingMessageSink()


@pytest.fixture
def backend(tmp_path, messages) -> FileSiteBackend:
    return FileSiteBackend(tmp_path / "site", messenger=messages)
