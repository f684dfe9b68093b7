# -*- coding: utf-8 -*-
"""
Tests for recipe and operation models.
"""

import pytest
from pydantic import ValidationError

from recipe_profile.recipes.models import Operation, OperationKind, RecipeDefinition


def test_definition_is_immutable():
    definition = RecipeDefinition(name="Base")

    with pytest.raises(ValidationError):
        definition.name = "Changed"


def test_key_prefers_source():
    assert RecipeDefinition(name="Blog", source="starter/blog").key == "starter/blog"
    assert RecipeDefinition(name="Blog").key == "Blog"


def test_cache_dict_round_trip_keeps_config_alias():
    definition = RecipeDefinition(
        name="Blog",
        source="blog",
        recipes=["base"],
        install=["blog_module"],
        config={"import": ["blog.settings"], "actions": {"blog.settings": {"set_value": {"a": 1}}}},
        config_data={"blog.settings": {"title": "Blog"}},
        settings={"maintainer": "web team"},
    )

    data = definition.to_cache_dict()

    assert data["config"]["import"] == ["blog.settings"]
    assert RecipeDefinition.model_validate(data) == definition


@pytest.mark.parametrize(
    "operation, description",
    [
        (Operation.enable("blog_module"), "Enable extension blog_module"),
        (Operation.import_config("blog.settings", {}), "Import configuration blog.settings"),
        (
            Operation.config_action("system.site", "set_value", {}),
            "Apply set_value to system.site",
        ),
        (Operation.call("install_core", print), "Run install_core"),
        (Operation.call("install_core", print, label="Install core"), "Install core"),
    ],
)
def test_operation_description(operation, description):
    assert operation.description == description


def test_only_enable_operations_collapse():
    assert Operation.enable("x").collapse_key == (
        OperationKind.ENABLE_EXTENSION.value,
        "x",
    )
    assert Operation.import_config("x", {}).collapse_key is None
