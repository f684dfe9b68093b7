# -*- coding: utf-8 -*-
"""
Tests for config actions and their registry.
"""

import pytest

from recipe_profile.recipes.actions import (
    ActionRegistry,
    create_if_not_exists,
    set_value,
    simple_config_update,
    substitute_placeholders,
)
from recipe_profile.setup.config_models import InstallState


@pytest.fixture
def install_state():
    return InstallState(site_name="Harbour News", parameters={"region": "TAS"})


def test_builtin_actions_are_registered():
    actions = ActionRegistry.get_all_actions()

    assert {"simple_config_update", "create_if_not_exists", "set_value"} <= set(actions)


def test_registering_a_duplicate_name_fails():
    with pytest.raises(ValueError):
        ActionRegistry.register("set_value")(lambda current, value, state: {})


def test_register_and_unregister_custom_action():
    @ActionRegistry.register("test_clear")
    def clear(current, value, state):
        return {}

    try:
        assert ActionRegistry.get_action("test_clear") is clear
    finally:
        ActionRegistry.unregister("test_clear")

    with pytest.raises(KeyError):
        ActionRegistry.get_action("test_clear")


def test_simple_config_update_merges_nested_keys(install_state):
    current = {"title": "Blog", "display": {"teaser": True, "count": 5}}

    updated = simple_config_update(
        current, {"display": {"count": 10}, "title": "{site_name} blog"}, install_state
    )

    assert updated == {
        "title": "Harbour News blog",
        "display": {"teaser": True, "count": 10},
    }
    assert current["display"]["count"] == 5


def test_simple_config_update_is_idempotent(install_state):
    once = simple_config_update({"a": 1}, {"b": 2}, install_state)

    assert simple_config_update(once, {"b": 2}, install_state) == once


def test_simple_config_update_requires_existing_object(install_state):
    with pytest.raises(ValueError):
        simple_config_update(None, {"b": 2}, install_state)


def test_simple_config_update_requires_mapping(install_state):
    with pytest.raises(ValueError):
        simple_config_update({"a": 1}, ["b"], install_state)


def test_create_if_not_exists(install_state):
    created = create_if_not_exists(None, {"name": "{site_name}"}, install_state)

    assert created == {"name": "Harbour News"}
    assert create_if_not_exists({"name": "Kept"}, {"name": "New"}, install_state) == {
        "name": "Kept"
    }


def test_set_value_creates_parents(install_state):
    updated = set_value({"page": "flat"}, {"page.front": "/home", "slogan": "{region}"}, install_state)

    assert updated == {"page": {"front": "/home"}, "slogan": "TAS"}


def test_set_value_creates_missing_object(install_state):
    assert set_value(None, {"a.b": 1}, install_state) == {"a": {"b": 1}}


def test_unknown_placeholders_are_left_alone(install_state):
    value = {"items": ["{site_name}", "{unknown}", "{ not a placeholder"], "n": 3}

    assert substitute_placeholders(value, install_state) == {
        "items": ["Harbour News", "{unknown}", "{ not a placeholder"],
        "n": 3,
    }
