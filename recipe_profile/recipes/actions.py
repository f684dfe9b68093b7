# recipe_profile/recipes/actions.py
# -*- coding: utf-8 -*-
"""
Registry for config actions.

Config actions are the custom steps a recipe runs against configuration
objects after its extensions are enabled and its configuration imported.
Each action receives the current value of the configuration object (or None
when it does not exist), the argument from recipe.yml and the install state,
and returns the new value. Actions must be idempotent: applying one twice
yields the same configuration as applying it once.
"""

import copy
import re
from typing import Any, Callable, Dict, Optional

from recipe_profile.setup.config_models import InstallState

ConfigAction = Callable[[Optional[Dict[str, Any]], Any, InstallState], Dict[str, Any]]

_PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")


class ActionRegistry:
    """
    Registry for config actions.

    This class provides a registry for config actions to register themselves
    and methods for accessing registered actions.
    """

    _registry: Dict[str, ConfigAction] = {}

    @classmethod
    def register(cls, name: str):
        """
        Decorator for registering config actions.

        Args:
            name: The action name used under `config.actions` in recipe.yml.

        Returns:
            A decorator function that registers the action.
        """

        def decorator(action: ConfigAction) -> ConfigAction:
            if name in cls._registry:
                raise ValueError(f"Config action '{name}' already registered")

            cls._registry[name] = action
            return action

        return decorator

    @classmethod
    def unregister(cls, name: str) -> None:
        cls._registry.pop(name, None)

    @classmethod
    def get_action(cls, name: str) -> ConfigAction:
        """
        Get a config action by name.

        Raises:
            KeyError: If no action with the given name is registered.
        """
        if name not in cls._registry:
            raise KeyError(f"No config action registered with name '{name}'")

        return cls._registry[name]

    @classmethod
    def get_all_actions(cls) -> Dict[str, ConfigAction]:
        return cls._registry.copy()


def substitute_placeholders(value: Any, install_state: InstallState) -> Any:
    """
    Replace {name} placeholders in every string within `value`.

    Unknown placeholders are left as they are.
    """
    placeholders = install_state.placeholders()

    def replace(match: "re.Match[str]") -> str:
        key = match.group(1)
        if key in placeholders:
            return str(placeholders[key])
        return match.group(0)

    if isinstance(value, str):
        return _PLACEHOLDER_PATTERN.sub(replace, value)
    if isinstance(value, dict):
        return {
            key: substitute_placeholders(item, install_state)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [substitute_placeholders(item, install_state) for item in value]
    return value


def _require_mapping(action: str, value: Any) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(
            f"{action} expects a mapping, got {type(value).__name__}"
        )
    return value


def _merge(target: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            target[key] = _merge(target[key], value)
        else:
            target[key] = value
    return target


@ActionRegistry.register("simple_config_update")
def simple_config_update(
    current: Optional[Dict[str, Any]], value: Any, install_state: InstallState
) -> Dict[str, Any]:
    """Merge the given keys into an existing configuration object."""
    updates = _require_mapping("simple_config_update", value)
    if current is None:
        raise ValueError(
            "simple_config_update requires an existing configuration object"
        )
    return _merge(
        copy.deepcopy(current), substitute_placeholders(updates, install_state)
    )


@ActionRegistry.register("create_if_not_exists")
def create_if_not_exists(
    current: Optional[Dict[str, Any]], value: Any, install_state: InstallState
) -> Dict[str, Any]:
    """Create the configuration object unless it already exists."""
    data = _require_mapping("create_if_not_exists", value)
    if current is not None:
        return current
    return substitute_placeholders(copy.deepcopy(data), install_state)


@ActionRegistry.register("set_value")
def set_value(
    current: Optional[Dict[str, Any]], value: Any, install_state: InstallState
) -> Dict[str, Any]:
    """
    Set dotted keys, e.g. {"page.front": "/home"}, creating parents.

    A missing configuration object is created.
    """
    assignments = _require_mapping("set_value", value)
    result = copy.deepcopy(current) if current is not None else {}
    for dotted_key, item in assignments.items():
        parts = str(dotted_key).split(".")
        node = result
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = substitute_placeholders(item, install_state)
    return result
