# recipe_profile/installer/backend.py
# -*- coding: utf-8 -*-
"""
Site backends that operations are applied to.

BaseSiteBackend defines the primitives the host site offers (enable an
extension, read and write configuration objects) and dispatches operations
onto them. FileSiteBackend keeps a site's state in plain YAML files.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from recipe_profile.common.file_utils import atomic_write_text, dump_yaml, read_yaml_file
from recipe_profile.installer.messenger import LoggingMessageSink, MessageSink
from recipe_profile.recipes.actions import ActionRegistry
from recipe_profile.recipes.models import Operation, OperationKind
from recipe_profile.setup.config_models import InstallState

EXTENSION_LIST_FILENAME = "core.extension.yml"
CONFIG_DIRNAME = "config"


class BaseSiteBackend(ABC):
    """
    Base class for site backends.

    Subclasses implement the storage primitives; applying operations and
    config actions is shared. Every primitive must be safe to repeat.
    """

    def __init__(
        self,
        messenger: Optional[MessageSink] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the backend.

        Args:
            messenger: Sink for user-facing status messages.
            logger: Optional logger instance. If not provided, a new logger will be created.
        """
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self.messenger = messenger or LoggingMessageSink(self.logger)

    @abstractmethod
    def enable_extension(self, name: str) -> bool:
        """
        Enable an extension.

        Returns:
            True if the extension was enabled, False if it already was.
        """

    @abstractmethod
    def uninstall_extension(self, name: str) -> bool:
        """
        Uninstall an extension.

        Returns:
            True if the extension was removed, False if it was not enabled.
        """

    @abstractmethod
    def enabled_extensions(self) -> List[str]:
        """Return enabled extensions in the order they were enabled."""

    @abstractmethod
    def read_config(self, name: str) -> Optional[Dict[str, Any]]:
        """Return a configuration object, or None if it does not exist."""

    @abstractmethod
    def write_config(self, name: str, data: Dict[str, Any]) -> None:
        """Create or replace a configuration object."""

    def is_extension_enabled(self, name: str) -> bool:
        return name in self.enabled_extensions()

    def import_config(self, name: str, data: Any) -> None:
        """
        Import a configuration object shipped by a recipe.

        Raises:
            ValueError: If the payload is not a mapping or declares a
                dependency on an extension that is not enabled.
        """
        if not isinstance(data, dict):
            raise ValueError(
                f"Configuration '{name}' must be a mapping, got {type(data).__name__}"
            )
        dependencies = data.get("dependencies") or {}
        if not isinstance(dependencies, dict):
            raise ValueError(
                f"Configuration '{name}' has malformed dependencies"
            )
        missing = [
            extension
            for extension in dependencies.get("module") or []
            if not self.is_extension_enabled(extension)
        ]
        if missing:
            raise ValueError(
                f"Configuration '{name}' depends on extensions that are not enabled: {', '.join(missing)}"
            )
        self.write_config(name, data)

    def apply_config_action(
        self,
        name: str,
        action_name: str,
        value: Any,
        install_state: InstallState,
    ) -> bool:
        """
        Run a registered config action against a configuration object.

        Returns:
            True if the configuration changed.

        Raises:
            KeyError: If the action is not registered.
        """
        action = ActionRegistry.get_action(action_name)
        current = self.read_config(name)
        updated = action(current, value, install_state)
        if updated == current:
            return False
        self.write_config(name, updated)
        return True

    def apply_operation(
        self, operation: Operation, install_state: InstallState
    ) -> None:
        """Apply one operation. Exceptions propagate to the executor."""
        if operation.kind == OperationKind.ENABLE_EXTENSION:
            if self.enable_extension(operation.target):
                self.messenger.add(
                    f"Extension {operation.target} has been enabled.", "status"
                )
        elif operation.kind == OperationKind.IMPORT_CONFIG:
            self.import_config(operation.target, operation.payload)
        elif operation.kind == OperationKind.CONFIG_ACTION:
            payload = operation.payload or {}
            self.apply_config_action(
                operation.target,
                payload.get("action", ""),
                payload.get("value"),
                install_state,
            )
        elif operation.kind == OperationKind.CALLABLE:
            if operation.func is None:
                raise ValueError(f"Operation '{operation.target}' has no callable")
            operation.func(self)
        else:
            raise ValueError(f"Unsupported operation kind: {operation.kind}")


class FileSiteBackend(BaseSiteBackend):
    """
    Site state kept in YAML files under a site directory.

    site/
        core.extension.yml      enabled extensions, in enable order
        config/<name>.yml       one file per configuration object
    """

    def __init__(
        self,
        site_dir: Union[str, Path],
        available_extensions: Optional[Iterable[str]] = None,
        messenger: Optional[MessageSink] = None,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(messenger=messenger, logger=logger)
        self.site_dir = Path(site_dir)
        self.available_extensions = (
            set(available_extensions) if available_extensions is not None else None
        )

    @property
    def extension_list_path(self) -> Path:
        return self.site_dir / EXTENSION_LIST_FILENAME

    def config_path(self, name: str) -> Path:
        if not name or "/" in name or "\\" in name or name.startswith("."):
            raise ValueError(f"Invalid configuration name: '{name}'")
        return self.site_dir / CONFIG_DIRNAME / f"{name}.yml"

    def enabled_extensions(self) -> List[str]:
        if not self.extension_list_path.is_file():
            return []
        data = read_yaml_file(self.extension_list_path) or {}
        return list(data.get("module") or [])

    def _save_extensions(self, extensions: List[str]) -> None:
        atomic_write_text(self.extension_list_path, dump_yaml({"module": extensions}))

    def enable_extension(self, name: str) -> bool:
        if (
            self.available_extensions is not None
            and name not in self.available_extensions
        ):
            raise ValueError(f"Extension '{name}' is not available on this site")

        extensions = self.enabled_extensions()
        if name in extensions:
            self.logger.debug(f"Extension {name} is already enabled, skipping")
            return False

        extensions.append(name)
        self._save_extensions(extensions)
        self.logger.info(f"Enabled extension: {name}")
        return True

    def uninstall_extension(self, name: str) -> bool:
        extensions = self.enabled_extensions()
        if name not in extensions:
            return False
        extensions.remove(name)
        self._save_extensions(extensions)
        self.logger.info(f"Uninstalled extension: {name}")
        return True

    def read_config(self, name: str) -> Optional[Dict[str, Any]]:
        path = self.config_path(name)
        if not path.is_file():
            return None
        try:
            data = read_yaml_file(path)
        except yaml.YAMLError as e:
            raise ValueError(f"Stored configuration '{name}' is unreadable: {e}") from e
        return data if isinstance(data, dict) else None

    def write_config(self, name: str, data: Dict[str, Any]) -> None:
        atomic_write_text(self.config_path(name), dump_yaml(data))
        self.logger.debug(f"Wrote configuration {name}")
