# recipe_profile/recipes/models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for recipe definitions and the operations they expand into.

A RecipeDefinition is the parsed, immutable form of a recipe.yml file plus
the configuration payloads it imports. An Operation is one atomic,
idempotent unit of work applied to a site during batch execution.
"""

from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OperationKind(str, Enum):
    """The kinds of work an Operation can describe."""

    ENABLE_EXTENSION = "enable_extension"
    IMPORT_CONFIG = "import_config"
    CONFIG_ACTION = "config_action"
    CALLABLE = "callable"


def _tuples_to_lists(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _tuples_to_lists(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_tuples_to_lists(item) for item in value]
    return value


class RecipeConfig(BaseModel):
    """The `config` section of a recipe.yml file."""

    model_config = ConfigDict(
        frozen=True, extra="ignore", populate_by_name=True
    )

    import_: Tuple[str, ...] = Field(
        default=(),
        alias="import",
        description="Configuration object names imported from the recipe's config directory.",
    )
    actions: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description="Config object name mapped to {action name: argument}.",
    )

    @field_validator("import_", "actions", mode="before")
    @classmethod
    def _empty_when_null(cls, value: Any, info) -> Any:
        if value is None:
            return () if info.field_name == "import_" else {}
        return value


class RecipeDefinition(BaseModel):
    """Parsed recipe. Unknown keys in recipe.yml are ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(description="Human-readable recipe name.")
    description: str = Field(default="")
    type: str = Field(default="Site")
    recipes: Tuple[str, ...] = Field(
        default=(), description="Nested recipes applied before this one."
    )
    install: Tuple[str, ...] = Field(
        default=(), description="Extensions to enable."
    )
    config: RecipeConfig = Field(default_factory=RecipeConfig)
    config_data: Dict[str, Any] = Field(
        default_factory=dict,
        description="Payloads for config.import, keyed by config object name.",
    )
    settings: Dict[str, Any] = Field(default_factory=dict)
    source: str = Field(
        default="", description="The recipe name this definition was loaded from."
    )

    @field_validator("recipes", "install", mode="before")
    @classmethod
    def _empty_tuple_when_null(cls, value: Any) -> Any:
        return () if value is None else value

    @field_validator("settings", "config_data", mode="before")
    @classmethod
    def _empty_dict_when_null(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("config", mode="before")
    @classmethod
    def _default_config_when_null(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def key(self) -> str:
        """Identifier used in composition paths and operation origins."""
        return self.source or self.name

    def to_cache_dict(self) -> Dict[str, Any]:
        """
        Return a dict that yaml.safe_dump can write and model_validate accepts.

        Payload values keep their Python types (dates, non-string keys,
        floats such as inf), so a definition read back from the cache equals
        the freshly parsed one.
        """
        return _tuples_to_lists(self.model_dump(by_alias=True))


class Operation(BaseModel):
    """One atomic, idempotent unit of work."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: OperationKind
    target: str
    recipe: str = ""
    payload: Any = None
    label: str = ""
    func: Optional[Callable[..., Any]] = Field(default=None, exclude=True)

    @property
    def description(self) -> str:
        if self.label:
            return self.label
        if self.kind == OperationKind.ENABLE_EXTENSION:
            return f"Enable extension {self.target}"
        if self.kind == OperationKind.IMPORT_CONFIG:
            return f"Import configuration {self.target}"
        if self.kind == OperationKind.CONFIG_ACTION:
            action = (self.payload or {}).get("action", "?")
            return f"Apply {action} to {self.target}"
        return f"Run {self.target}"

    @property
    def collapse_key(self) -> Optional[Tuple[str, str]]:
        """Key under which duplicates collapse, or None if never collapsed."""
        if self.kind == OperationKind.ENABLE_EXTENSION:
            return (self.kind.value, self.target)
        return None

    @classmethod
    def enable(cls, extension: str, recipe: str = "") -> "Operation":
        return cls(
            kind=OperationKind.ENABLE_EXTENSION, target=extension, recipe=recipe
        )

    @classmethod
    def import_config(
        cls, config_name: str, data: Any, recipe: str = ""
    ) -> "Operation":
        return cls(
            kind=OperationKind.IMPORT_CONFIG,
            target=config_name,
            recipe=recipe,
            payload=data,
        )

    @classmethod
    def config_action(
        cls, config_name: str, action: str, value: Any, recipe: str = ""
    ) -> "Operation":
        return cls(
            kind=OperationKind.CONFIG_ACTION,
            target=config_name,
            recipe=recipe,
            payload={"action": action, "value": value},
        )

    @classmethod
    def call(
        cls,
        step_id: str,
        func: Callable[..., Any],
        label: str = "",
        recipe: str = "",
    ) -> "Operation":
        """Wrap a host-supplied step; `func` receives the site backend."""
        return cls(
            kind=OperationKind.CALLABLE,
            target=step_id,
            recipe=recipe,
            label=label,
            func=func,
        )
