# recipe_profile/setup/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for application configuration.

This module defines the structured settings for the profile,
including defaults, type annotations, and descriptions.
It utilizes Pydantic for data validation and settings management.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from recipe_profile.common.logging_config import SYMBOLS_DEFAULT

# --- Default Static Values (can be overridden by config file/env/cli) ---
COOKBOOK_DIR_DEFAULT: str = "cookbook"
CACHE_DIR_DEFAULT: str = ".recipe_cache"
SITE_DIR_DEFAULT: str = "site"
STATE_FILE_DEFAULT: str = ".recipe_profile_state.json"
PROFILE_NAME_DEFAULT: str = "recipe_profile"
SITE_NAME_DEFAULT: str = "My site"
LOG_PREFIX_DEFAULT: str = "[RECIPE-PROFILE]"
BATCH_SIZE_DEFAULT: int = 0


class InstallState(BaseModel):
    """Site parameters chosen during install. Read-only for the orchestrator."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    site_name: str = Field(default=SITE_NAME_DEFAULT, description="Name of the site.")
    site_mail: str = Field(default="admin@example.com", description="Site email address.")
    account_name: str = Field(default="admin", description="Administrator account name.")
    account_mail: str = Field(default="admin@example.com", description="Administrator email address.")
    langcode: str = Field(default="en", description="Default language code.")
    interactive: bool = Field(default=True, description="Whether a person is driving the install.")
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Extra install parameters.")

    def placeholders(self) -> Dict[str, Any]:
        """Values available as {name} placeholders in config action strings."""
        values: Dict[str, Any] = dict(self.parameters)
        values.update(
            site_name=self.site_name,
            site_mail=self.site_mail,
            account_name=self.account_name,
            account_mail=self.account_mail,
            langcode=self.langcode,
        )
        return values


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="RECIPE_PROFILE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    cookbook_dir: Path = Field(default=Path(COOKBOOK_DIR_DEFAULT),
                               description="Directory holding one subdirectory per recipe.")
    cache_dir: Path = Field(default=Path(CACHE_DIR_DEFAULT),
                            description="Directory for cached recipe definitions.")
    cache_enabled: bool = Field(default=False,
                                description="Read and write the recipe cache. Opt-in so shipped caches stay untouched.")
    site_dir: Path = Field(default=Path(SITE_DIR_DEFAULT),
                           description="Directory holding the site's extension list and configuration.")
    state_file: Path = Field(default=Path(STATE_FILE_DEFAULT),
                             description="File recording batch progress between invocations.")
    profile_name: str = Field(default=PROFILE_NAME_DEFAULT,
                              description="Extension name of this profile, removed at the end of install.")
    available_extensions: Optional[List[str]] = Field(default=None,
                                                      description="Extensions the site can enable. None allows any.")
    core_extensions: List[str] = Field(default_factory=lambda: ["system", "user"],
                                       description="Extensions enabled before any recipe is applied.")
    recipes: List[str] = Field(default_factory=list,
                               description="Recipes applied by a full install, in order.")
    batch_size: int = Field(default=BATCH_SIZE_DEFAULT, ge=0,
                            description="Operations per batch invocation. 0 runs the whole job.")
    hidden_messages: List[str] = Field(default_factory=lambda: [r"^Extension .+ has been enabled\.$"],
                                       description="Regular expressions for messages hidden during recipe application.")
    log_prefix: str = Field(default=LOG_PREFIX_DEFAULT,
                            description="Prefix for console log lines.")

    site: InstallState = Field(default_factory=InstallState)

    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))
