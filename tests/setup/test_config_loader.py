# -*- coding: utf-8 -*-
"""
Tests for the config_loader module.
"""

import argparse
from pathlib import Path

import pytest
import yaml

from recipe_profile.setup.config_loader import _deep_update, load_app_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("RECIPE_PROFILE_BATCH_SIZE", raising=False)
    monkeypatch.delenv("RECIPE_PROFILE_COOKBOOK_DIR", raising=False)
    monkeypatch.delenv("RECIPE_PROFILE_CACHE_ENABLED", raising=False)
    monkeypatch.delenv("RECIPE_PROFILE_SITE__SITE_NAME", raising=False)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "cookbook_dir": "recipes",
                "recipes": ["standard"],
                "batch_size": 5,
                "site": {"site_name": "From YAML", "langcode": "fr"},
            }
        )
    )
    return path


def cli(**values):
    return argparse.Namespace(**values)


def test_defaults_without_config_file(tmp_path):
    settings = load_app_settings(config_file_path=tmp_path / "missing.yaml")

    assert settings.cookbook_dir == Path("cookbook")
    assert settings.cache_enabled is False
    assert settings.batch_size == 0
    assert settings.core_extensions == ["system", "user"]
    assert settings.site.site_name == "My site"


def test_yaml_overrides_defaults(config_file):
    settings = load_app_settings(config_file_path=config_file)

    assert settings.cookbook_dir == Path("recipes")
    assert settings.recipes == ["standard"]
    assert settings.batch_size == 5
    assert settings.site.site_name == "From YAML"
    assert settings.site.account_name == "admin"


def test_environment_is_overridden_by_yaml(monkeypatch, config_file):
    monkeypatch.setenv("RECIPE_PROFILE_BATCH_SIZE", "9")
    monkeypatch.setenv("RECIPE_PROFILE_CACHE_ENABLED", "true")

    settings = load_app_settings(config_file_path=config_file)

    assert settings.batch_size == 5
    assert settings.cache_enabled is True


def test_nested_environment_variable(monkeypatch, tmp_path):
    monkeypatch.setenv("RECIPE_PROFILE_SITE__SITE_NAME", "From env")

    settings = load_app_settings(config_file_path=tmp_path / "missing.yaml")

    assert settings.site.site_name == "From env"


def test_cli_overrides_everything(config_file):
    args = cli(
        cookbook="cli_cookbook",
        batch_size=2,
        cache=True,
        site_name="From CLI",
        non_interactive=True,
        site_mail=None,
    )

    settings = load_app_settings(cli_args=args, config_file_path=config_file)

    assert settings.cookbook_dir == Path("cli_cookbook")
    assert settings.batch_size == 2
    assert settings.cache_enabled is True
    assert settings.site.site_name == "From CLI"
    assert settings.site.langcode == "fr"
    assert settings.site.interactive is False


def test_unset_cli_flags_do_not_override(config_file):
    settings = load_app_settings(
        cli_args=cli(cache=None, batch_size=None), config_file_path=config_file
    )

    assert settings.cache_enabled is False
    assert settings.batch_size == 5


def test_invalid_yaml_file_is_ignored(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("batch_size: [unclosed\n")

    assert load_app_settings(config_file_path=path).batch_size == 0


def test_validation_error_exits(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"batch_size": -1}))

    with pytest.raises(SystemExit) as excinfo:
        load_app_settings(config_file_path=path)

    assert "Configuration error" in str(excinfo.value)


def test_deep_update_merges_nested_dicts():
    source = {"site": {"site_name": "a", "langcode": "en"}, "recipes": ["x"]}

    result = _deep_update(source, {"site": {"site_name": "b"}, "recipes": None})

    assert result == {"site": {"site_name": "b", "langcode": "en"}, "recipes": ["x"]}
