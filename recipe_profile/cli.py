#!/usr/bin/env python3
# recipe_profile/cli.py
"""
Command-line interface for the recipe profile.

Subcommands:
    list                   list the recipes in the cookbook
    show RECIPE            print the operations a recipe expands into
    apply RECIPE...        apply recipes to the site as a batch job
    install                run the full profile install workflow
"""

import argparse
import logging
import sys
from typing import List, Optional

from recipe_profile.batch.executor import BatchExecutor
from recipe_profile.common.logging_config import setup_logging
from recipe_profile.installer.backend import FileSiteBackend
from recipe_profile.installer.messenger import LoggingMessageSink
from recipe_profile.installer.orchestrator import RecipeOrchestrator
from recipe_profile.installer.profile import build_profile_tasks, run_batch
from recipe_profile.recipes.cache import RecipeCache
from recipe_profile.recipes.exceptions import RecipeError
from recipe_profile.recipes.loader import RecipeLoader
from recipe_profile.setup.config_loader import load_app_settings
from recipe_profile.setup.config_models import AppSettings
from recipe_profile.setup.state_manager import BatchStateStore


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Command-line arguments. If None, sys.argv[1:] is used.

    Returns:
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Site installation profile that applies configuration recipes"
    )

    # General options
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--config-file", default="config.yaml", help="YAML configuration file"
    )
    parser.add_argument("--cookbook", help="Directory containing recipes")
    parser.add_argument("--cache-dir", help="Directory for cached recipes")
    parser.add_argument(
        "--cache",
        action="store_true",
        default=None,
        help="Read and write the recipe cache",
    )
    parser.add_argument("--site-dir", help="Directory holding the site state")
    parser.add_argument("--state-file", help="Batch progress state file")
    parser.add_argument("--site-name", help="Name of the site")
    parser.add_argument("--site-mail", help="Site email address")
    parser.add_argument(
        "--non-interactive",
        action="store_true",
        default=None,
        help="Mark the install as unattended",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser("list", help="List available recipes")

    show_parser = subparsers.add_parser(
        "show", help="Show the operations a recipe expands into"
    )
    show_parser.add_argument("recipe", help="Recipe to expand")

    apply_parser = subparsers.add_parser("apply", help="Apply recipes to the site")
    apply_parser.add_argument("recipes", nargs="+", help="Recipes to apply, in order")
    apply_parser.add_argument(
        "--batch-size", type=int, help="Operations per batch invocation"
    )
    apply_parser.add_argument(
        "--no-resume",
        dest="resume",
        action="store_false",
        help="Ignore saved progress and start from the first operation",
    )

    subparsers.add_parser("install", help="Run the full profile install")

    return parser.parse_args(args)


def build_loader(app_settings: AppSettings, logger: logging.Logger) -> RecipeLoader:
    cache = RecipeCache(app_settings.cache_dir, logger=logger)
    return RecipeLoader(app_settings.cookbook_dir, cache=cache, logger=logger)


def build_backend(app_settings: AppSettings, logger: logging.Logger) -> FileSiteBackend:
    return FileSiteBackend(
        app_settings.site_dir,
        available_extensions=app_settings.available_extensions,
        messenger=LoggingMessageSink(logger),
        logger=logger,
    )


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Args:
        args: Command-line arguments. If None, sys.argv[1:] is used.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parsed_args = parse_args(args)

    logger = setup_logging(
        "recipe_profile",
        log_level="DEBUG" if parsed_args.verbose else None,
    )

    try:
        app_settings = load_app_settings(
            cli_args=parsed_args,
            config_file_path=parsed_args.config_file,
            current_logger=logger,
        )
        logger = setup_logging(
            "recipe_profile",
            log_level="DEBUG" if parsed_args.verbose else None,
            log_prefix=app_settings.log_prefix,
            symbols=app_settings.symbols,
        )
        loader = build_loader(app_settings, logger)

        if parsed_args.command == "list":
            logger.info("Available recipes:")
            for name in loader.list_recipes():
                try:
                    definition = loader.load(name, use_cache=app_settings.cache_enabled)
                except RecipeError as e:
                    logger.warning(f"  {name}: cannot be loaded ({e})")
                    continue
                logger.info(f"  {name}: {definition.name} - {definition.description}")
            return 0

        elif parsed_args.command == "show":
            orchestrator = RecipeOrchestrator(loader, app_settings.site, logger)
            operations = orchestrator.expand(
                parsed_args.recipe, cache_enabled=app_settings.cache_enabled
            )
            for index, operation in enumerate(operations, start=1):
                print(f"{index:3d}. {operation.description}  [{operation.recipe}]")
            return 0

        elif parsed_args.command == "apply":
            orchestrator = RecipeOrchestrator(loader, app_settings.site, logger)
            job = orchestrator.apply(
                parsed_args.recipes, cache_enabled=app_settings.cache_enabled
            )
            executor = BatchExecutor(
                build_backend(app_settings, logger),
                logger=logger,
                symbols=app_settings.symbols,
            )
            result = run_batch(
                job,
                executor,
                BatchStateStore(app_settings.state_file, logger=logger),
                batch_size=app_settings.batch_size,
                resume=parsed_args.resume,
            )
            if result.failure is not None:
                logger.error(f"Recipe application failed: {result.failure}")
                return 1
            logger.info("Recipes applied successfully")
            return 0

        elif parsed_args.command == "install":
            tasks = build_profile_tasks(
                app_settings,
                build_backend(app_settings, logger),
                loader=loader,
                state_store=BatchStateStore(app_settings.state_file, logger=logger),
                logger=logger,
            )
            tasks.run()
            return 0

        else:
            logger.error("No command specified. Use --help for usage information.")
            return 1

    except RecipeError as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        logger.exception(f"Error: {str(e)}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
