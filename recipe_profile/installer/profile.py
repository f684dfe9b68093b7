# recipe_profile/installer/profile.py
# -*- coding: utf-8 -*-
"""
The profile's install workflow.

build_profile_tasks assembles the default stages:

1. verify_requirements  check the cookbook and every configured recipe exist
2. install_core         enable the core extensions and the profile itself
3. configure_site       write site information and the admin account
4. apply_recipes        build the recipe batch job and run it
5. remove_profile       uninstall the profile once the site is set up

Callers splice in their own stages with InstallTaskList.insert_before and
insert_after.
"""

import logging
from typing import Any, Dict, List, Optional

from recipe_profile.batch.executor import BatchExecutor
from recipe_profile.batch.job import BatchJob, ExecutionResult
from recipe_profile.installer.backend import BaseSiteBackend
from recipe_profile.installer.messenger import FilteredMessageSink
from recipe_profile.installer.orchestrator import RecipeOrchestrator
from recipe_profile.installer.tasks import InstallTaskList
from recipe_profile.recipes.exceptions import NotFoundError
from recipe_profile.recipes.loader import RecipeLoader
from recipe_profile.setup.config_models import AppSettings
from recipe_profile.setup.state_manager import BatchStateStore

module_logger = logging.getLogger(__name__)


def run_batch(
    job: BatchJob,
    executor: BatchExecutor,
    state_store: Optional[BatchStateStore] = None,
    batch_size: int = 0,
    resume: bool = True,
    progress_sink=None,
) -> ExecutionResult:
    """
    Drive `job` to completion in chunks of `batch_size` operations.

    Each chunk corresponds to one executor invocation; progress is saved to
    `state_store` after every chunk so an interrupted run can resume.

    Returns:
        The result of the last invocation. On failure the saved position is
        the failed index.
    """
    if state_store is not None and resume:
        state_store.load(job)

    completed: List[int] = []
    while True:
        result = executor.run(job, progress_sink, max_operations=batch_size or None)
        completed.extend(result.completed)
        if state_store is not None:
            state_store.save(job)
        if not result.succeeded or result.finished or not result.completed:
            break

    if result.finished and state_store is not None:
        state_store.clear()
    return result.model_copy(update={"completed": completed})


def build_profile_tasks(
    app_settings: AppSettings,
    backend: BaseSiteBackend,
    loader: Optional[RecipeLoader] = None,
    executor: Optional[BatchExecutor] = None,
    state_store: Optional[BatchStateStore] = None,
    logger: Optional[logging.Logger] = None,
) -> InstallTaskList:
    """Assemble the default install stages for `app_settings`."""
    logger_to_use = logger or module_logger
    loader = loader or RecipeLoader(app_settings.cookbook_dir, logger=logger_to_use)
    executor = executor or BatchExecutor(
        backend, logger=logger_to_use, symbols=app_settings.symbols
    )
    install_state = app_settings.site

    def verify_requirements(context: Dict[str, Any]) -> List[str]:
        if not app_settings.cookbook_dir.is_dir():
            raise NotFoundError("<cookbook>", str(app_settings.cookbook_dir))
        for recipe_name in app_settings.recipes:
            loader.recipe_dir(recipe_name)
        return list(app_settings.recipes)

    def install_core(context: Dict[str, Any]) -> List[str]:
        for extension in [*app_settings.core_extensions, app_settings.profile_name]:
            backend.enable_extension(extension)
        return backend.enabled_extensions()

    def configure_site(context: Dict[str, Any]) -> Dict[str, Any]:
        site_config = backend.read_config("system.site") or {}
        site_config.update(
            name=install_state.site_name,
            mail=install_state.site_mail,
            langcode=install_state.langcode,
        )
        backend.write_config("system.site", site_config)
        backend.write_config(
            "user.admin_account",
            {"name": install_state.account_name, "mail": install_state.account_mail},
        )
        return site_config

    def apply_recipes(context: Dict[str, Any]) -> ExecutionResult:
        orchestrator = RecipeOrchestrator(loader, install_state, logger=logger_to_use)
        job = orchestrator.apply(
            app_settings.recipes, cache_enabled=app_settings.cache_enabled
        )
        context["job"] = job

        original_messenger = backend.messenger
        backend.messenger = FilteredMessageSink(
            original_messenger, app_settings.hidden_messages
        )
        try:
            result = run_batch(
                job, executor, state_store, batch_size=app_settings.batch_size
            )
        finally:
            backend.messenger = original_messenger

        result.raise_for_failure()
        return result

    def remove_profile(context: Dict[str, Any]) -> bool:
        return backend.uninstall_extension(app_settings.profile_name)

    tasks = InstallTaskList(logger=logger_to_use, symbols=app_settings.symbols)
    tasks.add_task("verify_requirements", "Verify requirements", verify_requirements)
    tasks.add_task("install_core", "Install core extensions", install_core)
    tasks.add_task("configure_site", "Configure site", configure_site)
    tasks.add_task("apply_recipes", "Apply recipes", apply_recipes)
    tasks.add_task("remove_profile", "Remove installation profile", remove_profile)
    return tasks
