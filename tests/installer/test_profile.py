# -*- coding: utf-8 -*-
"""
Tests for the profile install workflow and chunked batch runs.
"""

import json

import pytest

from recipe_profile.batch.executor import BatchExecutor
from recipe_profile.batch.job import BatchJob
from recipe_profile.installer.profile import build_profile_tasks, run_batch
from recipe_profile.installer.tasks import InstallTask
from recipe_profile.recipes.exceptions import BatchFailure, NotFoundError
from recipe_profile.recipes.models import Operation
from recipe_profile.setup.config_models import AppSettings, InstallState
from recipe_profile.setup.state_manager import BatchStateStore


@pytest.fixture
def app_settings(blog_cookbook, tmp_path):
    return AppSettings(
        cookbook_dir=blog_cookbook,
        cache_dir=tmp_path / "cache",
        site_dir=tmp_path / "site",
        state_file=tmp_path / "state.json",
        recipes=["blog"],
        site=InstallState(site_name="Harbour News", site_mail="news@example.com"),
    )


@pytest.fixture
def state_store(tmp_path):
    return BatchStateStore(tmp_path / "state.json")


def make_job(*extensions):
    return BatchJob(operations=[Operation.enable(name) for name in extensions])


class TestRunBatch:
    """Tests for run_batch."""

    def test_chunks_until_finished(self, backend, state_store, mocker):
        executor = BatchExecutor(backend)
        run_spy = mocker.spy(executor, "run")

        result = run_batch(make_job("a", "b", "c", "d", "e"), executor, state_store, batch_size=2)

        assert run_spy.call_count == 3
        assert result.finished
        assert result.completed == [0, 1, 2, 3, 4]
        assert not state_store.state_file.exists()

    def test_failure_saves_position(self, backend, state_store, mocker):
        executor = BatchExecutor(backend)
        mocker.patch.object(
            backend,
            "enable_extension",
            side_effect=[True, True, RuntimeError("boom")],
        )

        result = run_batch(make_job("a", "b", "c", "d"), executor, state_store, batch_size=1)

        assert result.failure.index == 2
        assert result.completed == [0, 1]
        saved = json.loads(state_store.state_file.read_text())
        assert saved["position"] == 2
        assert saved["total"] == 4

    def test_resumes_from_saved_position(self, backend, state_store, mocker):
        job = make_job("a", "b", "c")
        job.position = 2
        state_store.save(job)
        executor = BatchExecutor(backend)
        apply_spy = mocker.spy(backend, "apply_operation")

        result = run_batch(make_job("a", "b", "c"), executor, state_store)

        assert result.completed == [2]
        assert [call.args[0].target for call in apply_spy.call_args_list] == ["c"]

    def test_no_resume_starts_over(self, backend, state_store):
        job = make_job("a", "b", "c")
        job.position = 2
        state_store.save(job)

        result = run_batch(make_job("a", "b", "c"), BatchExecutor(backend), state_store, resume=False)

        assert result.completed == [0, 1, 2]


class TestProfileTasks:
    """Tests for build_profile_tasks."""

    def test_default_stage_order(self, app_settings, backend):
        tasks = build_profile_tasks(app_settings, backend)

        assert tasks.ids() == [
            "verify_requirements",
            "install_core",
            "configure_site",
            "apply_recipes",
            "remove_profile",
        ]

    def test_full_install(self, app_settings, backend, messages, state_store):
        tasks = build_profile_tasks(app_settings, backend, state_store=state_store)

        tasks.run()

        assert backend.enabled_extensions() == [
            "system",
            "user",
            "core_content",
            "blog_module",
        ]
        site = backend.read_config("system.site")
        assert site["name"] == "Harbour News"
        assert site["mail"] == "news@example.com"
        assert backend.read_config("user.admin_account")["name"] == "admin"
        assert backend.read_config("blog.settings")["title"] == "Blog"
        assert tasks.context["apply_recipes_result"].finished
        assert not state_store.state_file.exists()

    def test_extension_messages_hidden_during_recipes(self, app_settings, backend, messages):
        build_profile_tasks(app_settings, backend).run()

        hidden = [
            "Extension core_content has been enabled.",
            "Extension blog_module has been enabled.",
        ]
        assert not any(text in hidden for _, text in messages.messages)
        assert backend.messenger is messages

    def test_missing_recipe_fails_verification(self, app_settings, backend):
        settings = app_settings.model_copy(update={"recipes": ["missing"]})
        tasks = build_profile_tasks(settings, backend)

        with pytest.raises(NotFoundError):
            tasks.run()

        assert backend.enabled_extensions() == []

    def test_batch_failure_halts_install(self, app_settings, backend, write_recipe):
        write_recipe(
            "blog",
            {"name": "Blog", "install": ["blog_module"], "config": {"import": ["blog.settings"]}},
            config={"blog.settings": ["not", "a", "mapping"]},
        )
        tasks = build_profile_tasks(app_settings, backend)

        with pytest.raises(BatchFailure):
            tasks.run()

        assert backend.is_extension_enabled("recipe_profile")

    def test_custom_stage_can_be_spliced_in(self, app_settings, backend, mocker):
        tasks = build_profile_tasks(app_settings, backend)
        extra = mocker.Mock(return_value="ok")
        tasks.insert_after("apply_recipes", InstallTask("demo_content", "Demo content", extra))

        tasks.run()

        extra.assert_called_once_with(tasks.context)
        assert tasks.context["demo_content_result"] == "ok"
        assert tasks.ids().index("demo_content") == tasks.ids().index("apply_recipes") + 1
