# recipe_profile/installer/tasks.py
# -*- coding: utf-8 -*-
"""
Ordered list of install tasks.

The installer runs a sequence of named stages. Callers assemble the sequence
directly and splice their own stages in relative to existing ones with
insert_before and insert_after.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from recipe_profile.common.logging_config import SYMBOLS_DEFAULT

TaskFunction = Callable[[Dict[str, Any]], Any]


class InstallTask:
    """A named install stage."""

    def __init__(
        self,
        task_id: str,
        description: str,
        func: TaskFunction,
        fatal: bool = True,
    ):
        """
        Args:
            task_id: Stable identifier, unique within a task list.
            description: Human-readable name shown while the task runs.
            func: Called with the shared context dictionary.
            fatal: If True, a failure in this task halts the run.
        """
        self.task_id = task_id
        self.description = description
        self.func = func
        self.fatal = fatal

    def __repr__(self) -> str:
        return f"InstallTask({self.task_id!r})"


class InstallTaskList:
    """A centralized orchestrator to run a series of install tasks."""

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        symbols: Optional[Dict[str, str]] = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.symbols = symbols or SYMBOLS_DEFAULT
        self.tasks: List[InstallTask] = []
        # Shared context for tasks to pass state between each other
        self.context: Dict[str, Any] = {}

    def ids(self) -> List[str]:
        return [task.task_id for task in self.tasks]

    def _index(self, task_id: str) -> int:
        for index, task in enumerate(self.tasks):
            if task.task_id == task_id:
                return index
        raise KeyError(f"No install task with id '{task_id}'")

    def _check_new(self, task: InstallTask) -> None:
        if task.task_id in self.ids():
            raise ValueError(f"Install task '{task.task_id}' already exists")

    def get(self, task_id: str) -> InstallTask:
        return self.tasks[self._index(task_id)]

    def append(self, task: InstallTask) -> None:
        self._check_new(task)
        self.tasks.append(task)
        self.logger.debug(f"Task '{task.task_id}' added to the queue.")

    def add_task(
        self,
        task_id: str,
        description: str,
        func: TaskFunction,
        fatal: bool = True,
    ) -> InstallTask:
        task = InstallTask(task_id, description, func, fatal)
        self.append(task)
        return task

    def insert_before(self, anchor_id: str, task: InstallTask) -> None:
        """Insert `task` directly before the task with id `anchor_id`."""
        self._check_new(task)
        self.tasks.insert(self._index(anchor_id), task)

    def insert_after(self, anchor_id: str, task: InstallTask) -> None:
        """Insert `task` directly after the task with id `anchor_id`."""
        self._check_new(task)
        self.tasks.insert(self._index(anchor_id) + 1, task)

    def remove(self, task_id: str) -> InstallTask:
        return self.tasks.pop(self._index(task_id))

    def run(self) -> bool:
        """
        Executes all tasks in sequence.

        Each task's return value is stored in the context under
        "<task id>_result". A failing fatal task stops the run and its
        exception propagates; a failing non-fatal task is logged and skipped.

        Returns:
            True if every task ran.
        """
        self.logger.info("Install started.")
        for i, task in enumerate(self.tasks):
            self.logger.info(
                f"--- Stage {i + 1}: {task.description} ({task.task_id}) ---"
            )

            try:
                result = task.func(self.context)
            except Exception as e:
                if task.fatal:
                    self.logger.critical(
                        f"{self.symbols.get('critical', '🔥')} Task '{task.task_id}' failed: {e}"
                    )
                    raise
                self.logger.warning(
                    f"Task '{task.task_id}' failed but is non-fatal. Continuing: {e}"
                )
                continue

            self.context[f"{task.task_id}_result"] = result
            self.logger.info(
                f"{self.symbols.get('success', '✅')} Task '{task.task_id}' completed successfully."
            )

        self.logger.info(f"{self.symbols.get('sparkles', '✨')} Install finished successfully.")
        return True
