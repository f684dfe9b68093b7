# recipe_profile/batch/executor.py
# -*- coding: utf-8 -*-
"""
Runs batch jobs one operation at a time.

The executor may be invoked repeatedly against the same job, each time
processing a bounded number of operations, so that drivers with a time or
request-lifetime limit can spread a long job over several calls. Operations
never run concurrently; later operations may depend on earlier ones.
"""

import logging
from typing import Dict, List, Optional

from recipe_profile.batch.job import BatchJob, ExecutionResult, ProgressSink
from recipe_profile.common.logging_config import SYMBOLS_DEFAULT
from recipe_profile.installer.backend import BaseSiteBackend
from recipe_profile.recipes.exceptions import BatchFailure, OperationFailure

module_logger = logging.getLogger(__name__)


class BatchExecutor:
    """Applies a BatchJob's operations to a site backend in sequence."""

    def __init__(
        self,
        backend: BaseSiteBackend,
        logger: Optional[logging.Logger] = None,
        symbols: Optional[Dict[str, str]] = None,
    ):
        self.backend = backend
        self.logger = logger or module_logger
        self.symbols = symbols or SYMBOLS_DEFAULT

    def run(
        self,
        job: BatchJob,
        progress_sink: Optional[ProgressSink] = None,
        start_index: Optional[int] = None,
        max_operations: Optional[int] = None,
    ) -> ExecutionResult:
        """
        Execute operations from `start_index` onwards.

        Args:
            job: The job to run. Its position is advanced as operations complete.
            progress_sink: Called after each completed operation with
                (completed count, total, description).
            start_index: First index to run. Defaults to the job's position;
                lower indices are skipped.
            max_operations: Upper bound on operations run by this call.
                None or 0 runs to the end of the job.

        Returns:
            An ExecutionResult. On failure its `failure` holds a BatchFailure
            and the job's position stays at the failed index.

        Raises:
            ValueError: If start_index is outside the job.
        """
        total = job.total
        start = job.position if start_index is None else start_index
        if start < 0 or start > total:
            raise ValueError(
                f"Start index {start} is outside the job (0..{total})"
            )
        job.position = start
        completed: List[int] = []

        if start == 0:
            self.logger.info(f"{self.symbols.get('rocket', '🚀')} {job.init_message}")
        elif start < total:
            self.logger.info(f"Resuming '{job.title}' at operation {start + 1} of {total}")

        for index in range(start, total):
            if max_operations and len(completed) >= max_operations:
                break

            operation = job.operations[index]
            self.logger.info(
                f"--- {self.symbols.get('step', '➡️')} [{index + 1}/{total}] {operation.description} ---"
            )
            try:
                self.backend.apply_operation(operation, job.install_state)
            except Exception as e:
                failure = BatchFailure(
                    index, OperationFailure(operation, e), completed=range(index)
                )
                self.logger.error(
                    f"{self.symbols.get('error', '❌')} {job.error_message} {failure}",
                    exc_info=True,
                )
                return ExecutionResult(
                    completed=completed,
                    position=job.position,
                    total=total,
                    failure=failure,
                )

            completed.append(index)
            job.position = index + 1
            if progress_sink is not None:
                progress_sink(index + 1, total, operation.description)

        if job.is_finished:
            self.logger.info(
                f"{self.symbols.get('sparkles', '✨')} '{job.title}' finished: {total} operations applied."
            )

        return ExecutionResult(completed=completed, position=job.position, total=total)

    def run_step(
        self, job: BatchJob, progress_sink: Optional[ProgressSink] = None
    ) -> ExecutionResult:
        """Run exactly one operation from the job's current position."""
        return self.run(job, progress_sink, max_operations=1)
