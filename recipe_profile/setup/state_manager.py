# recipe_profile/setup/state_manager.py
# -*- coding: utf-8 -*-
"""
Manages the state file for tracking batch progress between invocations.

The state file records the fingerprint of the job being run and the index of
the next operation. Progress is only resumed for a job whose operation
sequence matches the recorded fingerprint; anything else starts over.
"""

import datetime
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from recipe_profile.batch.job import BatchJob
from recipe_profile.common.file_utils import atomic_write_text

module_logger = logging.getLogger(__name__)


class BatchStateStore:
    """Persists a BatchJob's position in a JSON state file."""

    def __init__(
        self,
        state_file: Union[str, Path],
        logger: Optional[logging.Logger] = None,
    ):
        self.state_file = Path(state_file)
        self.logger = logger or module_logger

    def _read(self) -> Optional[Dict[str, Any]]:
        if not self.state_file.is_file():
            return None
        try:
            with open(self.state_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.warning(
                f"State file {self.state_file} is unreadable, starting over: {e}"
            )
            return None
        return data if isinstance(data, dict) else None

    def load(self, job: BatchJob) -> int:
        """
        Restore the saved position onto `job`.

        Returns:
            The restored position, or 0 when no matching state exists. A
            state file recorded for a different job is cleared.
        """
        state = self._read()
        if state is None:
            return 0

        if state.get("fingerprint") != job.fingerprint():
            self.logger.warning(
                f"State file {self.state_file} belongs to a different job. Clearing saved progress."
            )
            self.clear()
            return 0

        position = state.get("position", 0)
        if not isinstance(position, int) or not 0 <= position <= job.total:
            self.logger.warning(
                f"Saved position {position!r} is invalid for '{job.title}'. Starting over."
            )
            return 0

        job.position = position
        self.logger.info(
            f"Resuming '{job.title}' from saved position {position}/{job.total}"
        )
        return position

    def save(self, job: BatchJob) -> None:
        """Record the job's current position."""
        state = {
            "title": job.title,
            "fingerprint": job.fingerprint(),
            "position": job.position,
            "total": job.total,
            "updated": datetime.datetime.now().isoformat(),
        }
        atomic_write_text(self.state_file, json.dumps(state, indent=2))
        self.logger.debug(f"Saved progress {job.position}/{job.total} to {self.state_file}")

    def clear(self) -> None:
        if self.state_file.exists():
            self.state_file.unlink()
            self.logger.debug(f"Cleared state file {self.state_file}")
