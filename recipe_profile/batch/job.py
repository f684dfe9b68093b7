# recipe_profile/batch/job.py
# -*- coding: utf-8 -*-
"""
Batch job and execution result models.
"""

import hashlib
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from recipe_profile.recipes.exceptions import BatchFailure
from recipe_profile.recipes.models import Operation
from recipe_profile.setup.config_models import InstallState

# Called after each completed operation with (done, total, description).
ProgressSink = Callable[[int, int, str], None]


class BatchJob(BaseModel):
    """
    An ordered, resumable sequence of operations.

    `position` is the index of the next operation to run and the only field
    the executor changes.
    """

    model_config = ConfigDict(validate_assignment=True)

    title: str = "Applying recipes"
    operations: List[Operation] = Field(default_factory=list)
    position: int = Field(default=0, ge=0)
    init_message: str = "Starting recipe application."
    error_message: str = "Recipe application has encountered an error."
    install_state: InstallState = Field(default_factory=InstallState)

    @property
    def total(self) -> int:
        return len(self.operations)

    @property
    def is_finished(self) -> bool:
        return self.position >= self.total

    def descriptions(self) -> List[str]:
        return [operation.description for operation in self.operations]

    def fingerprint(self) -> str:
        """Hash of the operation sequence, used to match saved progress."""
        hasher = hashlib.sha256()
        for operation in self.operations:
            hasher.update(
                f"{operation.kind.value}\0{operation.target}\0{operation.recipe}\0{operation.description}\n".encode(
                    "utf-8"
                )
            )
        return hasher.hexdigest()


class ExecutionResult(BaseModel):
    """Outcome of one executor invocation."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    completed: List[int] = Field(
        default_factory=list, description="Indices completed by this invocation."
    )
    position: int = 0
    total: int = 0
    failure: Optional[BatchFailure] = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    @property
    def finished(self) -> bool:
        return self.failure is None and self.position >= self.total

    def raise_for_failure(self) -> None:
        if self.failure is not None:
            raise self.failure
