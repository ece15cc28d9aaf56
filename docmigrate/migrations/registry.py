"""Ordered collection of migration steps."""

from typing import Iterable, List

from docmigrate.core.exceptions import DuplicateStepError, InvalidStepIdError
from docmigrate.migrations.base import MigrationStep


class StepRegistry:
    """Holds the known migration steps sorted by id.

    The registry also maintains the chain index used by the migrator: for
    each version a document may carry, the step that moves it forward.
    """

    def __init__(self, steps: Iterable[MigrationStep] | None = None):
        self._steps: List[MigrationStep] = []
        self._chain: dict[int, MigrationStep] = {}
        for step in steps or ():
            self.register(step)

    def register(self, step: MigrationStep) -> None:
        """Register a step.

        Raises:
            InvalidStepIdError: If the step id is not a positive integer
            DuplicateStepError: If a step with the same id is already known
        """
        if isinstance(step.id, bool) or not isinstance(step.id, int) or step.id <= 0:
            raise InvalidStepIdError(step.id)
        if any(existing.id == step.id for existing in self._steps):
            raise DuplicateStepError(step.id)
        self._steps.append(step)
        self._steps.sort(key=lambda s: s.id)
        self._reindex()

    def register_all(self, steps: Iterable[MigrationStep]) -> None:
        for step in steps:
            self.register(step)

    def _reindex(self) -> None:
        self._chain = {}
        previous = 0
        for step in self._steps:
            self._chain[previous] = step
            previous = step.id

    @property
    def steps(self) -> List[MigrationStep]:
        """Registered steps in ascending id order."""
        return list(self._steps)

    @property
    def last(self) -> int | None:
        """Highest registered step id, or None when the registry is empty."""
        if not self._steps:
            return None
        return self._steps[-1].id

    def step_for(self, version: int) -> MigrationStep | None:
        """Return the step that applies to documents at ``version``."""
        return self._chain.get(version)

    def __len__(self) -> int:
        return len(self._steps)

    def __bool__(self) -> bool:
        return bool(self._steps)
