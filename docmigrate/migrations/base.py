"""Base classes for docmigrate migration steps."""

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List

Transform = Callable[[dict], "dict | None | Awaitable[dict | None]"]


class MigrationOperation(ABC):
    """A declarative, forward-only change to a document."""

    @abstractmethod
    def forward(self, data: dict) -> dict:
        """Apply the transformation.

        Args:
            data: The document to transform

        Returns:
            Transformed copy of the document
        """
        pass


@dataclass
class MigrationStep:
    """One versioned migration unit.

    Applying the step stamps the document with ``id``. Steps are chained in
    ascending ``id`` order: the first step applies to documents at version
    0 and each following step applies to documents stamped by the previous
    one.

    Attributes:
        id: Version a document carries once the step has been applied
        transform: Plain or coroutine function returning the replacement
            document, or None when only the version stamp changes
        description: Human-readable description of the step
    """

    id: int
    transform: Transform | None = None
    description: str = ""

    async def apply(self, document: dict) -> Any:
        """Run the transform against a document.

        Returns:
            The replacement document, or None for a stamp-only step
        """
        if self.transform is None:
            return None
        result = self.transform(document)
        if inspect.isawaitable(result):
            result = await result
        return result

    @classmethod
    def from_operations(
        cls,
        id: int,
        operations: List[MigrationOperation],
        description: str = "",
    ) -> "MigrationStep":
        """Build a step that applies field operations in order.

        The resulting transform yields None when the operations leave the
        document unchanged, so the step only advances the version stamp.
        """

        def transform(document: dict) -> dict | None:
            result = document.copy()
            for op in operations:
                result = op.forward(result)
            return None if result == document else result

        return cls(id=id, transform=transform, description=description)
