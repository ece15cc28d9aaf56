"""Per-document migration state machine."""

import logging
from typing import Any

from docmigrate.migrations.registry import StepRegistry
from docmigrate.stores.base import read_version

logger = logging.getLogger(__name__)


class DocumentMigrator:
    """Advances a single document through the registered step chain.

    Args:
        registry: The steps to apply
        version_field: Name of the document's version marker
    """

    def __init__(self, registry: StepRegistry, version_field: str = "migration_version"):
        self.registry = registry
        self.version_field = version_field

    async def migrate(self, document: Any, target: int) -> tuple[Any, bool]:
        """Apply every step between the document's version and ``target``.

        Each step's result replaces the working document when it is not
        None, and the working document is then stamped with the step id.
        The chain stops once the version reaches ``target`` or when no
        step applies to the current version.

        Exceptions raised by a step transform propagate to the caller.

        Args:
            document: The document to migrate
            target: Version to reach

        Returns:
            ``(document, modified)`` where ``modified`` is True if any step
            rewrote the document content
        """
        if not isinstance(document, dict):
            return document, False

        modified = False
        version = read_version(document, self.version_field)

        while version < target:
            step = self.registry.step_for(version)
            if step is None:
                logger.warning(
                    f"No migration step applies to version {version}; "
                    f"document stays below target v{target}"
                )
                break

            new_document = await step.apply(document)
            if new_document is not None:
                document = new_document
                modified = True

            # A replacement that is not a mapping cannot be stamped.
            if not isinstance(document, dict):
                break

            document[self.version_field] = step.id
            version = step.id

        return document, modified
