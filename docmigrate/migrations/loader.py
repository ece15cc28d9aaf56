"""Discovery of migration steps from Python files."""

import importlib.util
import logging
import sys
from pathlib import Path
from typing import List

from docmigrate.core.exceptions import StepLoadError
from docmigrate.migrations.base import MigrationStep

logger = logging.getLogger(__name__)


class StepLoader:
    """Loads ``MigrationStep`` objects from a migrations directory.

    Every ``*.py`` file whose name does not start with an underscore is
    imported, and each module-level ``MigrationStep`` instance it defines
    becomes a step. A step file typically looks like::

        from docmigrate.migrations import MigrationStep

        async def upgrade(doc):
            doc["tags"] = []
            return doc

        step = MigrationStep(id=3, transform=upgrade, description="Add tags")
    """

    def __init__(self, migrations_dir: Path | str | None):
        self.migrations_dir = Path(migrations_dir) if migrations_dir else None

    def load(self) -> List[MigrationStep]:
        """Import the step files and collect their steps.

        Returns:
            Steps in file order; the registry sorts them by id

        Raises:
            StepLoadError: If a step file fails to import
        """
        if not self.migrations_dir or not self.migrations_dir.exists():
            logger.warning(f"Migrations directory not found: {self.migrations_dir}")
            return []

        steps: List[MigrationStep] = []
        seen: set[int] = set()
        for file_path in sorted(self.migrations_dir.glob("*.py")):
            if file_path.name.startswith("_"):
                continue

            module_name = f"docmigrate_step_{file_path.stem}"
            spec = importlib.util.spec_from_file_location(module_name, file_path)
            if not spec or not spec.loader:
                continue

            module = importlib.util.module_from_spec(spec)
            sys.modules[module_name] = module

            try:
                spec.loader.exec_module(module)
            except Exception as e:
                sys.modules.pop(module_name, None)
                raise StepLoadError(str(file_path), e) from e

            # Steps imported from an earlier step file are the same objects
            found = []
            for attr in vars(module).values():
                if isinstance(attr, MigrationStep) and id(attr) not in seen:
                    seen.add(id(attr))
                    found.append(attr)
            if not found:
                logger.debug(f"No migration steps defined in {file_path.name}")
            steps.extend(found)

        logger.info(f"Loaded {len(steps)} migration step(s) from {self.migrations_dir}")
        return steps
