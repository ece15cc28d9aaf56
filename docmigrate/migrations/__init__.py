"""Migration engine for docmigrate.

Steps advance documents one version at a time. The orchestrator finds the
documents lagging behind a target version, pages through them and writes
back the ones that changed.
"""

from docmigrate.migrations.base import MigrationOperation, MigrationStep
from docmigrate.migrations.batch import MAX_IN_FLIGHT, BatchProcessor
from docmigrate.migrations.loader import StepLoader
from docmigrate.migrations.migrator import DocumentMigrator
from docmigrate.migrations.operations import (
    AddField,
    ConditionalTransform,
    RemoveField,
    RenameField,
    TransformField,
)
from docmigrate.migrations.progress import ProgressState, ProgressTracker
from docmigrate.migrations.registry import StepRegistry
from docmigrate.migrations.runner import MigrationOrchestrator, MigrationReport

__all__ = [
    "MigrationOperation",
    "MigrationStep",
    "BatchProcessor",
    "MAX_IN_FLIGHT",
    "StepLoader",
    "DocumentMigrator",
    "AddField",
    "ConditionalTransform",
    "RemoveField",
    "RenameField",
    "TransformField",
    "ProgressState",
    "ProgressTracker",
    "StepRegistry",
    "MigrationOrchestrator",
    "MigrationReport",
]
