"""docmigrate: versioned schema migrations for JSON documents stored in S3."""

__version__ = "0.1.0"

# Core components
from docmigrate.core.client import S3ClientManager
from docmigrate.core.exceptions import (
    ConfigurationError,
    DocMigrateError,
    DuplicateStepError,
    InvalidStepIdError,
    NoStepsFoundError,
    PersistenceError,
    S3ConnectionError,
    S3OperationError,
    StepLoadError,
    StoreQueryError,
)
from docmigrate.core.settings import DocMigrateSettings

# Stores
from docmigrate.stores import DocumentStore, Row, S3DocumentStore

# Migration engine
from docmigrate.migrations import (
    AddField,
    BatchProcessor,
    ConditionalTransform,
    DocumentMigrator,
    MigrationOrchestrator,
    MigrationReport,
    MigrationStep,
    ProgressTracker,
    RemoveField,
    RenameField,
    StepLoader,
    StepRegistry,
    TransformField,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "S3ClientManager",
    "DocMigrateSettings",
    "DocMigrateError",
    "ConfigurationError",
    "DuplicateStepError",
    "InvalidStepIdError",
    "NoStepsFoundError",
    "PersistenceError",
    "S3ConnectionError",
    "S3OperationError",
    "StepLoadError",
    "StoreQueryError",
    # Stores
    "DocumentStore",
    "Row",
    "S3DocumentStore",
    # Migrations
    "MigrationStep",
    "StepRegistry",
    "StepLoader",
    "DocumentMigrator",
    "ProgressTracker",
    "BatchProcessor",
    "MigrationOrchestrator",
    "MigrationReport",
    "AddField",
    "RemoveField",
    "RenameField",
    "TransformField",
    "ConditionalTransform",
]
