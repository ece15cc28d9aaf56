"""Custom exceptions for docmigrate.

Every error carries a message and an optional hint so that a failed
migration run tells the operator what to look at next.
"""


class DocMigrateError(Exception):
    """Base exception for all docmigrate errors.

    Catch this to handle any failure raised by the migration engine,
    its store adapters or its configuration layer.
    """

    def __init__(self, message: str, hint: str | None = None):
        """Initialize the exception.

        Args:
            message: The error message
            hint: Optional hint for resolving the error
        """
        self.message = message
        self.hint = hint
        super().__init__(message)

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


class NoStepsFoundError(DocMigrateError):
    """Raised when a run is requested but no migration step is registered."""

    def __init__(self, migrations_dir: str | None = None):
        self.migrations_dir = migrations_dir
        if migrations_dir:
            hint = f"Add step files to '{migrations_dir}' or register steps programmatically."
        else:
            hint = "Register at least one MigrationStep before running."
        super().__init__("No migrations found", hint)


class StoreQueryError(DocMigrateError):
    """Raised when the document store cannot list candidate documents.

    Wraps the underlying store error; the batch loop aborts without retry.
    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the query error.

        Args:
            message: The error message
            original_error: The store exception that caused this error
        """
        self.original_error = original_error
        if original_error is not None:
            message = f"{message}: {original_error}"
        super().__init__(
            message,
            "Check that the document store is reachable and re-run the migration.",
        )


class PersistenceError(DocMigrateError):
    """Raised when a single migrated document cannot be written back."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the persistence error.

        Args:
            message: The error message
            key: Store key of the document that failed
            original_error: The original exception
        """
        self.key = key
        self.original_error = original_error
        hint = None
        if key:
            hint = f"The document at '{key}' keeps its previous version and will be retried on the next run."
        super().__init__(message, hint)


class StepLoadError(DocMigrateError):
    """Raised when a migration step file cannot be imported."""

    def __init__(self, path: str, original_error: Exception | None = None):
        self.path = path
        self.original_error = original_error
        super().__init__(
            f"Failed to load migration steps from {path}: {original_error}",
            "Fix the step file or move it out of the migrations directory.",
        )


class DuplicateStepError(DocMigrateError):
    """Raised when two steps share the same version id."""

    def __init__(self, step_id: int):
        self.step_id = step_id
        super().__init__(
            f"Migration step {step_id} is registered more than once",
            "Each step id must be unique; renumber one of the steps.",
        )


class InvalidStepIdError(DocMigrateError):
    """Raised when a step id is not a positive integer."""

    def __init__(self, step_id):
        self.step_id = step_id
        super().__init__(
            f"Migration step id {step_id!r} is not a positive integer",
            "A step id is the version it stamps; number steps from 1 (the first step migrates v0 to v1).",
        )


class S3ConnectionError(DocMigrateError):
    """Raised when there is an error connecting to S3."""

    def __init__(
        self,
        message: str | None = None,
        original_error: Exception | None = None,
        endpoint: str | None = None,
    ):
        """Initialize the connection error.

        Args:
            message: Custom error message (optional)
            original_error: The original exception that caused this error
            endpoint: The S3 endpoint URL being connected to
        """
        self.original_error = original_error
        self.endpoint = endpoint

        hint = None
        if message:
            final_message = message
        elif original_error:
            final_message = f"Could not connect to S3 at {endpoint or 'AWS'}: {original_error}"
        else:
            final_message = "Failed to connect to S3"
            hint = "Check your AWS credentials and network connection."

        if endpoint and "localhost" in endpoint:
            hint = "If using LocalStack, ensure it's running: docker run -d -p 4566:4566 localstack/localstack"

        super().__init__(final_message, hint)


class S3OperationError(DocMigrateError):
    """Raised when an S3 operation fails."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        key: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the operation error.

        Args:
            message: The error message
            operation: The S3 operation that failed (e.g., 'get_object')
            key: The S3 key involved in the operation
            original_error: The original exception
        """
        self.operation = operation
        self.key = key
        self.original_error = original_error

        hint = None
        if "NoSuchBucket" in message:
            hint = "The specified bucket does not exist."
        elif "AccessDenied" in message:
            hint = "Check your IAM permissions for this operation."

        super().__init__(message, hint)


class ConfigurationError(DocMigrateError):
    """Raised when docmigrate configuration is invalid."""

    def __init__(
        self,
        message: str | None = None,
        missing_fields: list[str] | None = None,
    ):
        """Initialize the configuration error.

        Args:
            message: Custom error message
            missing_fields: List of missing configuration fields
        """
        self.missing_fields = missing_fields or []

        if missing_fields:
            fields_str = ", ".join(missing_fields)
            message = f"Missing required configuration: {fields_str}"
            hint = "Set these as environment variables, in your .env file, or as CLI options."
        else:
            hint = "Check your docmigrate configuration."

        super().__init__(message or "Invalid docmigrate configuration", hint)
