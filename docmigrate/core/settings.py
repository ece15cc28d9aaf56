"""Settings for docmigrate, read from the environment and `.env`."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from docmigrate.core.exceptions import ConfigurationError


class DocMigrateSettings(BaseSettings):
    """Runtime configuration for a migration run.

    Every field can be set through an environment variable of the same
    name in upper case (e.g. ``AWS_BUCKET_NAME``, ``PAGE_SIZE``).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # S3 connection
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_default_region: str = "us-east-1"
    aws_url: str | None = None
    aws_bucket_name: str | None = None
    aws_retry_attempts: int = Field(3, ge=0)

    # Documents
    s3_base_path: str = ""
    version_field: str = "migration_version"
    id_field: str = "id"

    # Engine
    page_size: int = Field(512, ge=1)
    progress_interval: float = Field(5.0, gt=0)
    migrations_dir: str = "migrations"
    log_level: str = "INFO"

    def require(self, *fields: str) -> None:
        """Ensure the named settings have a value.

        Raises:
            ConfigurationError: If any of the fields is unset or empty
        """
        missing = [name for name in fields if not getattr(self, name, None)]
        if missing:
            raise ConfigurationError(missing_fields=[name.upper() for name in missing])
