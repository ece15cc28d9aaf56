"""S3 client manager for the migration engine."""

from collections.abc import AsyncGenerator
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any, Protocol, runtime_checkable

from aiobotocore.client import AioBaseClient
from aiobotocore.session import get_session
from botocore.config import Config
from botocore.exceptions import ClientError

from docmigrate.core.exceptions import S3ConnectionError, S3OperationError
from docmigrate.core.settings import DocMigrateSettings


@runtime_checkable
class S3ClientProtocol(Protocol):
    """The S3 operations the document store relies on."""

    async def get_object(self, Bucket: str, Key: str, **kwargs) -> dict[str, Any]:
        ...

    async def put_object(
        self, Bucket: str, Key: str, Body: bytes | str, **kwargs
    ) -> dict[str, Any]:
        ...

    async def list_objects_v2(self, Bucket: str, **kwargs) -> dict[str, Any]:
        ...

    async def head_bucket(self, Bucket: str, **kwargs) -> dict[str, Any]:
        ...


def adjust_endpoint_url(
    endpoint_url: str | None, bucket_name: str | None
) -> str | None:
    """Strip a virtual-hosted bucket prefix from the endpoint URL.

    Args:
        endpoint_url: The S3 endpoint URL
        bucket_name: The S3 bucket name

    Returns:
        Adjusted endpoint URL or None
    """
    if not endpoint_url:
        return None
    if bucket_name and f"{bucket_name}." in endpoint_url:
        return endpoint_url.replace(f"{bucket_name}.", "")
    return endpoint_url


class S3ClientManager:
    """Creates aiobotocore S3 clients from docmigrate settings.

    One manager is built per CLI invocation or application; there is no
    shared global instance.
    """

    def __init__(self, settings: DocMigrateSettings | None = None):
        self.settings = settings or DocMigrateSettings()
        self._session = None
        self._endpoint_url = adjust_endpoint_url(
            self.settings.aws_url, self.settings.aws_bucket_name
        )
        self._client_config = Config(
            s3={"addressing_style": "path"},
            retries={
                "max_attempts": self.settings.aws_retry_attempts,
                "mode": "standard",
            },
        )

    @asynccontextmanager
    async def get_async_client(self) -> AsyncGenerator[AioBaseClient, None]:
        """Get an async S3 client within a context manager.

        Yields:
            An aiobotocore S3 client

        Raises:
            S3ConnectionError: If client creation fails
        """
        if self._session is None:
            self._session = get_session()

        async with AsyncExitStack() as stack:
            try:
                client = await stack.enter_async_context(
                    self._session.create_client(
                        "s3",
                        region_name=self.settings.aws_default_region,
                        aws_access_key_id=self.settings.aws_access_key_id,
                        aws_secret_access_key=self.settings.aws_secret_access_key,
                        endpoint_url=self._endpoint_url,
                        config=self._client_config,
                    )
                )
            except Exception as e:
                raise S3ConnectionError(
                    message=f"Failed to create async S3 client: {e}",
                    original_error=e,
                    endpoint=self._endpoint_url,
                )
            yield client

    async def ensure_bucket_exists(self, client: S3ClientProtocol) -> None:
        """Check that the configured bucket is reachable.

        Raises:
            S3OperationError: If the bucket is missing or access is denied
        """
        bucket = self.settings.aws_bucket_name
        try:
            await client.head_bucket(Bucket=bucket)
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            if error_code in ("404", "NoSuchBucket", "NotFound"):
                raise S3OperationError(
                    f"NoSuchBucket: bucket '{bucket}' does not exist",
                    operation="head_bucket",
                    original_error=e,
                )
            if error_code == "403":
                raise S3OperationError(
                    f"AccessDenied: cannot access bucket '{bucket}'",
                    operation="head_bucket",
                    original_error=e,
                )
            raise S3OperationError(
                f"Error checking bucket: {e}",
                operation="head_bucket",
                original_error=e,
            )
