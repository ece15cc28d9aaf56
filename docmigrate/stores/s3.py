"""S3-backed document store.

Documents are JSON objects stored one per key under a common prefix, e.g.
``users/42.json``. A version query scans the prefix in key order and keeps
the documents whose version marker is below the requested bound.
"""

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

from botocore.exceptions import ClientError

from docmigrate.core.exceptions import PersistenceError, S3OperationError
from docmigrate.stores.base import Row, read_version

logger = logging.getLogger(__name__)


class S3DocumentStore:
    """Document store over an S3 bucket prefix.

    Args:
        s3_client: An aiobotocore client or anything implementing
            ``S3ClientProtocol``
        bucket_name: The S3 bucket name
        prefix: Key prefix the documents live under
        version_field: Name of the version marker field
        id_field: Document field used to build keys for new documents
    """

    LIST_PAGE_SIZE = 1000

    def __init__(
        self,
        s3_client,
        bucket_name: str,
        prefix: str = "",
        version_field: str = "migration_version",
        id_field: str = "id",
    ):
        self.s3_client = s3_client
        self.bucket_name = bucket_name
        self.prefix = prefix
        self.version_field = version_field
        self.id_field = id_field

    async def _iter_keys(self, start_after: str | None = None) -> AsyncIterator[str]:
        """Yield the JSON keys under the prefix in key order."""
        continuation_token = None

        while True:
            params = {
                "Bucket": self.bucket_name,
                "Prefix": self.prefix,
                "MaxKeys": self.LIST_PAGE_SIZE,
            }
            if continuation_token:
                params["ContinuationToken"] = continuation_token
            elif start_after:
                params["StartAfter"] = start_after

            try:
                response = await self.s3_client.list_objects_v2(**params)
            except ClientError as e:
                raise S3OperationError(
                    f"Failed to list documents under '{self.prefix}': {e}",
                    operation="list_objects_v2",
                    original_error=e,
                )

            for obj_summary in response.get("Contents", []):
                key = obj_summary["Key"]
                if key.endswith(".json"):
                    yield key

            if not response.get("IsTruncated", False):
                break

            continuation_token = response.get("NextContinuationToken")

    async def _load(self, key: str) -> tuple[bool, Any]:
        """Load and decode one document.

        Returns:
            ``(True, document)`` or ``(False, None)`` when the body is not JSON
        """
        try:
            response = await self.s3_client.get_object(
                Bucket=self.bucket_name,
                Key=key,
            )
            body = await response["Body"].read()
        except ClientError as e:
            raise S3OperationError(
                f"Failed to read document {key}: {e}",
                operation="get_object",
                key=key,
                original_error=e,
            )

        try:
            return True, json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Skipping {key}: body is not valid JSON ({e})")
            return False, None

    async def query_by_version(
        self,
        end_version: int,
        limit: int | None = None,
        start_after: str | None = None,
        include_docs: bool = True,
    ) -> list[Row]:
        """List documents whose version marker is below ``end_version``.

        Args:
            end_version: Exclusive upper bound on the version marker
            limit: Maximum number of rows, or None for all of them
            start_after: Only return rows whose key sorts after this one
            include_docs: Whether to attach document bodies to the rows

        Returns:
            Rows ordered by key

        Raises:
            S3OperationError: If listing or reading objects fails
        """
        rows: list[Row] = []
        if limit is not None and limit <= 0:
            return rows

        async for key in self._iter_keys(start_after):
            ok, document = await self._load(key)
            if not ok:
                continue

            version = read_version(document, self.version_field)
            if version >= end_version:
                continue

            rows.append(Row(key=key, version=version, doc=document if include_docs else None))
            if limit is not None and len(rows) >= limit:
                break

        return rows

    def object_key(self, document: dict) -> str:
        """Build the S3 key for a document from its id field.

        Raises:
            PersistenceError: If the document has no id
        """
        doc_id = document.get(self.id_field)
        if doc_id is None or doc_id == "":
            raise PersistenceError(
                f"Document has no '{self.id_field}' field and no key was given"
            )
        return f"{self.prefix}{doc_id}.json"

    async def upsert(self, document: dict, key: str | None = None) -> dict:
        """Create or overwrite a document.

        Args:
            document: The document to store
            key: S3 key; built from the id field when omitted

        Returns:
            The ``put_object`` response

        Raises:
            PersistenceError: If the document cannot be written
        """
        key = key or self.object_key(document)
        try:
            return await self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=json.dumps(document).encode("utf-8"),
                ContentType="application/json",
            )
        except (ClientError, TypeError, ValueError) as e:
            raise PersistenceError(
                f"Failed to write document {key}: {e}",
                key=key,
                original_error=e,
            )
