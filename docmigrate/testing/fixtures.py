"""Pytest fixtures for docmigrate testing.

To use these fixtures, add to your conftest.py:

    pytest_plugins = ["docmigrate.testing.fixtures"]
"""

from typing import AsyncGenerator

import pytest

from docmigrate.core.settings import DocMigrateSettings
from docmigrate.stores.s3 import S3DocumentStore
from docmigrate.testing.mocks import InMemoryS3


@pytest.fixture
def s3_test_bucket() -> str:
    """Default test bucket name."""
    return "test-bucket"


@pytest.fixture
def s3_base_path() -> str:
    """Default prefix the test documents live under."""
    return "docs/"


@pytest.fixture
def docmigrate_settings(s3_test_bucket: str, s3_base_path: str) -> DocMigrateSettings:
    """Provide settings configured for testing.

    The progress interval is short so reporter behaviour can be observed.
    """
    return DocMigrateSettings(
        _env_file=None,
        aws_bucket_name=s3_test_bucket,
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
        aws_url="http://localhost:4566",
        s3_base_path=s3_base_path,
        progress_interval=0.01,
        migrations_dir="",
    )


@pytest.fixture
def mock_s3() -> InMemoryS3:
    """Provide in-memory S3 mock."""
    s3 = InMemoryS3()
    yield s3
    s3.clear()


@pytest.fixture
async def s3_client(
    mock_s3: InMemoryS3, s3_test_bucket: str
) -> AsyncGenerator[InMemoryS3, None]:
    """Provide the mock with the test bucket already created."""
    await mock_s3.create_bucket(Bucket=s3_test_bucket)
    yield mock_s3


@pytest.fixture
def document_store(
    s3_client: InMemoryS3,
    s3_test_bucket: str,
    s3_base_path: str,
) -> S3DocumentStore:
    """Provide an S3 document store backed by the mock."""
    return S3DocumentStore(s3_client, s3_test_bucket, prefix=s3_base_path)
