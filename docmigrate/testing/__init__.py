"""Testing utilities for docmigrate.

Usage in conftest.py:
    pytest_plugins = ["docmigrate.testing.fixtures"]

Or build the mock directly:
    from docmigrate.testing import InMemoryDocumentStore, InMemoryS3
"""

from docmigrate.testing.mocks import InMemoryDocumentStore, InMemoryS3, mock_s3_client

__all__ = [
    "InMemoryDocumentStore",
    "InMemoryS3",
    "mock_s3_client",
]
