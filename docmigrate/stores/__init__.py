"""Document store adapters for docmigrate."""

from docmigrate.stores.base import DocumentStore, Row, read_version
from docmigrate.stores.s3 import S3DocumentStore

__all__ = [
    "DocumentStore",
    "Row",
    "read_version",
    "S3DocumentStore",
]
