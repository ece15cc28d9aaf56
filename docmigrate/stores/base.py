"""Document store interface used by the migration engine."""

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass
class Row:
    """A candidate document returned by a version query.

    Attributes:
        key: Store key of the document; rows are ordered by it
        version: Version marker read from the document (0 when absent)
        doc: The document body, or None when docs were not requested
    """

    key: str
    version: int
    doc: Any = None


@runtime_checkable
class DocumentStore(Protocol):
    """Storage operations the migration engine needs.

    Implementations return rows in a stable key order so that paging with
    ``start_after`` visits every candidate exactly once.
    """

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
        """
        ...

    async def upsert(self, document: dict, key: str | None = None) -> dict:
        """Create or overwrite a document.

        Args:
            document: The document to store
            key: Store key; derived from the document when omitted

        Returns:
            The store acknowledgement
        """
        ...


def read_version(document: Any, version_field: str) -> int:
    """Return a document's version marker as an int.

    Integral floats and numeric strings (``2.0``, ``"2"``) are read as the
    number they spell. A marker that is absent or holds anything else
    reads as 0, as does a document that is not a mapping.
    """
    if not isinstance(document, dict):
        return 0
    value = document.get(version_field)
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else 0
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0
