"""
Document store abstraction.

The fee core treats persistence as a hierarchical key-path document store
(Studios/{studio}/Families/{family}/Fees/{fee}, ...). Implementations provide
point lookups, equality and array-membership queries, inserts, partial
updates and optionally atomic write batches. Store-generated timestamps are
requested with the SERVER_TIMESTAMP sentinel.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

__all__ = [
    "SERVER_TIMESTAMP",
    "FilterOperator",
    "FieldFilter",
    "DocumentPath",
    "DocumentSnapshot",
    "WriteBatch",
    "DocumentStore",
]


class _ServerTimestamp:
    """Sentinel replaced by the store's clock when a document is written."""

    _instance: Optional["_ServerTimestamp"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


class FilterOperator(str, Enum):
    """Query operators supported by every store."""
    EQUALS = "=="
    ARRAY_CONTAINS = "array-contains"


@dataclass(frozen=True)
class FieldFilter:
    """Single query condition on a top-level document field."""

    field: str
    operator: FilterOperator
    value: Any

    @classmethod
    def equals(cls, field_name: str, value: Any) -> "FieldFilter":
        return cls(field_name, FilterOperator.EQUALS, value)

    @classmethod
    def array_contains(cls, field_name: str, value: Any) -> "FieldFilter":
        return cls(field_name, FilterOperator.ARRAY_CONTAINS, value)

    def matches(self, data: Dict[str, Any]) -> bool:
        if self.field not in data:
            return False
        current = data[self.field]
        if self.operator == FilterOperator.EQUALS:
            return current == self.value
        if self.operator == FilterOperator.ARRAY_CONTAINS:
            return isinstance(current, (list, tuple)) and self.value in current
        raise ValueError(f"Unsupported filter operator: {self.operator}")


class DocumentPath:
    """Helpers for slash-separated collection/document paths."""

    SEPARATOR = "/"

    @classmethod
    def join(cls, *segments: str) -> str:
        # Segments may themselves be already-joined paths
        parts = []
        for segment in segments:
            pieces = str(segment).split(cls.SEPARATOR)
            if not all(piece.strip() for piece in pieces):
                raise ValueError(f"Invalid path segment: {segment!r}")
            parts.extend(pieces)
        return cls.SEPARATOR.join(parts)

    @classmethod
    def parent(cls, path: str) -> str:
        """Collection path containing the document at `path`."""
        head, _, _ = path.rpartition(cls.SEPARATOR)
        return head

    @classmethod
    def document_id(cls, path: str) -> str:
        return path.rpartition(cls.SEPARATOR)[2]

    @classmethod
    def is_collection(cls, path: str) -> bool:
        return len(path.split(cls.SEPARATOR)) % 2 == 1

    # Studio layout

    @classmethod
    def studio(cls, studio_id: str) -> str:
        return cls.join("Studios", studio_id)

    @classmethod
    def collection(cls, studio_id: str, name: str) -> str:
        return cls.join("Studios", studio_id, name)

    @classmethod
    def document(cls, studio_id: str, collection: str, doc_id: str) -> str:
        return cls.join("Studios", studio_id, collection, doc_id)

    @classmethod
    def family_fees(cls, studio_id: str, family_id: str) -> str:
        return cls.join("Studios", studio_id, "Families", family_id, "Fees")


@dataclass
class DocumentSnapshot:
    """Point-in-time copy of a stored document."""

    path: str
    data: Optional[Dict[str, Any]] = None

    @property
    def id(self) -> str:
        return DocumentPath.document_id(self.path)

    @property
    def exists(self) -> bool:
        return self.data is not None

    def get(self, field_name: str, default: Any = None) -> Any:
        if self.data is None:
            return default
        return self.data.get(field_name, default)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.data or {})


class WriteBatch(ABC):
    """
    Group of writes committed together.

    Writes are staged locally and sent on commit(). Whether the group is
    applied atomically depends on DocumentStore.supports_atomic_batches.
    """

    def __init__(self) -> None:
        self._committed = False

    @property
    def committed(self) -> bool:
        return self._committed

    @abstractmethod
    def add(self, collection: str, data: Dict[str, Any]) -> str:
        """Stage an insert and return the path the document will get."""

    @abstractmethod
    def update(self, path: str, data: Dict[str, Any]) -> None:
        """Stage a partial update of an existing document."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of staged writes."""

    @abstractmethod
    async def commit(self) -> List[str]:
        """Apply staged writes and return the written paths."""

    def _ensure_open(self) -> None:
        if self._committed:
            raise RuntimeError("Write batch already committed")


class DocumentStore(ABC):
    """
    Async hierarchical document store.

    Implementations raise StoreUnavailableError on transient I/O failures and
    ResourceNotFoundError when updating a document that does not exist.
    """

    @property
    def supports_atomic_batches(self) -> bool:
        return False

    @abstractmethod
    async def get(self, path: str) -> DocumentSnapshot:
        """Point lookup; a missing document yields a snapshot with exists=False."""

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
    ) -> List[DocumentSnapshot]:
        """Documents in `collection` matching every filter."""

    @abstractmethod
    async def list_documents(self, collection: str) -> List[DocumentSnapshot]:
        """All documents directly inside `collection`."""

    @abstractmethod
    async def add(self, collection: str, data: Dict[str, Any]) -> DocumentSnapshot:
        """Insert a document with a generated id."""

    @abstractmethod
    async def set(self, path: str, data: Dict[str, Any]) -> DocumentSnapshot:
        """Create or overwrite the document at `path`."""

    @abstractmethod
    async def update(self, path: str, data: Dict[str, Any]) -> DocumentSnapshot:
        """Merge `data` into an existing document."""

    @abstractmethod
    def batch(self) -> WriteBatch:
        """Start a new write batch."""
