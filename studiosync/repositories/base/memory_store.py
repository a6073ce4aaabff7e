"""
In-memory document store.

Reference DocumentStore implementation backing tests and local tooling.
Documents are deep-copied on the way in and out so callers never share
mutable state with the store. Write batches are applied atomically.
"""

from __future__ import annotations

import copy
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
from uuid import uuid4

from studiosync.core.exceptions import ResourceNotFoundError
from studiosync.core.logging import get_logger
from studiosync.repositories.base.document_store import (
    SERVER_TIMESTAMP,
    DocumentPath,
    DocumentSnapshot,
    DocumentStore,
    FieldFilter,
    WriteBatch,
)
from studiosync.utils.date_utils import now_utc

logger = get_logger(__name__)


def _generate_id() -> str:
    return uuid4().hex[:20]


class InMemoryWriteBatch(WriteBatch):
    """Write batch staged against an InMemoryDocumentStore."""

    def __init__(self, store: "InMemoryDocumentStore"):
        super().__init__()
        self._store = store
        self._operations: List[Tuple[str, str, Dict[str, Any]]] = []

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        self._ensure_open()
        self._store._require_collection(collection)
        path = DocumentPath.join(collection, self._store._id_factory())
        self._operations.append(("set", path, copy.deepcopy(data)))
        return path

    def update(self, path: str, data: Dict[str, Any]) -> None:
        self._ensure_open()
        self._store._require_document(path)
        self._operations.append(("update", path, copy.deepcopy(data)))

    def __len__(self) -> int:
        return len(self._operations)

    async def commit(self) -> List[str]:
        self._ensure_open()
        self._store._apply_batch(self._operations)
        self._committed = True
        return [path for _, path, _ in self._operations]


class InMemoryDocumentStore(DocumentStore):
    """
    Dictionary-backed document store.

    Args:
        clock: Source of store timestamps (defaults to UTC now)
        id_factory: Generator for document ids
    """

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._documents: Dict[str, Dict[str, Any]] = {}
        self._clock = clock or now_utc
        self._id_factory = id_factory or _generate_id

    @property
    def supports_atomic_batches(self) -> bool:
        return True

    # ==================== Seeding ====================

    def load(self, documents: Dict[str, Dict[str, Any]]) -> None:
        """Synchronously seed documents keyed by path."""
        for path, data in documents.items():
            self._require_document(path)
            self._documents[path] = self._resolve(data)

    def __len__(self) -> int:
        return len(self._documents)

    # ==================== Reads ====================

    async def get(self, path: str) -> DocumentSnapshot:
        self._require_document(path)
        data = self._documents.get(path)
        return DocumentSnapshot(path, copy.deepcopy(data) if data is not None else None)

    async def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
    ) -> List[DocumentSnapshot]:
        self._require_collection(collection)
        return [
            DocumentSnapshot(path, copy.deepcopy(data))
            for path, data in self._documents.items()
            if DocumentPath.parent(path) == collection
            and all(f.matches(data) for f in filters)
        ]

    async def list_documents(self, collection: str) -> List[DocumentSnapshot]:
        return await self.query(collection)

    # ==================== Writes ====================

    async def add(self, collection: str, data: Dict[str, Any]) -> DocumentSnapshot:
        self._require_collection(collection)
        path = DocumentPath.join(collection, self._id_factory())
        return await self.set(path, data)

    async def set(self, path: str, data: Dict[str, Any]) -> DocumentSnapshot:
        self._require_document(path)
        self._documents[path] = self._resolve(data)
        logger.debug("Document written", extra={"path": path})
        return DocumentSnapshot(path, copy.deepcopy(self._documents[path]))

    async def update(self, path: str, data: Dict[str, Any]) -> DocumentSnapshot:
        self._require_document(path)
        if path not in self._documents:
            raise ResourceNotFoundError("Document", path)
        self._documents[path].update(self._resolve(data))
        logger.debug("Document updated", extra={"path": path, "fields": sorted(data)})
        return DocumentSnapshot(path, copy.deepcopy(self._documents[path]))

    def batch(self) -> InMemoryWriteBatch:
        return InMemoryWriteBatch(self)

    # ==================== Internals ====================

    def _apply_batch(self, operations: List[Tuple[str, str, Dict[str, Any]]]) -> None:
        """Validate every staged write first so a failing batch changes nothing."""
        pending = set()
        for kind, path, _ in operations:
            if kind == "set":
                pending.add(path)
            elif path not in self._documents and path not in pending:
                raise ResourceNotFoundError("Document", path)

        for kind, path, data in operations:
            resolved = self._resolve(data)
            if kind == "set":
                self._documents[path] = resolved
            else:
                self._documents[path].update(resolved)

        logger.debug("Write batch committed", extra={"writes": len(operations)})

    def _resolve(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Deep-copy a payload, replacing SERVER_TIMESTAMP with the store clock."""
        timestamp = self._clock()

        def resolve(value: Any) -> Any:
            if value is SERVER_TIMESTAMP:
                return timestamp
            if isinstance(value, dict):
                return {key: resolve(item) for key, item in value.items()}
            if isinstance(value, list):
                return [resolve(item) for item in value]
            return copy.deepcopy(value)

        return resolve(data)

    @staticmethod
    def _require_collection(path: str) -> None:
        if not path or not DocumentPath.is_collection(path):
            raise ValueError(f"Not a collection path: {path!r}")

    @staticmethod
    def _require_document(path: str) -> None:
        if not path or DocumentPath.is_collection(path):
            raise ValueError(f"Not a document path: {path!r}")
