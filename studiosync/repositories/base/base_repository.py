"""
Base repository for document-store backed data access.

Domain repositories translate between store documents and schemas and
build studio-scoped paths; they never swallow store errors.
"""

from typing import Any, List, Sequence

from studiosync.core.logging import get_logger
from studiosync.repositories.base.document_store import (
    DocumentPath,
    DocumentSnapshot,
    DocumentStore,
    FieldFilter,
)


class BaseRepository:
    """
    Shared plumbing for studio repositories.

    Provides path helpers and thin query wrappers over the injected
    DocumentStore.
    """

    def __init__(self, store: DocumentStore):
        """
        Initialize repository.

        Args:
            store: Document store used for all reads and writes
        """
        self.store = store
        self._logger = get_logger(self.__class__.__name__)

    # ==================== Paths ====================

    @staticmethod
    def collection_path(studio_id: str, name: str) -> str:
        return DocumentPath.collection(studio_id, name)

    @staticmethod
    def document_path(studio_id: str, collection: str, doc_id: str) -> str:
        return DocumentPath.document(studio_id, collection, doc_id)

    # ==================== Reads ====================

    async def _get(self, studio_id: str, collection: str, doc_id: str) -> DocumentSnapshot:
        return await self.store.get(self.document_path(studio_id, collection, doc_id))

    async def _find(
        self,
        studio_id: str,
        collection: str,
        *filters: FieldFilter,
    ) -> List[DocumentSnapshot]:
        snapshots = await self.store.query(self.collection_path(studio_id, collection), filters)
        self._logger.debug(
            f"Query on {collection} returned {len(snapshots)} document(s)",
            extra={
                "collection": collection,
                "filters": [f"{f.field} {f.operator.value} {f.value}" for f in filters],
            },
        )
        return snapshots

    @staticmethod
    def _field_values(snapshots: Sequence[DocumentSnapshot], field_name: str) -> List[Any]:
        """Non-empty values of one field across snapshots, in order."""
        return [s.get(field_name) for s in snapshots if s.get(field_name)]
