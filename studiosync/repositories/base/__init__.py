"""
Base repositories package.

Provides the document store abstraction, the in-memory reference store
and the shared repository base class.
"""

from studiosync.repositories.base.document_store import (
    SERVER_TIMESTAMP,
    DocumentPath,
    DocumentSnapshot,
    DocumentStore,
    FieldFilter,
    FilterOperator,
    WriteBatch,
)
from studiosync.repositories.base.memory_store import InMemoryDocumentStore, InMemoryWriteBatch
from studiosync.repositories.base.base_repository import BaseRepository

__all__ = [
    "SERVER_TIMESTAMP",
    "DocumentPath",
    "DocumentSnapshot",
    "DocumentStore",
    "FieldFilter",
    "FilterOperator",
    "WriteBatch",
    "InMemoryDocumentStore",
    "InMemoryWriteBatch",
    "BaseRepository",
]
