"""
Repositories over the studio document store.
"""

from studiosync.repositories.base import (
    SERVER_TIMESTAMP,
    BaseRepository,
    DocumentPath,
    DocumentSnapshot,
    DocumentStore,
    FieldFilter,
    FilterOperator,
    InMemoryDocumentStore,
    WriteBatch,
)
from studiosync.repositories.fees import FeeRepository, StudioRosterRepository
from studiosync.repositories.studio import StudioUserRepository

__all__ = [
    "SERVER_TIMESTAMP",
    "BaseRepository",
    "DocumentPath",
    "DocumentSnapshot",
    "DocumentStore",
    "FieldFilter",
    "FilterOperator",
    "InMemoryDocumentStore",
    "WriteBatch",
    "FeeRepository",
    "StudioRosterRepository",
    "StudioUserRepository",
]
