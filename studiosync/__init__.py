"""
StudioSync fees: fee scheduling and distribution for studio families.
"""

from studiosync.repositories.base import InMemoryDocumentStore
from studiosync.schemas.common import AssociationType, FeeType, PaymentStatus
from studiosync.schemas.fees import FamilyFeeRecord, FeeDefinition
from studiosync.services.fees import FeesManager
from studiosync.services.studio import StudioContextService

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "InMemoryDocumentStore",
    "AssociationType",
    "FeeType",
    "PaymentStatus",
    "FamilyFeeRecord",
    "FeeDefinition",
    "FeesManager",
    "StudioContextService",
]
