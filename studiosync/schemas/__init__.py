"""
Pydantic schemas for fee definitions, family fee records and studio context.
"""

from studiosync.schemas.common import AssociationType, BaseSchema, FeeType, FrozenSchema, PaymentStatus
from studiosync.schemas.fees import FamilyFeeRecord, FamilyRef, FeeDefinition, ScheduleEntry
from studiosync.schemas.studio import StudioBranding, StudioContext, UserProfile

__all__ = [
    "AssociationType",
    "BaseSchema",
    "FeeType",
    "FrozenSchema",
    "PaymentStatus",
    "FamilyFeeRecord",
    "FamilyRef",
    "FeeDefinition",
    "ScheduleEntry",
    "StudioBranding",
    "StudioContext",
    "UserProfile",
]
