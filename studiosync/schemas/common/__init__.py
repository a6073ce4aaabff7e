from studiosync.schemas.common.base import BaseSchema, FrozenSchema
from studiosync.schemas.common.enums import AssociationType, FeeType, PaymentStatus

__all__ = [
    "BaseSchema",
    "FrozenSchema",
    "AssociationType",
    "FeeType",
    "PaymentStatus",
]
