"""
Enumeration types used across the fee core.
"""

from enum import Enum

__all__ = [
    "FeeType",
    "AssociationType",
    "PaymentStatus",
]


class FeeType(str, Enum):
    """Fee billing type."""

    ONE_TIME = "OneTime"
    RECURRING = "Recurring"


class AssociationType(str, Enum):
    """Entity a fee definition is attached to."""

    SEASON = "Season"
    CLASS = "Class"
    FAMILY = "Family"
    STUDENT = "Student"


class PaymentStatus(str, Enum):
    """Schedule entry payment status."""

    UNPAID = "Unpaid"
    PAID = "Paid"
