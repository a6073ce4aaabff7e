from studiosync.schemas.fees.fee_definition import FeeDefinition
from studiosync.schemas.fees.family_fee import FamilyFeeRecord, FamilyRef, ScheduleEntry

__all__ = [
    "FeeDefinition",
    "FamilyFeeRecord",
    "FamilyRef",
    "ScheduleEntry",
]
