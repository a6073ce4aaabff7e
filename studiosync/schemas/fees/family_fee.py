"""
Per-family fee schemas.

A FamilyFeeRecord is the materialization of one FeeDefinition for one
family, stored under Studios/{studio}/Families/{family}/Fees/{record}.
"""

from __future__ import annotations

from datetime import date as Date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import Field, computed_field, field_serializer

from studiosync.schemas.common.base import BaseSchema, FrozenSchema
from studiosync.schemas.common.enums import AssociationType, FeeType, PaymentStatus
from studiosync.utils.date_utils import isoformat_utc

__all__ = [
    "FamilyRef",
    "ScheduleEntry",
    "FamilyFeeRecord",
]


class FamilyRef(FrozenSchema):
    """Reference to a billed family, compared and hashed by family_id."""

    family_id: str = Field(..., min_length=1, alias="familyId")


class ScheduleEntry(BaseSchema):
    """One due installment of a family fee."""

    month: str = Field(..., alias="Month", description='"<MonthName> <Year>" label')
    amount: Decimal = Field(..., alias="Amount")
    due_date: datetime = Field(..., alias="DueDate")
    status: PaymentStatus = Field(default=PaymentStatus.UNPAID, alias="Status")

    @field_serializer("due_date")
    def serialize_due_date(self, value: datetime) -> str:
        return isoformat_utc(value)


class FamilyFeeRecord(BaseSchema):
    """
    Billing record for one (fee definition, family) pair.

    Created once when a fee is applied; afterwards only `is_active` and
    `last_updated` change.
    """

    id: Optional[str] = Field(default=None, description="Store-assigned record id")

    name: str = Field(..., alias="Name")
    amount: Decimal = Field(..., alias="Amount", description="Per-period amount")
    fee_type: FeeType = Field(..., alias="Type")

    created_at: Optional[datetime] = Field(default=None, alias="CreatedAt")
    last_updated: Optional[datetime] = Field(default=None, alias="LastUpdated")

    fee_id: Optional[str] = Field(default=None, alias="FeeId")
    association_type: AssociationType = Field(..., alias="AssociationType")
    association_id: str = Field(..., alias="AssociationId")

    is_active: bool = Field(default=True, alias="IsActive")
    has_end_date: bool = Field(default=False, alias="HasEndDate")
    fee_end_date: Optional[Date] = Field(default=None, alias="FeeEndDate")

    entire_fee_amount: Decimal = Field(..., alias="EntireFeeAmount")
    duration: Optional[int] = Field(
        default=None,
        alias="Duration",
        description="Effective number of months (recurring fees only)",
    )
    schedule: List[ScheduleEntry] = Field(default_factory=list, alias="Schedule")

    @computed_field(alias="IsRecurring")
    @property
    def is_recurring(self) -> bool:
        return self.fee_type == FeeType.RECURRING

    @property
    def scheduled_total(self) -> Decimal:
        """Sum of the amounts actually scheduled."""
        return sum((entry.amount for entry in self.schedule), Decimal("0"))

    def to_document(self) -> Dict[str, Any]:
        """
        Render the record as a store document.

        The id is carried by the document path, and unset timestamps are
        left for the store to fill in at write time.
        """
        data = self.model_dump(by_alias=True, exclude={"id"})
        if self.duration is None:
            data.pop("Duration", None)
        for key in ("CreatedAt", "LastUpdated"):
            if data.get(key) is None:
                data.pop(key, None)
        return data

    @classmethod
    def from_document(cls, record_id: Optional[str], data: Dict[str, Any]) -> "FamilyFeeRecord":
        payload = dict(data)
        payload["id"] = record_id
        return cls.model_validate(payload)
