"""
Fee definition schema.

A fee definition is the studio-level template that gets materialized into
one billing record per affected family. Documents live under
Studios/{studio}/Fees/{fee}.
"""

from __future__ import annotations

from datetime import date as Date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from pydantic import Field, field_validator

from studiosync.schemas.common.base import FrozenSchema
from studiosync.schemas.common.enums import FeeType
from studiosync.utils.date_utils import DateUtilsError, coerce_date

__all__ = [
    "FeeDefinition",
]


class FeeDefinition(FrozenSchema):
    """
    Studio fee definition.

    For recurring fees `amount` is the per-period amount before it is
    apportioned over `broken_up_count` installments.
    """

    id: Optional[str] = Field(
        default=None,
        description="Store-assigned fee document id",
    )
    name: str = Field(
        default="",
        alias="Name",
        description="Display name of the fee",
    )
    amount: Decimal = Field(
        ...,
        alias="Amount",
        description="Fee amount (per period for recurring fees)",
    )
    fee_type: FeeType = Field(
        default=FeeType.ONE_TIME,
        alias="Type",
        description="OneTime or Recurring",
    )
    duration: Optional[int] = Field(
        default=None,
        alias="Duration",
        description="Number of monthly installments; unset means the default duration",
    )
    broken_up_count: int = Field(
        default=1,
        alias="BrokenUpCount",
        description="Number of parts the amount is divided into",
    )
    has_end_date: bool = Field(
        default=False,
        alias="HasEndDate",
    )
    fee_end_date: Optional[Date] = Field(
        default=None,
        alias="FeeEndDate",
        description="Last calendar day an installment may fall on",
    )
    is_active: bool = Field(
        default=True,
        alias="IsActive",
    )

    @field_validator("name", mode="before")
    @classmethod
    def blank_name(cls, v: Any) -> Any:
        # Stored fees may omit Name; records copy whatever is there
        return "" if v is None else v

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> Decimal:
        """Accept numbers and numeric strings; reject booleans and blanks."""
        if isinstance(v, bool) or v is None:
            raise ValueError("Amount must be a number")
        if isinstance(v, Decimal):
            return v
        try:
            return Decimal(str(v).strip())
        except InvalidOperation as e:
            raise ValueError(f"Amount is not numeric: {v!r}") from e

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("Amount must be a finite number")
        if v <= 0:
            raise ValueError("Amount must be greater than zero")
        return v

    @field_validator("fee_type", mode="before")
    @classmethod
    def default_fee_type(cls, v: Any) -> Any:
        # Missing type is treated as a one-time fee
        return v or FeeType.ONE_TIME

    @field_validator("duration", mode="before")
    @classmethod
    def blank_duration(cls, v: Any) -> Any:
        return v or None

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError("Duration must be a positive number of months")
        return v

    @field_validator("broken_up_count", mode="before")
    @classmethod
    def default_broken_up_count(cls, v: Any) -> Any:
        return v or 1

    @field_validator("broken_up_count")
    @classmethod
    def validate_broken_up_count(cls, v: int) -> int:
        if v < 1:
            raise ValueError("BrokenUpCount must be at least 1")
        return v

    @field_validator("fee_end_date", mode="before")
    @classmethod
    def parse_fee_end_date(cls, v: Any) -> Optional[Date]:
        try:
            return coerce_date(v)
        except DateUtilsError as e:
            raise ValueError(str(e)) from e

    @property
    def is_recurring(self) -> bool:
        return self.fee_type == FeeType.RECURRING

    @property
    def end_date(self) -> Optional[Date]:
        """End date that bounds the schedule, if one applies."""
        if self.has_end_date and self.fee_end_date is not None:
            return self.fee_end_date
        return None

    @classmethod
    def from_document(cls, fee_id: Optional[str], data: Dict[str, Any]) -> "FeeDefinition":
        """Build a definition from a stored fee document."""
        payload = dict(data)
        if fee_id is not None:
            payload["id"] = fee_id
        return cls.model_validate(payload)
