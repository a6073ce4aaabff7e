"""
Fee Schedule Generator

Materializes a fee definition into a per-family billing record:
- One-time fees get a single installment due on the reference date
- Recurring fees are apportioned over BrokenUpCount and scheduled monthly
- An end date caps the number of months and drops installments due after it

Pure computation: no store access. The reference date is the only notion
of "now" the generator sees.
"""

from datetime import datetime
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from typing import Any, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from studiosync.core.config import FeeSettings, settings
from studiosync.core.exceptions import InvalidFeeError, field_errors_from_pydantic
from studiosync.core.logging import get_logger
from studiosync.schemas.common.enums import AssociationType, FeeType, PaymentStatus
from studiosync.schemas.fees import FamilyFeeRecord, FeeDefinition, ScheduleEntry
from studiosync.services.fees.family_resolver_service import parse_association_type
from studiosync.utils.date_utils import add_months, month_label, months_between, to_utc

FeeInput = Union[FeeDefinition, Mapping[str, Any]]


def coerce_fee_definition(fee: FeeInput) -> FeeDefinition:
    """
    Validate raw fee input.

    Raises:
        InvalidFeeError: If the amount is not a finite positive number, the
            type is unknown, or another field is malformed
    """
    if isinstance(fee, FeeDefinition):
        return fee
    if not isinstance(fee, Mapping):
        raise InvalidFeeError(f"Fee definition must be a mapping, got {type(fee).__name__}")

    try:
        return FeeDefinition.model_validate(dict(fee))
    except PydanticValidationError as e:
        field_errors = field_errors_from_pydantic(e)
        raise InvalidFeeError(
            f"Invalid fee definition: {', '.join(sorted(field_errors))}",
            fee_id=fee.get("id"),
            field_errors=field_errors,
        ) from e


class FeeScheduleGenerator:
    """
    Builds FamilyFeeRecords from fee definitions.

    Month arithmetic is calendar based: installment i is due i calendar
    months after the reference date, with the day clamped to the target
    month's length.
    """

    def __init__(self, fee_settings: Optional[FeeSettings] = None):
        """
        Initialize schedule generator.

        Args:
            fee_settings: Fee settings (defaults to the global settings)
        """
        self.settings = fee_settings or settings.fees
        self._logger = get_logger(self.__class__.__name__)

    def build_family_fee_record(
        self,
        fee: FeeInput,
        association_type: Union[AssociationType, str],
        association_id: str,
        reference_date: datetime,
    ) -> FamilyFeeRecord:
        """
        Build the billing record for one family.

        Args:
            fee: Fee definition (schema or raw document mapping)
            association_type: Season, Class, Family or Student
            association_id: Id of the associated entity
            reference_date: Start of the schedule (naive values are UTC)

        Returns:
            Unsaved FamilyFeeRecord with IsActive=True and an Unpaid schedule

        Raises:
            InvalidFeeError: Malformed fee definition, or installments that
                would round to zero
            InvalidAssociationError: Unknown association type
        """
        definition = coerce_fee_definition(fee)
        assoc = parse_association_type(association_type)
        start = to_utc(reference_date)

        duration: Optional[int] = None
        if definition.fee_type == FeeType.RECURRING:
            schedule, entire_fee_amount, duration = self._recurring_schedule(definition, start)
        else:
            entire_fee_amount = definition.amount
            schedule = [self._entry(start, definition.amount)]

        return FamilyFeeRecord(
            name=definition.name,
            amount=definition.amount,
            fee_type=definition.fee_type,
            fee_id=definition.id,
            association_type=assoc,
            association_id=association_id,
            is_active=True,
            has_end_date=definition.has_end_date,
            fee_end_date=definition.fee_end_date if definition.has_end_date else None,
            entire_fee_amount=entire_fee_amount,
            duration=duration,
            schedule=schedule,
        )

    # -------------------------------------------------------------------------
    # Recurring schedules
    # -------------------------------------------------------------------------

    def monthly_amount(self, definition: FeeDefinition) -> Decimal:
        """Per-month share of the fee, unrounded."""
        return definition.amount / Decimal(definition.broken_up_count)

    def total_for(self, definition: FeeDefinition, months: int) -> Decimal:
        """Unrounded amount owed for `months` months (Amount / BrokenUpCount × months)."""
        return definition.amount * Decimal(months) / Decimal(definition.broken_up_count)

    def check_installments(self, definition: FeeDefinition) -> None:
        """
        Reject a recurring fee whose monthly share is below the currency quantum.

        Raises:
            InvalidFeeError: If an installment would be billed as zero
        """
        if not definition.is_recurring:
            return
        quantum = self.settings.currency_quantum
        if self.monthly_amount(definition).quantize(quantum, rounding=ROUND_DOWN) <= 0:
            raise InvalidFeeError(
                f"Amount {definition.amount} split over {definition.broken_up_count} "
                f"parts is less than {quantum} per installment",
                fee_id=definition.id,
                field_errors={"Amount": ["Installment rounds to zero"]},
            )

    def installment_amounts(self, definition: FeeDefinition, count: int) -> List[Decimal]:
        """
        Installment amounts for `count` scheduled months.

        Every installment but the last is the monthly share rounded down to
        the currency quantum. The last takes the remainder, so the amounts
        sum to the total for `count` months rounded half up.
        """
        if count <= 0:
            return []
        quantum = self.settings.currency_quantum
        regular = self.monthly_amount(definition).quantize(quantum, rounding=ROUND_DOWN)
        target = self.total_for(definition, count).quantize(quantum, rounding=ROUND_HALF_UP)
        return [regular] * (count - 1) + [target - regular * (count - 1)]

    def effective_months(self, definition: FeeDefinition, start: datetime) -> int:
        """
        Number of months to schedule.

        Without an end date this is the fee duration (or the default). With
        one, it is capped at the inclusive month span from the start month to
        the end month, and never less than one.
        """
        months = definition.duration or self.settings.FEES_DEFAULT_DURATION_MONTHS
        end_date = definition.end_date
        if end_date is not None:
            months_diff = months_between(start.date(), end_date)
            months = min(months, max(1, months_diff + 1))
        return months

    def _recurring_schedule(
        self,
        definition: FeeDefinition,
        start: datetime,
    ) -> Tuple[List[ScheduleEntry], Decimal, int]:
        self.check_installments(definition)
        months = self.effective_months(definition, start)
        end_date = definition.end_date

        due_dates: List[datetime] = []
        for index in range(months):
            due_date = add_months(start, index)
            # An installment due on the end date itself is still billed
            if end_date is not None and due_date.date() > end_date:
                break
            due_dates.append(due_date)

        amounts = self.installment_amounts(definition, len(due_dates))
        schedule = [self._entry(due, amount) for due, amount in zip(due_dates, amounts)]

        duration = months
        if len(schedule) < months:
            self._logger.bind(fee_id=definition.id).warning(
                "End date clipped the schedule below its declared duration",
                extra={
                    "declared_months": months,
                    "scheduled_months": len(schedule),
                    "reconciled": self.settings.FEES_RECONCILE_CLIPPED_TOTAL,
                },
            )
            if self.settings.FEES_RECONCILE_CLIPPED_TOTAL:
                duration = len(schedule)

        return schedule, self.total_for(definition, duration), duration

    @staticmethod
    def _entry(due_date: datetime, amount: Decimal) -> ScheduleEntry:
        return ScheduleEntry(
            month=month_label(due_date),
            amount=amount,
            due_date=due_date,
            status=PaymentStatus.UNPAID,
        )
