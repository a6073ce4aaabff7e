from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from studiosync.core.exceptions import InvalidFeeError
from studiosync.schemas.common.enums import FeeType
from studiosync.schemas.fees import FeeDefinition
from studiosync.services.fees import coerce_fee_definition


class TestFeeDefinition:
    def test_reads_store_document(self):
        fee = FeeDefinition.from_document(
            "fee-1",
            {
                "Name": "Tuition",
                "Amount": "99.50",
                "Type": "Recurring",
                "Duration": 10,
                "BrokenUpCount": 2,
                "HasEndDate": True,
                "FeeEndDate": "2025-06-30T00:00:00.000Z",
            },
        )
        assert fee.id == "fee-1"
        assert fee.amount == Decimal("99.50")
        assert fee.fee_type is FeeType.RECURRING
        assert fee.is_recurring
        assert fee.duration == 10
        assert fee.broken_up_count == 2
        assert fee.end_date == date(2025, 6, 30)

    def test_defaults(self):
        fee = FeeDefinition.model_validate({"Name": "Registration", "Amount": 25})
        assert fee.fee_type is FeeType.ONE_TIME
        assert fee.duration is None
        assert fee.broken_up_count == 1
        assert fee.is_active

    def test_blank_optional_fields_fall_back(self):
        fee = FeeDefinition.model_validate(
            {"Name": "Tuition", "Amount": 10, "Type": "", "Duration": 0, "BrokenUpCount": None}
        )
        assert fee.fee_type is FeeType.ONE_TIME
        assert fee.duration is None
        assert fee.broken_up_count == 1

    @pytest.mark.parametrize("name", [None, ""])
    def test_name_is_optional(self, name):
        assert FeeDefinition.model_validate({"Amount": 10}).name == ""
        assert FeeDefinition.model_validate({"Name": name, "Amount": 10}).name == ""

    def test_end_date_ignored_without_flag(self):
        fee = FeeDefinition.model_validate(
            {"Name": "Tuition", "Amount": 10, "HasEndDate": False, "FeeEndDate": "2025-06-30"}
        )
        assert fee.fee_end_date == date(2025, 6, 30)
        assert fee.end_date is None

    @pytest.mark.parametrize("amount", [0, -5, "abc", None, True, "NaN", "Infinity"])
    def test_rejects_bad_amounts(self, amount):
        with pytest.raises(ValidationError):
            FeeDefinition.model_validate({"Name": "Fee", "Amount": amount})

    def test_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            FeeDefinition.model_validate({"Name": "Fee", "Amount": 5, "Type": "Weekly"})

    def test_is_immutable(self):
        fee = FeeDefinition.model_validate({"Name": "Fee", "Amount": 5})
        with pytest.raises(ValidationError):
            fee.amount = Decimal("6")


class TestCoerceFeeDefinition:
    def test_passes_schema_through(self):
        fee = FeeDefinition.model_validate({"Name": "Fee", "Amount": 5})
        assert coerce_fee_definition(fee) is fee

    def test_wraps_validation_errors(self):
        with pytest.raises(InvalidFeeError) as exc_info:
            coerce_fee_definition({"id": "fee-9", "Name": "Fee", "Amount": -1})

        error = exc_info.value
        assert error.details["fee_id"] == "fee-9"
        assert "Amount" in error.details["field_errors"]
        assert error.retryable is False

    def test_rejects_non_mapping(self):
        with pytest.raises(InvalidFeeError):
            coerce_fee_definition(["Fee", 5])
