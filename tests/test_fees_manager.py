from decimal import Decimal

import pytest

from studiosync.core.exceptions import FeeNotFoundError, InvalidFeeError
from studiosync.schemas.common.enums import FeeType

from tests.conftest import REFERENCE_DATE, STUDIO_ID


async def test_get_fee_definition(manager):
    fee = await manager.get_fee_definition(STUDIO_ID, "fee-tuition")

    assert fee.id == "fee-tuition"
    assert fee.fee_type is FeeType.RECURRING
    assert fee.amount == Decimal("1200")


async def test_get_missing_fee_definition(manager):
    with pytest.raises(FeeNotFoundError):
        await manager.get_fee_definition(STUDIO_ID, "fee-unknown")


async def test_malformed_stored_fee(manager, store):
    await store.set(f"Studios/{STUDIO_ID}/Fees/fee-bad", {"Name": "Broken", "Amount": "free"})

    with pytest.raises(InvalidFeeError) as exc_info:
        await manager.get_fee_definition(STUDIO_ID, "fee-bad")
    assert exc_info.value.details["fee_id"] == "fee-bad"


async def test_lookup_helpers(manager):
    assert [f.family_id for f in await manager.get_families_for_season(STUDIO_ID, "sea-1")] == ["f1", "f2"]
    assert [f.family_id for f in await manager.get_families_for_class(STUDIO_ID, "c2")] == ["f1"]
    assert [f.family_id for f in await manager.get_family_for_student(STUDIO_ID, "st2")] == ["f2"]


def test_build_family_fee_record_is_pure(manager, store, costume_fee):
    before = len(store)
    record = manager.build_family_fee_record(costume_fee, "Family", "f3", REFERENCE_DATE)

    assert record.id is None
    assert record.entire_fee_amount == Decimal("50")
    assert len(store) == before
