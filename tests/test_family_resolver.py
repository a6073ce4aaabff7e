import pytest

from studiosync.core.exceptions import ErrorCode, InvalidAssociationError, StudentNotFoundError
from studiosync.repositories.fees import StudioRosterRepository
from studiosync.schemas.common.enums import AssociationType
from studiosync.schemas.fees import FamilyRef
from studiosync.services.fees import FamilyResolverService, parse_association_type, unique_families

from tests.conftest import STUDIO_ID


@pytest.fixture
def resolver(store):
    return FamilyResolverService(StudioRosterRepository(store))


def family_ids(families):
    return [family.family_id for family in families]


async def test_family_association_is_used_directly(resolver):
    families = await resolver.resolve_families(STUDIO_ID, AssociationType.FAMILY, "f-any")
    assert families == [FamilyRef(family_id="f-any")]


@pytest.mark.parametrize("association_type", ["Family", "Student", "Class", "Season"])
@pytest.mark.parametrize("association_id", ["", "   ", None])
async def test_blank_association_id_is_rejected(resolver, association_type, association_id):
    with pytest.raises(InvalidAssociationError) as exc_info:
        await resolver.resolve_families(STUDIO_ID, association_type, association_id)

    assert exc_info.value.error_code is ErrorCode.INVALID_ASSOCIATION
    assert exc_info.value.details["association_type"] == association_type


async def test_student_resolves_to_its_family(resolver):
    families = await resolver.resolve_families(STUDIO_ID, "Student", "st3")
    assert family_ids(families) == ["f1"]


@pytest.mark.parametrize("student_id", ["st4", "missing-student"])
async def test_student_without_family(resolver, student_id):
    with pytest.raises(StudentNotFoundError) as exc_info:
        await resolver.resolve_families(STUDIO_ID, "Student", student_id)
    assert exc_info.value.error_code is ErrorCode.STUDENT_NOT_FOUND


async def test_class_skips_students_without_family(resolver):
    families = await resolver.resolve_families(STUDIO_ID, "Class", "c1")
    assert family_ids(families) == ["f1", "f2"]


async def test_class_deduplicates_siblings(resolver):
    families = await resolver.resolve_families(STUDIO_ID, "Class", "c2")
    assert family_ids(families) == ["f1"]


async def test_season_deduplicates_across_classes(resolver):
    families = await resolver.resolve_families(STUDIO_ID, AssociationType.SEASON, "sea-1")
    assert family_ids(families) == ["f1", "f2"]


async def test_empty_season_and_class(resolver):
    assert await resolver.resolve_families(STUDIO_ID, "Season", "sea-2") == []
    assert await resolver.resolve_families(STUDIO_ID, "Season", "no-such-season") == []
    assert await resolver.resolve_families(STUDIO_ID, "Class", "c3") == []


async def test_invalid_association_type(resolver):
    with pytest.raises(InvalidAssociationError):
        await resolver.resolve_families(STUDIO_ID, "Household", "x")


async def test_studios_are_isolated(resolver):
    assert await resolver.resolve_families("studio-2", "Class", "c1") == []


def test_parse_association_type():
    assert parse_association_type("Class") is AssociationType.CLASS
    assert parse_association_type(AssociationType.SEASON) is AssociationType.SEASON
    with pytest.raises(InvalidAssociationError):
        parse_association_type("class")


def test_unique_families_keeps_first_seen_order():
    assert family_ids(unique_families(["f2", "f1", "f2", "", "f3", "f1"])) == ["f2", "f1", "f3"]
