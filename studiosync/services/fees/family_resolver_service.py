"""
Family Resolver Service

Maps a fee association (season, class, family or student) to the distinct
families it bills. Families are deduplicated by family id value, so a
family reached through several students or classes appears once.
"""

from typing import Any, Dict, Iterable, List, Union

from studiosync.core.exceptions import InvalidAssociationError, StudentNotFoundError
from studiosync.repositories.fees import StudioRosterRepository
from studiosync.schemas.common.enums import AssociationType
from studiosync.schemas.fees import FamilyRef
from studiosync.services.base import BaseService


def parse_association_type(value: Union[AssociationType, str]) -> AssociationType:
    """
    Coerce a raw association type.

    Raises:
        InvalidAssociationError: If the value is not Season, Class, Family or Student
    """
    if isinstance(value, AssociationType):
        return value
    try:
        return AssociationType(value)
    except ValueError as e:
        raise InvalidAssociationError(value) from e


def require_association_id(assoc: AssociationType, association_id: Any) -> str:
    """
    Raises:
        InvalidAssociationError: If the association id is missing or blank
    """
    if not isinstance(association_id, str) or not association_id.strip():
        raise InvalidAssociationError(
            assoc.value,
            message=f"{assoc.value} association requires a non-empty id",
        )
    return association_id


def unique_families(family_ids: Iterable[str]) -> List[FamilyRef]:
    """Deduplicate family ids by value, keeping first-seen order."""
    families: Dict[str, FamilyRef] = {}
    for family_id in family_ids:
        if family_id and family_id not in families:
            families[family_id] = FamilyRef(family_id=family_id)
    return list(families.values())


class FamilyResolverService(BaseService):
    """
    Resolves the families affected by a fee association.

    Lookups are sequential: one store round-trip per class for seasons.
    """

    def __init__(self, roster_repository: StudioRosterRepository):
        """
        Initialize family resolver.

        Args:
            roster_repository: Student/class roster repository
        """
        super().__init__()
        self.roster = roster_repository

    async def resolve_families(
        self,
        studio_id: str,
        association_type: Union[AssociationType, str],
        association_id: str,
    ) -> List[FamilyRef]:
        """
        Resolve the distinct families for an association.

        Args:
            studio_id: Studio owning the roster
            association_type: Season, Class, Family or Student
            association_id: Id of the associated entity

        Returns:
            Families without duplicates, in first-seen order

        Raises:
            InvalidAssociationError: Unknown association type or blank id
            StudentNotFoundError: Student missing or without a family
            StoreUnavailableError: Store I/O failure
        """
        assoc = parse_association_type(association_type)
        require_association_id(assoc, association_id)

        with self.studio_scope(studio_id):
            try:
                if assoc == AssociationType.FAMILY:
                    families = [FamilyRef(family_id=association_id)]
                elif assoc == AssociationType.STUDENT:
                    families = await self.get_family_for_student(studio_id, association_id)
                elif assoc == AssociationType.CLASS:
                    families = await self.get_families_for_class(studio_id, association_id)
                else:
                    families = await self.get_families_for_season(studio_id, association_id)
            except Exception as e:
                self._log_failure(
                    e,
                    "resolve families",
                    association_id,
                    {"association_type": assoc.value},
                )
                raise

            self._logger.debug(
                f"Resolved {len(families)} family(ies) for {assoc.value} {association_id}",
                extra={"association_type": assoc.value, "family_count": len(families)},
            )
            return families

    async def get_family_for_student(self, studio_id: str, student_id: str) -> List[FamilyRef]:
        """
        Raises:
            StudentNotFoundError: Student missing or without a family
        """
        student = await self.roster.get_student(studio_id, student_id)
        family_id = student.get("FamilyId")
        if not student.exists or not family_id:
            raise StudentNotFoundError(student_id)
        return [FamilyRef(family_id=family_id)]

    async def get_families_for_class(self, studio_id: str, class_id: str) -> List[FamilyRef]:
        family_ids = await self.roster.family_ids_for_class(studio_id, class_id)
        return unique_families(family_ids)

    async def get_families_for_season(self, studio_id: str, season_id: str) -> List[FamilyRef]:
        classes = await self.roster.find_classes_in_season(studio_id, season_id)

        family_ids: List[str] = []
        for class_doc in classes:
            family_ids.extend(await self.roster.family_ids_for_class(studio_id, class_doc.id))

        return unique_families(family_ids)
