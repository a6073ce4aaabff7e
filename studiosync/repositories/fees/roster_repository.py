"""
Studio roster repository.

Read access to the students, classes and families a fee can be
associated with.
"""

from typing import List

from studiosync.repositories.base.base_repository import BaseRepository
from studiosync.repositories.base.document_store import DocumentSnapshot, FieldFilter


class StudioRosterRepository(BaseRepository):
    """
    Roster lookups with:
    - Student point lookup
    - Class membership queries (array-contains on Students.Classes)
    - Season membership queries (equality on Classes.SeasonId)
    - Family enumeration
    """

    STUDENTS = "Students"
    CLASSES = "Classes"
    FAMILIES = "Families"

    async def get_student(self, studio_id: str, student_id: str) -> DocumentSnapshot:
        return await self._get(studio_id, self.STUDENTS, student_id)

    async def find_students_in_class(self, studio_id: str, class_id: str) -> List[DocumentSnapshot]:
        return await self._find(
            studio_id,
            self.STUDENTS,
            FieldFilter.array_contains("Classes", class_id),
        )

    async def find_classes_in_season(self, studio_id: str, season_id: str) -> List[DocumentSnapshot]:
        return await self._find(
            studio_id,
            self.CLASSES,
            FieldFilter.equals("SeasonId", season_id),
        )

    async def list_families(self, studio_id: str) -> List[DocumentSnapshot]:
        return await self.store.list_documents(self.collection_path(studio_id, self.FAMILIES))

    async def family_ids_for_class(self, studio_id: str, class_id: str) -> List[str]:
        """FamilyId of every student enrolled in the class, duplicates included."""
        students = await self.find_students_in_class(studio_id, class_id)
        return self._field_values(students, "FamilyId")
