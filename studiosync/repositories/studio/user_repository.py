"""
Studio user repository: staff user and instructor profiles.
"""

from studiosync.repositories.base.base_repository import BaseRepository
from studiosync.repositories.base.document_store import DocumentSnapshot


class StudioUserRepository(BaseRepository):
    """Profile lookups in the Users and Instructors collections."""

    USERS = "Users"
    INSTRUCTORS = "Instructors"

    async def get_user(self, studio_id: str, user_doc_id: str) -> DocumentSnapshot:
        return await self._get(studio_id, self.USERS, user_doc_id)

    async def get_instructor(self, studio_id: str, uid: str) -> DocumentSnapshot:
        return await self._get(studio_id, self.INSTRUCTORS, uid)
