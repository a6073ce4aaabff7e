"""
Fee repository.

Persists studio fee definitions (Studios/{studio}/Fees) and the per-family
fee records materialized from them (Studios/{studio}/Families/{family}/Fees).
"""

from typing import List

from studiosync.core.exceptions import FeeNotFoundError, ResourceNotFoundError
from studiosync.repositories.base.base_repository import BaseRepository
from studiosync.repositories.base.document_store import (
    SERVER_TIMESTAMP,
    DocumentPath,
    DocumentSnapshot,
    FieldFilter,
    WriteBatch,
)
from studiosync.schemas.fees import FamilyFeeRecord


class FeeRepository(BaseRepository):
    """
    Fee persistence with:
    - Fee definition lookup and activation updates
    - Family fee record inserts (direct or staged in a write batch)
    - FeeId lookups inside a family's records
    """

    FEES = "Fees"

    # ==================== Fee definitions ====================

    async def get_fee_document(self, studio_id: str, fee_id: str) -> DocumentSnapshot:
        return await self._get(studio_id, self.FEES, fee_id)

    async def set_fee_activation(self, studio_id: str, fee_id: str, is_active: bool) -> DocumentSnapshot:
        """
        Flip IsActive on the canonical fee definition.

        Raises:
            FeeNotFoundError: If the fee document does not exist
        """
        try:
            return await self.store.update(
                self.document_path(studio_id, self.FEES, fee_id),
                {"IsActive": is_active, "LastUpdated": SERVER_TIMESTAMP},
            )
        except ResourceNotFoundError as e:
            raise FeeNotFoundError(fee_id) from e

    # ==================== Family fee records ====================

    @staticmethod
    def family_fees_path(studio_id: str, family_id: str) -> str:
        return DocumentPath.family_fees(studio_id, family_id)

    @staticmethod
    def _record_document(record: FamilyFeeRecord) -> dict:
        data = record.to_document()
        data["CreatedAt"] = SERVER_TIMESTAMP
        data["LastUpdated"] = SERVER_TIMESTAMP
        return data

    async def add_family_fee(
        self,
        studio_id: str,
        family_id: str,
        record: FamilyFeeRecord,
    ) -> FamilyFeeRecord:
        """Insert one family fee record and return it with its id and timestamps."""
        snapshot = await self.store.add(
            self.family_fees_path(studio_id, family_id),
            self._record_document(record),
        )
        return FamilyFeeRecord.from_document(snapshot.id, snapshot.to_dict())

    def stage_family_fee(
        self,
        batch: WriteBatch,
        studio_id: str,
        family_id: str,
        record: FamilyFeeRecord,
    ) -> str:
        """Stage an insert in `batch` and return the path it will be written to."""
        return batch.add(
            self.family_fees_path(studio_id, family_id),
            self._record_document(record),
        )

    async def find_family_fees_for_fee(
        self,
        studio_id: str,
        family_id: str,
        fee_id: str,
    ) -> List[DocumentSnapshot]:
        return await self.store.query(
            self.family_fees_path(studio_id, family_id),
            [FieldFilter.equals("FeeId", fee_id)],
        )

    async def list_family_fees(self, studio_id: str, family_id: str) -> List[FamilyFeeRecord]:
        snapshots = await self.store.list_documents(self.family_fees_path(studio_id, family_id))
        return [FamilyFeeRecord.from_document(s.id, s.to_dict()) for s in snapshots]

    async def set_family_fee_activation(self, path: str, is_active: bool) -> DocumentSnapshot:
        return await self.store.update(
            path,
            {"IsActive": is_active, "LastUpdated": SERVER_TIMESTAMP},
        )
