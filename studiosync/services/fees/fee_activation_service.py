"""
Fee Activation Service

Propagates a fee definition's IsActive flag to every family record
materialized from it. The scan visits each family and queries its fee
records by FeeId; there is no cross-family index. Updates are sequential
and not transactional, so a concurrent reader can observe a mix of
updated and stale records until the scan finishes.
"""

from studiosync.core.logging import log_execution_time
from studiosync.repositories.fees import FeeRepository, StudioRosterRepository
from studiosync.services.base import BaseService


class FeeActivationService(BaseService):
    """Activates or deactivates a fee across a studio."""

    def __init__(self, fee_repository: FeeRepository, roster_repository: StudioRosterRepository):
        """
        Initialize fee activation service.

        Args:
            fee_repository: Fee persistence
            roster_repository: Roster repository used to enumerate families
        """
        super().__init__()
        self.fees = fee_repository
        self.roster = roster_repository

    @log_execution_time()
    async def update_fee_activation(self, studio_id: str, fee_id: str, is_active: bool) -> int:
        """
        Set IsActive on the fee definition and on all of its family records.

        Args:
            studio_id: Studio id
            fee_id: Fee definition id
            is_active: New activation state

        Returns:
            Number of family fee records updated

        Raises:
            FeeNotFoundError: Fee definition does not exist (nothing is updated)
            StoreUnavailableError: Store I/O failure; records visited before
                the failure keep their new state
        """
        with self.studio_scope(studio_id):
            updated = 0
            try:
                await self.fees.set_fee_activation(studio_id, fee_id, is_active)

                families = await self.roster.list_families(studio_id)
                for family in families:
                    matches = await self.fees.find_family_fees_for_fee(studio_id, family.id, fee_id)
                    for record in matches:
                        await self.fees.set_family_fee_activation(record.path, is_active)
                        updated += 1
            except Exception as e:
                self._log_failure(
                    e,
                    "update fee activation",
                    fee_id,
                    {"is_active": is_active, "records_updated": updated},
                )
                raise

            self._log_operation(
                "update fee activation",
                fee_id,
                {"is_active": is_active, "records_updated": updated, "families_scanned": len(families)},
            )
            return updated
