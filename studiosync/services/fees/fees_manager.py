"""
Fees Manager

Single entry point for fee operations across a studio. Wires the
repositories and services over one document store.
"""

from datetime import datetime
from typing import Callable, List, Optional, Union

from studiosync.core.config import Settings, settings as default_settings
from studiosync.core.exceptions import FeeNotFoundError, InvalidFeeError
from studiosync.repositories.base.document_store import DocumentStore
from studiosync.repositories.fees import FeeRepository, StudioRosterRepository
from studiosync.schemas.common.enums import AssociationType
from studiosync.schemas.fees import FamilyFeeRecord, FamilyRef, FeeDefinition
from studiosync.services.fees.family_resolver_service import FamilyResolverService
from studiosync.services.fees.fee_activation_service import FeeActivationService
from studiosync.services.fees.fee_distribution_service import FeeDistributionService
from studiosync.services.fees.fee_schedule_generator import FeeInput, FeeScheduleGenerator


class FeesManager:
    """
    Facade over fee resolution, scheduling, distribution and activation.

    Example:
        manager = FeesManager(store)
        records = await manager.add_fee_to_families(
            "studio-1", fee, AssociationType.CLASS, "class-7"
        )
    """

    def __init__(
        self,
        store: DocumentStore,
        app_settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the fees manager.

        Args:
            store: Studio document store
            app_settings: Settings (defaults to the global settings)
            clock: Source of the schedule reference instant
        """
        config = app_settings or default_settings

        self.store = store
        self.roster_repository = StudioRosterRepository(store)
        self.fee_repository = FeeRepository(store)

        self.resolver = FamilyResolverService(self.roster_repository)
        self.generator = FeeScheduleGenerator(config.fees)
        self.distribution = FeeDistributionService(
            self.resolver,
            self.generator,
            self.fee_repository,
            fee_settings=config.fees,
            clock=clock,
        )
        self.activation = FeeActivationService(self.fee_repository, self.roster_repository)

    # ==================== Distribution ====================

    async def add_fee_to_families(
        self,
        studio_id: str,
        fee: FeeInput,
        association_type: Union[AssociationType, str],
        association_id: str,
    ) -> List[FamilyFeeRecord]:
        return await self.distribution.add_fee_to_families(
            studio_id, fee, association_type, association_id
        )

    async def add_fee_to_family(
        self,
        studio_id: str,
        family_id: str,
        fee: FeeInput,
        association_type: Union[AssociationType, str],
        association_id: str,
    ) -> FamilyFeeRecord:
        return await self.distribution.add_fee_to_family(
            studio_id, family_id, fee, association_type, association_id
        )

    async def apply_stored_fee(
        self,
        studio_id: str,
        fee_id: str,
        association_type: Union[AssociationType, str],
        association_id: str,
    ) -> List[FamilyFeeRecord]:
        """Load a fee definition from the store and distribute it."""
        fee = await self.get_fee_definition(studio_id, fee_id)
        return await self.add_fee_to_families(studio_id, fee, association_type, association_id)

    # ==================== Activation ====================

    async def update_fee_activation(self, studio_id: str, fee_id: str, is_active: bool) -> int:
        return await self.activation.update_fee_activation(studio_id, fee_id, is_active)

    # ==================== Resolution ====================

    async def resolve_families(
        self,
        studio_id: str,
        association_type: Union[AssociationType, str],
        association_id: str,
    ) -> List[FamilyRef]:
        return await self.resolver.resolve_families(studio_id, association_type, association_id)

    async def get_families_for_season(self, studio_id: str, season_id: str) -> List[FamilyRef]:
        return await self.resolve_families(studio_id, AssociationType.SEASON, season_id)

    async def get_families_for_class(self, studio_id: str, class_id: str) -> List[FamilyRef]:
        return await self.resolve_families(studio_id, AssociationType.CLASS, class_id)

    async def get_family_for_student(self, studio_id: str, student_id: str) -> List[FamilyRef]:
        return await self.resolve_families(studio_id, AssociationType.STUDENT, student_id)

    # ==================== Lookups ====================

    def build_family_fee_record(
        self,
        fee: FeeInput,
        association_type: Union[AssociationType, str],
        association_id: str,
        reference_date: datetime,
    ) -> FamilyFeeRecord:
        return self.generator.build_family_fee_record(
            fee, association_type, association_id, reference_date
        )

    async def get_fee_definition(self, studio_id: str, fee_id: str) -> FeeDefinition:
        """
        Raises:
            FeeNotFoundError: No fee document with this id
            InvalidFeeError: Stored document is malformed
        """
        snapshot = await self.fee_repository.get_fee_document(studio_id, fee_id)
        if not snapshot.exists:
            raise FeeNotFoundError(fee_id)
        try:
            return FeeDefinition.from_document(fee_id, snapshot.to_dict())
        except ValueError as e:
            raise InvalidFeeError(f"Stored fee {fee_id} is malformed: {e}", fee_id=fee_id) from e

    async def list_family_fees(self, studio_id: str, family_id: str) -> List[FamilyFeeRecord]:
        return await self.fee_repository.list_family_fees(studio_id, family_id)
