"""
Fee Distribution Service

Applies a fee definition to every family an association resolves to:
resolve families, build one record per family against a single reference
instant, then persist.

Write policy:
- Atomic (default, when the store supports batches): records are committed
  in write batches of at most FEES_MAX_BATCH_WRITES, each batch all or
  nothing. A single batch covers the whole distribution unless the family
  count exceeds the batch limit.
- Sequential: one insert per family in resolver order. The first failure
  aborts and propagates; families already written stay billed.
"""

from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple, Union

from studiosync.core.config import FeeSettings, settings
from studiosync.core.logging import log_execution_time
from studiosync.repositories.base.document_store import DocumentPath
from studiosync.repositories.fees import FeeRepository
from studiosync.schemas.common.enums import AssociationType
from studiosync.schemas.fees import FamilyFeeRecord, FamilyRef
from studiosync.services.base import BaseService
from studiosync.services.fees.family_resolver_service import (
    FamilyResolverService,
    parse_association_type,
    require_association_id,
)
from studiosync.services.fees.fee_schedule_generator import (
    FeeInput,
    FeeScheduleGenerator,
    coerce_fee_definition,
)
from studiosync.utils.date_utils import now_utc

PendingRecord = Tuple[FamilyRef, FamilyFeeRecord]


class FeeDistributionService(BaseService):
    """
    Orchestrates fee materialization across families.

    Families are processed one store round-trip at a time; nothing runs in
    parallel within a distribution.
    """

    def __init__(
        self,
        resolver: FamilyResolverService,
        generator: FeeScheduleGenerator,
        fee_repository: FeeRepository,
        fee_settings: Optional[FeeSettings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize fee distribution service.

        Args:
            resolver: Family resolver
            generator: Fee schedule generator
            fee_repository: Fee persistence
            fee_settings: Fee settings (defaults to the global settings)
            clock: Source of the schedule reference instant
        """
        super().__init__()
        self.resolver = resolver
        self.generator = generator
        self.fees = fee_repository
        self.settings = fee_settings or settings.fees
        self._clock = clock or now_utc

    @property
    def uses_atomic_writes(self) -> bool:
        return self.settings.FEES_ATOMIC_DISTRIBUTION and self.fees.store.supports_atomic_batches

    @log_execution_time()
    async def add_fee_to_families(
        self,
        studio_id: str,
        fee: FeeInput,
        association_type: Union[AssociationType, str],
        association_id: str,
    ) -> List[FamilyFeeRecord]:
        """
        Bill every family affected by an association.

        Args:
            studio_id: Studio id
            fee: Fee definition (schema or raw document mapping)
            association_type: Season, Class, Family or Student
            association_id: Id of the associated entity

        Returns:
            Persisted records, with their store ids, in family order

        Raises:
            InvalidFeeError: Malformed fee definition, or installments that
                would round to zero (nothing is written)
            InvalidAssociationError: Unknown association type or blank
                association id (nothing is written)
            StudentNotFoundError: Student missing or without a family
            StoreUnavailableError: Store I/O failure; with sequential writes
                some families may already be billed
        """
        definition = coerce_fee_definition(fee)
        assoc = parse_association_type(association_type)
        require_association_id(assoc, association_id)
        self.generator.check_installments(definition)

        with self.studio_scope(studio_id):
            families = await self.resolver.resolve_families(studio_id, assoc, association_id)
            if not families:
                self._logger.info(
                    f"No families to bill for {assoc.value} {association_id}",
                    extra={"fee_id": definition.id, "association_type": assoc.value},
                )
                return []

            reference_date = self._clock()
            pending: List[PendingRecord] = [
                (
                    family,
                    self.generator.build_family_fee_record(
                        definition, assoc, association_id, reference_date
                    ),
                )
                for family in families
            ]

            try:
                if self.uses_atomic_writes:
                    persisted = await self._write_batched(studio_id, pending)
                else:
                    persisted = await self._write_sequential(studio_id, pending)
            except Exception as e:
                self._log_failure(
                    e,
                    "add fee to families",
                    definition.id,
                    {
                        "association_type": assoc.value,
                        "association_id": association_id,
                        "family_count": len(families),
                        "atomic": self.uses_atomic_writes,
                    },
                )
                raise

            self._log_operation(
                "add fee to families",
                definition.id,
                {
                    "association_type": assoc.value,
                    "association_id": association_id,
                    "family_count": len(persisted),
                    "atomic": self.uses_atomic_writes,
                },
            )
            return persisted

    async def add_fee_to_family(
        self,
        studio_id: str,
        family_id: str,
        fee: FeeInput,
        association_type: Union[AssociationType, str],
        association_id: str,
        reference_date: Optional[datetime] = None,
    ) -> FamilyFeeRecord:
        """
        Bill a single family directly, without association resolution.

        Raises:
            InvalidFeeError: Malformed fee definition
            InvalidAssociationError: Unknown association type
            StoreUnavailableError: Store I/O failure
        """
        record = self.generator.build_family_fee_record(
            fee,
            association_type,
            association_id,
            reference_date or self._clock(),
        )

        with self.studio_scope(studio_id):
            try:
                saved = await self.fees.add_family_fee(studio_id, family_id, record)
            except Exception as e:
                self._log_failure(e, "add fee to family", family_id, {"fee_id": record.fee_id})
                raise

            self._logger.debug(
                f"Fee record {saved.id} created for family {family_id}",
                extra={"fee_id": record.fee_id, "family_id": family_id},
            )
            return saved

    # -------------------------------------------------------------------------
    # Write strategies
    # -------------------------------------------------------------------------

    async def _write_sequential(
        self,
        studio_id: str,
        pending: Sequence[PendingRecord],
    ) -> List[FamilyFeeRecord]:
        persisted: List[FamilyFeeRecord] = []
        for family, record in pending:
            try:
                persisted.append(
                    await self.fees.add_family_fee(studio_id, family.family_id, record)
                )
            except Exception:
                self._logger.warning(
                    f"Distribution aborted after {len(persisted)} of {len(pending)} families",
                    extra={
                        "failed_family_id": family.family_id,
                        "billed_family_ids": [r.family_id for r, _ in pending[: len(persisted)]],
                    },
                )
                raise
        return persisted

    async def _write_batched(
        self,
        studio_id: str,
        pending: Sequence[PendingRecord],
    ) -> List[FamilyFeeRecord]:
        limit = self.settings.FEES_MAX_BATCH_WRITES
        persisted: List[FamilyFeeRecord] = []

        for offset in range(0, len(pending), limit):
            chunk = pending[offset: offset + limit]
            batch = self.fees.store.batch()
            staged = [
                (record, self.fees.stage_family_fee(batch, studio_id, family.family_id, record))
                for family, record in chunk
            ]
            try:
                await batch.commit()
            except Exception:
                if offset:
                    self._logger.warning(
                        f"Batch commit failed after {offset} of {len(pending)} families were billed",
                        extra={"committed_batches": offset // limit},
                    )
                raise

            persisted.extend(
                record.model_copy(update={"id": DocumentPath.document_id(path)})
                for record, path in staged
            )

        return persisted
