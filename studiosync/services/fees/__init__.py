"""
Fee services: family resolution, schedule generation, distribution and activation.
"""

from studiosync.services.fees.family_resolver_service import (
    FamilyResolverService,
    parse_association_type,
    require_association_id,
    unique_families,
)
from studiosync.services.fees.fee_schedule_generator import (
    FeeInput,
    FeeScheduleGenerator,
    coerce_fee_definition,
)
from studiosync.services.fees.fee_distribution_service import FeeDistributionService
from studiosync.services.fees.fee_activation_service import FeeActivationService
from studiosync.services.fees.fees_manager import FeesManager

__all__ = [
    "FamilyResolverService",
    "parse_association_type",
    "require_association_id",
    "unique_families",
    "FeeInput",
    "FeeScheduleGenerator",
    "coerce_fee_definition",
    "FeeDistributionService",
    "FeeActivationService",
    "FeesManager",
]
