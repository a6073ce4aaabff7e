"""
Service layer: fee distribution and activation, studio context.
"""

from studiosync.services.base import BaseService
from studiosync.services.fees import (
    FamilyResolverService,
    FeeActivationService,
    FeeDistributionService,
    FeeScheduleGenerator,
    FeesManager,
)
from studiosync.services.studio import ContextCache, StudioContextService

__all__ = [
    "BaseService",
    "FamilyResolverService",
    "FeeActivationService",
    "FeeDistributionService",
    "FeeScheduleGenerator",
    "FeesManager",
    "ContextCache",
    "StudioContextService",
]
