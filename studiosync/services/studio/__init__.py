"""
Studio services: per-user studio context and branding.
"""

from studiosync.services.studio.context_cache import ContextCache
from studiosync.services.studio.studio_context_service import StudioContextService

__all__ = [
    "ContextCache",
    "StudioContextService",
]
