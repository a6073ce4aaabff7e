from studiosync.schemas.studio.studio_context import StudioBranding, StudioContext, UserProfile

__all__ = [
    "StudioBranding",
    "StudioContext",
    "UserProfile",
]
