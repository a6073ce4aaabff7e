"""
Studio context schemas: the signed-in user's profile and studio branding
that the UI layer renders on every page.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field, field_validator

from studiosync.schemas.common.base import BaseSchema, FrozenSchema
from studiosync.utils.color_utils import adjust_color, is_hex_color

__all__ = [
    "UserProfile",
    "StudioBranding",
    "StudioContext",
]

NO_ROLE_LABEL = "No Role Assigned"


class UserProfile(BaseSchema):
    """Profile of a studio user or instructor."""

    first_name: str = Field(default="", alias="FirstName")
    last_name: str = Field(default="", alias="LastName")
    email: Optional[str] = Field(default=None, alias="Email")
    role: Optional[str] = Field(default=None, alias="Role")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def display_role(self) -> str:
        return self.role or NO_ROLE_LABEL

    @property
    def has_role(self) -> bool:
        return bool(self.role)


class StudioBranding(FrozenSchema):
    """Resolved studio theme with defaults applied."""

    primary_color: str
    primary_hover: str
    secondary_color: str
    studio_name: str
    logo_url: Optional[str] = None

    @field_validator("primary_color", "primary_hover", "secondary_color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        if not is_hex_color(v):
            raise ValueError(f"Invalid hex colour: {v!r}")
        return v if v.startswith("#") else f"#{v}"

    @property
    def show_logo(self) -> bool:
        return bool(self.logo_url)

    @property
    def logo_alt(self) -> str:
        return self.studio_name

    @classmethod
    def from_studio_data(
        cls,
        studio_data: Optional[Dict[str, Any]],
        default_primary: str,
        default_secondary: str,
        default_name: str,
    ) -> "StudioBranding":
        """
        Build branding from a studio document.

        Missing or invalid colours fall back to the defaults; the hover
        colour is the primary colour darkened by 10%.
        """
        data = studio_data or {}

        primary = data.get("PrimaryColor") or default_primary
        if not is_hex_color(primary):
            primary = default_primary
        secondary = data.get("SecondaryColor") or default_secondary
        if not is_hex_color(secondary):
            secondary = default_secondary
        studio_name = data.get("StudioName")
        if not isinstance(studio_name, str) or not studio_name:
            studio_name = default_name

        return cls(
            primary_color=primary,
            primary_hover=adjust_color(primary, -10),
            secondary_color=secondary,
            studio_name=studio_name,
            logo_url=data.get("LogoUrl") or None,
        )


class StudioContext(BaseSchema):
    """Cached per-user studio context."""

    studio_id: str
    loaded_at: datetime
    user: UserProfile
    branding: StudioBranding
    source: str = Field(default="Users", description="Collection the profile came from")
