from datetime import timedelta

import pytest

from studiosync.core.config import StudioContextSettings
from studiosync.core.exceptions import (
    ResourceNotFoundError,
    StoreUnavailableError,
    UserNotFoundError,
)
from studiosync.repositories.base import InMemoryDocumentStore
from studiosync.schemas.studio import StudioBranding, UserProfile
from studiosync.services.studio import ContextCache, StudioContextService

from tests.conftest import REFERENCE_DATE, STUDIO_ID

STUDIO_DATA = {
    "StudioName": "Pointe Academy",
    "PrimaryColor": "#3DCED7",
    "SecondaryColor": "#112233",
    "LogoUrl": "https://cdn.example.com/pointe.png",
}


class MovableClock:
    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def context_clock():
    return MovableClock(REFERENCE_DATE)


@pytest.fixture
def profile_store():
    store = InMemoryDocumentStore()
    store.load(
        {
            f"Studios/{STUDIO_ID}/Users/u-1": {
                "FirstName": "Dana",
                "LastName": "Marsh",
                "Email": "dana@example.com",
                "Role": "Owner",
            },
            f"Studios/{STUDIO_ID}/Instructors/uid-9": {
                "FirstName": "Kai",
                "LastName": "Ito",
                "Email": "kai@example.com",
            },
        }
    )
    return store


@pytest.fixture
def service(profile_store, context_clock):
    return StudioContextService(
        profile_store,
        cache=ContextCache(),
        context_settings=StudioContextSettings(),
        clock=context_clock,
    )


class TestLoad:
    async def test_users_profile_wins(self, service):
        context = await service.load(STUDIO_ID, "u-1", "uid-9", STUDIO_DATA)

        assert context.source == "Users"
        assert context.user.full_name == "Dana Marsh"
        assert context.user.display_role == "Owner"
        assert context.loaded_at == REFERENCE_DATE

    async def test_falls_back_to_instructor(self, service):
        context = await service.load(STUDIO_ID, "u-missing", "uid-9", STUDIO_DATA)

        assert context.source == "Instructors"
        assert context.user.email == "kai@example.com"
        assert context.user.display_role == "No Role Assigned"
        assert not context.user.has_role

    async def test_no_profile(self, service):
        with pytest.raises(UserNotFoundError) as exc_info:
            await service.load(STUDIO_ID, "u-missing", "uid-missing", STUDIO_DATA)
        assert isinstance(exc_info.value, ResourceNotFoundError)

    async def test_branding(self, service):
        context = await service.load(STUDIO_ID, "u-1", None, STUDIO_DATA)

        branding = context.branding
        assert branding.studio_name == "Pointe Academy"
        assert branding.primary_hover == "#24b5be"
        assert branding.secondary_color == "#112233"
        assert branding.show_logo
        assert branding.logo_alt == "Pointe Academy"


class TestCaching:
    async def test_fresh_entry_is_served_from_cache(self, service, profile_store):
        first = await service.get_context(STUDIO_ID, "u-1", None, STUDIO_DATA)
        await profile_store.update(f"Studios/{STUDIO_ID}/Users/u-1", {"Role": "Manager"})

        second = await service.get_context(STUDIO_ID, "u-1", None, STUDIO_DATA)
        assert second is first
        assert second.user.role == "Owner"

    async def test_half_life_triggers_refresh(self, service, profile_store, context_clock):
        await service.get_context(STUDIO_ID, "u-1", None, STUDIO_DATA)
        await profile_store.update(f"Studios/{STUDIO_ID}/Users/u-1", {"Role": "Manager"})

        context_clock.advance(minutes=29)
        assert (await service.get_context(STUDIO_ID, "u-1", None, STUDIO_DATA)).user.role == "Owner"

        context_clock.advance(minutes=2)
        refreshed = await service.get_context(STUDIO_ID, "u-1", None, STUDIO_DATA)
        assert refreshed.user.role == "Manager"
        assert refreshed.loaded_at == context_clock.now

    async def test_expired_entry_is_evicted(self, service, context_clock):
        cached = await service.get_context(STUDIO_ID, "u-1", None, STUDIO_DATA)

        context_clock.advance(hours=1)
        assert not service.is_cache_valid(cached)
        assert service.should_refresh(cached)

        reloaded = await service.get_context(STUDIO_ID, "u-1", None, STUDIO_DATA)
        assert reloaded is not cached
        assert len(service.cache) == 1

    async def test_failed_reload_leaves_no_stale_entry(self, service, profile_store, context_clock):
        await service.get_context(STUDIO_ID, "u-1", None, STUDIO_DATA)
        profile_store._documents.pop(f"Studios/{STUDIO_ID}/Users/u-1")

        context_clock.advance(hours=2)
        with pytest.raises(UserNotFoundError):
            await service.get_context(STUDIO_ID, "u-1", None, STUDIO_DATA)
        assert len(service.cache) == 0

    async def test_failed_refresh_serves_valid_entry(self, service, profile_store, context_clock, monkeypatch):
        cached = await service.get_context(STUDIO_ID, "u-1", None, STUDIO_DATA)

        async def unavailable(path):
            raise StoreUnavailableError("down", path=path, operation="get")

        monkeypatch.setattr(profile_store, "get", unavailable)
        context_clock.advance(minutes=40)
        assert service.should_refresh(cached)

        served = await service.get_context(STUDIO_ID, "u-1", None, STUDIO_DATA)
        assert served is cached
        assert len(service.cache) == 1

    async def test_failed_refresh_of_expired_entry_raises(self, service, profile_store, context_clock, monkeypatch):
        await service.get_context(STUDIO_ID, "u-1", None, STUDIO_DATA)

        async def unavailable(path):
            raise StoreUnavailableError("down", path=path, operation="get")

        monkeypatch.setattr(profile_store, "get", unavailable)
        context_clock.advance(minutes=61)

        with pytest.raises(StoreUnavailableError):
            await service.get_context(STUDIO_ID, "u-1", None, STUDIO_DATA)
        assert len(service.cache) == 0

    async def test_invalidate(self, service):
        await service.get_context(STUDIO_ID, "u-1", None, STUDIO_DATA)
        assert service.invalidate(STUDIO_ID, "u-1", None)
        assert not service.invalidate(STUDIO_ID, "u-1", None)

    async def test_custom_ttl(self, profile_store, context_clock):
        service = StudioContextService(
            profile_store,
            context_settings=StudioContextSettings(CONTEXT_CACHE_DURATION_SECONDS=60),
            clock=context_clock,
        )
        cached = await service.get_context(STUDIO_ID, "u-1", None)

        context_clock.advance(seconds=31)
        assert service.should_refresh(cached)
        assert service.is_cache_valid(cached)


class TestBranding:
    def test_defaults_when_studio_data_missing(self):
        branding = StudioBranding.from_studio_data(None, "#3DCED7", "#3A506B", "Studio Sync")

        assert branding.primary_color == "#3DCED7"
        assert branding.primary_hover == "#24b5be"
        assert branding.secondary_color == "#3A506B"
        assert branding.studio_name == "Studio Sync"
        assert not branding.show_logo

    def test_invalid_colour_falls_back(self):
        branding = StudioBranding.from_studio_data(
            {"PrimaryColor": "teal", "SecondaryColor": ""}, "#3DCED7", "#3A506B", "Studio Sync"
        )
        assert branding.primary_color == "#3DCED7"
        assert branding.secondary_color == "#3A506B"

    def test_non_string_fields_fall_back(self):
        branding = StudioBranding.from_studio_data(
            {"PrimaryColor": 4050647, "SecondaryColor": ["#112233"], "StudioName": 7},
            "#3DCED7",
            "#3A506B",
            "Studio Sync",
        )
        assert branding.primary_color == "#3DCED7"
        assert branding.primary_hover == "#24b5be"
        assert branding.secondary_color == "#3A506B"
        assert branding.studio_name == "Studio Sync"


def test_user_profile_name_and_role():
    profile = UserProfile.model_validate({"FirstName": "Dana", "LastName": ""})
    assert profile.full_name == "Dana"
    assert profile.display_role == "No Role Assigned"
