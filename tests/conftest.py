"""
Shared fixtures: a seeded in-memory studio and a fixed clock.
"""

from datetime import datetime, timezone
from itertools import count

import pytest

from studiosync.core.config import FeeSettings, Settings, StudioContextSettings
from studiosync.repositories.base import InMemoryDocumentStore
from studiosync.services.fees import FeesManager

STUDIO_ID = "studio-1"
REFERENCE_DATE = datetime(2025, 1, 15, 9, 30, tzinfo=timezone.utc)


def studio_documents(studio_id: str = STUDIO_ID) -> dict:
    """Roster used across tests.

    Families f1 and f2 attend class c1; f1 also attends c2 through a
    sibling. Season sea-1 holds c1 and c2, season sea-2 holds c3 (empty).
    """
    base = f"Studios/{studio_id}"
    return {
        f"{base}/Families/f1": {"FamilyName": "Rivera"},
        f"{base}/Families/f2": {"FamilyName": "Okafor"},
        f"{base}/Families/f3": {"FamilyName": "Lindqvist"},
        f"{base}/Students/st1": {"FirstName": "Ana", "FamilyId": "f1", "Classes": ["c1", "c2"]},
        f"{base}/Students/st2": {"FirstName": "Chidi", "FamilyId": "f2", "Classes": ["c1"]},
        f"{base}/Students/st3": {"FirstName": "Luis", "FamilyId": "f1", "Classes": ["c2"]},
        f"{base}/Students/st4": {"FirstName": "Noor", "Classes": ["c1"]},
        f"{base}/Classes/c1": {"ClassName": "Ballet I", "SeasonId": "sea-1"},
        f"{base}/Classes/c2": {"ClassName": "Jazz", "SeasonId": "sea-1"},
        f"{base}/Classes/c3": {"ClassName": "Tap", "SeasonId": "sea-2"},
        f"{base}/Fees/fee-tuition": {
            "Name": "Tuition",
            "Amount": 1200,
            "Type": "Recurring",
            "Duration": 12,
            "BrokenUpCount": 12,
            "HasEndDate": False,
            "IsActive": True,
        },
        f"{base}/Fees/fee-costume": {
            "Name": "Costume",
            "Amount": "50",
            "Type": "OneTime",
            "IsActive": True,
        },
    }


def make_id_factory(prefix: str = "doc"):
    counter = count(1)
    return lambda: f"{prefix}-{next(counter)}"


@pytest.fixture
def clock():
    return lambda: REFERENCE_DATE


@pytest.fixture
def store(clock):
    store = InMemoryDocumentStore(clock=clock, id_factory=make_id_factory())
    store.load(studio_documents())
    return store


@pytest.fixture
def fee_settings():
    return FeeSettings()


@pytest.fixture
def app_settings():
    return Settings(
        fees=FeeSettings(),
        studio_context=StudioContextSettings(),
    )


@pytest.fixture
def manager(store, app_settings, clock):
    return FeesManager(store, app_settings=app_settings, clock=clock)


@pytest.fixture
def tuition_fee():
    return {
        "id": "fee-tuition",
        "Name": "Tuition",
        "Amount": 1200,
        "Type": "Recurring",
        "Duration": 12,
        "BrokenUpCount": 12,
        "HasEndDate": False,
    }


@pytest.fixture
def costume_fee():
    return {
        "id": "fee-costume",
        "Name": "Costume",
        "Amount": 50,
        "Type": "OneTime",
    }
