from studiosync.repositories.fees.fee_repository import FeeRepository
from studiosync.repositories.fees.roster_repository import StudioRosterRepository

__all__ = [
    "FeeRepository",
    "StudioRosterRepository",
]
