from studiosync.repositories.studio.user_repository import StudioUserRepository

__all__ = ["StudioUserRepository"]
