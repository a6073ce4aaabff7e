"""
Studio Context Service

Loads the signed-in user's profile and the studio branding, and keeps the
result cached for CONTEXT_CACHE_DURATION_SECONDS:
- Age below the TTL: the cached context is served
- Age past half the TTL: the context is reloaded before being served
- Age at or past the TTL: the entry is evicted and reloaded
"""

from datetime import datetime
from typing import Any, Callable, Dict, Optional

from studiosync.core.config import StudioContextSettings, settings
from studiosync.core.exceptions import UserNotFoundError
from studiosync.core.logging import log_execution_time
from studiosync.repositories.base.document_store import DocumentStore
from studiosync.repositories.studio import StudioUserRepository
from studiosync.schemas.studio import StudioBranding, StudioContext, UserProfile
from studiosync.services.base import BaseService
from studiosync.services.studio.context_cache import ContextCache
from studiosync.utils.date_utils import now_utc, to_utc


class StudioContextService(BaseService):
    """Builds and caches per-user studio contexts."""

    def __init__(
        self,
        store: DocumentStore,
        cache: Optional[ContextCache] = None,
        context_settings: Optional[StudioContextSettings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize studio context service.

        Args:
            store: Studio document store
            cache: Context cache (a private one is created when omitted)
            context_settings: Context settings (defaults to the global settings)
            clock: Time source for cache ages
        """
        super().__init__()
        self.users = StudioUserRepository(store)
        self.cache = cache if cache is not None else ContextCache()
        self.settings = context_settings or settings.studio_context
        self._clock = clock or now_utc

    @property
    def ttl_seconds(self) -> int:
        return self.settings.CONTEXT_CACHE_DURATION_SECONDS

    @staticmethod
    def cache_key(studio_id: str, user_doc_id: Optional[str], uid: Optional[str]) -> str:
        return f"{studio_id}:{user_doc_id or ''}:{uid or ''}"

    # -------------------------------------------------------------------------
    # Freshness
    # -------------------------------------------------------------------------

    def age_seconds(self, context: StudioContext) -> float:
        return (to_utc(self._clock()) - to_utc(context.loaded_at)).total_seconds()

    def is_cache_valid(self, context: StudioContext) -> bool:
        return self.age_seconds(context) < self.ttl_seconds

    def should_refresh(self, context: StudioContext) -> bool:
        return self.age_seconds(context) > self.ttl_seconds / 2

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def get_context(
        self,
        studio_id: str,
        user_doc_id: Optional[str],
        uid: Optional[str],
        studio_data: Optional[Dict[str, Any]] = None,
    ) -> StudioContext:
        """
        Serve the cached context, reloading it when stale.

        An entry past half its TTL is refreshed; if that refresh fails the
        entry is still valid and is served as is.

        Raises:
            UserNotFoundError: No Users or Instructors profile for this user
                and nothing valid cached
        """
        key = self.cache_key(studio_id, user_doc_id, uid)
        cached = self.cache.get(key)

        if cached is not None and not self.is_cache_valid(cached):
            self.cache.delete(key)
            cached = None

        if cached is None:
            return await self.load(studio_id, user_doc_id, uid, studio_data)

        if not self.should_refresh(cached):
            return cached

        try:
            return await self.load(studio_id, user_doc_id, uid, studio_data)
        except Exception as e:
            self._logger.warning(
                f"Studio context refresh failed, serving cached entry: {e}",
                extra={
                    "studio_id": studio_id,
                    "cache_key": key,
                    "age_seconds": round(self.age_seconds(cached), 3),
                    "exception_type": type(e).__name__,
                },
            )
            return cached

    @log_execution_time()
    async def load(
        self,
        studio_id: str,
        user_doc_id: Optional[str],
        uid: Optional[str],
        studio_data: Optional[Dict[str, Any]] = None,
    ) -> StudioContext:
        """
        Fetch the profile and branding and cache the result.

        The Users profile wins; the Instructors profile keyed by auth uid is
        only consulted when the Users document is absent.

        Args:
            studio_id: Studio id
            user_doc_id: Document id in the studio's Users collection
            uid: Auth uid, the document id in the Instructors collection
            studio_data: Studio document used for branding

        Raises:
            UserNotFoundError: Neither profile exists
        """
        with self.studio_scope(studio_id):
            try:
                profile, source = await self._fetch_profile(studio_id, user_doc_id, uid)
            except Exception as e:
                self._log_failure(e, "load studio context", user_doc_id or uid)
                raise

            context = StudioContext(
                studio_id=studio_id,
                loaded_at=to_utc(self._clock()),
                user=profile,
                branding=StudioBranding.from_studio_data(
                    studio_data,
                    self.settings.CONTEXT_DEFAULT_PRIMARY_COLOR,
                    self.settings.CONTEXT_DEFAULT_SECONDARY_COLOR,
                    self.settings.CONTEXT_DEFAULT_STUDIO_NAME,
                ),
                source=source,
            )
            self.cache.set(self.cache_key(studio_id, user_doc_id, uid), context)

            self._logger.debug(
                f"Studio context loaded from {source}",
                extra={"profile_source": source, "has_role": profile.has_role},
            )
            return context

    def invalidate(self, studio_id: str, user_doc_id: Optional[str], uid: Optional[str]) -> bool:
        return self.cache.delete(self.cache_key(studio_id, user_doc_id, uid))

    async def _fetch_profile(
        self,
        studio_id: str,
        user_doc_id: Optional[str],
        uid: Optional[str],
    ):
        if user_doc_id:
            user_doc = await self.users.get_user(studio_id, user_doc_id)
            if user_doc.exists:
                return UserProfile.model_validate(user_doc.to_dict()), StudioUserRepository.USERS

        if uid:
            instructor_doc = await self.users.get_instructor(studio_id, uid)
            if instructor_doc.exists:
                return (
                    UserProfile.model_validate(instructor_doc.to_dict()),
                    StudioUserRepository.INSTRUCTORS,
                )

        raise UserNotFoundError(user_doc_id or uid)
