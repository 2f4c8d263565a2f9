"""
Process-lifetime cache of the provider's model catalog.

Entries are fetched lazily per API revision and never refreshed, so a model
the provider adds mid-session only shows up after a restart. The cache is
owned by whoever builds the resolver (the API server or the CLI) and is bound
to the event loop it is used from.
"""

import asyncio
import logging
from typing import TYPE_CHECKING

from .errors import CatalogUnavailableError

if TYPE_CHECKING:
    from providers.base import GenerativeProvider

    from .types import ApiRevision

logger = logging.getLogger(__name__)


class CatalogCache:
    """
    Memoized model listing, keyed by API revision.

    Concurrent first access for the same revision is single-flight: one
    coroutine fetches while the others wait on a per-revision lock and then
    read the populated entry. Failed fetches are not cached.
    """

    def __init__(self, provider: "GenerativeProvider"):
        self.provider = provider
        self._entries: dict["ApiRevision", tuple[str, ...]] = {}
        self._locks: dict["ApiRevision", asyncio.Lock] = {}
        self.fetch_count = 0

    def _lock_for(self, revision: "ApiRevision") -> asyncio.Lock:
        lock = self._locks.get(revision)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[revision] = lock
        return lock

    def cached(self, revision: "ApiRevision") -> tuple[str, ...] | None:
        """Return the cached catalog for a revision without fetching."""
        return self._entries.get(revision)

    async def get(self, revision: "ApiRevision", api_key: str) -> tuple[str, ...]:
        """
        Get the model names for a revision, fetching on first access.

        Raises:
            CatalogUnavailableError: If the listing call fails
        """
        entry = self._entries.get(revision)
        if entry is not None:
            return entry

        async with self._lock_for(revision):
            # Another coroutine may have populated it while we waited
            entry = self._entries.get(revision)
            if entry is not None:
                return entry

            self.fetch_count += 1
            try:
                names = await self.provider.list_models(revision, api_key)
            except CatalogUnavailableError:
                raise
            except Exception as e:
                raise CatalogUnavailableError(str(e), revision=revision) from e

            entry = tuple(names)
            self._entries[revision] = entry
            logger.info(
                f"Cached {len(entry)} catalog entries for revision {revision.value}"
            )
            return entry
