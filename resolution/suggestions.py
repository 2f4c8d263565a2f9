"""
Catalog-backed suggestions for models that could not be resolved.
"""

import logging

from .catalog import CatalogCache
from .errors import CatalogUnavailableError
from .naming import model_families
from .types import API_REVISIONS, ApiRevision

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 3


class SuggestionEngine:
    """Propose real model names from the same family as a failed request."""

    def __init__(
        self,
        catalog: CatalogCache,
        revisions: tuple[ApiRevision, ...] = API_REVISIONS,
        limit: int = MAX_SUGGESTIONS,
    ):
        self.catalog = catalog
        self.revisions = revisions
        self.limit = limit

    async def suggest(self, api_key: str, requested_model: str) -> list[str]:
        """
        Return up to `limit` catalog names matching the requested model's family.

        Revisions are searched in order and the first one with any match
        wins; matches from different revisions are never merged.
        """
        families = model_families(requested_model)
        if not families:
            return []

        for revision in self.revisions:
            try:
                names = await self.catalog.get(revision, api_key)
            except CatalogUnavailableError as e:
                logger.warning(
                    f"Model catalog unavailable for {revision.value}, "
                    f"skipping suggestions from it: {e}"
                )
                continue

            matches = [
                name for name in names if any(name.startswith(f) for f in families)
            ]
            if matches:
                logger.debug(
                    f"Found {len(matches)} catalog matches for {requested_model} "
                    f"in {revision.value}"
                )
                return matches[: self.limit]

        return []
