"""
Resolve-and-generate loop.

Turns a possibly imprecise model name into a working generate-content call by
walking API revisions x candidate spellings one attempt at a time:

    TRYING(revision, candidate)
        success          -> SUCCEEDED      (no further calls)
        fatal failure    -> FATAL_ABORTED  (no further calls)
        retryable        -> next candidate, then next revision
        nothing left     -> EXHAUSTED      (ask the catalog for suggestions)

Attempts are never fanned out: the order encodes preference, and every
attempt may consume provider quota.
"""

import logging

from providers.base import GenerativeProvider

from .cancellation import CancellationToken
from .catalog import CatalogCache
from .errors import (
    GenerationError,
    MissingApiKeyError,
    MissingModelError,
    ResolutionCancelled,
)
from .naming import MODEL_PATH_PREFIX, candidate_names
from .suggestions import SuggestionEngine
from .types import (
    API_REVISIONS,
    ApiRevision,
    AttemptOutcome,
    OutcomeKind,
    ResolutionFailure,
    ResolutionResult,
    ResolutionState,
)

logger = logging.getLogger(__name__)


def format_failure_message(last_error: str, suggested_names: list[str]) -> str:
    """Combine the last error with suggested model names into one message."""
    if not suggested_names:
        return last_error
    return f"{last_error}. Available alternatives: {', '.join(suggested_names)}"


class ModelResolver:
    """
    Orchestrates candidate generation, retries and suggestions.

    The catalog cache is shared across calls; build one resolver per process
    (or pass a shared CatalogCache) to get cache hits between resolutions.
    """

    def __init__(
        self,
        provider: GenerativeProvider,
        catalog: CatalogCache | None = None,
        suggestions: SuggestionEngine | None = None,
        revisions: tuple[ApiRevision, ...] = API_REVISIONS,
        default_model: str | None = None,
    ):
        self.provider = provider
        self.catalog = catalog if catalog is not None else CatalogCache(provider)
        self.revisions = revisions
        self.suggestions = (
            suggestions
            if suggestions is not None
            else SuggestionEngine(self.catalog, revisions=revisions)
        )
        self.default_model = default_model

    def normalize_model(self, requested_model: str | None) -> str:
        """Clean up a user-supplied model name, falling back to the default."""
        name = (requested_model or "").strip()
        if name.startswith(MODEL_PATH_PREFIX):
            name = name[len(MODEL_PATH_PREFIX) :]
        if not name and self.default_model:
            name = self.default_model
        if not name:
            raise MissingModelError()
        return name

    async def _attempt(
        self,
        prompt: str,
        revision: ApiRevision,
        model_name: str,
        api_key: str,
        cancel_token: CancellationToken | None,
    ) -> AttemptOutcome:
        try:
            text = await self.provider.generate_content(
                prompt, revision, model_name, api_key, cancel_token=cancel_token
            )
        except GenerationError as e:
            kind = OutcomeKind.RETRYABLE if e.retryable else OutcomeKind.FATAL
            return AttemptOutcome(kind, revision, model_name, error=e)
        return AttemptOutcome(OutcomeKind.SUCCESS, revision, model_name, text=text)

    async def resolve_and_generate(
        self,
        prompt: str,
        api_key: str | None,
        requested_model: str | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> ResolutionResult | ResolutionFailure:
        """
        Generate content with the first (revision, candidate) pair that works.

        Args:
            prompt: Prompt text, passed through unchanged
            api_key: Provider API key
            requested_model: Model name as typed by the user
            cancel_token: Optional token; a cancelled token aborts at the
                next attempt boundary

        Returns:
            ResolutionResult on success, ResolutionFailure otherwise

        Raises:
            MissingApiKeyError: If no API key was supplied
            MissingModelError: If no model was requested and there is no default
            ResolutionCancelled: If the token was cancelled
        """
        if not api_key:
            raise MissingApiKeyError()

        model = self.normalize_model(requested_model)
        candidates = candidate_names(model)
        logger.info(
            f"Resolving model {model!r}: {len(candidates)} candidates x "
            f"{len(self.revisions)} revisions"
        )

        state = ResolutionState.TRYING
        revision_index = 0
        candidate_index = 0
        attempts = 0
        last_outcome: AttemptOutcome | None = None

        while state is ResolutionState.TRYING:
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()

            revision = self.revisions[revision_index]
            candidate = candidates[candidate_index]
            attempts += 1
            logger.debug(f"Attempt {attempts}: {revision.value}/{candidate}")
            outcome = await self._attempt(
                prompt, revision, candidate, api_key, cancel_token
            )
            last_outcome = outcome

            if outcome.kind is OutcomeKind.SUCCESS:
                state = ResolutionState.SUCCEEDED
            elif outcome.kind is OutcomeKind.FATAL:
                state = ResolutionState.FATAL_ABORTED
            else:
                logger.debug(
                    f"{revision.value}/{candidate} unavailable: {outcome.reason}"
                )
                candidate_index += 1
                if candidate_index >= len(candidates):
                    candidate_index = 0
                    revision_index += 1
                    if revision_index >= len(self.revisions):
                        state = ResolutionState.EXHAUSTED

        if state is ResolutionState.SUCCEEDED:
            logger.info(
                f"Resolved {model!r} to {last_outcome.revision.value}/"
                f"{last_outcome.model_name} after {attempts} attempt(s)"
            )
            return ResolutionResult(
                text=last_outcome.text,
                revision=last_outcome.revision,
                model_name=last_outcome.model_name,
                attempts=attempts,
            )

        if state is ResolutionState.FATAL_ABORTED:
            logger.warning(
                f"Aborting resolution of {model!r} at {last_outcome.revision.value}/"
                f"{last_outcome.model_name}: {last_outcome.reason}"
            )
            return ResolutionFailure(
                state=state,
                message=last_outcome.reason,
                last_error=last_outcome.error,
                attempts=attempts,
            )

        logger.warning(f"No candidate for {model!r} worked after {attempts} attempts")
        suggested: list[str] = []
        try:
            suggested = await self.suggestions.suggest(api_key, model)
        except ResolutionCancelled:
            raise
        except Exception as e:
            logger.warning(f"Model suggestions failed for {model!r}: {e}")

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        return ResolutionFailure(
            state=state,
            message=format_failure_message(last_outcome.reason, suggested),
            last_error=last_outcome.error,
            suggested_names=suggested,
            attempts=attempts,
        )
