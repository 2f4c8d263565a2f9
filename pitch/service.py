"""
Script generation service.

Resolves the requested model and generates a script, substituting the offline
template whenever resolution fails for any reason.
"""

import logging
from dataclasses import dataclass, field

from resolution import (
    CancellationToken,
    GeminiError,
    MissingApiKeyError,
    ModelResolver,
    ResolutionCancelled,
    ResolutionResult,
)

from .context import PitchContext, build_fallback_script, build_prompt
from .timing import SpeakingTime, estimate_speaking_time

logger = logging.getLogger(__name__)

SOURCE_GEMINI = "gemini"
SOURCE_FALLBACK = "fallback"

API_KEY_HINT = "Add your Gemini API key to generate a tailored script."


@dataclass
class PitchScript:
    """A script ready to display, plus how it was produced."""

    text: str
    source: str
    status: str
    timing: SpeakingTime
    resolved_model: str | None = None
    revision: str | None = None
    suggested_models: list[str] = field(default_factory=list)

    @property
    def used_fallback(self) -> bool:
        return self.source == SOURCE_FALLBACK

    def to_dict(self) -> dict:
        return {
            "script": self.text,
            "source": self.source,
            "status": self.status,
            "resolved_model": self.resolved_model,
            "revision": self.revision,
            "suggested_models": list(self.suggested_models),
            "timing": self.timing.to_dict(),
        }


class ScriptService:
    """Generates pitch scripts through a ModelResolver."""

    def __init__(self, resolver: ModelResolver, default_api_key: str | None = None):
        self.resolver = resolver
        self.default_api_key = default_api_key

    def _fallback(
        self, context: PitchContext, reason: str, suggested: list[str] | None = None
    ) -> PitchScript:
        text = build_fallback_script(context)
        return PitchScript(
            text=text,
            source=SOURCE_FALLBACK,
            status=f"Using the offline template because: {reason}.",
            timing=estimate_speaking_time(text),
            suggested_models=list(suggested or []),
        )

    async def generate(
        self,
        context: PitchContext,
        api_key: str | None = None,
        model: str | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> PitchScript:
        """
        Generate a script for a pitch context.

        Raises:
            ResolutionCancelled: If a newer request superseded this one
        """
        prompt = build_prompt(context)
        key = (api_key or "").strip() or self.default_api_key

        try:
            outcome = await self.resolver.resolve_and_generate(
                prompt, key, model, cancel_token=cancel_token
            )
        except ResolutionCancelled:
            raise
        except MissingApiKeyError as e:
            return self._fallback(context, f"{e}. {API_KEY_HINT}".rstrip("."))
        except GeminiError as e:
            logger.error(f"Script generation failed: {e}")
            return self._fallback(context, str(e))

        if isinstance(outcome, ResolutionResult):
            return PitchScript(
                text=outcome.text,
                source=SOURCE_GEMINI,
                status=f"Success! Script generated via {outcome.model_name}.",
                timing=estimate_speaking_time(outcome.text),
                resolved_model=outcome.model_name,
                revision=outcome.revision.value,
            )

        logger.info(f"Falling back to offline template: {outcome.message}")
        return self._fallback(context, outcome.message, outcome.suggested_names)
