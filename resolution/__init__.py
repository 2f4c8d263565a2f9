"""
Model resolution package.

Maps an imprecise model name to a working generate-content call:
- Name normalization and candidate spellings (naming)
- Retryable vs fatal failure classification (errors)
- Process-lifetime model catalog cache (catalog)
- Catalog-backed suggestions (suggestions)
- The ordered retry loop itself (loop)
"""

from .cancellation import CancellationToken, SupersedingTokens
from .catalog import CatalogCache
from .errors import (
    CatalogUnavailableError,
    EmptyResponseError,
    ErrorClass,
    FatalGenerationError,
    GeminiError,
    GenerationError,
    MissingApiKeyError,
    MissingModelError,
    ModelUnavailableError,
    ResolutionCancelled,
    classify_error,
)
from .loop import ModelResolver, format_failure_message
from .naming import candidate_names, model_families, strip_suffixes
from .suggestions import SuggestionEngine
from .types import (
    API_REVISIONS,
    ApiRevision,
    ResolutionFailure,
    ResolutionResult,
    ResolutionState,
)

__all__ = [
    "ModelResolver",
    "CatalogCache",
    "SuggestionEngine",
    "CancellationToken",
    "SupersedingTokens",
    "ApiRevision",
    "API_REVISIONS",
    "ResolutionResult",
    "ResolutionFailure",
    "ResolutionState",
    "candidate_names",
    "model_families",
    "strip_suffixes",
    "classify_error",
    "format_failure_message",
    "ErrorClass",
    "GeminiError",
    "GenerationError",
    "ModelUnavailableError",
    "FatalGenerationError",
    "EmptyResponseError",
    "MissingApiKeyError",
    "MissingModelError",
    "CatalogUnavailableError",
    "ResolutionCancelled",
]
