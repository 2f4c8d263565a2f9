"""
Error taxonomy and failure classification for model resolution.

The provider does not return a machine-readable reason when a model name or
API revision is unknown, so classification is a substring match against its
error text. If the provider rewords these messages, unknown-model failures
will start aborting resolution instead of advancing to the next candidate.

    Message contains        Class
    ---------------------   ---------
    "not found"             RETRYABLE
    "not supported"         RETRYABLE
    "does not exist"        RETRYABLE
    anything else           FATAL
"""

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import ApiRevision

RETRYABLE_MARKERS = ("not found", "not supported", "does not exist")


class ErrorClass(Enum):
    RETRYABLE = "retryable"
    FATAL = "fatal"


def classify_error(message: str | None) -> ErrorClass:
    """Classify a provider error message as retryable or fatal."""
    text = (message or "").lower()
    if any(marker in text for marker in RETRYABLE_MARKERS):
        return ErrorClass.RETRYABLE
    return ErrorClass.FATAL


class GeminiError(Exception):
    """Base class for everything the engine raises."""


class MissingApiKeyError(GeminiError):
    """No API key was supplied; resolution never starts."""

    def __init__(self, message: str = "no Gemini API key found"):
        super().__init__(message)


class MissingModelError(GeminiError):
    """No model was requested and no default model is configured."""

    def __init__(
        self, message: str = "no Gemini model requested and no default configured"
    ):
        super().__init__(message)


class GenerationError(GeminiError):
    """A generate-content call failed for a specific revision and model."""

    retryable = False

    def __init__(
        self,
        message: str,
        revision: "ApiRevision | None" = None,
        model_name: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.revision = revision
        self.model_name = model_name
        self.status_code = status_code

    def context(self) -> dict:
        """Structured context for logs and API responses."""
        return {
            "revision": self.revision.value if self.revision else None,
            "model": self.model_name,
            "status_code": self.status_code,
        }


class ModelUnavailableError(GenerationError):
    """The revision/model combination does not exist; try the next one."""

    retryable = True


class FatalGenerationError(GenerationError):
    """Auth, quota, malformed request or network failure; stop resolving."""


class EmptyResponseError(FatalGenerationError):
    """The call succeeded but produced no text."""

    def __init__(self, revision=None, model_name=None, status_code=None):
        super().__init__(
            "Gemini returned an empty response",
            revision=revision,
            model_name=model_name,
            status_code=status_code,
        )


class CatalogUnavailableError(GeminiError):
    """The model listing call failed for a revision."""

    def __init__(self, message: str, revision: "ApiRevision | None" = None):
        super().__init__(message)
        self.revision = revision


class ResolutionCancelled(GeminiError):
    """A newer resolution superseded this one."""


def generation_error_for(
    message: str,
    revision: "ApiRevision | None" = None,
    model_name: str | None = None,
    status_code: int | None = None,
) -> GenerationError:
    """Build the right GenerationError subclass for a provider message."""
    if classify_error(message) is ErrorClass.RETRYABLE:
        error_cls = ModelUnavailableError
    else:
        error_cls = FatalGenerationError
    return error_cls(
        message, revision=revision, model_name=model_name, status_code=status_code
    )
