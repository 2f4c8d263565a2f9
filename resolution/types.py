"""
Value types shared by the resolution engine.
"""

from dataclasses import dataclass, field
from enum import Enum


class ApiRevision(str, Enum):
    """Provider API version namespaces."""

    PRIMARY = "v1"
    SECONDARY = "v1beta"


# Fixed preference order: GA revision first
API_REVISIONS: tuple[ApiRevision, ...] = (ApiRevision.PRIMARY, ApiRevision.SECONDARY)


class OutcomeKind(Enum):
    SUCCESS = "success"
    RETRYABLE = "retryable"
    FATAL = "fatal"


class ResolutionState(Enum):
    """States of the resolve-and-generate loop."""

    TRYING = "trying"
    SUCCEEDED = "succeeded"
    FATAL_ABORTED = "fatal_aborted"
    EXHAUSTED = "exhausted"


@dataclass
class AttemptOutcome:
    """Result of one (revision, model name) call."""

    kind: OutcomeKind
    revision: ApiRevision
    model_name: str
    text: str | None = None
    error: Exception | None = None

    @property
    def reason(self) -> str:
        return str(self.error) if self.error is not None else ""


@dataclass
class ResolutionResult:
    """Successful resolution: the text and the pair that produced it."""

    text: str
    revision: ApiRevision
    model_name: str
    attempts: int = 1

    @property
    def succeeded(self) -> bool:
        return True

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "revision": self.revision.value,
            "model": self.model_name,
            "attempts": self.attempts,
        }


@dataclass
class ResolutionFailure:
    """Unsuccessful resolution, ready to show to a user."""

    state: ResolutionState
    message: str
    last_error: Exception | None = None
    suggested_names: list[str] = field(default_factory=list)
    attempts: int = 0

    @property
    def succeeded(self) -> bool:
        return False

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "message": self.message,
            "suggested_models": list(self.suggested_names),
            "attempts": self.attempts,
        }
