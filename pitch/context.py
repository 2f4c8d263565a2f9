"""
Pitch context collected from the form, and the texts built from it.
"""

from dataclasses import asdict, dataclass
from typing import Mapping

from config import DEFAULT_HACKATHON
from prompts import render

from .timing import TARGET_MINUTES

REQUIRED_FIELDS = ("projectName", "problem", "solution", "techStack", "targetUsers")


@dataclass
class PitchContext:
    """Project details a script is written about."""

    project_name: str
    problem: str
    solution: str
    tech_stack: str
    target_users: str
    hackathon_name: str = DEFAULT_HACKATHON

    @classmethod
    def from_form(cls, data: Mapping[str, object]) -> "PitchContext":
        """
        Build a context from camelCase form fields.

        Values are trimmed and a blank hackathon name falls back to the
        default.

        Raises:
            ValueError: If a required project field is missing or blank
        """

        def _field(key: str) -> str:
            value = data.get(key)
            return str(value).strip() if value is not None else ""

        missing = [key for key in REQUIRED_FIELDS if not _field(key)]
        if missing:
            raise ValueError(f"Missing required fields: {', '.join(missing)}")

        return cls(
            project_name=_field("projectName"),
            problem=_field("problem"),
            solution=_field("solution"),
            tech_stack=_field("techStack"),
            target_users=_field("targetUsers"),
            hackathon_name=_field("hackathonName") or DEFAULT_HACKATHON,
        )

    def to_dict(self) -> dict:
        return asdict(self)


def build_prompt(context: PitchContext) -> str:
    """Prompt text sent to Gemini."""
    return render("pitch", "script", target_minutes=TARGET_MINUTES, **context.to_dict())


def build_fallback_script(context: PitchContext) -> str:
    """Offline script shown when generation fails."""
    return render("pitch", "fallback", **context.to_dict())
