"""
Pitch script package: form context, prompt/fallback texts, timing and the
generation service used by the API server and the CLI.
"""

from .context import PitchContext, build_fallback_script, build_prompt
from .service import PitchScript, ScriptService
from .timing import SpeakingTime, estimate_speaking_time

__all__ = [
    "PitchContext",
    "PitchScript",
    "ScriptService",
    "SpeakingTime",
    "build_prompt",
    "build_fallback_script",
    "estimate_speaking_time",
]
