"""
Providers package.

To add a provider, implement GenerativeProvider in a new module and export it
below.
"""

from .base import GenerativeProvider, get_api_key
from .gemini_provider import DEFAULT_SAFETY_SETTINGS, GeminiProvider

__all__ = [
    "GenerativeProvider",
    "GeminiProvider",
    "DEFAULT_SAFETY_SETTINGS",
    "get_api_key",
]
