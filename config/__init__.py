"""
Config package for runtime settings and logging setup.
"""

from .settings import (
    DEFAULT_HACKATHON,
    DEFAULT_MODEL,
    Settings,
    configure_logging,
)

__all__ = [
    "Settings",
    "configure_logging",
    "DEFAULT_MODEL",
    "DEFAULT_HACKATHON",
]
