"""
Runtime settings for DemoPitch.

All settings come from environment variables so the same image can run the
API server or the CLI without a config file.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from providers.base import get_api_key

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_MODEL = "gemini-1.5-flash"
DEFAULT_HACKATHON = "DemoPitch AI Hackathon"
DEFAULT_TIMEOUT_SECONDS = 60.0
# Upper bound for one whole API request, every resolution attempt included
DEFAULT_REQUEST_TIMEOUT_SECONDS = 300.0
DEFAULT_SAFETY_THRESHOLD = "BLOCK_NONE"

# Checked in order; the first one set wins
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Settings:
    """Process-wide configuration."""

    api_key: str | None = None
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    default_model: str = DEFAULT_MODEL
    safety_threshold: str = DEFAULT_SAFETY_THRESHOLD
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables."""
        env = os.environ if environ is None else environ

        api_key = None
        for var in API_KEY_ENV_VARS:
            api_key = env.get(var) if environ is not None else get_api_key(var)
            if api_key:
                break

        try:
            timeout = float(env.get("GEMINI_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
        except ValueError:
            logger.warning(
                f"Invalid GEMINI_TIMEOUT_SECONDS={env.get('GEMINI_TIMEOUT_SECONDS')!r}, "
                f"using {DEFAULT_TIMEOUT_SECONDS}"
            )
            timeout = DEFAULT_TIMEOUT_SECONDS

        try:
            request_timeout = float(
                env.get("REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SECONDS)
            )
        except ValueError:
            logger.warning(
                "Invalid REQUEST_TIMEOUT_SECONDS="
                f"{env.get('REQUEST_TIMEOUT_SECONDS')!r}, "
                f"using {DEFAULT_REQUEST_TIMEOUT_SECONDS}"
            )
            request_timeout = DEFAULT_REQUEST_TIMEOUT_SECONDS

        try:
            port = int(env.get("PORT", 8080))
        except ValueError:
            logger.warning(f"Invalid PORT={env.get('PORT')!r}, using 8080")
            port = 8080

        return cls(
            api_key=api_key or None,
            base_url=env.get("GEMINI_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            timeout_seconds=timeout,
            request_timeout_seconds=request_timeout,
            default_model=env.get("DEFAULT_MODEL", "").strip() or DEFAULT_MODEL,
            safety_threshold=env.get(
                "GEMINI_SAFETY_THRESHOLD", DEFAULT_SAFETY_THRESHOLD
            ),
            host=env.get("HOST", "0.0.0.0"),
            port=port,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for an entry point."""
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    # Request URLs carry the API key as a query parameter
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
