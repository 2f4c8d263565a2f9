"""
Base classes for generative-content providers.

This module defines the interface the resolution engine talks to, plus the
shared API key lookup used by the config layer.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from resolution.cancellation import CancellationToken
    from resolution.types import ApiRevision

logger = logging.getLogger(__name__)


class GenerativeProvider(ABC):
    """Abstract base class for providers the resolver can drive."""

    name: str  # Provider identifier (e.g., "gemini")

    @abstractmethod
    async def generate_content(
        self,
        prompt: str,
        revision: "ApiRevision",
        model_name: str,
        api_key: str,
        cancel_token: "CancellationToken | None" = None,
    ) -> str:
        """
        Issue one generate-content call for a concrete revision and model.

        Args:
            prompt: Prompt text sent as a single user turn
            revision: API revision namespace to call
            model_name: Bare model name (no "models/" prefix)
            api_key: Provider API key
            cancel_token: Optional token checked around the call

        Returns:
            The generated text

        Raises:
            GenerationError: If the call fails or yields no text
            ResolutionCancelled: If the token was cancelled
        """
        pass

    @abstractmethod
    async def list_models(self, revision: "ApiRevision", api_key: str) -> list[str]:
        """
        Return the model names the provider exposes for a revision.

        Raises:
            CatalogUnavailableError: If the listing call fails
        """
        pass

    async def aclose(self) -> None:
        """Release any network resources held by the provider."""
        return None


def get_api_key(env_var: str, file_env_var: str | None = None) -> str | None:
    """
    Get API key from environment variable or file.

    Args:
        env_var: Name of environment variable containing the key
        file_env_var: Optional name of env var containing path to key file

    Returns:
        API key string or None if not configured
    """
    # Check direct environment variable
    api_key = os.environ.get(env_var)
    if api_key:
        return api_key.strip()

    # Check file-based secret (Docker Swarm secrets)
    if file_env_var:
        api_key_file = os.environ.get(file_env_var)
        if api_key_file and os.path.exists(api_key_file):
            with open(api_key_file, "r") as f:
                return f.read().strip()

    # Also check default _FILE suffix
    file_path = os.environ.get(f"{env_var}_FILE")
    if file_path and os.path.exists(file_path):
        with open(file_path, "r") as f:
            return f.read().strip()

    return None
