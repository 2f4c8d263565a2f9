"""
Prompt Library - Centralized prompt and script templates.

This module provides a structured way to manage:
- The prompt sent to Gemini for a pitch script
- The offline fallback script used when generation fails

Templates use Jinja2 for variable substitution, conditionals, and loops.

Usage:
    from prompts import render

    prompt = render("pitch", "script",
        project_name="Pitchly",
        hackathon_name="DemoPitch AI Hackathon",
        ...
    )
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)

# Global singleton
_library: "PromptLibrary | None" = None


def get_library() -> "PromptLibrary":
    """Get the global PromptLibrary instance."""
    global _library
    if _library is None:
        from prompts.loader import PromptLibrary

        _library = PromptLibrary()
    return _library


def render(category: str, name: str, template_key: str = "template", **variables) -> str:
    """
    Render a prompt template with variables.

    Args:
        category: Prompt category (e.g., "pitch")
        name: Prompt name (e.g., "script", "fallback")
        template_key: Key in the YAML for the template (default: "template")
        **variables: Variables to pass to the Jinja2 template

    Returns:
        Rendered template string
    """
    return get_library().render(category, name, template_key, **variables)


def get_config(category: str, name: str) -> dict[str, Any]:
    """Get raw config dict for a prompt."""
    return get_library().get_config(category, name)


def reload():
    """Reload all prompts from disk (for hot-reload)."""
    global _library
    from prompts.loader import PromptLibrary

    _library = PromptLibrary()
    logger.info("Prompt library reloaded")
