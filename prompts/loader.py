"""
Prompt Library Loader - YAML loading with Jinja2 rendering.

Loads prompt templates from defaults/ directory, with overrides/ taking precedence.
Templates are rendered using Jinja2 for variable substitution, conditionals, and loops.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from jinja2 import Environment, StrictUndefined

logger = logging.getLogger(__name__)


class PromptLibrary:
    """
    Manages prompt and script templates.

    Loads from defaults/, with overrides/ taking precedence.
    Templates are rendered using Jinja2.

    Directory structure:
        prompts/
        ├── defaults/           # Built-in templates
        │   └── pitch/
        │       ├── script.yaml     # Prompt sent to Gemini
        │       └── fallback.yaml   # Offline script template
        └── overrides/          # Local overrides (gitignored)
    """

    def __init__(
        self,
        defaults_dir: str | Path | None = None,
        overrides_dir: str | Path | None = None,
    ):
        # Find the prompts directory relative to this file
        base_dir = Path(__file__).parent

        self.defaults_dir = (
            Path(defaults_dir) if defaults_dir else base_dir / "defaults"
        )
        self.overrides_dir = (
            Path(overrides_dir) if overrides_dir else base_dir / "overrides"
        )
        self._cache: dict[str, dict] = {}

        self._env = Environment(
            autoescape=False,  # We're generating prompts, not HTML
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
            undefined=StrictUndefined,
        )

        self._load_all()

    def _load_all(self):
        """Load all YAML files from defaults and overrides."""
        if self.defaults_dir.exists():
            self._load_directory(self.defaults_dir)

        # Then load overrides (will replace defaults)
        if self.overrides_dir.exists():
            self._load_directory(self.overrides_dir)

        logger.info(f"Loaded {len(self._cache)} prompt configs")

    def _load_directory(self, base_dir: Path):
        """Recursively load YAML files from a directory."""
        for yaml_file in sorted(base_dir.rglob("*.yaml")):
            rel_path = yaml_file.relative_to(base_dir)
            # Remove .yaml extension and convert to category/name format
            key = str(rel_path.with_suffix("")).replace("\\", "/")

            try:
                with open(yaml_file, "r", encoding="utf-8") as f:
                    config = yaml.safe_load(f) or {}
                self._cache[key] = config
                logger.debug(f"Loaded prompt config: {key}")
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Failed to load {yaml_file}: {e}")

    def get_config(self, category: str, name: str) -> dict[str, Any]:
        """
        Get raw config dict for a prompt.

        Returns:
            Config dictionary from YAML file, or empty dict if not found
        """
        return self._cache.get(f"{category}/{name}", {})

    def render(
        self,
        category: str,
        name: str,
        template_key: str = "template",
        **variables,
    ) -> str:
        """
        Render a Jinja2 template from a prompt config.

        Args:
            category: Prompt category (e.g., "pitch")
            name: Prompt name (e.g., "script", "fallback")
            template_key: Key in the YAML for the template (default: "template")
            **variables: Variables to pass to the template

        Returns:
            Rendered template string

        Raises:
            KeyError: If the config or template key does not exist
        """
        config = self.get_config(category, name)
        template_str = config.get(template_key, "")

        if not template_str:
            raise KeyError(f"No template '{template_key}' found in {category}/{name}")

        template = self._env.from_string(template_str)

        # Include other config values as variables (e.g., section_headers)
        # But don't override explicitly passed variables
        context = {**config, **variables}

        return template.render(**context).strip()

    def list_configs(self, category: str | None = None) -> list[str]:
        """List available config keys, optionally within one category."""
        if category:
            return [k for k in self._cache.keys() if k.startswith(f"{category}/")]
        return list(self._cache.keys())
