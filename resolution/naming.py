"""
Model name normalization for Gemini.

The provider publishes the same model under several spellings (bare name,
"-latest" alias, preview builds, numbered revisions). These helpers reduce a
name to its base form and expand it back into an ordered list of spellings
worth trying.
"""

import re

# Qualifier after "-preview": one segment ("-0514", "-exp") or a date ("-05-20", "-09-2025")
_QUALIFIER = r"(?:-(?:\d{2}-\d{2,4}|[a-z0-9]+))?"

SUFFIX_PATTERNS = (
    re.compile(r"-latest$", re.IGNORECASE),
    re.compile(r"-preview-tts" + _QUALIFIER + r"$", re.IGNORECASE),
    re.compile(r"-preview" + _QUALIFIER + r"$", re.IGNORECASE),
    re.compile(r"-00[1-9]$"),
)

# Retry priority after the raw name and the base form
CANDIDATE_SUFFIXES = (
    "",
    "-latest",
    "-preview",
    "-preview-tts",
    "-001",
    "-002",
    "-exp",
    "-preview-05-20",
    "-preview-06-05",
    "-preview-09-2025",
)

MODEL_PATH_PREFIX = "models/"


def strip_model_path(name: str) -> str:
    """Remove a structural "models/" style path prefix from a model name."""
    return name.rsplit("/", 1)[-1] if "/" in name else name


def strip_suffixes(name: str) -> str:
    """
    Reduce a model name to its base form.

    Patterns are applied until none match, so compound suffixes such as
    "-preview-002" or "-001-latest" collapse completely.
    """
    base = name
    changed = True
    while changed:
        changed = False
        for pattern in SUFFIX_PATTERNS:
            stripped = pattern.sub("", base)
            if stripped != base:
                base = stripped
                changed = True
    return base


def candidate_names(name: str) -> list[str]:
    """Ordered, de-duplicated spellings to try for a requested model."""
    base = strip_suffixes(name)
    candidates: list[str] = []

    def _add(value: str) -> None:
        if value and value not in candidates:
            candidates.append(value)

    _add(name)
    _add(base)
    for suffix in CANDIDATE_SUFFIXES:
        _add(base + suffix)

    return candidates


def model_families(name: str) -> tuple[str, ...]:
    """
    Coarse prefixes used to search the catalog for alternatives.

    "gemini-1.5-flash-8b" gives ("gemini-1.5-flash-8b", "gemini-1.5-flash").
    """
    base = strip_suffixes(name)
    if not base:
        return ()

    families = [base]
    segments = base.split("-")
    if len(segments) > 2:
        broader = "-".join(segments[:-1])
        if broader not in families:
            families.append(broader)
    return tuple(families)
