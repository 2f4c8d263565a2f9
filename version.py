"""DemoPitch version string, reported by /health and the server banner."""

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION = "demopitch"


def get_version() -> str:
    """Installed distribution version, else the VERSION file of a checkout."""
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        pass
    version_file = Path(__file__).with_name("VERSION")
    if version_file.exists():
        return version_file.read_text().strip()
    return "unknown"


VERSION = get_version()
