# ==============================================================================
# Version Utilities
# ==============================================================================
"""
Utilities for retrieving package versions.
"""

from importlib.metadata import version, PackageNotFoundError


def get_tereport_version() -> str:
    """
    Get the te-report package version.

    Returns:
        Version string (e.g., "0.1.0")
    """
    try:
        return version("te-report")
    except PackageNotFoundError:
        return "0.1.0"


def get_user_agent() -> str:
    """User-Agent sent to upstream services, e.g. "te-report/0.1.0"."""
    return f"te-report/{get_tereport_version()}"
