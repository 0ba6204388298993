# ==============================================================================
# Version Utilities
# ==============================================================================
"""
Utilities for retrieving package versions.
"""

from importlib.metadata import version, PackageNotFoundError


def get_voicetime_version() -> str:
    """
    Get the voicetime package version.

    Returns:
        Version string (e.g., "0.1.0")
    """
    try:
        return version("voicetime")
    except PackageNotFoundError:
        return "0.1.0"
