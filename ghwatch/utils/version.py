"""
version.py - Version information for ghwatch
"""

from typing import Any, Dict

__version__ = "0.1.0"
__release_date__ = "2026-10-18"


def get_version() -> str:
    """
    Get ghwatch version

    Returns:
        Version string
    """
    return __version__


def get_version_info() -> Dict[str, Any]:
    """
    Get detailed version information

    Returns:
        Dictionary with version, release date and pattern set version
    """
    from ..rules.expressions import UNTRUSTED_CONTEXT_PATTERNS_VERSION

    return {
        "version": __version__,
        "release_date": __release_date__,
        "untrusted_patterns_version": UNTRUSTED_CONTEXT_PATTERNS_VERSION,
    }
