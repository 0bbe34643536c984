"""
test_main.py - Tests for the main package functionality
"""

from unittest.mock import patch

import ghwatch


def test_version_info():
    """Test version information is accessible from the main package."""
    assert isinstance(ghwatch.__version__, str)


def test_main_imports():
    """Test that key functions and classes are importable from the package."""
    for name in ghwatch.__all__:
        assert hasattr(ghwatch, name), name


def test_main_function():
    """Test the main entry point function."""
    with patch("ghwatch.cli.cli") as mock_cli:
        ghwatch.main()

        mock_cli.assert_called_once()
