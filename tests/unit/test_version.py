"""Tests for version module."""

from __future__ import annotations

import pytest

from mesh_operations_manager import __version__
from mesh_operations_manager.__version__ import __version__ as version_string


@pytest.mark.unit
class TestVersion:
    """Test version information."""

    def test_version_format(self) -> None:
        """Version is at least major.minor, both numeric."""
        parts = __version__.split(".")
        assert len(parts) >= 2
        assert all(part.isdigit() for part in parts[:2])

    def test_version_importable(self) -> None:
        """Package and module expose the same version."""
        assert __version__ == version_string
