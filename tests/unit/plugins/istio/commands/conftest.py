"""Shared fixtures for revision tag command tests."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest
import typer

from mesh_operations_manager.integrations.kubernetes.models.webhooks import TagSummary
from mesh_operations_manager.plugins.istio.commands import register_tag_commands


@pytest.fixture
def mock_tag_manager() -> MagicMock:
    """Create a mock RevisionTagManager."""
    return MagicMock()


@pytest.fixture
def get_tag_manager(mock_tag_manager: MagicMock) -> Callable[[], MagicMock]:
    """Create a factory function that returns the mock manager."""
    return lambda: mock_tag_manager


@pytest.fixture
def app(get_tag_manager: Callable[[], MagicMock]) -> typer.Typer:
    """Typer app with the tag group registered."""
    app = typer.Typer()
    register_tag_commands(app, get_tag_manager)
    return app


@pytest.fixture
def sample_summaries() -> list[TagSummary]:
    return [
        TagSummary(
            name="istio-revision-tag-prod",
            tag="prod",
            revision="1-8-1",
            namespaces=["bookinfo", "payments"],
        ),
        TagSummary(name="istio-revision-tag-canary", tag="canary", revision="1-9-0"),
    ]
