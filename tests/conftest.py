"""Shared pytest fixtures for mesh_operations_manager tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Temporary directory for config and log files."""
    return tmp_path


@pytest.fixture
def temp_config_file(temp_dir: Path) -> Path:
    """Config file with an istio plugin section."""
    config_path = temp_dir / "config.yaml"
    config_path.write_text(
        """
version: "1.0"
environment: staging
plugins:
  enabled: [core, istio]
  istio:
    active_cluster: dev
    clusters:
      dev:
        context: kind-dev
        timeout: 15
"""
    )
    return config_path


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear MESHOPS_ environment variables for each test."""
    for key in list(os.environ):
        if key.startswith("MESHOPS_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger() -> Generator[None]:
    """Undo handlers installed by configure_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
