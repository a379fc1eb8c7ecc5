"""Unit tests for the istio plugin."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import typer
from typer.testing import CliRunner

from mesh_operations_manager.integrations.kubernetes.exceptions import KubernetesConnectionError
from mesh_operations_manager.plugins.istio.commands.base import read_confirmation
from mesh_operations_manager.plugins.istio.formatters import OutputFormat
from mesh_operations_manager.plugins.istio.plugin import IstioPlugin

PLUGIN_MODULE = "mesh_operations_manager.plugins.istio.plugin"


@pytest.mark.unit
class TestIstioPluginMetadata:
    """Tests for IstioPlugin metadata."""

    def test_metadata(self) -> None:
        plugin = IstioPlugin()
        assert plugin.name == "istio"
        assert plugin.version == "0.1.0"
        assert "revision tag" in plugin.description


@pytest.mark.unit
class TestIstioPluginInit:
    """Configuration handling."""

    def test_initialize_parses_config(self) -> None:
        plugin = IstioPlugin()
        plugin.initialize(
            {"active_cluster": "dev", "clusters": {"dev": {"context": "kind-dev", "timeout": 5}}}
        )

        assert plugin.is_initialized
        assert plugin.plugin_config.get_active_context() == "kind-dev"
        assert plugin.plugin_config.get_active_timeout() == 5

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MESHOPS_K8S_CONTEXT", "kind-canary")
        plugin = IstioPlugin()
        plugin.initialize({})

        assert plugin.plugin_config.get_active_context() == "kind-canary"

    def test_initialize_does_not_connect(self) -> None:
        with patch(f"{PLUGIN_MODULE}.KubernetesClient") as mock_client_class:
            IstioPlugin().initialize({})
        mock_client_class.assert_not_called()

    def test_plugin_config_without_initialize(self) -> None:
        assert IstioPlugin().plugin_config.output_format == "table"


@pytest.mark.unit
class TestGetManager:
    """Lazy manager construction."""

    @patch(f"{PLUGIN_MODULE}.RevisionTagManager")
    @patch(f"{PLUGIN_MODULE}.LabeledResourceIndex")
    @patch(f"{PLUGIN_MODULE}.KubernetesClient")
    def test_builds_once(
        self,
        mock_client_class: MagicMock,
        mock_index_class: MagicMock,
        mock_manager_class: MagicMock,
    ) -> None:
        plugin = IstioPlugin()
        plugin.initialize({})

        first = plugin.get_manager()
        second = plugin.get_manager()

        assert first is second
        mock_client_class.assert_called_once_with(plugin.plugin_config)
        mock_index_class.assert_called_once_with(mock_client_class.return_value)
        mock_manager_class.assert_called_once_with(
            mock_index_class.return_value, confirm=read_confirmation
        )

    def test_invalid_config_reported_as_connection_error(self) -> None:
        plugin = IstioPlugin()
        plugin.initialize({})
        plugin._plugin_config = None
        plugin._config = {"clusters": {"dev": {"timeout": -1}}}

        with pytest.raises(KubernetesConnectionError, match="Invalid plugins.istio"):
            plugin.get_manager()

    @patch(f"{PLUGIN_MODULE}.KubernetesClient")
    def test_connection_failure_propagates(self, mock_client_class: MagicMock) -> None:
        mock_client_class.side_effect = KubernetesConnectionError("no kubeconfig")
        plugin = IstioPlugin()
        plugin.initialize({})

        with pytest.raises(KubernetesConnectionError):
            plugin.get_manager()


@pytest.mark.unit
class TestRegisterCommands:
    """Command registration and cleanup."""

    def test_registers_tag_group(self, cli_runner: CliRunner) -> None:
        plugin = IstioPlugin()
        plugin.initialize({})
        app = typer.Typer()

        plugin.register_commands(app)
        result = cli_runner.invoke(app, ["tag", "--help"])

        assert result.exit_code == 0
        assert "revision tags" in result.output

    @patch(f"{PLUGIN_MODULE}.register_tag_commands")
    def test_default_output_from_config(self, mock_register: MagicMock) -> None:
        plugin = IstioPlugin()
        plugin.initialize({"output_format": "yaml"})
        app = typer.Typer()

        plugin.register_commands(app)

        mock_register.assert_called_once_with(
            app, plugin.get_manager, default_output=OutputFormat.YAML
        )

    @patch(f"{PLUGIN_MODULE}.register_tag_commands")
    def test_invalid_config_falls_back_to_table(self, mock_register: MagicMock) -> None:
        plugin = IstioPlugin()
        plugin._config = {"output_format": "xml"}

        plugin.register_commands(typer.Typer())

        assert mock_register.call_args.kwargs["default_output"] is OutputFormat.TABLE

    @patch(f"{PLUGIN_MODULE}.RevisionTagManager")
    @patch(f"{PLUGIN_MODULE}.LabeledResourceIndex")
    @patch(f"{PLUGIN_MODULE}.KubernetesClient")
    def test_cleanup_closes_client(
        self,
        mock_client_class: MagicMock,
        mock_index_class: MagicMock,
        mock_manager_class: MagicMock,
    ) -> None:
        plugin = IstioPlugin()
        plugin.initialize({})
        plugin.get_manager()

        plugin.cleanup()

        mock_client_class.return_value.close.assert_called_once()
        assert plugin._manager is None

    def test_cleanup_without_client(self) -> None:
        plugin = IstioPlugin()
        plugin.cleanup()
        assert plugin._client is None
