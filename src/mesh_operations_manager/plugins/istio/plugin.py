"""Istio plugin.

Contributes the ``tag`` command group for managing control plane revision
tags. The cluster client is created the first time a command needs it.
"""

from __future__ import annotations

import structlog
import typer

from mesh_operations_manager.core.plugins.base import Plugin, hookimpl
from mesh_operations_manager.integrations.kubernetes.client import KubernetesClient
from mesh_operations_manager.integrations.kubernetes.config import KubernetesPluginConfig
from mesh_operations_manager.integrations.kubernetes.exceptions import KubernetesConnectionError
from mesh_operations_manager.plugins.istio.commands import register_tag_commands
from mesh_operations_manager.plugins.istio.commands.base import read_confirmation
from mesh_operations_manager.plugins.istio.formatters import OutputFormat
from mesh_operations_manager.services.istio.tag_manager import RevisionTagManager
from mesh_operations_manager.services.kubernetes.resource_index import LabeledResourceIndex

logger = structlog.get_logger()


class IstioPlugin(Plugin):
    """Istio revision tag management plugin."""

    name = "istio"
    version = "0.1.0"
    description = "Istio control plane revision tag management"

    def __init__(self) -> None:
        super().__init__()
        self._client: KubernetesClient | None = None
        self._plugin_config: KubernetesPluginConfig | None = None
        self._manager: RevisionTagManager | None = None

    def on_initialize(self) -> None:
        """Parse the plugin configuration, applying environment overrides."""
        self._plugin_config = KubernetesPluginConfig.from_env(self._config)
        logger.debug(
            "istio_plugin_initialized",
            active_cluster=self._plugin_config.active_cluster,
            timeout=self._plugin_config.get_active_timeout(),
        )

    @property
    def plugin_config(self) -> KubernetesPluginConfig:
        if self._plugin_config is None:
            self._plugin_config = KubernetesPluginConfig.from_env(self._config)
        return self._plugin_config

    def get_manager(self) -> RevisionTagManager:
        """Return the tag manager, connecting to the cluster on first use.

        Raises:
            KubernetesConnectionError: No usable cluster configuration.
        """
        if self._manager is None:
            try:
                plugin_config = self.plugin_config
            except ValueError as e:
                raise KubernetesConnectionError(
                    "Invalid plugins.istio configuration", original_error=e
                ) from e
            self._client = KubernetesClient(plugin_config)
            self._manager = RevisionTagManager(
                LabeledResourceIndex(self._client),
                confirm=read_confirmation,
            )
            logger.debug("tag_manager_ready", context=self._client.get_current_context())
        return self._manager

    @hookimpl
    def register_commands(self, app: typer.Typer) -> None:
        try:
            default_output = OutputFormat(self.plugin_config.output_format)
        except ValueError:
            default_output = OutputFormat.TABLE
        register_tag_commands(app, self.get_manager, default_output=default_output)
        logger.debug("istio_commands_registered")

    @hookimpl
    def cleanup(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None
        self._manager = None
        super().cleanup()
