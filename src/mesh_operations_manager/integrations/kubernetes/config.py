"""Kubernetes connection configuration models."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator


class ClusterConfig(BaseModel):
    """Connection settings for a single named cluster."""

    model_config = ConfigDict(extra="forbid")

    context: str = ""
    kubeconfig: str | None = None
    timeout: int = 30

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator("kubeconfig")
    @classmethod
    def validate_kubeconfig(cls, v: str | None) -> str | None:
        """Expand ~ in kubeconfig path."""
        return str(Path(v).expanduser()) if v else None


class KubernetesDefaultsConfig(BaseModel):
    """Defaults applied when no named cluster overrides them."""

    model_config = ConfigDict(extra="forbid")

    timeout: int = 30

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v


class KubernetesPluginConfig(BaseModel):
    """Cluster access configuration for the istio plugin."""

    model_config = ConfigDict(extra="forbid")

    clusters: dict[str, ClusterConfig] = {}
    active_cluster: str | None = None
    defaults: KubernetesDefaultsConfig = KubernetesDefaultsConfig()
    output_format: Literal["table", "json", "yaml"] = "table"

    # Set from MESHOPS_K8S_KUBECONFIG when no named cluster carries a path
    _kubeconfig_override: str | None = None

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> KubernetesPluginConfig:
        """Create configuration with environment variable overrides.

        Environment variables take precedence over base_config values.

        Supported environment variables:
            MESHOPS_K8S_CONTEXT: Override active cluster / kubeconfig context
            MESHOPS_K8S_KUBECONFIG: Override kubeconfig path for every cluster
            MESHOPS_K8S_TIMEOUT: Request timeout in seconds
            MESHOPS_K8S_OUTPUT: Output format (table, json, yaml)
        """
        config_dict = dict(base_config) if base_config else {}
        config_dict["defaults"] = dict(config_dict.get("defaults") or {})
        config_dict["clusters"] = dict(config_dict.get("clusters") or {})

        if context := os.environ.get("MESHOPS_K8S_CONTEXT"):
            config_dict["active_cluster"] = context

        if timeout := os.environ.get("MESHOPS_K8S_TIMEOUT"):
            config_dict["defaults"]["timeout"] = int(timeout)

        if output_format := os.environ.get("MESHOPS_K8S_OUTPUT"):
            config_dict["output_format"] = output_format

        instance = cls.model_validate(config_dict)

        if kubeconfig := os.environ.get("MESHOPS_K8S_KUBECONFIG"):
            kubeconfig = str(Path(kubeconfig).expanduser())
            instance._kubeconfig_override = kubeconfig
            for cluster_cfg in instance.clusters.values():
                cluster_cfg.kubeconfig = kubeconfig

        return instance

    def get_active_context(self) -> str | None:
        """Get the kubeconfig context to load.

        A named cluster resolves to its configured context; any other value
        is treated as a raw kubeconfig context name. With nothing configured
        the kubeconfig's current-context is used (None).
        """
        if self.active_cluster:
            if cluster := self.clusters.get(self.active_cluster):
                return cluster.context or None
            return self.active_cluster
        if self.clusters:
            first = next(iter(self.clusters.values()))
            return first.context or None
        return None

    def get_active_kubeconfig(self) -> str | None:
        """Get the kubeconfig path for the active cluster (None = default lookup)."""
        cluster = self._active_cluster_config()
        if cluster and cluster.kubeconfig:
            return cluster.kubeconfig
        return self._kubeconfig_override

    def get_active_timeout(self) -> int:
        """Get the request timeout for the active cluster."""
        cluster = self._active_cluster_config()
        return cluster.timeout if cluster else self.defaults.timeout

    def _active_cluster_config(self) -> ClusterConfig | None:
        if self.active_cluster:
            return self.clusters.get(self.active_cluster)
        if self.clusters:
            return next(iter(self.clusters.values()))
        return None
