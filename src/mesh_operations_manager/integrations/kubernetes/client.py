"""Kubernetes API client wrapper.

Wraps the official kubernetes Python client with kubeconfig/in-cluster
loading, lazy API group initialization and consistent error translation.
Calls are never retried here: cluster reads are cheap to repeat and writes
are left for the operator to re-invoke.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from mesh_operations_manager.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConflictError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesValidationError,
)

if TYPE_CHECKING:
    from kubernetes.client import AdmissionregistrationV1Api, CoreV1Api

    from mesh_operations_manager.integrations.kubernetes.config import (
        KubernetesPluginConfig,
    )

logger = structlog.get_logger()


class KubernetesClient:
    """Kubernetes API client for the mesh control plane.

    Example:
        ```python
        config = KubernetesPluginConfig.from_env()
        with KubernetesClient(config) as client:
            hooks = client.admissionregistration_v1.list_mutating_webhook_configuration()
        ```
    """

    def __init__(self, plugin_config: KubernetesPluginConfig) -> None:
        """Load cluster credentials for the configured context.

        Args:
            plugin_config: Cluster access configuration.

        Raises:
            KubernetesConnectionError: If neither kubeconfig nor in-cluster
                credentials can be loaded.
        """
        self._config = plugin_config
        self._current_context: str | None = None

        self._core_v1: CoreV1Api | None = None
        self._admissionregistration_v1: AdmissionregistrationV1Api | None = None

        self._load_config()

        logger.debug("kubernetes_client_initialized", context=self._current_context)

    def _load_config(self) -> None:
        """Load Kubernetes configuration from kubeconfig or in-cluster."""
        from kubernetes import config
        from kubernetes.config import ConfigException

        active_context = self._config.get_active_context()
        kubeconfig_path = self._config.get_active_kubeconfig()

        try:
            config.load_kube_config(config_file=kubeconfig_path, context=active_context)
            self._current_context = active_context or self._kubeconfig_current_context()
            logger.debug("loaded_kubeconfig", context=active_context, kubeconfig=kubeconfig_path)
        except ConfigException:
            try:
                config.load_incluster_config()
                self._current_context = "in-cluster"
                logger.debug("loaded_incluster_config")
            except ConfigException as e:
                raise KubernetesConnectionError(
                    message="Cannot load Kubernetes configuration. "
                    "Ensure kubeconfig exists or running inside a cluster.",
                    original_error=e,
                ) from e

        self._core_v1 = None
        self._admissionregistration_v1 = None

    def _kubeconfig_current_context(self) -> str | None:
        from kubernetes import config
        from kubernetes.config import ConfigException

        try:
            _, active = config.list_kube_config_contexts(
                config_file=self._config.get_active_kubeconfig()
            )
        except ConfigException:
            return None
        return active.get("name") if active else None

    # =========================================================================
    # Lazy API Group Accessors
    # =========================================================================

    @property
    def core_v1(self) -> CoreV1Api:
        """Get CoreV1Api instance (namespaces)."""
        if self._core_v1 is None:
            from kubernetes.client import CoreV1Api

            self._core_v1 = CoreV1Api()
        return self._core_v1

    @property
    def admissionregistration_v1(self) -> AdmissionregistrationV1Api:
        """Get AdmissionregistrationV1Api instance (mutating webhook configurations)."""
        if self._admissionregistration_v1 is None:
            from kubernetes.client import AdmissionregistrationV1Api

            self._admissionregistration_v1 = AdmissionregistrationV1Api()
        return self._admissionregistration_v1

    # =========================================================================
    # Error Translation
    # =========================================================================

    @staticmethod
    def translate_api_exception(
        e: Exception,
        resource_type: str | None = None,
        resource_name: str | None = None,
    ) -> KubernetesError:
        """Translate a kubernetes ApiException to a KubernetesError subclass.

        Args:
            e: The original exception.
            resource_type: Kind of resource being operated on.
            resource_name: Name of the resource.

        Returns:
            An appropriate KubernetesError subclass.
        """
        from kubernetes.client import ApiException
        from urllib3.exceptions import HTTPError

        if isinstance(e, KubernetesError):
            return e

        if isinstance(e, HTTPError | OSError):
            return KubernetesConnectionError(
                message=f"Kubernetes API unreachable: {e}",
                original_error=e,
            )

        if not isinstance(e, ApiException):
            return KubernetesError(
                message=str(e),
                resource_type=resource_type,
                resource_name=resource_name,
            )

        status = e.status

        if status in (401, 403):
            return KubernetesAuthError(
                message=e.reason or "Authentication/authorization failed",
                status_code=status,
                reason=e.reason,
            )

        if status == 404:
            return KubernetesNotFoundError(
                resource_type=resource_type,
                resource_name=resource_name,
            )

        if status == 409:
            return KubernetesConflictError(
                resource_type=resource_type,
                resource_name=resource_name,
            )

        if status in (400, 422):
            return KubernetesValidationError(
                message=e.reason or "Validation failed",
                status_code=status,
            )

        return KubernetesError(
            message=e.reason or f"Kubernetes API error: {status}",
            status_code=status,
            resource_type=resource_type,
            resource_name=resource_name,
        )

    # =========================================================================
    # Properties
    # =========================================================================

    def get_current_context(self) -> str:
        """Get the loaded context name ('in-cluster' inside a pod)."""
        return self._current_context or "unknown"

    @property
    def timeout(self) -> int:
        """Per-request timeout in seconds."""
        return self._config.get_active_timeout()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Release cached API group instances."""
        self._core_v1 = None
        self._admissionregistration_v1 = None
        logger.debug("kubernetes_client_closed")

    def __enter__(self) -> KubernetesClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
