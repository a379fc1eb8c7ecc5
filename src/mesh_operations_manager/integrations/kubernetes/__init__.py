"""Kubernetes integration - API client, configuration and label selectors."""

from mesh_operations_manager.integrations.kubernetes.client import KubernetesClient
from mesh_operations_manager.integrations.kubernetes.config import (
    ClusterConfig,
    KubernetesDefaultsConfig,
    KubernetesPluginConfig,
)
from mesh_operations_manager.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConflictError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesValidationError,
)
from mesh_operations_manager.integrations.kubernetes.selectors import (
    Equals,
    Exists,
    InvalidSelectorError,
    LabelSelector,
    NotExists,
)

__all__ = [
    "ClusterConfig",
    "Equals",
    "Exists",
    "InvalidSelectorError",
    "KubernetesAuthError",
    "KubernetesClient",
    "KubernetesConflictError",
    "KubernetesConnectionError",
    "KubernetesDefaultsConfig",
    "KubernetesError",
    "KubernetesNotFoundError",
    "KubernetesPluginConfig",
    "KubernetesValidationError",
    "LabelSelector",
    "NotExists",
]
