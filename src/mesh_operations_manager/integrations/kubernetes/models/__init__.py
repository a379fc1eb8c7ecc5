"""Kubernetes resource display models."""

from mesh_operations_manager.integrations.kubernetes.models.base import K8sEntityBase
from mesh_operations_manager.integrations.kubernetes.models.webhooks import TagSummary

__all__ = [
    "K8sEntityBase",
    "TagSummary",
]
