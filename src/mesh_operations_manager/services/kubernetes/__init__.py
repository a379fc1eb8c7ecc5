"""Kubernetes service module.

Cluster access shared by the revision tag services.
"""

from mesh_operations_manager.services.kubernetes.base import K8sBaseManager
from mesh_operations_manager.services.kubernetes.resource_index import (
    LabeledResourceIndex,
    ResourceKind,
)

__all__ = [
    "K8sBaseManager",
    "LabeledResourceIndex",
    "ResourceKind",
]
