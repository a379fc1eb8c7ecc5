"""Revision tag services.

Resolution, construction and lifecycle management of Istio revision tags.
"""

from mesh_operations_manager.services.istio.namespace_finder import DependentNamespaceFinder
from mesh_operations_manager.services.istio.tag_builder import (
    TagWebhookConfig,
    build_tag_webhook,
    tag_webhook_config_from_canonical,
    webhook_to_dict,
)
from mesh_operations_manager.services.istio.tag_manager import (
    RevisionTagManager,
    TagRemoveResult,
    TagSetResult,
    build_delete_confirmation,
)
from mesh_operations_manager.services.istio.tag_resolver import TagResolver

__all__ = [
    "DependentNamespaceFinder",
    "RevisionTagManager",
    "TagRemoveResult",
    "TagResolver",
    "TagSetResult",
    "TagWebhookConfig",
    "build_delete_confirmation",
    "build_tag_webhook",
    "tag_webhook_config_from_canonical",
    "webhook_to_dict",
]
