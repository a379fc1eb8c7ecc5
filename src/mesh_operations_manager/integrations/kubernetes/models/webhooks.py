"""Display models for revision tag webhooks."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from mesh_operations_manager.integrations.kubernetes.models.base import (
    K8sEntityBase,
    _get_labels,
    _get_timestamp,
    _safe_get,
)


class TagSummary(K8sEntityBase):
    """One row of ``tag list``: a tag webhook and its dependents.

    ``error`` is set instead of ``tag``/``revision`` when the webhook's
    labels could not be interpreted; the row is still reported.
    """

    _entity_name: ClassVar[str] = "revision_tag"

    tag: str | None = Field(default=None, description="Tag name")
    revision: str | None = Field(default=None, description="Referenced control plane revision")
    namespaces: list[str] = Field(default_factory=list, description="Dependent namespaces")
    error: str | None = Field(default=None, description="Why the row could not be resolved")

    @classmethod
    def from_k8s_object(
        cls,
        obj: Any,
        *,
        tag: str | None = None,
        revision: str | None = None,
        namespaces: list[str] | None = None,
        error: str | None = None,
    ) -> TagSummary:
        """Create from a kubernetes V1MutatingWebhookConfiguration object."""
        return cls(
            name=_safe_get(obj, "metadata", "name", default=""),
            creation_timestamp=_get_timestamp(_safe_get(obj, "metadata", "creation_timestamp")),
            labels=_get_labels(obj) or None,
            tag=tag,
            revision=revision,
            namespaces=namespaces or [],
            error=error,
        )
