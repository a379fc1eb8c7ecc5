"""Dependent namespace lookup."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mesh_operations_manager.integrations.kubernetes.models.base import _safe_get

if TYPE_CHECKING:
    from mesh_operations_manager.services.kubernetes.resource_index import LabeledResourceIndex


class DependentNamespaceFinder:
    """Finds namespaces whose injection currently resolves through a tag."""

    def __init__(self, index: LabeledResourceIndex) -> None:
        self._index = index

    def find(self, tag: str) -> list[str]:
        """Names of namespaces labelled ``istio.io/rev=<tag>``, in discovery order."""
        return [
            _safe_get(ns, "metadata", "name", default="")
            for ns in self._index.namespaces_with_revision_label(tag)
        ]
