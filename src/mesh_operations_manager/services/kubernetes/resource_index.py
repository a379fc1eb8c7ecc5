"""Labeled resource index.

Cluster read/write access for the two kinds revision tags care about,
MutatingWebhookConfigurations and Namespaces, keyed by typed label
selectors. Results keep the API server's discovery order and every failure
is surfaced as a ``KubernetesError`` without retrying.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any, NamedTuple

from mesh_operations_manager.integrations.istio.constants import REVISION_LABEL, TAG_LABEL
from mesh_operations_manager.integrations.kubernetes.selectors import (
    Equals,
    Exists,
    LabelSelector,
    NotExists,
)
from mesh_operations_manager.services.kubernetes.base import K8sBaseManager

if TYPE_CHECKING:
    from kubernetes.client import V1MutatingWebhookConfiguration, V1Namespace


class ResourceKind(StrEnum):
    """Cluster-scoped kinds the index can operate on."""

    MUTATING_WEBHOOK_CONFIGURATION = "MutatingWebhookConfiguration"
    NAMESPACE = "Namespace"


class _KindApi(NamedTuple):
    group: str
    list: str
    create: str
    replace: str
    delete: str


_KIND_APIS: dict[ResourceKind, _KindApi] = {
    ResourceKind.MUTATING_WEBHOOK_CONFIGURATION: _KindApi(
        group="admissionregistration_v1",
        list="list_mutating_webhook_configuration",
        create="create_mutating_webhook_configuration",
        replace="replace_mutating_webhook_configuration",
        delete="delete_mutating_webhook_configuration",
    ),
    ResourceKind.NAMESPACE: _KindApi(
        group="core_v1",
        list="list_namespace",
        create="create_namespace",
        replace="replace_namespace",
        delete="delete_namespace",
    ),
}


# Selector builders for the queries revision tags rely on


def all_tags_selector() -> LabelSelector:
    """Every tag webhook, whatever its tag."""
    return LabelSelector(Exists(TAG_LABEL))


def tag_selector(tag: str) -> LabelSelector:
    """Tag webhooks for one tag."""
    return LabelSelector(Equals(TAG_LABEL, tag))


def canonical_revision_selector(revision: str) -> LabelSelector:
    """The webhook created at install time for a revision, never a tag webhook."""
    return LabelSelector(Equals(REVISION_LABEL, revision), NotExists(TAG_LABEL))


def revision_label_selector(value: str) -> LabelSelector:
    """Namespaces whose revision label equals ``value``."""
    return LabelSelector(Equals(REVISION_LABEL, value))


class LabeledResourceIndex(K8sBaseManager):
    """Label-indexed access to webhook configurations and namespaces."""

    _entity_name = "labeled_resource"

    def _api(self, kind: ResourceKind) -> tuple[Any, _KindApi]:
        kind_api = _KIND_APIS[kind]
        return getattr(self._client, kind_api.group), kind_api

    # =========================================================================
    # Generic Operations
    # =========================================================================

    def list_objects(self, kind: ResourceKind, selector: LabelSelector) -> list[Any]:
        """List objects of ``kind`` matching ``selector``.

        Args:
            kind: Resource kind to list.
            selector: Label selector every returned object satisfies.

        Returns:
            Matching SDK objects in API discovery order.
        """
        api, ops = self._api(kind)
        rendered = selector.render()
        self._log.debug("listing_objects", kind=str(kind), label_selector=rendered)
        try:
            result = getattr(api, ops.list)(
                label_selector=rendered,
                _request_timeout=self._client.timeout,
            )
        except Exception as e:
            self._handle_api_error(e, str(kind), None)
        items = list(result.items or [])
        self._log.debug("listed_objects", kind=str(kind), count=len(items))
        return items

    def create_object(self, kind: ResourceKind, body: Any) -> Any:
        """Create an object.

        Returns:
            The object as stored by the API server.
        """
        api, ops = self._api(kind)
        name = body.metadata.name
        self._log.info("creating_object", kind=str(kind), name=name)
        try:
            result = getattr(api, ops.create)(body=body, _request_timeout=self._client.timeout)
        except Exception as e:
            self._handle_api_error(e, str(kind), name)
        self._log.info("created_object", kind=str(kind), name=name)
        return result

    def update_object(self, kind: ResourceKind, body: Any) -> Any:
        """Replace an object in place.

        ``body.metadata.resource_version`` must carry the version that was
        read; the API server rejects stale versions with a conflict.

        Returns:
            The object as stored by the API server.
        """
        api, ops = self._api(kind)
        name = body.metadata.name
        self._log.info(
            "updating_object",
            kind=str(kind),
            name=name,
            resource_version=body.metadata.resource_version,
        )
        try:
            result = getattr(api, ops.replace)(
                name=name,
                body=body,
                _request_timeout=self._client.timeout,
            )
        except Exception as e:
            self._handle_api_error(e, str(kind), name)
        self._log.info("updated_object", kind=str(kind), name=name)
        return result

    def delete_object(self, kind: ResourceKind, name: str) -> None:
        """Delete an object by name."""
        api, ops = self._api(kind)
        self._log.info("deleting_object", kind=str(kind), name=name)
        try:
            getattr(api, ops.delete)(name=name, _request_timeout=self._client.timeout)
        except Exception as e:
            self._handle_api_error(e, str(kind), name)
        self._log.info("deleted_object", kind=str(kind), name=name)

    # =========================================================================
    # Revision Tag Queries
    # =========================================================================

    def all_tag_webhooks(self) -> list[V1MutatingWebhookConfiguration]:
        """All webhooks carrying the tag label."""
        return self.list_objects(ResourceKind.MUTATING_WEBHOOK_CONFIGURATION, all_tags_selector())

    def webhooks_for_tag(self, tag: str) -> list[V1MutatingWebhookConfiguration]:
        """Webhooks labelled with the given tag."""
        return self.list_objects(ResourceKind.MUTATING_WEBHOOK_CONFIGURATION, tag_selector(tag))

    def canonical_webhooks_for_revision(
        self, revision: str
    ) -> list[V1MutatingWebhookConfiguration]:
        """Untagged webhooks labelled with the given revision."""
        return self.list_objects(
            ResourceKind.MUTATING_WEBHOOK_CONFIGURATION,
            canonical_revision_selector(revision),
        )

    def namespaces_with_revision_label(self, value: str) -> list[V1Namespace]:
        """Namespaces whose revision label equals ``value``."""
        return self.list_objects(ResourceKind.NAMESPACE, revision_label_selector(value))
