"""Tag webhook construction.

A tag webhook is derived from the canonical injector webhook of a revision:
the sidecar injection entry is copied, re-targeted at namespaces labelled
with the tag, and given a tag-specific identity. Everything here is pure;
nothing reads from or writes to the cluster.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from mesh_operations_manager.integrations.istio.constants import (
    COMPONENT_LABEL,
    COMPONENT_LABEL_VALUE,
    INJECTION_WEBHOOK_NAME,
    LEGACY_INJECTION_LABEL,
    MUTATING_WEBHOOK_API_VERSION,
    MUTATING_WEBHOOK_KIND,
    REVISION_LABEL,
    TAG_LABEL,
    tag_webhook_name,
)
from mesh_operations_manager.integrations.istio.exceptions import (
    InjectionEndpointNotFoundError,
    MalformedCanonicalError,
)
from mesh_operations_manager.integrations.kubernetes.models.base import _get_labels, _safe_get
from mesh_operations_manager.integrations.kubernetes.selectors import validate_label_value

if TYPE_CHECKING:
    from kubernetes.client import V1MutatingWebhook, V1MutatingWebhookConfiguration


@dataclass(frozen=True)
class TagWebhookConfig:
    """Inputs a chart renderer needs to produce a tag's webhook.

    ``remote_injection_url`` is empty when the revision's injector is reached
    through an in-cluster service reference.
    """

    tag: str
    revision: str
    remote_injection_url: str = ""

    def to_values(self, istio_namespace: str = "istio-system") -> dict[str, Any]:
        """Values document for the istio-discovery chart."""
        return {
            "revision": self.revision,
            "revisionTags": [self.tag],
            "global": {
                "istioNamespace": istio_namespace,
                "istiod": {"enableAnalysis": False},
                "configValidation": False,
            },
            "istiodRemote": {"injectionURL": self.remote_injection_url},
            "base": {"enableCRDTemplates": False},
        }


def _canonical_revision(canonical: Any) -> str:
    labels = _get_labels(canonical)
    if REVISION_LABEL not in labels:
        raise MalformedCanonicalError(_safe_get(canonical, "metadata", "name"))
    return labels[REVISION_LABEL]


def _injection_entry(canonical: Any) -> V1MutatingWebhook:
    for entry in _safe_get(canonical, "webhooks", default=[]):
        if entry.name == INJECTION_WEBHOOK_NAME:
            return entry
    raise InjectionEndpointNotFoundError(
        _safe_get(canonical, "metadata", "name"),
        INJECTION_WEBHOOK_NAME,
    )


def _validate_tag(tag: str) -> None:
    if not tag:
        raise ValueError("revision tag must not be empty")
    validate_label_value(tag)


def build_injection_webhook(canonical: Any, tag: str) -> V1MutatingWebhook:
    """Copy the canonical injection entry and re-target it at ``tag``.

    The copy selects namespaces with ``istio.io/rev In [tag]`` that do not
    carry the legacy ``istio-injection`` label, and has its CA bundle
    cleared; istiod patches the bundle back in after creation.

    Raises:
        InjectionEndpointNotFoundError: The canonical webhook has no
            sidecar injection entry.
    """
    from kubernetes.client import V1LabelSelector, V1LabelSelectorRequirement

    _validate_tag(tag)
    entry = copy.deepcopy(_injection_entry(canonical))
    entry.namespace_selector = V1LabelSelector(
        match_expressions=[
            V1LabelSelectorRequirement(key=REVISION_LABEL, operator="In", values=[tag]),
            V1LabelSelectorRequirement(key=LEGACY_INJECTION_LABEL, operator="DoesNotExist"),
        ]
    )
    if entry.client_config is not None:
        entry.client_config.ca_bundle = ""
    return entry


def build_tag_webhook(canonical: Any, tag: str) -> V1MutatingWebhookConfiguration:
    """Build the tag webhook for ``tag`` from a revision's canonical webhook.

    Args:
        canonical: The revision's canonical MutatingWebhookConfiguration.
        tag: Tag name; must be a valid label value.

    Returns:
        A new MutatingWebhookConfiguration named ``istio-revision-tag-<tag>``
        with exactly one webhook entry. ``canonical`` is left untouched.

    Raises:
        MalformedCanonicalError: The canonical webhook has no revision label.
        InjectionEndpointNotFoundError: It has no sidecar injection entry.
        ValueError: The tag is empty or not a valid label value.
    """
    from kubernetes.client import V1MutatingWebhookConfiguration, V1ObjectMeta

    _validate_tag(tag)
    revision = _canonical_revision(canonical)
    injection_webhook = build_injection_webhook(canonical, tag)

    return V1MutatingWebhookConfiguration(
        api_version=MUTATING_WEBHOOK_API_VERSION,
        kind=MUTATING_WEBHOOK_KIND,
        metadata=V1ObjectMeta(
            name=tag_webhook_name(tag),
            labels={
                TAG_LABEL: tag,
                REVISION_LABEL: revision,
                COMPONENT_LABEL: COMPONENT_LABEL_VALUE,
            },
        ),
        webhooks=[injection_webhook],
    )


def tag_webhook_config_from_canonical(canonical: Any, tag: str) -> TagWebhookConfig:
    """Extract the chart inputs for ``tag`` from a canonical webhook.

    Raises:
        MalformedCanonicalError: The canonical webhook has no revision label.
        InjectionEndpointNotFoundError: It has no sidecar injection entry.
    """
    _validate_tag(tag)
    revision = _canonical_revision(canonical)
    entry = _injection_entry(canonical)
    return TagWebhookConfig(
        tag=tag,
        revision=revision,
        remote_injection_url=_safe_get(entry, "client_config", "url", default=""),
    )


def webhook_to_dict(webhook: V1MutatingWebhookConfiguration) -> dict[str, Any]:
    """Serialize a webhook configuration to its API (camelCase) representation."""
    from kubernetes.client import ApiClient

    return ApiClient().sanitize_for_serialization(webhook)
