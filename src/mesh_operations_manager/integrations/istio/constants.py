"""Well-known Istio label keys and object names used by revision tags."""

from __future__ import annotations

# Namespace/webhook label naming the control plane revision (or tag) to use
REVISION_LABEL = "istio.io/rev"

# Present only on tag webhooks; value is the tag name
TAG_LABEL = "istio.io/tag"

# Legacy opt-in/opt-out label; namespaces carrying it are excluded from tag injection
LEGACY_INJECTION_LABEL = "istio-injection"

# Name of the sidecar injection entry inside a MutatingWebhookConfiguration
INJECTION_WEBHOOK_NAME = "sidecar-injector.istio.io"

# Tag webhooks are named "<prefix>-<tag>"
TAG_WEBHOOK_NAME_PREFIX = "istio-revision-tag"

# Ownership marker so uninstall tooling also removes tag webhooks
COMPONENT_LABEL = "operator.istio.io/component"
COMPONENT_LABEL_VALUE = "Pilot"

MUTATING_WEBHOOK_KIND = "MutatingWebhookConfiguration"
MUTATING_WEBHOOK_API_VERSION = "admissionregistration.k8s.io/v1"


def tag_webhook_name(tag: str) -> str:
    """Deterministic MutatingWebhookConfiguration name for a tag."""
    return f"{TAG_WEBHOOK_NAME_PREFIX}-{tag}"
