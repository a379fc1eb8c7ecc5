"""Revision and tag webhook resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from mesh_operations_manager.integrations.istio.constants import REVISION_LABEL, TAG_LABEL
from mesh_operations_manager.integrations.istio.exceptions import (
    MalformedResourceError,
    RevisionAmbiguousError,
    RevisionNotFoundError,
)
from mesh_operations_manager.integrations.kubernetes.models.base import _get_labels, _safe_get

if TYPE_CHECKING:
    from kubernetes.client import V1MutatingWebhookConfiguration

    from mesh_operations_manager.services.kubernetes.resource_index import LabeledResourceIndex

logger = structlog.get_logger()


def webhook_name(webhook: Any) -> str:
    """Name of a webhook configuration object ('' when unset)."""
    return _safe_get(webhook, "metadata", "name", default="")


def tag_name(webhook: Any) -> str:
    """Extract the tag a tag webhook implements.

    Raises:
        MalformedResourceError: If the webhook has no tag label.
    """
    labels = _get_labels(webhook)
    if TAG_LABEL not in labels:
        raise MalformedResourceError(
            f"could not extract tag name from webhook {webhook_name(webhook)!r}",
            webhook_name(webhook),
        )
    return labels[TAG_LABEL]


def tag_revision(webhook: Any) -> str:
    """Extract the revision a webhook points at.

    Raises:
        MalformedResourceError: If the webhook has no revision label.
    """
    labels = _get_labels(webhook)
    if REVISION_LABEL not in labels:
        raise MalformedResourceError(
            f"could not extract tag revision from webhook {webhook_name(webhook)!r}",
            webhook_name(webhook),
        )
    return labels[REVISION_LABEL]


class TagResolver:
    """Resolves revisions and tags to webhook configurations.

    Enforces the cardinality rules: a revision has exactly one canonical
    webhook, a tag has zero or more tag webhooks (callers decide what an
    empty result means).
    """

    def __init__(self, index: LabeledResourceIndex) -> None:
        self._index = index
        self._log = logger.bind(entity="tag_resolver")

    def resolve_canonical(self, revision: str) -> V1MutatingWebhookConfiguration:
        """Return the single canonical webhook for ``revision``.

        Raises:
            RevisionNotFoundError: No canonical webhook exists.
            RevisionAmbiguousError: More than one canonical webhook exists.
        """
        self._log.debug("resolving_canonical_webhook", revision=revision)
        webhooks = self._index.canonical_webhooks_for_revision(revision)
        if not webhooks:
            raise RevisionNotFoundError(revision)
        if len(webhooks) > 1:
            raise RevisionAmbiguousError(revision, [webhook_name(w) for w in webhooks])
        self._log.debug(
            "resolved_canonical_webhook", revision=revision, name=webhook_name(webhooks[0])
        )
        return webhooks[0]

    def resolve_tag(self, tag: str) -> list[V1MutatingWebhookConfiguration]:
        """Return every tag webhook for ``tag`` (possibly none)."""
        webhooks = self._index.webhooks_for_tag(tag)
        self._log.debug("resolved_tag_webhooks", tag=tag, count=len(webhooks))
        return webhooks

    def check_name_collision(self, candidate_tag: str) -> bool:
        """True if an installed revision already uses ``candidate_tag`` as its name."""
        return bool(self._index.canonical_webhooks_for_revision(candidate_tag))
