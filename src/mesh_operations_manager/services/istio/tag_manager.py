"""Revision tag lifecycle management.

Implements set / list / remove for revision tags on top of the labeled
resource index. Every operation runs synchronously against the cluster and
takes its options as explicit arguments.

Set order of checks: name collision with an installed revision first, then
resolution of the source revision, then existence of the tag. A tag that
collides with a revision is therefore rejected even when ``overwrite`` is set
and even when the source revision does not exist.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from mesh_operations_manager.integrations.istio.exceptions import (
    AggregateDeleteError,
    MalformedResourceError,
    NameCollisionError,
    TagAlreadyExistsError,
    TagAmbiguousError,
    TagNotFoundError,
)
from mesh_operations_manager.integrations.kubernetes.exceptions import KubernetesError
from mesh_operations_manager.integrations.kubernetes.models.webhooks import TagSummary
from mesh_operations_manager.services.istio.namespace_finder import DependentNamespaceFinder
from mesh_operations_manager.services.istio.tag_builder import (
    TagWebhookConfig,
    build_tag_webhook,
    tag_webhook_config_from_canonical,
)
from mesh_operations_manager.services.istio.tag_resolver import (
    TagResolver,
    tag_name,
    tag_revision,
    webhook_name,
)
from mesh_operations_manager.services.kubernetes.resource_index import ResourceKind

if TYPE_CHECKING:
    from kubernetes.client import V1MutatingWebhookConfiguration

    from mesh_operations_manager.services.kubernetes.resource_index import LabeledResourceIndex

logger = structlog.get_logger()

Confirmer = Callable[[str], bool]

_WEBHOOK_KIND = ResourceKind.MUTATING_WEBHOOK_CONFIGURATION


@dataclass(frozen=True)
class TagSetResult:
    """Outcome of a successful ``set_tag``."""

    tag: str
    revision: str
    webhook_name: str
    created: bool


@dataclass(frozen=True)
class TagRemoveResult:
    """Outcome of ``remove_tag``; ``removed`` is False when the operator declined."""

    tag: str
    removed: bool
    deleted: list[str] = field(default_factory=list)
    dependent_namespaces: list[str] = field(default_factory=list)


def build_delete_confirmation(tag: str, namespaces: Sequence[str]) -> str:
    """Prompt shown before removing a tag that namespaces still depend on."""
    listed = "".join(f" {ns}" for ns in namespaces)
    return (
        f'Caution, found {len(namespaces)} namespace(s) still injected by tag "{tag}":'
        f"{listed}\nProceed with operation? [y/N]"
    )


def decline(prompt: str) -> bool:
    """Non-interactive confirmer that never consents."""
    return False


class RevisionTagManager:
    """Creates, lists and removes revision tags.

    Args:
        index: Cluster access used for every read and write.
        confirm: Asked before removing a tag that namespaces depend on.
            Receives the prompt text and returns True to proceed. Defaults
            to declining, so unattended callers never remove in-use tags
            unless they pass ``skip_confirmation``.
    """

    _entity_name = "revision_tag"

    def __init__(self, index: LabeledResourceIndex, confirm: Confirmer = decline) -> None:
        self._index = index
        self._resolver = TagResolver(index)
        self._finder = DependentNamespaceFinder(index)
        self._confirm = confirm
        self._log = logger.bind(entity=self._entity_name)

    # =========================================================================
    # Set
    # =========================================================================

    def _resolve_source(self, tag: str, revision: str) -> V1MutatingWebhookConfiguration:
        if not tag:
            raise ValueError("must provide a tag for modification")
        if not revision:
            raise ValueError("must provide a control plane revision for the tag")

        if self._resolver.check_name_collision(tag):
            raise NameCollisionError(tag)
        return self._resolver.resolve_canonical(revision)

    def set_tag(self, tag: str, revision: str, *, overwrite: bool = False) -> TagSetResult:
        """Create a tag, or repoint an existing one when ``overwrite`` is set.

        Args:
            tag: Tag name.
            revision: Control plane revision the tag should reference.
            overwrite: Allow replacing an existing tag.

        Returns:
            What was written and whether it was created or updated.

        Raises:
            NameCollisionError: ``tag`` is the name of an installed revision.
            RevisionNotFoundError: ``revision`` has no canonical webhook.
            RevisionAmbiguousError: ``revision`` has several canonical webhooks.
            TagAlreadyExistsError: The tag exists and ``overwrite`` is False.
            TagAmbiguousError: Several webhooks already implement the tag.
            KubernetesError: A cluster call failed (including version conflicts).
        """
        log = self._log.bind(tag=tag, revision=revision, overwrite=overwrite)
        log.info("setting_revision_tag")

        canonical = self._resolve_source(tag, revision)

        existing = self._resolver.resolve_tag(tag)
        if existing and not overwrite:
            raise TagAlreadyExistsError(tag)
        if len(existing) > 1:
            raise TagAmbiguousError(tag, [webhook_name(w) for w in existing])

        webhook = build_tag_webhook(canonical, tag)

        if existing:
            current = existing[0]
            # keep the stored identity so the replace targets the same object
            webhook.metadata.name = current.metadata.name
            webhook.metadata.resource_version = current.metadata.resource_version
            stored = self._index.update_object(_WEBHOOK_KIND, webhook)
            created = False
        else:
            stored = self._index.create_object(_WEBHOOK_KIND, webhook)
            created = True

        name = webhook_name(stored) or webhook.metadata.name
        log.info("set_revision_tag", webhook=name, created=created)
        return TagSetResult(tag=tag, revision=revision, webhook_name=name, created=created)

    def generate_tag(self, tag: str, revision: str) -> V1MutatingWebhookConfiguration:
        """Build the tag webhook ``set_tag`` would write, without writing it.

        Raises:
            NameCollisionError: ``tag`` is the name of an installed revision.
            RevisionNotFoundError: ``revision`` has no canonical webhook.
            RevisionAmbiguousError: ``revision`` has several canonical webhooks.
        """
        canonical = self._resolve_source(tag, revision)
        self._log.debug("generated_tag_webhook", tag=tag, revision=revision)
        return build_tag_webhook(canonical, tag)

    def generate_tag_config(self, tag: str, revision: str) -> TagWebhookConfig:
        """Chart inputs for rendering ``tag`` against ``revision``."""
        canonical = self._resolve_source(tag, revision)
        return tag_webhook_config_from_canonical(canonical, tag)

    # =========================================================================
    # List
    # =========================================================================

    def list_tags(self) -> list[TagSummary]:
        """Describe every tag webhook in discovery order.

        A webhook whose tag or revision label is missing produces a row with
        ``error`` set; the remaining rows are still resolved.
        """
        summaries: list[TagSummary] = []
        for webhook in self._index.all_tag_webhooks():
            try:
                tag = tag_name(webhook)
                revision = tag_revision(webhook)
            except MalformedResourceError as e:
                self._log.warning(
                    "malformed_tag_webhook", webhook=webhook_name(webhook), error=str(e)
                )
                summaries.append(TagSummary.from_k8s_object(webhook, error=str(e)))
                continue

            summaries.append(
                TagSummary.from_k8s_object(
                    webhook,
                    tag=tag,
                    revision=revision,
                    namespaces=self._finder.find(tag),
                )
            )

        self._log.debug("listed_revision_tags", count=len(summaries))
        return summaries

    # =========================================================================
    # Remove
    # =========================================================================

    def remove_tag(self, tag: str, *, skip_confirmation: bool = False) -> TagRemoveResult:
        """Remove a tag, asking first when namespaces still depend on it.

        Every matching webhook deletion is attempted even if an earlier one
        fails; all failures are reported together.

        Raises:
            TagNotFoundError: No webhook implements the tag.
            AggregateDeleteError: At least one deletion failed.
            KubernetesError: A lookup failed.
        """
        if not tag:
            raise ValueError("must provide a tag for removal")

        log = self._log.bind(tag=tag)
        webhooks = self._resolver.resolve_tag(tag)
        if not webhooks:
            raise TagNotFoundError(tag)

        dependents = self._finder.find(tag)
        if dependents and not skip_confirmation:
            if not self._confirm(build_delete_confirmation(tag, dependents)):
                log.info("revision_tag_removal_declined", dependents=dependents)
                return TagRemoveResult(tag=tag, removed=False, dependent_namespaces=dependents)

        deleted: list[str] = []
        errors: dict[str, KubernetesError] = {}
        for webhook in webhooks:
            name = webhook_name(webhook)
            try:
                self._index.delete_object(_WEBHOOK_KIND, name)
            except KubernetesError as e:
                log.warning("tag_webhook_delete_failed", webhook=name, error=str(e))
                errors[name] = e
            else:
                deleted.append(name)

        if errors:
            raise AggregateDeleteError(errors, deleted)

        log.info("removed_revision_tag", deleted=deleted)
        return TagRemoveResult(
            tag=tag,
            removed=True,
            deleted=deleted,
            dependent_namespaces=dependents,
        )
