"""Revision tag domain exceptions.

Cluster I/O failures are not part of this hierarchy; they surface as
``KubernetesError`` subclasses from the Kubernetes integration.
"""

from __future__ import annotations

from collections.abc import Sequence

from mesh_operations_manager.integrations.kubernetes.exceptions import KubernetesError


class RevisionTagError(Exception):
    """Base exception for revision tag operations.

    Attributes:
        message: Human-readable error message.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ResolutionNotFoundError(RevisionTagError):
    """No webhook matched a revision or tag lookup."""


class RevisionNotFoundError(ResolutionNotFoundError):
    """No canonical injector webhook exists for the revision."""

    def __init__(self, revision: str) -> None:
        super().__init__(
            "cannot modify tag: cannot find MutatingWebhookConfiguration "
            f"with revision {revision!r}"
        )
        self.revision = revision


class TagNotFoundError(ResolutionNotFoundError):
    """No tag webhook exists for the tag."""

    def __init__(self, tag: str) -> None:
        super().__init__(
            f"cannot remove tag {tag!r}: cannot find MutatingWebhookConfiguration for tag"
        )
        self.tag = tag


class ResolutionAmbiguousError(RevisionTagError):
    """A lookup that must be unique matched more than one webhook."""

    def __init__(self, message: str, names: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.names = list(names)


class RevisionAmbiguousError(ResolutionAmbiguousError):
    """More than one canonical injector webhook carries the revision label."""

    def __init__(self, revision: str, names: Sequence[str] = ()) -> None:
        super().__init__(
            f"cannot modify tag: found multiple canonical webhooks with revision {revision!r}",
            names,
        )
        self.revision = revision


class TagAmbiguousError(ResolutionAmbiguousError):
    """More than one tag webhook carries the tag label."""

    def __init__(self, tag: str, names: Sequence[str] = ()) -> None:
        super().__init__(
            f"cannot modify tag: found multiple tag webhooks for tag {tag!r}: {', '.join(names)}",
            names,
        )
        self.tag = tag


class NameCollisionError(RevisionTagError):
    """The requested tag name is already used by an installed revision."""

    def __init__(self, tag: str) -> None:
        super().__init__(
            f"cannot create revision tag {tag!r}: "
            "found existing control plane revision with same name"
        )
        self.tag = tag


class TagAlreadyExistsError(RevisionTagError):
    """The tag exists and overwriting was not requested."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"revision tag {tag!r} already exists, and --overwrite is false")
        self.tag = tag


class MalformedResourceError(RevisionTagError):
    """A webhook is missing an expected label or webhook entry."""

    def __init__(self, message: str, resource_name: str | None = None) -> None:
        super().__init__(message)
        self.resource_name = resource_name


class MalformedCanonicalError(MalformedResourceError):
    """The canonical webhook has no revision label."""

    def __init__(self, resource_name: str | None = None) -> None:
        super().__init__(
            f"could not extract revision from webhook {resource_name!r}",
            resource_name,
        )


class InjectionEndpointNotFoundError(MalformedResourceError):
    """The canonical webhook has no sidecar injection entry."""

    def __init__(self, resource_name: str | None = None, entry_name: str = "") -> None:
        super().__init__(
            f"could not find {entry_name or 'sidecar-injector'} webhook in "
            f"canonical webhook {resource_name!r}",
            resource_name,
        )
        self.entry_name = entry_name


class AggregateDeleteError(RevisionTagError):
    """One or more tag webhook deletions failed.

    Attributes:
        errors: Mapping of webhook name to the error its deletion raised,
            in the order deletions were attempted.
        deleted: Names of webhooks that were deleted successfully.
    """

    def __init__(self, errors: dict[str, KubernetesError], deleted: Sequence[str] = ()) -> None:
        details = "; ".join(f"{name}: {err}" for name, err in errors.items())
        super().__init__(
            f"failed to delete {len(errors)} revision tag webhook(s): {details}"
        )
        self.errors = dict(errors)
        self.deleted = list(deleted)
