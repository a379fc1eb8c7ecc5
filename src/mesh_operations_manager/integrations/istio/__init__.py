"""Istio control plane conventions and revision tag errors."""

from mesh_operations_manager.integrations.istio.exceptions import (
    AggregateDeleteError,
    InjectionEndpointNotFoundError,
    MalformedCanonicalError,
    MalformedResourceError,
    NameCollisionError,
    ResolutionAmbiguousError,
    ResolutionNotFoundError,
    RevisionAmbiguousError,
    RevisionNotFoundError,
    RevisionTagError,
    TagAlreadyExistsError,
    TagAmbiguousError,
    TagNotFoundError,
)

__all__ = [
    "AggregateDeleteError",
    "InjectionEndpointNotFoundError",
    "MalformedCanonicalError",
    "MalformedResourceError",
    "NameCollisionError",
    "ResolutionAmbiguousError",
    "ResolutionNotFoundError",
    "RevisionAmbiguousError",
    "RevisionNotFoundError",
    "RevisionTagError",
    "TagAlreadyExistsError",
    "TagAmbiguousError",
    "TagNotFoundError",
]
