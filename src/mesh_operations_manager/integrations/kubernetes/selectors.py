"""Typed label selector construction.

Label selectors are built from typed predicates instead of formatted
strings, so a caller-supplied value such as ``"a,b"`` or ``"x=y"`` can never
widen a query. Keys and values are validated against Kubernetes label
syntax when the predicate is created.

Example:
    >>> selector = LabelSelector(Equals("istio.io/rev", "1-8-1"), NotExists("istio.io/tag"))
    >>> selector.render()
    'istio.io/rev=1-8-1,!istio.io/tag'
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

_NAME_RE = re.compile(r"^[A-Za-z0-9]([A-Za-z0-9._-]{0,61}[A-Za-z0-9])?$")
_DNS_LABEL = r"[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?"
_PREFIX_RE = re.compile(rf"^{_DNS_LABEL}(\.{_DNS_LABEL})*$")
_MAX_PREFIX_LENGTH = 253


class InvalidSelectorError(ValueError):
    """Raised when a label key or value is not valid Kubernetes label syntax."""


def validate_label_key(key: str) -> str:
    """Validate a label key (``[prefix/]name``).

    Raises:
        InvalidSelectorError: If the key is malformed.
    """
    prefix, sep, name = key.rpartition("/")
    if sep and (
        not prefix or len(prefix) > _MAX_PREFIX_LENGTH or not _PREFIX_RE.match(prefix)
    ):
        raise InvalidSelectorError(f"invalid label key prefix in {key!r}")
    if not _NAME_RE.match(name):
        raise InvalidSelectorError(f"invalid label key {key!r}")
    return key


def validate_label_value(value: str) -> str:
    """Validate a label value (empty, or up to 63 alphanumeric/``-_.`` chars).

    Raises:
        InvalidSelectorError: If the value is malformed.
    """
    if value and not _NAME_RE.match(value):
        raise InvalidSelectorError(f"invalid label value {value!r}")
    return value


@dataclass(frozen=True)
class Equals:
    """``key=value``"""

    key: str
    value: str

    def __post_init__(self) -> None:
        validate_label_key(self.key)
        validate_label_value(self.value)

    def render(self) -> str:
        return f"{self.key}={self.value}"

    def matches(self, labels: Mapping[str, str]) -> bool:
        return labels.get(self.key) == self.value


@dataclass(frozen=True)
class Exists:
    """``key`` (label present with any value)"""

    key: str

    def __post_init__(self) -> None:
        validate_label_key(self.key)

    def render(self) -> str:
        return self.key

    def matches(self, labels: Mapping[str, str]) -> bool:
        return self.key in labels


@dataclass(frozen=True)
class NotExists:
    """``!key`` (label absent)"""

    key: str

    def __post_init__(self) -> None:
        validate_label_key(self.key)

    def render(self) -> str:
        return f"!{self.key}"

    def matches(self, labels: Mapping[str, str]) -> bool:
        return self.key not in labels


Predicate = Equals | Exists | NotExists


class LabelSelector:
    """Immutable conjunction of label predicates."""

    __slots__ = ("_predicates",)

    def __init__(self, *predicates: Predicate) -> None:
        if not predicates:
            raise InvalidSelectorError("a label selector needs at least one predicate")
        self._predicates: tuple[Predicate, ...] = predicates

    @property
    def predicates(self) -> tuple[Predicate, ...]:
        return self._predicates

    def and_(self, *predicates: Predicate) -> LabelSelector:
        """Return a new selector with additional predicates appended."""
        return LabelSelector(*self._predicates, *predicates)

    def render(self) -> str:
        """Render the selector in the API server's ``labelSelector`` syntax."""
        return ",".join(p.render() for p in self._predicates)

    def matches(self, labels: Mapping[str, str] | None) -> bool:
        """Evaluate the selector against a label mapping."""
        labels = labels or {}
        return all(p.matches(labels) for p in self._predicates)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"LabelSelector({self.render()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LabelSelector):
            return NotImplemented
        return self._predicates == other._predicates

    def __hash__(self) -> int:
        return hash(self._predicates)
