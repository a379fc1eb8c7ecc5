"""Unit tests for typed label selectors."""

from __future__ import annotations

import pytest

from mesh_operations_manager.integrations.kubernetes.selectors import (
    Equals,
    Exists,
    InvalidSelectorError,
    LabelSelector,
    NotExists,
    validate_label_key,
    validate_label_value,
)


@pytest.mark.unit
@pytest.mark.kubernetes
class TestLabelSyntax:
    """Key and value validation."""

    @pytest.mark.parametrize(
        "key",
        ["app", "istio.io/rev", "istio.io/tag", "operator.istio.io/component", "istio-injection"],
    )
    def test_valid_keys(self, key: str) -> None:
        assert validate_label_key(key) == key

    @pytest.mark.parametrize(
        "key",
        ["", "/rev", "Istio.IO/rev", "istio.io/", "a,b", "x=y", "-leading", "a" * 64],
    )
    def test_invalid_keys(self, key: str) -> None:
        with pytest.raises(InvalidSelectorError):
            validate_label_key(key)

    @pytest.mark.parametrize("value", ["", "1-8-1", "prod", "canary.v2", "A_b"])
    def test_valid_values(self, value: str) -> None:
        assert validate_label_value(value) == value

    @pytest.mark.parametrize("value", ["a,b", "x=y", "!prod", "has space", "trailing-"])
    def test_invalid_values(self, value: str) -> None:
        with pytest.raises(InvalidSelectorError):
            validate_label_value(value)

    def test_invalid_selector_error_is_value_error(self) -> None:
        assert issubclass(InvalidSelectorError, ValueError)


@pytest.mark.unit
@pytest.mark.kubernetes
class TestPredicates:
    """Rendering and matching of single predicates."""

    def test_equals(self) -> None:
        predicate = Equals("istio.io/rev", "1-8-1")
        assert predicate.render() == "istio.io/rev=1-8-1"
        assert predicate.matches({"istio.io/rev": "1-8-1"})
        assert not predicate.matches({"istio.io/rev": "1-9-0"})
        assert not predicate.matches({})

    def test_exists(self) -> None:
        predicate = Exists("istio.io/tag")
        assert predicate.render() == "istio.io/tag"
        assert predicate.matches({"istio.io/tag": ""})
        assert not predicate.matches({"istio.io/rev": "1-8-1"})

    def test_not_exists(self) -> None:
        predicate = NotExists("istio.io/tag")
        assert predicate.render() == "!istio.io/tag"
        assert predicate.matches({})
        assert not predicate.matches({"istio.io/tag": "prod"})

    def test_injected_value_rejected(self) -> None:
        with pytest.raises(InvalidSelectorError):
            Equals("istio.io/tag", "prod,istio.io/rev")


@pytest.mark.unit
@pytest.mark.kubernetes
class TestLabelSelector:
    """Conjunctions of predicates."""

    def test_render_joins_with_commas(self) -> None:
        selector = LabelSelector(Equals("istio.io/rev", "1-8-1"), NotExists("istio.io/tag"))
        assert selector.render() == "istio.io/rev=1-8-1,!istio.io/tag"
        assert str(selector) == selector.render()

    def test_empty_selector_rejected(self) -> None:
        with pytest.raises(InvalidSelectorError):
            LabelSelector()

    def test_matches_requires_every_predicate(self) -> None:
        selector = LabelSelector(Equals("istio.io/rev", "1-8-1"), NotExists("istio.io/tag"))
        assert selector.matches({"istio.io/rev": "1-8-1"})
        assert not selector.matches({"istio.io/rev": "1-8-1", "istio.io/tag": "prod"})
        assert not selector.matches(None)

    def test_and_returns_new_selector(self) -> None:
        base = LabelSelector(Exists("istio.io/tag"))
        extended = base.and_(Equals("istio.io/rev", "1-8-1"))
        assert base.render() == "istio.io/tag"
        assert extended.render() == "istio.io/tag,istio.io/rev=1-8-1"
        assert extended.predicates[0] == Exists("istio.io/tag")

    def test_equality_and_hash(self) -> None:
        first = LabelSelector(Equals("istio.io/tag", "prod"))
        second = LabelSelector(Equals("istio.io/tag", "prod"))
        assert first == second
        assert hash(first) == hash(second)
        assert first != LabelSelector(Equals("istio.io/tag", "canary"))
        assert first != "istio.io/tag=prod"

    def test_repr(self) -> None:
        assert repr(LabelSelector(Exists("app"))) == "LabelSelector('app')"
