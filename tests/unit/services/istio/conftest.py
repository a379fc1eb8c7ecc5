"""Fixtures for revision tag service tests.

``FakeCluster`` keeps MutatingWebhookConfigurations and Namespaces in memory
and answers the list/create/replace/delete calls the labeled resource index
makes, including label selector filtering and resourceVersion checks.
"""

from __future__ import annotations

import copy
from types import SimpleNamespace
from typing import Any

import pytest
from kubernetes.client import (
    AdmissionregistrationV1ServiceReference,
    ApiException,
    V1MutatingWebhook,
    V1MutatingWebhookConfiguration,
    V1Namespace,
    V1ObjectMeta,
    V1RuleWithOperations,
)
from kubernetes.client import (
    AdmissionregistrationV1WebhookClientConfig as WebhookClientConfig,
)

from mesh_operations_manager.integrations.kubernetes.client import KubernetesClient
from mesh_operations_manager.services.istio.tag_manager import RevisionTagManager
from mesh_operations_manager.services.kubernetes.resource_index import LabeledResourceIndex


def _selector_matches(selector: str, labels: dict[str, str] | None) -> bool:
    labels = labels or {}
    for term in selector.split(","):
        if term.startswith("!"):
            if term[1:] in labels:
                return False
        elif "=" in term:
            key, value = term.split("=", 1)
            if labels.get(key) != value:
                return False
        elif term not in labels:
            return False
    return True


class _Store:
    """Ordered name -> object store with optimistic concurrency."""

    def __init__(self) -> None:
        self.objects: dict[str, Any] = {}
        self.calls: list[tuple[str, str]] = []
        self.failures: dict[tuple[str, str], ApiException] = {}
        self._version = 0

    def _next_version(self) -> str:
        self._version += 1
        return str(self._version)

    def _check_failure(self, verb: str, name: str) -> None:
        self.calls.append((verb, name))
        if (verb, name) in self.failures:
            raise self.failures[(verb, name)]

    def add(self, obj: Any) -> Any:
        obj = copy.deepcopy(obj)
        obj.metadata.resource_version = self._next_version()
        self.objects[obj.metadata.name] = obj
        return obj

    def list(self, label_selector: str, _request_timeout: int | None = None) -> Any:
        self.calls.append(("list", label_selector))
        items = [
            copy.deepcopy(obj)
            for obj in self.objects.values()
            if _selector_matches(label_selector, obj.metadata.labels)
        ]
        return SimpleNamespace(items=items)

    def create(self, body: Any, _request_timeout: int | None = None) -> Any:
        name = body.metadata.name
        self._check_failure("create", name)
        if name in self.objects:
            raise ApiException(status=409, reason="AlreadyExists")
        if body.metadata.resource_version:
            raise ApiException(status=400, reason="resourceVersion should not be set")
        return copy.deepcopy(self.add(body))

    def replace(self, name: str, body: Any, _request_timeout: int | None = None) -> Any:
        self._check_failure("replace", name)
        current = self.objects.get(name)
        if current is None:
            raise ApiException(status=404, reason="NotFound")
        if body.metadata.resource_version != current.metadata.resource_version:
            raise ApiException(status=409, reason="Conflict")
        return copy.deepcopy(self.add(body))

    def delete(self, name: str, _request_timeout: int | None = None) -> Any:
        self._check_failure("delete", name)
        if name not in self.objects:
            raise ApiException(status=404, reason="NotFound")
        del self.objects[name]
        return SimpleNamespace(status="Success")


class _AdmissionApi:
    def __init__(self, store: _Store) -> None:
        self.list_mutating_webhook_configuration = store.list
        self.create_mutating_webhook_configuration = store.create
        self.replace_mutating_webhook_configuration = store.replace
        self.delete_mutating_webhook_configuration = store.delete


class _CoreApi:
    def __init__(self, store: _Store) -> None:
        self.list_namespace = store.list
        self.create_namespace = store.create
        self.replace_namespace = store.replace
        self.delete_namespace = store.delete


class FakeCluster:
    """Stand-in for KubernetesClient backed by in-memory stores."""

    timeout = 30
    translate_api_exception = staticmethod(KubernetesClient.translate_api_exception)

    def __init__(self) -> None:
        self.webhooks = _Store()
        self.namespaces = _Store()
        self.admissionregistration_v1 = _AdmissionApi(self.webhooks)
        self.core_v1 = _CoreApi(self.namespaces)

    def add_webhook(
        self, webhook: V1MutatingWebhookConfiguration
    ) -> V1MutatingWebhookConfiguration:
        return self.webhooks.add(webhook)

    def add_namespace(self, name: str, labels: dict[str, str] | None = None) -> None:
        self.namespaces.add(V1Namespace(metadata=V1ObjectMeta(name=name, labels=labels)))

    def webhook(self, name: str) -> V1MutatingWebhookConfiguration:
        return self.webhooks.objects[name]

    def webhook_names(self) -> list[str]:
        return list(self.webhooks.objects)

    def writes(self) -> list[tuple[str, str]]:
        return [call for call in self.webhooks.calls if call[0] != "list"]


def _make_canonical(
    revision: str = "1-8-1",
    *,
    name: str | None = None,
    url: str | None = None,
    labels: dict[str, str] | None = None,
    include_injection_entry: bool = True,
) -> V1MutatingWebhookConfiguration:
    """A revision's install-time injector webhook."""
    if url is None:
        client_config = WebhookClientConfig(
            service=AdmissionregistrationV1ServiceReference(
                name=f"istiod-{revision}",
                namespace="istio-system",
                path="/inject",
                port=443,
            ),
            ca_bundle="Y2EtYnVuZGxl",
        )
    else:
        client_config = WebhookClientConfig(url=url, ca_bundle="Y2EtYnVuZGxl")

    entries = [
        V1MutatingWebhook(
            name="namespace.sidecar-injector.istio.io",
            admission_review_versions=["v1"],
            side_effects="None",
            client_config=copy.deepcopy(client_config),
        )
    ]
    if include_injection_entry:
        entries.append(
            V1MutatingWebhook(
                name="sidecar-injector.istio.io",
                admission_review_versions=["v1beta1", "v1"],
                side_effects="None",
                failure_policy="Fail",
                client_config=client_config,
                rules=[
                    V1RuleWithOperations(
                        api_groups=[""],
                        api_versions=["v1"],
                        operations=["CREATE"],
                        resources=["pods"],
                    )
                ],
            )
        )

    return V1MutatingWebhookConfiguration(
        api_version="admissionregistration.k8s.io/v1",
        kind="MutatingWebhookConfiguration",
        metadata=V1ObjectMeta(
            name=name or f"istio-sidecar-injector-{revision}",
            labels=(
                labels
                if labels is not None
                else {"istio.io/rev": revision, "app": "sidecar-injector"}
            ),
        ),
        webhooks=entries,
    )


def _make_tag_webhook(
    tag: str,
    revision: str | None = "1-8-1",
    *,
    name: str | None = None,
) -> V1MutatingWebhookConfiguration:
    """A tag webhook as previously written to the cluster."""
    labels = {"istio.io/tag": tag}
    if revision is not None:
        labels["istio.io/rev"] = revision
    return V1MutatingWebhookConfiguration(
        metadata=V1ObjectMeta(name=name or f"istio-revision-tag-{tag}", labels=labels),
        webhooks=[
            V1MutatingWebhook(
                name="sidecar-injector.istio.io",
                admission_review_versions=["v1"],
                side_effects="None",
                client_config=WebhookClientConfig(url="https://istiod/inject"),
            )
        ],
    )


@pytest.fixture
def cluster() -> FakeCluster:
    return FakeCluster()


@pytest.fixture
def index(cluster: FakeCluster) -> LabeledResourceIndex:
    return LabeledResourceIndex(cluster)  # type: ignore[arg-type]


@pytest.fixture
def confirmations() -> list[str]:
    """Prompts passed to the confirmer, in order."""
    return []


@pytest.fixture
def make_manager(  # type: ignore[no-untyped-def]
    index: LabeledResourceIndex, confirmations: list[str]
):
    def factory(answer: bool | None = None) -> RevisionTagManager:
        if answer is None:
            return RevisionTagManager(index)

        def confirm(prompt: str) -> bool:
            confirmations.append(prompt)
            return answer

        return RevisionTagManager(index, confirm=confirm)

    return factory


@pytest.fixture
def make_canonical():  # type: ignore[no-untyped-def]
    return _make_canonical


@pytest.fixture
def make_tag_webhook():  # type: ignore[no-untyped-def]
    return _make_tag_webhook


@pytest.fixture
def installed(cluster: FakeCluster) -> V1MutatingWebhookConfiguration:
    """Cluster with revision 1-8-1 installed; returns its canonical webhook."""
    return cluster.add_webhook(_make_canonical("1-8-1"))
