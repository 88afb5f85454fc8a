"""Tests for the Kubernetes API backed object store."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from kubernetes.client.exceptions import ApiException

from agent_controlplane_operator.constants import FIELD_MANAGER
from agent_controlplane_operator.resources import AGENT_CONTROL_PLANE, CLUSTER_DEPLOYMENT, SECRET
from agent_controlplane_operator.services.kube.client import KubeObjectStore
from agent_controlplane_operator.services.kube.errors import (
    AlreadyExistsError,
    ConflictError,
    NotFoundError,
)


def api_exception(status: int, reason: str | None = None) -> ApiException:
    e = ApiException(status=status, reason="error")
    if reason is not None:
        e.body = f'{{"kind":"Status","reason":"{reason}"}}'
    return e


@pytest.fixture
def custom_api():
    return MagicMock()


@pytest.fixture
def core_api():
    core = MagicMock()
    core.api_client.sanitize_for_serialization.side_effect = lambda obj: obj.to_dict()
    return core


@pytest.fixture
def kube_store(custom_api, core_api):
    return KubeObjectStore(custom_api, core_api, request_timeout=5.0)


class TestKubeObjectStore:
    """Test cases for KubeObjectStore."""

    def test_get_custom_object(self, kube_store, custom_api):
        custom_api.get_namespaced_custom_object.return_value = {"metadata": {"name": "demo-cd"}}

        result = kube_store.get(CLUSTER_DEPLOYMENT, "test-ns", "demo-cd")

        assert result == {"metadata": {"name": "demo-cd"}}
        custom_api.get_namespaced_custom_object.assert_called_once_with(
            group="hive.openshift.io",
            version="v1",
            namespace="test-ns",
            plural="clusterdeployments",
            name="demo-cd",
            _request_timeout=5.0,
        )

    def test_get_secret_is_converted_to_dict(self, kube_store, core_api):
        model = MagicMock()
        model.to_dict.return_value = {"metadata": {"name": "s"}, "data": {"kubeconfig": "WFla"}}
        core_api.read_namespaced_secret.return_value = model

        result = kube_store.get(SECRET, "test-ns", "s")

        assert result["data"] == {"kubeconfig": "WFla"}
        assert result["apiVersion"] == "v1"
        assert result["kind"] == "Secret"

    def test_list_returns_items(self, kube_store, custom_api):
        custom_api.list_namespaced_custom_object.return_value = {"items": [{"metadata": {"name": "a"}}]}

        assert kube_store.list(AGENT_CONTROL_PLANE, "test-ns") == [{"metadata": {"name": "a"}}]

    def test_list_without_items(self, kube_store, custom_api):
        custom_api.list_namespaced_custom_object.return_value = {"items": None}

        assert kube_store.list(AGENT_CONTROL_PLANE, "test-ns") == []

    def test_create_sets_field_manager(self, kube_store, custom_api):
        body = {"metadata": {"name": "demo-cd", "namespace": "test-ns"}}
        custom_api.create_namespaced_custom_object.return_value = body

        kube_store.create(CLUSTER_DEPLOYMENT, body)

        kwargs = custom_api.create_namespaced_custom_object.call_args.kwargs
        assert kwargs["field_manager"] == FIELD_MANAGER
        assert kwargs["namespace"] == "test-ns"
        assert kwargs["body"] is body

    def test_update_status_uses_status_subresource(self, kube_store, custom_api):
        body = {"metadata": {"name": "demo-cp", "namespace": "test-ns"}, "status": {"ready": True}}
        custom_api.replace_namespaced_custom_object_status.return_value = body

        kube_store.update_status(AGENT_CONTROL_PLANE, body)

        custom_api.replace_namespaced_custom_object_status.assert_called_once()
        custom_api.replace_namespaced_custom_object.assert_not_called()

    def test_update_status_rejects_core_resources(self, kube_store):
        with pytest.raises(ValueError):
            kube_store.update_status(SECRET, {"metadata": {"name": "s", "namespace": "test-ns"}})

    def test_not_found(self, kube_store, custom_api):
        custom_api.get_namespaced_custom_object.side_effect = api_exception(404, "NotFound")

        with pytest.raises(NotFoundError) as exc_info:
            kube_store.get(CLUSTER_DEPLOYMENT, "test-ns", "demo-cd")
        assert exc_info.value.name == "demo-cd"

    def test_already_exists(self, kube_store, custom_api):
        custom_api.create_namespaced_custom_object.side_effect = api_exception(409, "AlreadyExists")

        with pytest.raises(AlreadyExistsError):
            kube_store.create(CLUSTER_DEPLOYMENT, {"metadata": {"name": "demo-cd", "namespace": "test-ns"}})

    def test_conflict(self, kube_store, custom_api):
        custom_api.replace_namespaced_custom_object.side_effect = api_exception(409, "Conflict")

        with pytest.raises(ConflictError):
            kube_store.update(CLUSTER_DEPLOYMENT, {"metadata": {"name": "demo-cd", "namespace": "test-ns"}})

    def test_conflict_without_body(self, kube_store, custom_api):
        custom_api.replace_namespaced_custom_object.side_effect = api_exception(409)

        with pytest.raises(ConflictError):
            kube_store.update(CLUSTER_DEPLOYMENT, {"metadata": {"name": "demo-cd", "namespace": "test-ns"}})

    def test_other_errors_propagate(self, kube_store, custom_api):
        custom_api.get_namespaced_custom_object.side_effect = api_exception(500)

        with pytest.raises(ApiException):
            kube_store.get(CLUSTER_DEPLOYMENT, "test-ns", "demo-cd")

    def test_no_timeout_by_default(self, custom_api, core_api):
        custom_api.get_namespaced_custom_object.return_value = {}
        KubeObjectStore(custom_api, core_api).get(CLUSTER_DEPLOYMENT, "test-ns", "demo-cd")

        assert "_request_timeout" not in custom_api.get_namespaced_custom_object.call_args.kwargs
