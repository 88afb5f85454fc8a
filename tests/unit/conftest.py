"""Shared fixtures: an in-memory object store and factories for cluster objects."""

from __future__ import annotations

import copy
import itertools
import threading
import uuid
from typing import Any

import pytest

from agent_controlplane_operator.constants import LABEL_CLUSTER_NAME
from agent_controlplane_operator.resources import (
    AGENT_CLUSTER_INSTALL,
    AGENT_CONTROL_PLANE,
    CLUSTER,
    CLUSTER_DEPLOYMENT,
    SECRET,
    ResourceType,
)
from agent_controlplane_operator.services.kube.errors import (
    AlreadyExistsError,
    ConflictError,
    NotFoundError,
)
from agent_controlplane_operator.utils import rate_limit
from agent_controlplane_operator.utils.secrets import encode_secret_value


class FakeObjectStore:
    """Thread-safe in-memory ObjectStore with API server like semantics.

    Objects get a uid and a resourceVersion. Updates carrying a stale
    resourceVersion fail with ConflictError; ``update`` leaves custom resource
    status alone and ``update_status`` only touches status.
    """

    def __init__(self) -> None:
        self._objects: dict[tuple[str, str, str], dict[str, Any]] = {}
        self._lock = threading.Lock()
        self._versions = itertools.count(1)
        self.writes: list[tuple[str, str, str]] = []

    def _key(self, resource: ResourceType, namespace: str, name: str) -> tuple[str, str, str]:
        return resource.kind, namespace, name

    def _body_key(self, resource: ResourceType, body: dict[str, Any]) -> tuple[str, str, str]:
        meta = body["metadata"]
        return self._key(resource, meta.get("namespace", ""), meta["name"])

    def add(self, resource: ResourceType, body: dict[str, Any]) -> dict[str, Any]:
        """Seed an object, bypassing write tracking."""
        with self._lock:
            stored = copy.deepcopy(body)
            stored.setdefault("apiVersion", resource.api_version)
            stored.setdefault("kind", resource.kind)
            meta = stored["metadata"]
            meta.setdefault("uid", str(uuid.uuid4()))
            meta["resourceVersion"] = str(next(self._versions))
            self._objects[self._body_key(resource, stored)] = stored
            return copy.deepcopy(stored)

    def peek(self, resource: ResourceType, namespace: str, name: str) -> dict[str, Any] | None:
        with self._lock:
            obj = self._objects.get(self._key(resource, namespace, name))
            return copy.deepcopy(obj)

    def all(self, resource: ResourceType) -> list[dict[str, Any]]:
        with self._lock:
            return [copy.deepcopy(obj) for key, obj in self._objects.items() if key[0] == resource.kind]

    def get(self, resource: ResourceType, namespace: str, name: str) -> dict[str, Any]:
        obj = self.peek(resource, namespace, name)
        if obj is None:
            raise NotFoundError(resource, namespace, name)
        return obj

    def list(self, resource: ResourceType, namespace: str) -> list[dict[str, Any]]:
        return [obj for obj in self.all(resource) if obj["metadata"].get("namespace") == namespace]

    def create(self, resource: ResourceType, body: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            key = self._body_key(resource, body)
            if key in self._objects:
                raise AlreadyExistsError(resource, key[1], key[2])
            stored = copy.deepcopy(body)
            stored["metadata"]["uid"] = str(uuid.uuid4())
            stored["metadata"]["resourceVersion"] = str(next(self._versions))
            self._objects[key] = stored
            self.writes.append(("create", resource.kind, key[2]))
            return copy.deepcopy(stored)

    def update(self, resource: ResourceType, body: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            current = self._check_update(resource, body)
            stored = copy.deepcopy(body)
            if not resource.is_core:
                stored["status"] = copy.deepcopy(current.get("status"))
                if stored["status"] is None:
                    del stored["status"]
            stored["metadata"]["uid"] = current["metadata"]["uid"]
            stored["metadata"]["resourceVersion"] = str(next(self._versions))
            self._objects[self._body_key(resource, body)] = stored
            self.writes.append(("update", resource.kind, body["metadata"]["name"]))
            return copy.deepcopy(stored)

    def update_status(self, resource: ResourceType, body: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            current = self._check_update(resource, body)
            stored = copy.deepcopy(current)
            stored["status"] = copy.deepcopy(body.get("status") or {})
            stored["metadata"]["resourceVersion"] = str(next(self._versions))
            self._objects[self._body_key(resource, body)] = stored
            self.writes.append(("update_status", resource.kind, body["metadata"]["name"]))
            return copy.deepcopy(stored)

    def _check_update(self, resource: ResourceType, body: dict[str, Any]) -> dict[str, Any]:
        key = self._body_key(resource, body)
        current = self._objects.get(key)
        if current is None:
            raise NotFoundError(resource, key[1], key[2])
        version = body["metadata"].get("resourceVersion")
        if version and version != current["metadata"]["resourceVersion"]:
            raise ConflictError(resource, key[1], key[2])
        return current


class ClusterObjects:
    """Factories seeding a consistent set of cluster objects into a store."""

    namespace = "test-ns"

    def __init__(self, store: FakeObjectStore) -> None:
        self.store = store

    def cluster(
        self,
        name: str = "demo",
        pod_cidrs: list[str] | None = None,
        service_cidrs: list[str] | None = None,
    ) -> dict[str, Any]:
        return self.store.add(CLUSTER, {
            "metadata": {"name": name, "namespace": self.namespace},
            "spec": {
                "clusterNetwork": {
                    "pods": {"cidrBlocks": pod_cidrs if pod_cidrs is not None else ["10.128.0.0/14"]},
                    "services": {"cidrBlocks": service_cidrs if service_cidrs is not None else ["172.30.0.0/16"]},
                },
            },
        })

    def control_plane(
        self,
        name: str = "demo-cp",
        cluster: dict[str, Any] | None = None,
        deployment_name: str = "demo-cd",
        cluster_name: str | None = "demo",
        status: dict[str, Any] | None = None,
        **agent_config: Any,
    ) -> dict[str, Any]:
        owner_references = []
        if cluster is not None:
            owner_references.append({
                "apiVersion": CLUSTER.api_version,
                "kind": CLUSTER.kind,
                "name": cluster["metadata"]["name"],
                "uid": cluster["metadata"]["uid"],
                "controller": True,
            })
        labels = {LABEL_CLUSTER_NAME: cluster_name} if cluster_name else {}
        config = {
            "clusterDeploymentRef": {
                "apiVersion": CLUSTER_DEPLOYMENT.api_version,
                "kind": CLUSTER_DEPLOYMENT.kind,
                "namespace": self.namespace,
                "name": deployment_name,
            },
            "releaseImage": "quay.io/openshift-release-dev/ocp-release:4.16.0-x86_64",
            "apiVIPs": ["192.168.111.5"],
            "ingressVIPs": ["192.168.111.4"],
            "sshAuthorizedKey": "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAA test@example.com",
            "machineNetwork": [{"cidr": "192.168.111.0/24"}],
        }
        config.update(agent_config)
        body = {
            "metadata": {
                "name": name,
                "namespace": self.namespace,
                "labels": labels,
                "ownerReferences": owner_references,
            },
            "spec": {"replicas": 3, "agentConfigSpec": config},
        }
        if status is not None:
            body["status"] = status
        return self.store.add(AGENT_CONTROL_PLANE, body)

    def cluster_deployment(self, name: str = "demo-cd", install_ref: dict[str, Any] | None = None) -> dict[str, Any]:
        spec: dict[str, Any] = {"clusterName": "demo", "baseDomain": "example.com"}
        if install_ref is not None:
            spec["clusterInstallRef"] = install_ref
        return self.store.add(CLUSTER_DEPLOYMENT, {
            "metadata": {"name": name, "namespace": self.namespace},
            "spec": spec,
        })

    def install(
        self,
        control_plane: dict[str, Any] | None,
        name: str = "demo-cd",
        kubeconfig_secret: str | None = None,
        state: str | None = None,
    ) -> dict[str, Any]:
        owner_references = []
        if control_plane is not None:
            owner_references.append({
                "apiVersion": AGENT_CONTROL_PLANE.api_version,
                "kind": AGENT_CONTROL_PLANE.kind,
                "name": control_plane["metadata"]["name"],
                "uid": control_plane["metadata"]["uid"],
                "controller": True,
                "blockOwnerDeletion": True,
            })
        spec: dict[str, Any] = {"clusterDeploymentRef": {"name": name}}
        if kubeconfig_secret is not None:
            spec["clusterMetadata"] = {
                "clusterID": "0000",
                "adminKubeconfigSecretRef": {"name": kubeconfig_secret},
            }
        body: dict[str, Any] = {
            "metadata": {"name": name, "namespace": self.namespace, "ownerReferences": owner_references},
            "spec": spec,
        }
        if state is not None:
            body["status"] = {"debugInfo": {"state": state, "stateInfo": state}}
        return self.store.add(AGENT_CLUSTER_INSTALL, body)

    def secret(
        self,
        name: str,
        data: dict[str, bytes],
        labels: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        return self.store.add(SECRET, {
            "metadata": {"name": name, "namespace": self.namespace, "labels": labels or {}},
            "type": "Opaque",
            "data": {key: encode_secret_value(value) for key, value in data.items()},
        })


@pytest.fixture(autouse=True)
def no_rate_limit(monkeypatch):
    """Disable client-side API throttling."""
    monkeypatch.setattr(rate_limit, "_K8S_RATE_LIMIT_PER_SECOND", 0.0)


@pytest.fixture
def store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def objs(store) -> ClusterObjects:
    return ClusterObjects(store)
