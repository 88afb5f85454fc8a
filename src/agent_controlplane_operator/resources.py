"""Type registry for the Kubernetes resources the operator reads and writes."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import (
    CAPI_GROUP,
    CAPI_VERSION,
    CONTROLPLANE_GROUP,
    CONTROLPLANE_VERSION,
    HIVE_EXT_GROUP,
    HIVE_EXT_VERSION,
    HIVE_GROUP,
    HIVE_VERSION,
    KIND_AGENT_CLUSTER_INSTALL,
    KIND_AGENT_CONTROL_PLANE,
    KIND_CLUSTER,
    KIND_CLUSTER_DEPLOYMENT,
    KIND_CLUSTER_IMAGE_SET,
    KIND_SECRET,
)


@dataclass(frozen=True)
class ResourceType:
    """Group/version/kind/plural descriptor of a resource type.

    An empty group denotes the Kubernetes core API group.
    """

    group: str
    version: str
    kind: str
    plural: str

    @property
    def api_version(self) -> str:
        """Value of the ``apiVersion`` field for objects of this type."""
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    @property
    def is_core(self) -> bool:
        return not self.group

    def __str__(self) -> str:
        return f"{self.kind}.{self.group or 'core'}"


AGENT_CONTROL_PLANE = ResourceType(
    CONTROLPLANE_GROUP, CONTROLPLANE_VERSION, KIND_AGENT_CONTROL_PLANE, "agentcontrolplanes"
)
CLUSTER = ResourceType(CAPI_GROUP, CAPI_VERSION, KIND_CLUSTER, "clusters")
CLUSTER_DEPLOYMENT = ResourceType(HIVE_GROUP, HIVE_VERSION, KIND_CLUSTER_DEPLOYMENT, "clusterdeployments")
CLUSTER_IMAGE_SET = ResourceType(HIVE_GROUP, HIVE_VERSION, KIND_CLUSTER_IMAGE_SET, "clusterimagesets")
AGENT_CLUSTER_INSTALL = ResourceType(
    HIVE_EXT_GROUP, HIVE_EXT_VERSION, KIND_AGENT_CLUSTER_INSTALL, "agentclusterinstalls"
)
SECRET = ResourceType("", "v1", KIND_SECRET, "secrets")


def split_api_version(api_version: str) -> tuple[str, str]:
    """Split an ``apiVersion`` string into ``(group, version)``.

    Core resources (``v1``) have an empty group.
    """
    if "/" not in api_version:
        return "", api_version
    group, _, version = api_version.partition("/")
    return group, version
