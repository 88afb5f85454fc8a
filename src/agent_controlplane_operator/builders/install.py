"""Builders for the install resources derived from an AgentControlPlane."""

from __future__ import annotations

from typing import Any

from ..constants import CLUSTER_NETWORK_HOST_PREFIX
from ..resources import AGENT_CLUSTER_INSTALL, CLUSTER_IMAGE_SET
from ..utils.owners import controller_owner_reference


def build_networking(cluster: dict[str, Any], agent_config: dict[str, Any]) -> dict[str, Any]:
    """Derive install networking from the Cluster and the control plane config.

    Every pod CIDR block becomes a cluster network entry with a fixed /23 host
    prefix. Service CIDR blocks and the machine network pass through unchanged.

    Args:
        cluster: Cluster API Cluster body
        agent_config: ``spec.agentConfigSpec`` of the AgentControlPlane

    Returns:
        The ``networking`` section of an AgentClusterInstall spec
    """
    cluster_network_spec = cluster.get("spec", {}).get("clusterNetwork") or {}
    pods = cluster_network_spec.get("pods") or {}
    services = cluster_network_spec.get("services") or {}

    cluster_network = [
        {"cidr": cidr, "hostPrefix": CLUSTER_NETWORK_HOST_PREFIX}
        for cidr in pods.get("cidrBlocks") or []
    ]

    return {
        "clusterNetwork": cluster_network,
        "serviceNetwork": list(services.get("cidrBlocks") or []),
        "machineNetwork": list(agent_config.get("machineNetwork") or []),
    }


def build_cluster_image_set(
    name: str,
    namespace: str,
    release_image: str,
    control_plane: dict[str, Any],
) -> dict[str, Any]:
    """Build the ClusterImageSet pointing at the installer release image."""
    return {
        "apiVersion": CLUSTER_IMAGE_SET.api_version,
        "kind": CLUSTER_IMAGE_SET.kind,
        "metadata": {
            "name": name,
            "namespace": namespace,
            "ownerReferences": [controller_owner_reference(control_plane)],
        },
        "spec": {"releaseImage": release_image},
    }


def build_agent_cluster_install(
    cluster_deployment: dict[str, Any],
    control_plane: dict[str, Any],
    image_set_name: str,
    networking: dict[str, Any],
) -> dict[str, Any]:
    """Build the AgentClusterInstall for a ClusterDeployment.

    Only the first API and ingress VIP are used; additional entries are
    ignored. Installs downstream expect a single VIP of each kind, so multi-VIP
    support needs confirming with the install service owners first.

    Args:
        cluster_deployment: ClusterDeployment body
        control_plane: Owning AgentControlPlane body
        image_set_name: Name of the ClusterImageSet to install from
        networking: Networking section (see :func:`build_networking`)

    Returns:
        AgentClusterInstall body, named after the ClusterDeployment
    """
    cd_meta = cluster_deployment["metadata"]
    spec = control_plane.get("spec", {})
    agent_config = spec.get("agentConfigSpec") or {}

    return {
        "apiVersion": AGENT_CLUSTER_INSTALL.api_version,
        "kind": AGENT_CLUSTER_INSTALL.kind,
        "metadata": {
            "name": cd_meta["name"],
            "namespace": cd_meta["namespace"],
            "ownerReferences": [controller_owner_reference(control_plane)],
        },
        "spec": {
            "apiVIP": agent_config["apiVIPs"][0],
            "ingressVIP": agent_config["ingressVIPs"][0],
            "clusterDeploymentRef": {"name": cd_meta["name"]},
            "provisionRequirements": {
                "controlPlaneAgents": int(spec.get("replicas") or 0),
            },
            "sshPublicKey": agent_config.get("sshAuthorizedKey", ""),
            "imageSetRef": {"name": image_set_name},
            "networking": networking,
        },
    }


def build_cluster_install_ref(install_name: str) -> dict[str, str]:
    """Build the ``spec.clusterInstallRef`` value linking an AgentClusterInstall."""
    return {
        "group": AGENT_CLUSTER_INSTALL.group,
        "version": AGENT_CLUSTER_INSTALL.version,
        "kind": AGENT_CLUSTER_INSTALL.kind,
        "name": install_name,
    }
