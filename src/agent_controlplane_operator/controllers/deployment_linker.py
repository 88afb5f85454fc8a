"""Reconciler creating install resources for ClusterDeployments.

A ClusterDeployment referenced by an AgentControlPlane gets exactly one
ClusterImageSet and one AgentClusterInstall, both owned by the control plane.
The ClusterDeployment's ``spec.clusterInstallRef`` is the guard: once set, the
install resources exist and the reconcile is a no-op.
"""

from __future__ import annotations

import logging
from typing import Any

from .. import metrics
from ..builders.install import (
    build_agent_cluster_install,
    build_cluster_image_set,
    build_cluster_install_ref,
    build_networking,
)
from ..constants import (
    CLUSTER_OWNER_REQUEUE_SECONDS,
    EVENT_REASON_CLUSTER_INSTALL_CREATED,
    EVENT_REASON_WAITING_FOR_CLUSTER,
)
from ..resources import (
    AGENT_CLUSTER_INSTALL,
    AGENT_CONTROL_PLANE,
    CLUSTER,
    CLUSTER_DEPLOYMENT,
    CLUSTER_IMAGE_SET,
    split_api_version,
)
from ..services.kube.base import ObjectStore
from ..services.kube.errors import AlreadyExistsError, NotFoundError
from ..utils.owners import find_owner_reference, is_controlled_by
from .errors import InstallAlreadyExistsError, InvalidControlPlaneError
from .result import Result

logger = logging.getLogger(__name__)


def references_cluster_deployment(control_plane: dict[str, Any], cluster_deployment: dict[str, Any]) -> bool:
    """Check whether a control plane's ``clusterDeploymentRef`` points at a ClusterDeployment.

    Matches on group, kind, namespace and name. A reference without a
    namespace is local to the control plane's namespace.
    """
    agent_config = control_plane.get("spec", {}).get("agentConfigSpec") or {}
    ref = agent_config.get("clusterDeploymentRef")
    if not ref:
        return False

    group, _ = split_api_version(ref.get("apiVersion", ""))
    cd_meta = cluster_deployment.get("metadata", {})
    ref_namespace = ref.get("namespace") or control_plane.get("metadata", {}).get("namespace")
    return (
        group == CLUSTER_DEPLOYMENT.group
        and ref.get("kind") == CLUSTER_DEPLOYMENT.kind
        and ref_namespace == cd_meta.get("namespace")
        and ref.get("name") == cd_meta.get("name")
    )


def validate_control_plane(control_plane: dict[str, Any]) -> None:
    """Ensure the control plane carries the settings an install needs.

    Raises:
        InvalidControlPlaneError: If a VIP list or the release image is missing
    """
    name = control_plane.get("metadata", {}).get("name")
    agent_config = control_plane.get("spec", {}).get("agentConfigSpec") or {}
    if not agent_config.get("apiVIPs"):
        raise InvalidControlPlaneError(f"AgentControlPlane {name} has no apiVIPs")
    if not agent_config.get("ingressVIPs"):
        raise InvalidControlPlaneError(f"AgentControlPlane {name} has no ingressVIPs")
    if not agent_config.get("releaseImage"):
        raise InvalidControlPlaneError(f"AgentControlPlane {name} has no releaseImage")


class DeploymentLinker:
    """Links ClusterDeployments to the install resources derived from their control plane."""

    def __init__(self, store: ObjectStore):
        """Initialize the reconciler.

        Args:
            store: Object store used for all reads and writes
        """
        self.store = store

    def reconcile(self, namespace: str, name: str) -> Result:
        """Reconcile the ClusterDeployment ``namespace/name``.

        Returns:
            ``Result.done()`` when nothing is (left) to do, or a retry after
            ``CLUSTER_OWNER_REQUEUE_SECONDS`` while Cluster API has not yet set
            the control plane's owner Cluster

        Raises:
            StoreError: On conflicts and unexpected store errors
            ReconcileError: On inconsistent state
        """
        try:
            cluster_deployment = self.store.get(CLUSTER_DEPLOYMENT, namespace, name)
        except NotFoundError:
            logger.debug(f"ClusterDeployment {namespace}/{name} not found, nothing to do")
            return Result.done()

        control_planes = self.store.list(AGENT_CONTROL_PLANE, namespace)
        logger.debug(f"Found {len(control_planes)} AgentControlPlanes in namespace {namespace}")

        control_plane = next(
            (cp for cp in control_planes if references_cluster_deployment(cp, cluster_deployment)),
            None,
        )
        if control_plane is None:
            logger.debug(f"ClusterDeployment {namespace}/{name} is not referenced by any AgentControlPlane")
            return Result.done()

        cp_name = control_plane["metadata"]["name"]
        cluster = self._get_owner_cluster(control_plane)
        if cluster is None:
            message = f"Waiting for Cluster API to set the owner Cluster of AgentControlPlane {cp_name}"
            logger.info(message)
            return Result.retry_after(CLUSTER_OWNER_REQUEUE_SECONDS, EVENT_REASON_WAITING_FOR_CLUSTER, message)

        install_ref = cluster_deployment.get("spec", {}).get("clusterInstallRef")
        if install_ref:
            logger.debug(
                f"ClusterDeployment {namespace}/{name} already references "
                f"{install_ref.get('kind')} {install_ref.get('name')}, skipping"
            )
            return Result.done()

        return self._ensure_cluster_install(cluster_deployment, control_plane, cluster)

    def _get_owner_cluster(self, control_plane: dict[str, Any]) -> dict[str, Any] | None:
        """Get the Cluster owning a control plane, None if no owner reference is set yet."""
        ref = find_owner_reference(control_plane, CLUSTER)
        if ref is None:
            return None
        return self.store.get(CLUSTER, control_plane["metadata"]["namespace"], ref["name"])

    def _ensure_cluster_install(
        self,
        cluster_deployment: dict[str, Any],
        control_plane: dict[str, Any],
        cluster: dict[str, Any],
    ) -> Result:
        """Create the image set and install for a ClusterDeployment and link them."""
        validate_control_plane(control_plane)

        cd_meta = cluster_deployment["metadata"]
        namespace, name = cd_meta["namespace"], cd_meta["name"]
        agent_config = control_plane["spec"]["agentConfigSpec"]

        image_set = build_cluster_image_set(name, namespace, agent_config["releaseImage"], control_plane)
        try:
            self.store.create(CLUSTER_IMAGE_SET, image_set)
            metrics.resources_created_total.labels(kind=CLUSTER_IMAGE_SET.kind).inc()
            logger.info(f"Created ClusterImageSet {namespace}/{name}")
        except AlreadyExistsError:
            logger.info(f"ClusterImageSet {namespace}/{name} already exists")

        networking = build_networking(cluster, agent_config)
        install = build_agent_cluster_install(cluster_deployment, control_plane, name, networking)
        try:
            self.store.create(AGENT_CLUSTER_INSTALL, install)
        except AlreadyExistsError as e:
            self._link_existing_install(cluster_deployment, control_plane)
            raise InstallAlreadyExistsError(
                f"AgentClusterInstall {namespace}/{name} already exists but "
                f"ClusterDeployment {namespace}/{name} did not reference it"
            ) from e
        metrics.resources_created_total.labels(kind=AGENT_CLUSTER_INSTALL.kind).inc()
        logger.info(f"Created AgentClusterInstall {namespace}/{name}")

        self._set_install_ref(cluster_deployment, name)
        return Result.done((EVENT_REASON_CLUSTER_INSTALL_CREATED, f"AgentClusterInstall {name} created"))

    def _link_existing_install(self, cluster_deployment: dict[str, Any], control_plane: dict[str, Any]) -> None:
        """Record the link to an install left behind by an interrupted reconcile.

        Only an install controlled by the same control plane and pointing at
        this ClusterDeployment is linked; anything else is left for an operator.
        The caller still raises InstallAlreadyExistsError after a successful
        link, so the duplicate create is reported either way and the next
        reconcile finds the link in place.
        """
        cd_meta = cluster_deployment["metadata"]
        existing = self.store.get(AGENT_CLUSTER_INSTALL, cd_meta["namespace"], cd_meta["name"])
        deployment_ref = existing.get("spec", {}).get("clusterDeploymentRef") or {}
        if is_controlled_by(existing, control_plane) and deployment_ref.get("name") == cd_meta["name"]:
            logger.warning(f"Linking existing AgentClusterInstall {cd_meta['namespace']}/{cd_meta['name']}")
            self._set_install_ref(cluster_deployment, cd_meta["name"])

    def _set_install_ref(self, cluster_deployment: dict[str, Any], install_name: str) -> None:
        cluster_deployment.setdefault("spec", {})["clusterInstallRef"] = build_cluster_install_ref(install_name)
        self.store.update(CLUSTER_DEPLOYMENT, cluster_deployment)
