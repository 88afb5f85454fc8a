"""Reconciler propagating AgentClusterInstall progress to the AgentControlPlane."""

from __future__ import annotations

import logging
from typing import Any

from .. import metrics
from ..builders.kubeconfig import build_kubeconfig_secret
from ..constants import (
    EVENT_REASON_CONTROL_PLANE_READY,
    EVENT_REASON_KUBECONFIG_BRIDGED,
    INSTALL_STATE_ADDING_HOSTS,
    KUBECONFIG_SOURCE_KEY,
    LABEL_CLUSTER_NAME,
)
from ..resources import AGENT_CLUSTER_INSTALL, AGENT_CONTROL_PLANE, SECRET
from ..services.kube.base import ObjectStore
from ..services.kube.errors import AlreadyExistsError, NotFoundError
from ..utils.owners import find_owner_reference
from ..utils.secrets import get_secret_data
from .errors import InvalidControlPlaneError, KubeconfigMissingError, OwnerNotFoundError
from .result import Result

logger = logging.getLogger(__name__)


def kubeconfig_secret_ref(install: dict[str, Any]) -> str | None:
    """Name of the admin kubeconfig secret recorded on an install, if any."""
    cluster_metadata = install.get("spec", {}).get("clusterMetadata") or {}
    return (cluster_metadata.get("adminKubeconfigSecretRef") or {}).get("name") or None


def is_installed(install: dict[str, Any]) -> bool:
    """Whether the install moved on to adding hosts, i.e. the control plane is up."""
    debug_info = install.get("status", {}).get("debugInfo") or {}
    return debug_info.get("state") == INSTALL_STATE_ADDING_HOSTS


class InstallStatusBridge:
    """Bridges install credentials and completion back to the owning control plane.

    Status flags on the control plane only ever move from false to true. A
    flag that is already set is left untouched, so repeated deliveries are
    no-ops.
    """

    def __init__(self, store: ObjectStore):
        self.store = store

    def reconcile(self, namespace: str, name: str) -> Result:
        """Reconcile the AgentClusterInstall ``namespace/name``.

        Raises:
            StoreError: On conflicts and unexpected store errors
            ReconcileError: On inconsistent state
        """
        try:
            install = self.store.get(AGENT_CLUSTER_INSTALL, namespace, name)
        except NotFoundError:
            logger.debug(f"AgentClusterInstall {namespace}/{name} not found, nothing to do")
            return Result.done()

        control_plane = self._get_owner_control_plane(install)
        events = []

        control_plane, secret_name = self._bridge_kubeconfig(install, control_plane)
        if secret_name is not None:
            events.append((EVENT_REASON_KUBECONFIG_BRIDGED, f"Kubeconfig available in secret {secret_name}"))

        if is_installed(install) and not self._status_flag(control_plane, "ready"):
            control_plane = self._set_status_flag(control_plane, "ready")
            events.append((EVENT_REASON_CONTROL_PLANE_READY, "Control plane installed"))

        return Result.done(*events)

    def _get_owner_control_plane(self, install: dict[str, Any]) -> dict[str, Any]:
        meta = install["metadata"]
        ref = find_owner_reference(install, AGENT_CONTROL_PLANE, controller_only=True)
        if ref is None:
            raise OwnerNotFoundError(f"AgentClusterInstall {meta['namespace']}/{meta['name']} has no AgentControlPlane owner")
        try:
            return self.store.get(AGENT_CONTROL_PLANE, meta["namespace"], ref["name"])
        except NotFoundError as e:
            raise OwnerNotFoundError(
                f"AgentControlPlane {meta['namespace']}/{ref['name']} owning AgentClusterInstall {meta['name']} not found"
            ) from e

    def _bridge_kubeconfig(
        self,
        install: dict[str, Any],
        control_plane: dict[str, Any],
    ) -> tuple[dict[str, Any], str | None]:
        """Copy the install's admin kubeconfig into the Cluster API kubeconfig secret.

        Returns:
            The (possibly updated) control plane, and the name of the kubeconfig
            secret if this call marked the control plane initialized
        """
        source_name = kubeconfig_secret_ref(install)
        if source_name is None:
            return control_plane, None

        cp_meta = control_plane["metadata"]
        namespace = cp_meta["namespace"]
        try:
            source = self.store.get(SECRET, namespace, source_name)
        except NotFoundError as e:
            raise KubeconfigMissingError(
                f"Admin kubeconfig secret {namespace}/{source_name} referenced by "
                f"AgentClusterInstall {install['metadata']['name']} not found"
            ) from e

        cluster_name = (cp_meta.get("labels") or {}).get(LABEL_CLUSTER_NAME)
        if not cluster_name:
            raise InvalidControlPlaneError(f"AgentControlPlane {cp_meta['name']} has no {LABEL_CLUSTER_NAME} label")

        labels = source.setdefault("metadata", {}).get("labels") or {}
        if labels.get(LABEL_CLUSTER_NAME) != cluster_name:
            labels[LABEL_CLUSTER_NAME] = cluster_name
            source["metadata"]["labels"] = labels
            source = self.store.update(SECRET, source)

        kubeconfig = get_secret_data(source, KUBECONFIG_SOURCE_KEY)
        if kubeconfig is None:
            raise KubeconfigMissingError(
                f"Secret {namespace}/{source_name} has no {KUBECONFIG_SOURCE_KEY} key"
            )

        desired = build_kubeconfig_secret(cluster_name, namespace, kubeconfig, control_plane)
        self._ensure_kubeconfig_secret(desired)

        if self._status_flag(control_plane, "initialized"):
            return control_plane, None
        control_plane = self._set_status_flag(control_plane, "initialized")
        return control_plane, desired["metadata"]["name"]

    def _ensure_kubeconfig_secret(self, desired: dict[str, Any]) -> None:
        """Create the kubeconfig secret, or bring an existing one up to date."""
        meta = desired["metadata"]
        try:
            existing = self.store.get(SECRET, meta["namespace"], meta["name"])
        except NotFoundError:
            try:
                self.store.create(SECRET, desired)
                metrics.resources_created_total.labels(kind=SECRET.kind).inc()
                logger.info(f"Created kubeconfig secret {meta['namespace']}/{meta['name']}")
            except AlreadyExistsError:
                # Created concurrently since the lookup
                self.store.update(SECRET, desired)
                logger.info(f"Replaced kubeconfig secret {meta['namespace']}/{meta['name']}")
            return

        existing_meta = existing.setdefault("metadata", {})
        existing_labels = existing_meta.get("labels") or {}
        if existing.get("data") == desired["data"] and all(
            existing_labels.get(key) == value for key, value in meta["labels"].items()
        ):
            return

        existing["data"] = desired["data"]
        existing_meta["labels"] = {**existing_labels, **meta["labels"]}
        if not existing_meta.get("ownerReferences"):
            existing_meta["ownerReferences"] = meta["ownerReferences"]
        self.store.update(SECRET, existing)
        logger.info(f"Updated stale kubeconfig secret {meta['namespace']}/{meta['name']}")

    @staticmethod
    def _status_flag(control_plane: dict[str, Any], flag: str) -> bool:
        return bool((control_plane.get("status") or {}).get(flag))

    def _set_status_flag(self, control_plane: dict[str, Any], flag: str) -> dict[str, Any]:
        """Set a status flag to true and persist it through the status subresource."""
        status = control_plane.get("status") or {}
        status[flag] = True
        control_plane["status"] = status
        updated = self.store.update_status(AGENT_CONTROL_PLANE, control_plane)
        metrics.control_plane_transitions_total.labels(transition=flag).inc()
        logger.info(f"AgentControlPlane {control_plane['metadata']['namespace']}/{control_plane['metadata']['name']} {flag}")
        return updated
