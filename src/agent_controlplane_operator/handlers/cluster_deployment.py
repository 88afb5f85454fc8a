"""Handlers for ClusterDeployment and AgentControlPlane changes."""

from __future__ import annotations

import os
from typing import Any

import kopf

from ..constants import KIND_AGENT_CONTROL_PLANE, KIND_CLUSTER_DEPLOYMENT
from ..controllers.deployment_linker import DeploymentLinker
from ..controllers.result import Result
from ..resources import AGENT_CONTROL_PLANE, CLUSTER_DEPLOYMENT, split_api_version
from .base import BaseHandler

RESYNC_INTERVAL_SECONDS = float(os.getenv("RESYNC_INTERVAL_SECONDS", "300"))


def referenced_cluster_deployment(spec: dict[str, Any], namespace: str) -> tuple[str, str] | None:
    """Namespace and name of the ClusterDeployment an AgentControlPlane spec references."""
    ref = (spec.get("agentConfigSpec") or {}).get("clusterDeploymentRef") or {}
    group, _ = split_api_version(ref.get("apiVersion", ""))
    if group != CLUSTER_DEPLOYMENT.group or ref.get("kind") != CLUSTER_DEPLOYMENT.kind or not ref.get("name"):
        return None
    return ref.get("namespace") or namespace, ref["name"]


class ClusterDeploymentHandler(BaseHandler):
    """Runs the DeploymentLinker for ClusterDeployments."""

    def __init__(self, kind: str = KIND_CLUSTER_DEPLOYMENT):
        super().__init__(kind)

    def reconcile(self, linker: DeploymentLinker, body: dict[str, Any], namespace: str, name: str) -> Result:
        """Reconcile the ClusterDeployment ``namespace/name`` on behalf of ``body``."""
        return self.reconcile_with_metrics(body, lambda: linker.reconcile(namespace, name))


# Global handler instances
_handler = ClusterDeploymentHandler()
_control_plane_handler = ClusterDeploymentHandler(KIND_AGENT_CONTROL_PLANE)


@kopf.on.create(CLUSTER_DEPLOYMENT.api_version, CLUSTER_DEPLOYMENT.kind)
@kopf.on.update(CLUSTER_DEPLOYMENT.api_version, CLUSTER_DEPLOYMENT.kind)
@kopf.on.resume(CLUSTER_DEPLOYMENT.api_version, CLUSTER_DEPLOYMENT.kind)
def handle_cluster_deployment(
    body: kopf.Body,
    name: str,
    namespace: str,
    memo: kopf.Memo,
    **kwargs: Any,
) -> None:
    """Handle ClusterDeployment reconciliation."""
    _handler.reconcile(memo.deployment_linker, dict(body), namespace, name)


@kopf.timer(CLUSTER_DEPLOYMENT.api_version, CLUSTER_DEPLOYMENT.kind, interval=RESYNC_INTERVAL_SECONDS, idle=RESYNC_INTERVAL_SECONDS)
def resync_cluster_deployment(
    body: kopf.Body,
    name: str,
    namespace: str,
    memo: kopf.Memo,
    **kwargs: Any,
) -> None:
    """Periodically re-run the ClusterDeployment reconcile."""
    _handler.reconcile(memo.deployment_linker, dict(body), namespace, name)


@kopf.on.create(AGENT_CONTROL_PLANE.api_version, AGENT_CONTROL_PLANE.kind)
@kopf.on.update(AGENT_CONTROL_PLANE.api_version, AGENT_CONTROL_PLANE.kind)
@kopf.on.resume(AGENT_CONTROL_PLANE.api_version, AGENT_CONTROL_PLANE.kind)
def handle_agent_control_plane(
    body: kopf.Body,
    spec: kopf.Spec,
    namespace: str,
    memo: kopf.Memo,
    **kwargs: Any,
) -> None:
    """Reconcile the ClusterDeployment an AgentControlPlane references."""
    target = referenced_cluster_deployment(dict(spec), namespace)
    if target is None:
        return
    cd_namespace, cd_name = target
    _control_plane_handler.reconcile(memo.deployment_linker, dict(body), cd_namespace, cd_name)
