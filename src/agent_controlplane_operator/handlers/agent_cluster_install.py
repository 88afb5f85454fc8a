"""Handlers for AgentClusterInstall changes."""

from __future__ import annotations

import os
from typing import Any

import kopf

from ..constants import KIND_AGENT_CLUSTER_INSTALL
from ..controllers.install_status_bridge import InstallStatusBridge
from ..controllers.result import Result
from ..resources import AGENT_CLUSTER_INSTALL
from .base import BaseHandler

RESYNC_INTERVAL_SECONDS = float(os.getenv("RESYNC_INTERVAL_SECONDS", "300"))


class AgentClusterInstallHandler(BaseHandler):
    """Runs the InstallStatusBridge for AgentClusterInstalls."""

    def __init__(self):
        super().__init__(KIND_AGENT_CLUSTER_INSTALL)

    def reconcile(self, bridge: InstallStatusBridge, body: dict[str, Any], namespace: str, name: str) -> Result:
        return self.reconcile_with_metrics(body, lambda: bridge.reconcile(namespace, name))


# Global handler instance
_handler = AgentClusterInstallHandler()


@kopf.on.create(AGENT_CLUSTER_INSTALL.api_version, AGENT_CLUSTER_INSTALL.kind)
@kopf.on.update(AGENT_CLUSTER_INSTALL.api_version, AGENT_CLUSTER_INSTALL.kind)
@kopf.on.resume(AGENT_CLUSTER_INSTALL.api_version, AGENT_CLUSTER_INSTALL.kind)
def handle_agent_cluster_install(
    body: kopf.Body,
    name: str,
    namespace: str,
    memo: kopf.Memo,
    **kwargs: Any,
) -> None:
    """Handle AgentClusterInstall reconciliation."""
    _handler.reconcile(memo.install_status_bridge, dict(body), namespace, name)


@kopf.on.field(AGENT_CLUSTER_INSTALL.api_version, AGENT_CLUSTER_INSTALL.kind, field="status.debugInfo.state")
def handle_agent_cluster_install_state(
    body: kopf.Body,
    name: str,
    namespace: str,
    memo: kopf.Memo,
    **kwargs: Any,
) -> None:
    """Handle install state changes reported by the install service."""
    _handler.reconcile(memo.install_status_bridge, dict(body), namespace, name)


@kopf.timer(AGENT_CLUSTER_INSTALL.api_version, AGENT_CLUSTER_INSTALL.kind, interval=RESYNC_INTERVAL_SECONDS, idle=RESYNC_INTERVAL_SECONDS)
def resync_agent_cluster_install(
    body: kopf.Body,
    name: str,
    namespace: str,
    memo: kopf.Memo,
    **kwargs: Any,
) -> None:
    """Periodically re-run the AgentClusterInstall reconcile."""
    _handler.reconcile(memo.install_status_bridge, dict(body), namespace, name)
