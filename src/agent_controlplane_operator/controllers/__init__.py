"""Reconcilers bridging Cluster API control planes and agent based installs."""

from .deployment_linker import DeploymentLinker
from .errors import (
    InstallAlreadyExistsError,
    InvalidControlPlaneError,
    KubeconfigMissingError,
    OwnerNotFoundError,
    ReconcileError,
)
from .install_status_bridge import InstallStatusBridge
from .result import Result

__all__ = [
    "DeploymentLinker",
    "InstallStatusBridge",
    "Result",
    "ReconcileError",
    "OwnerNotFoundError",
    "InvalidControlPlaneError",
    "KubeconfigMissingError",
    "InstallAlreadyExistsError",
]
