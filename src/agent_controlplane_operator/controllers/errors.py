"""Errors reported by the reconcilers for inconsistent cluster state."""


class ReconcileError(Exception):
    """Base class for state inconsistencies found during reconciliation."""


class OwnerNotFoundError(ReconcileError):
    """An object has no resolvable owner of the expected kind."""


class InvalidControlPlaneError(ReconcileError):
    """An AgentControlPlane lacks configuration needed to proceed."""


class KubeconfigMissingError(ReconcileError):
    """The admin kubeconfig referenced by an install cannot be read."""


class InstallAlreadyExistsError(ReconcileError):
    """An AgentClusterInstall exists for a ClusterDeployment that does not reference one."""
