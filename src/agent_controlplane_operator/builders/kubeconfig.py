"""Builder for the Cluster API kubeconfig secret."""

from __future__ import annotations

from typing import Any

from ..constants import CLUSTER_SECRET_TYPE, KUBECONFIG_TARGET_KEY, LABEL_CLUSTER_NAME
from ..resources import SECRET
from ..utils.owners import controller_owner_reference
from ..utils.secrets import kubeconfig_secret_name


def build_kubeconfig_secret(
    cluster_name: str,
    namespace: str,
    encoded_kubeconfig: str,
    control_plane: dict[str, Any],
) -> dict[str, Any]:
    """Build the ``<cluster-name>-kubeconfig`` secret Cluster API polls for.

    Args:
        cluster_name: Name of the Cluster API cluster
        namespace: Namespace of the secret
        encoded_kubeconfig: Base64 encoded kubeconfig, copied as is
        control_plane: Owning AgentControlPlane body

    Returns:
        Secret body
    """
    return {
        "apiVersion": SECRET.api_version,
        "kind": SECRET.kind,
        "metadata": {
            "name": kubeconfig_secret_name(cluster_name),
            "namespace": namespace,
            "labels": {LABEL_CLUSTER_NAME: cluster_name},
            "ownerReferences": [controller_owner_reference(control_plane)],
        },
        "type": CLUSTER_SECRET_TYPE,
        "data": {KUBECONFIG_TARGET_KEY: encoded_kubeconfig},
    }
