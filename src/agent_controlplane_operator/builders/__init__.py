"""Builders turning control plane configuration into derived object bodies."""

from .install import (
    build_agent_cluster_install,
    build_cluster_image_set,
    build_cluster_install_ref,
    build_networking,
)
from .kubeconfig import build_kubeconfig_secret

__all__ = [
    "build_agent_cluster_install",
    "build_cluster_image_set",
    "build_cluster_install_ref",
    "build_networking",
    "build_kubeconfig_secret",
]
