"""Utilities for Kubernetes secret bodies."""

from __future__ import annotations

import base64
from typing import Any

from ..constants import KUBECONFIG_SECRET_SUFFIX


def encode_secret_value(value: bytes | str) -> str:
    """Base64 encode a value for a secret's ``data`` map."""
    if isinstance(value, str):
        value = value.encode("utf-8")
    return base64.b64encode(value).decode("ascii")


def get_secret_data(secret: dict[str, Any], key: str) -> str | None:
    """Get the raw (base64 encoded) value stored under ``key``.

    Args:
        secret: Secret body
        key: Key in the secret's data

    Returns:
        Encoded value, or None if the key is absent
    """
    return (secret.get("data") or {}).get(key)


def kubeconfig_secret_name(cluster_name: str) -> str:
    """Name of the kubeconfig secret Cluster API looks up for a cluster."""
    return f"{cluster_name}-{KUBECONFIG_SECRET_SUFFIX}"
