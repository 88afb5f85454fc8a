"""Kubernetes object store access."""

from .base import ObjectStore
from .client import KubeObjectStore
from .errors import AlreadyExistsError, ConflictError, NotFoundError, StoreError

__all__ = [
    "ObjectStore",
    "KubeObjectStore",
    "StoreError",
    "NotFoundError",
    "AlreadyExistsError",
    "ConflictError",
]
