"""Errors raised by object store implementations."""

from __future__ import annotations

from ...resources import ResourceType


class StoreError(Exception):
    """Base class for object store errors."""

    def __init__(self, resource: ResourceType, namespace: str | None, name: str | None, message: str = ""):
        self.resource = resource
        self.namespace = namespace
        self.name = name
        super().__init__(message or f"{resource.kind} {namespace}/{name}")


class NotFoundError(StoreError):
    """The requested object does not exist."""

    def __init__(self, resource: ResourceType, namespace: str | None, name: str | None):
        super().__init__(resource, namespace, name, f"{resource.kind} {namespace}/{name} not found")


class AlreadyExistsError(StoreError):
    """An object with the same name already exists."""

    def __init__(self, resource: ResourceType, namespace: str | None, name: str | None):
        super().__init__(resource, namespace, name, f"{resource.kind} {namespace}/{name} already exists")


class ConflictError(StoreError):
    """The object was modified since it was read (resourceVersion mismatch)."""

    def __init__(self, resource: ResourceType, namespace: str | None, name: str | None):
        super().__init__(
            resource,
            namespace,
            name,
            f"{resource.kind} {namespace}/{name} was modified concurrently",
        )
