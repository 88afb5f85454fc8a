"""Object store interface."""

from __future__ import annotations

from typing import Any, Protocol

from ...resources import ResourceType


class ObjectStore(Protocol):
    """Protocol defining the object store operations the reconcilers use.

    Objects are plain dict bodies. Implementations raise
    :class:`~.errors.NotFoundError`, :class:`~.errors.AlreadyExistsError` and
    :class:`~.errors.ConflictError`; any other failure propagates unchanged.
    """

    def get(self, resource: ResourceType, namespace: str, name: str) -> dict[str, Any]:
        """Get a single object."""
        ...

    def list(self, resource: ResourceType, namespace: str) -> list[dict[str, Any]]:
        """List all objects of a type in a namespace."""
        ...

    def create(self, resource: ResourceType, body: dict[str, Any]) -> dict[str, Any]:
        """Create an object and return the stored version."""
        ...

    def update(self, resource: ResourceType, body: dict[str, Any]) -> dict[str, Any]:
        """Replace an object.

        When ``metadata.resourceVersion`` is set the update is conditional on
        it and fails with a conflict if the stored object changed.
        """
        ...

    def update_status(self, resource: ResourceType, body: dict[str, Any]) -> dict[str, Any]:
        """Replace the status subresource of an object."""
        ...
