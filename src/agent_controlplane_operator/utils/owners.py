"""Owner reference helpers."""

from __future__ import annotations

from typing import Any

from ..resources import ResourceType, split_api_version


def controller_owner_reference(owner: dict[str, Any]) -> dict[str, Any]:
    """Build a controller owner reference pointing at ``owner``.

    Args:
        owner: Owning object body (needs apiVersion, kind, metadata.name and metadata.uid)

    Returns:
        Owner reference dict with ``controller`` and ``blockOwnerDeletion`` set
    """
    metadata = owner.get("metadata", {})
    return {
        "apiVersion": owner["apiVersion"],
        "kind": owner["kind"],
        "name": metadata["name"],
        "uid": metadata.get("uid", ""),
        "controller": True,
        "blockOwnerDeletion": True,
    }


def find_owner_reference(
    obj: dict[str, Any],
    resource: ResourceType,
    controller_only: bool = False,
) -> dict[str, Any] | None:
    """Find the owner reference of ``obj`` pointing at a given resource type.

    Only the group is compared, not the version, so owners stored at another
    API version still match.

    Args:
        obj: Object body
        resource: Type of the owner to look for
        controller_only: Only consider references with ``controller: true``

    Returns:
        The matching owner reference or None
    """
    for ref in obj.get("metadata", {}).get("ownerReferences") or []:
        if ref.get("kind") != resource.kind:
            continue
        group, _ = split_api_version(ref.get("apiVersion", ""))
        if group != resource.group:
            continue
        if controller_only and not ref.get("controller"):
            continue
        return ref
    return None


def is_controlled_by(obj: dict[str, Any], owner: dict[str, Any]) -> bool:
    """Check whether ``obj`` has a controller reference to ``owner`` (matched by uid)."""
    owner_uid = owner.get("metadata", {}).get("uid")
    if not owner_uid:
        return False
    for ref in obj.get("metadata", {}).get("ownerReferences") or []:
        if ref.get("controller") and ref.get("uid") == owner_uid:
            return True
    return False
