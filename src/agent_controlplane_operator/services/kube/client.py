"""Kubernetes API backed object store."""

from __future__ import annotations

import json
import logging
import time
from functools import partial
from typing import Any, Callable

from kubernetes import client
from kubernetes.client.exceptions import ApiException

from ... import metrics
from ...constants import FIELD_MANAGER
from ...resources import ResourceType
from ...utils.rate_limit import rate_limit_k8s
from .errors import AlreadyExistsError, ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def _api_reason(e: ApiException) -> str | None:
    """Extract the ``reason`` field of a Kubernetes Status error body."""
    if not e.body:
        return None
    try:
        body = json.loads(e.body)
    except (TypeError, ValueError):
        return None
    if isinstance(body, dict):
        return body.get("reason")
    return None


class KubeObjectStore:
    """Object store talking to the Kubernetes API server.

    Custom resources go through ``CustomObjectsApi``; core resources (secrets)
    go through ``CoreV1Api`` and are converted to plain dicts so callers see
    the same representation for every kind.
    """

    def __init__(
        self,
        custom_api: client.CustomObjectsApi,
        core_api: client.CoreV1Api,
        request_timeout: float | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            custom_api: Client for custom resources
            core_api: Client for core resources
            request_timeout: Per-request timeout in seconds, None for the client default
        """
        self.custom_api = custom_api
        self.core_api = core_api
        self.request_timeout = request_timeout

    def get(self, resource: ResourceType, namespace: str, name: str) -> dict[str, Any]:
        """Get a single object."""
        if resource.is_core:
            call = partial(self.core_api.read_namespaced_secret, name=name, namespace=namespace)
        else:
            call = partial(
                self.custom_api.get_namespaced_custom_object,
                group=resource.group,
                version=resource.version,
                namespace=namespace,
                plural=resource.plural,
                name=name,
            )
        return self._to_dict(resource, self._call("get", resource, namespace, name, call))

    def list(self, resource: ResourceType, namespace: str) -> list[dict[str, Any]]:
        """List all objects of a type in a namespace."""
        if resource.is_core:
            call = partial(self.core_api.list_namespaced_secret, namespace=namespace)
        else:
            call = partial(
                self.custom_api.list_namespaced_custom_object,
                group=resource.group,
                version=resource.version,
                namespace=namespace,
                plural=resource.plural,
            )
        result = self._to_dict(resource, self._call("list", resource, namespace, None, call))
        return result.get("items") or []

    def create(self, resource: ResourceType, body: dict[str, Any]) -> dict[str, Any]:
        """Create an object and return the stored version."""
        namespace, name = self._identity(body)
        if resource.is_core:
            call = partial(
                self.core_api.create_namespaced_secret,
                namespace=namespace,
                body=body,
                field_manager=FIELD_MANAGER,
            )
        else:
            call = partial(
                self.custom_api.create_namespaced_custom_object,
                group=resource.group,
                version=resource.version,
                namespace=namespace,
                plural=resource.plural,
                body=body,
                field_manager=FIELD_MANAGER,
            )
        return self._to_dict(resource, self._call("create", resource, namespace, name, call))

    def update(self, resource: ResourceType, body: dict[str, Any]) -> dict[str, Any]:
        """Replace an object, conditional on ``metadata.resourceVersion`` when set."""
        namespace, name = self._identity(body)
        if resource.is_core:
            call = partial(
                self.core_api.replace_namespaced_secret,
                name=name,
                namespace=namespace,
                body=body,
                field_manager=FIELD_MANAGER,
            )
        else:
            call = partial(
                self.custom_api.replace_namespaced_custom_object,
                group=resource.group,
                version=resource.version,
                namespace=namespace,
                plural=resource.plural,
                name=name,
                body=body,
                field_manager=FIELD_MANAGER,
            )
        return self._to_dict(resource, self._call("update", resource, namespace, name, call))

    def update_status(self, resource: ResourceType, body: dict[str, Any]) -> dict[str, Any]:
        """Replace the status subresource of a custom object."""
        if resource.is_core:
            raise ValueError(f"status updates are not supported for {resource}")
        namespace, name = self._identity(body)
        call = partial(
            self.custom_api.replace_namespaced_custom_object_status,
            group=resource.group,
            version=resource.version,
            namespace=namespace,
            plural=resource.plural,
            name=name,
            body=body,
            field_manager=FIELD_MANAGER,
        )
        return self._to_dict(resource, self._call("update_status", resource, namespace, name, call))

    def _call(
        self,
        operation: str,
        resource: ResourceType,
        namespace: str,
        name: str | None,
        call: Callable[..., Any],
    ) -> Any:
        """Run an API call with rate limiting, metrics and error translation."""
        metric_operation = f"{operation}_{resource.plural}"
        kwargs = {}
        if self.request_timeout is not None:
            kwargs["_request_timeout"] = self.request_timeout
        start_time = time.time()
        try:
            result = rate_limit_k8s(call)(**kwargs)
            metrics.api_call_total.labels(api_type="k8s", operation=metric_operation, result="success").inc()
            return result
        except ApiException as e:
            metrics.api_call_total.labels(api_type="k8s", operation=metric_operation, result="error").inc()
            if e.status == 404:
                raise NotFoundError(resource, namespace, name) from e
            if e.status == 409:
                if _api_reason(e) == "AlreadyExists":
                    raise AlreadyExistsError(resource, namespace, name) from e
                raise ConflictError(resource, namespace, name) from e
            logger.warning(f"Kubernetes API {operation} on {resource} {namespace}/{name} failed: {e.status} {e.reason}")
            raise
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="k8s", operation=metric_operation).observe(duration)

    def _to_dict(self, resource: ResourceType, obj: Any) -> dict[str, Any]:
        """Convert a client model (core API) into a plain dict body."""
        if isinstance(obj, dict):
            return obj
        data = self.core_api.api_client.sanitize_for_serialization(obj)
        if isinstance(data, dict) and "metadata" in data:
            data.setdefault("apiVersion", resource.api_version)
            data.setdefault("kind", resource.kind)
        return data

    @staticmethod
    def _identity(body: dict[str, Any]) -> tuple[str, str]:
        metadata = body.get("metadata") or {}
        return metadata.get("namespace", ""), metadata.get("name", "")


def get_object_store(request_timeout: float | None = None) -> KubeObjectStore:
    """Build a :class:`KubeObjectStore` from in-cluster or local kube config.

    Args:
        request_timeout: Per-request timeout in seconds

    Returns:
        KubeObjectStore instance
    """
    from kubernetes import config

    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()

    api_client = client.ApiClient()
    return KubeObjectStore(
        client.CustomObjectsApi(api_client),
        client.CoreV1Api(api_client),
        request_timeout=request_timeout,
    )
