"""Utility functions for the Agent Control Plane Operator."""

from .errors import sanitize_dict, sanitize_error_message, sanitize_exception
from .events import emit_event, emit_reconcile_failed
from .owners import controller_owner_reference, find_owner_reference, is_controlled_by
from .rate_limit import rate_limit_k8s
from .secrets import encode_secret_value, get_secret_data, kubeconfig_secret_name

__all__ = [
    "sanitize_dict",
    "sanitize_error_message",
    "sanitize_exception",
    "emit_event",
    "emit_reconcile_failed",
    "controller_owner_reference",
    "find_owner_reference",
    "is_controlled_by",
    "rate_limit_k8s",
    "encode_secret_value",
    "get_secret_data",
    "kubeconfig_secret_name",
]
