"""Base handler class with common functionality for all kopf handlers."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

import kopf

from .. import metrics
from ..config import OperatorConfig
from ..constants import CONTROLLER_NAME
from ..controllers.result import Result
from ..logging import log_resource_event
from ..services.kube.errors import ConflictError
from ..tracing import trace_span
from ..utils.errors import sanitize_exception
from ..utils.events import emit_event, emit_reconcile_failed


class BaseHandler:
    """Base class for handlers driving a reconciler from kopf."""

    def __init__(self, kind: str, conflict_retry_delay: float | None = None):
        """Initialize base handler.

        Args:
            kind: The Kubernetes resource kind (e.g., "ClusterDeployment")
            conflict_retry_delay: Seconds to wait before retrying after a write conflict,
                defaults to CONFLICT_RETRY_DELAY_SECONDS from the environment
        """
        self.kind = kind
        if conflict_retry_delay is None:
            conflict_retry_delay = OperatorConfig.from_env().conflict_retry_delay
        self.conflict_retry_delay = conflict_retry_delay
        self.logger = logging.getLogger(__name__)

    def _get_resource_context(self, meta: dict[str, Any]) -> dict[str, Any]:
        """Extract common resource context from metadata."""
        return {
            "name": meta.get("name", "unknown"),
            "namespace": meta.get("namespace", "default"),
            "uid": meta.get("uid", "unknown"),
        }

    def _log(
        self,
        level: int,
        meta: dict[str, Any],
        message: str,
        event: str,
        reason: str,
        **kwargs: Any,
    ) -> None:
        ctx = self._get_resource_context(meta)
        log_resource_event(
            self.logger,
            controller=CONTROLLER_NAME,
            resource_kind=self.kind,
            resource_name=ctx["name"],
            namespace=ctx["namespace"],
            uid=ctx["uid"],
            event=event,
            reason=reason,
            message=message,
            level=level,
            **kwargs,
        )

    def log_info(
        self,
        meta: dict[str, Any],
        message: str,
        event: str = "info",
        reason: str = "Info",
        **kwargs: Any,
    ) -> None:
        """Log an info-level structured log message."""
        self._log(logging.INFO, meta, message, event, reason, **kwargs)

    def log_warning(
        self,
        meta: dict[str, Any],
        message: str,
        event: str = "warning",
        reason: str = "Warning",
        **kwargs: Any,
    ) -> None:
        """Log a warning-level structured log message."""
        self._log(logging.WARNING, meta, message, event, reason, **kwargs)

    def log_error(
        self,
        meta: dict[str, Any],
        message: str,
        error: Exception | None = None,
        event: str = "error",
        reason: str = "Error",
        **kwargs: Any,
    ) -> None:
        """Log an error-level structured log message.

        Args:
            meta: Kubernetes resource metadata
            message: Log message
            error: Optional exception to include sanitized error details
            event: Event type (default: "error")
            reason: Reason for the event (default: "Error")
            **kwargs: Additional fields to include in the log
        """
        log_data = kwargs.copy()
        if error is not None:
            log_data["error"] = sanitize_exception(error)
            log_data["error_type"] = type(error).__name__
        self._log(logging.ERROR, meta, message, event, reason, **log_data)

    def reconcile_with_metrics(
        self,
        body: dict[str, Any],
        reconcile_fn: Callable[[], Result],
    ) -> Result:
        """Execute a reconcile with tracing, metrics, events and error handling.

        Write conflicts and requested requeues are turned into
        ``kopf.TemporaryError`` with the matching delay; any other error is
        logged, reported as an event and re-raised for kopf's backoff.

        Args:
            body: Body of the object that triggered the reconcile
            reconcile_fn: Function running the reconcile

        Returns:
            The reconcile result
        """
        meta = body.get("metadata", {})
        metrics.reconcile_total.labels(kind=self.kind, result="started").inc()

        start_time = time.time()
        try:
            with trace_span(f"reconcile_{self.kind.lower()}", kind=self.kind, attributes={"resource.name": meta.get("name", "")}):
                result = reconcile_fn()
        except ConflictError as e:
            metrics.reconcile_total.labels(kind=self.kind, result="conflict").inc()
            self.log_warning(meta, f"Write conflict, retrying: {e}", reason="Conflict")
            raise kopf.TemporaryError(str(e), delay=self.conflict_retry_delay) from e
        except Exception as e:
            sanitized_error = sanitize_exception(e)
            metrics.error_total.labels(kind=self.kind, error_type=type(e).__name__).inc()
            self.log_error(meta, "Reconciliation failed", error=e, reason="ReconciliationFailed")
            emit_reconcile_failed(body, f"Reconciliation failed: {sanitized_error}")
            metrics.reconcile_total.labels(kind=self.kind, result="error").inc()
            raise
        finally:
            duration = time.time() - start_time
            metrics.reconcile_duration_seconds.labels(kind=self.kind).observe(duration)

        for reason, message in result.events:
            emit_event(body, reason, message)
            self.log_info(meta, message, event="reconciled", reason=reason)

        if result.requeue:
            metrics.reconcile_total.labels(kind=self.kind, result="requeued").inc()
            message = result.events[0][1] if result.events else "Requeued"
            raise kopf.TemporaryError(message, delay=result.requeue_after)

        metrics.reconcile_total.labels(kind=self.kind, result="success").inc()
        return result
