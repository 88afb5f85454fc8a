"""Operator configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class OperatorConfig:
    """Runtime settings of the operator."""

    metrics_port: int = 8080
    log_level: str = "INFO"
    request_timeout: float = 30.0
    max_workers: int = 4
    conflict_retry_delay: float = 1.0

    @classmethod
    def from_env(cls) -> OperatorConfig:
        """Build the configuration from environment variables.

        Environment Variables:
            METRICS_PORT: Port for /metrics, /healthz and /readyz (default: 8080)
            LOG_LEVEL: Root log level (default: INFO)
            K8S_REQUEST_TIMEOUT_SECONDS: API request timeout (default: 30)
            MAX_WORKERS: Thread pool size for sync handlers (default: 4)
            CONFLICT_RETRY_DELAY_SECONDS: Requeue delay after a write conflict (default: 1)
        """
        return cls(
            metrics_port=int(os.getenv("METRICS_PORT", "8080")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            request_timeout=float(os.getenv("K8S_REQUEST_TIMEOUT_SECONDS", "30.0")),
            max_workers=int(os.getenv("MAX_WORKERS", "4")),
            conflict_retry_delay=float(os.getenv("CONFLICT_RETRY_DELAY_SECONDS", "1.0")),
        )
