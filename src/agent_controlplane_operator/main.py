"""Main entry point for the Agent Control Plane Operator."""

from __future__ import annotations

from typing import Any

import kopf

from . import handlers  # noqa: F401
from . import health
from . import logging as structured_logging
from . import tracing
from .config import OperatorConfig
from .controllers import DeploymentLinker, InstallStatusBridge
from .services.kube.client import get_object_store


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, memo: kopf.Memo, **_: Any) -> None:
    """Configure the operator and build the reconcilers."""
    config = OperatorConfig.from_env()

    structured_logging.setup_structured_logging(config.log_level)
    tracing.initialize_tracing()

    # Use annotations for progress so handler state never races status updates
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage()
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage()

    settings.posting.level = 0
    settings.networking.request_timeout = config.request_timeout
    settings.execution.max_workers = config.max_workers

    store = get_object_store(request_timeout=config.request_timeout)
    memo.config = config
    memo.deployment_linker = DeploymentLinker(store)
    memo.install_status_bridge = InstallStatusBridge(store)

    health.start_metrics_server(config.metrics_port)


def main() -> None:
    """Run the operator against all namespaces."""
    kopf.run(clusterwide=True)


if __name__ == "__main__":
    main()
