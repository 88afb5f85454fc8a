"""Handler modules for the watched resources."""

# Import handlers to register them - all handlers register themselves via @kopf decorators
from . import agent_cluster_install  # noqa: F401
from . import cluster_deployment  # noqa: F401
