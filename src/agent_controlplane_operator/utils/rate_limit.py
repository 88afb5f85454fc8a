"""Rate limiting utilities for API calls."""

from __future__ import annotations

import os
import threading
import time
from functools import wraps
from typing import Any, Callable, TypeVar

from .. import metrics

_F = TypeVar("_F", bound=Callable[..., Any])

# Rate limit configuration
_K8S_RATE_LIMIT_PER_SECOND = float(os.getenv("K8S_RATE_LIMIT_PER_SECOND", "10.0"))

# Track last call time, shared by all kopf worker threads
_k8s_last_call_time: float = 0.0
_k8s_lock = threading.Lock()


def rate_limit_k8s(func: _F) -> _F:
    """Decorator to rate limit Kubernetes API calls.

    Spaces calls at least ``1 / K8S_RATE_LIMIT_PER_SECOND`` seconds apart so
    bursts of reconciles do not overwhelm the API server. A non-positive rate
    disables throttling.
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        global _k8s_last_call_time
        if _K8S_RATE_LIMIT_PER_SECOND > 0:
            min_interval = 1.0 / _K8S_RATE_LIMIT_PER_SECOND
            with _k8s_lock:
                time_since_last_call = time.time() - _k8s_last_call_time
                if time_since_last_call < min_interval:
                    metrics.rate_limit_hits_total.labels(api_type="k8s").inc()
                    time.sleep(min_interval - time_since_last_call)
                _k8s_last_call_time = time.time()
        return func(*args, **kwargs)

    return wrapper  # type: ignore
