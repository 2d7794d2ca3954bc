# app/httpcheck/__init__.py
"""
Public API for httpcheck.

Consumers construct a HealthChecker and call ``is_healthy()``. Condition
evaluation and the timeout merging helpers stay internal.
"""

from .checker import (
    DEFAULT_TIMEOUT,
    HealthChecker,
    HttpClient,
)
from .conditions import HttpResponse
from .exceptions import HealthCheckError, InvalidInput

__all__ = [
    "DEFAULT_TIMEOUT",
    "HealthChecker",
    "HttpClient",
    "HttpResponse",
    "HealthCheckError",
    "InvalidInput",
]
