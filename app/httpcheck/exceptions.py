"""Exception hierarchy for the httpcheck package.

Only construction-time input errors are surfaced to callers. Transport
failures raised by the HTTP client are absorbed by the checker and turned
into an unhealthy verdict, so they have no counterpart here.
"""


class HealthCheckError(Exception):
    """Base class for all errors raised by httpcheck."""


class InvalidInput(HealthCheckError, ValueError):
    """Raised when a HealthChecker is constructed with invalid arguments.

    Subclasses ``ValueError`` so callers that already guard configuration
    parsing with ``except ValueError`` keep working.
    """
