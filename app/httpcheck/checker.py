"""Single-shot HTTP health checker.

Issue one GET request against an endpoint with finite timeouts and reduce
the configured response conditions to a boolean verdict. Transport failures
never escape: they are logged and reported as unhealthy.

Example:
    >>> with HealthChecker(
    ...     "http://127.0.0.1:8000/health",
    ...     {"status_code_equals_to": 200, "body_contains": "ok"},
    ...     {"headers": {"Accept": "application/json"}, "timeout": 3},
    ... ) as checker:
    ...     checker.is_healthy()
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Optional, Protocol

import httpx

from .conditions import HealthConditions, HttpResponse
from .core.logging_config import get_logger
from .exceptions import InvalidInput

logger = get_logger(__name__)

# Seconds, applied independently to each timeout option.
DEFAULT_TIMEOUT = 10

TIMEOUT_OPTIONS = ("connect_timeout", "read_timeout", "timeout")


class HttpClient(Protocol):
    """Anything able to perform a GET and return a status code and body.

    ``httpx.Client`` and FastAPI's ``TestClient`` both satisfy it. Non-2xx
    responses must be returned, not raised; only transport problems raise.
    """

    def get(self, url: str, **kwargs: Any) -> HttpResponse: ...


def grant_finite_timeout(options: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``options`` with every timeout option set.

    A timeout the caller left out, or set to None, falls back to
    DEFAULT_TIMEOUT. Nothing else is defaulted.
    """
    granted = dict(options)
    for key in TIMEOUT_OPTIONS:
        if granted.get(key) is None:
            granted[key] = DEFAULT_TIMEOUT
    return granted


def build_timeout(options: Mapping[str, Any]) -> httpx.Timeout:
    """Combine the granted timeout options into a single ``httpx.Timeout``.

    An ``httpx.Timeout`` given as the ``timeout`` option is used unchanged;
    ``connect_timeout`` and ``read_timeout`` are then ignored.

    Raises:
        InvalidInput: If a timeout option is not a number of seconds.
    """
    if isinstance(options["timeout"], httpx.Timeout):
        return options["timeout"]

    for key in TIMEOUT_OPTIONS:
        value = options[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidInput(
                f"Timeout option '{key}' must be a number of seconds, got {value!r}."
            )

    return httpx.Timeout(
        options["timeout"],
        connect=options["connect_timeout"],
        read=options["read_timeout"],
    )


class HealthChecker:
    """Probe an HTTP endpoint and decide whether it is healthy.

    The checker is positive by default: with no conditions configured, any
    completed HTTP exchange counts as healthy, whatever its status code.

    ``timeout`` bounds each phase of the request, not its total duration:
    it becomes the write and pool timeout, while ``connect_timeout`` and
    ``read_timeout`` bound connecting and each individual read. A server
    trickling its body in small chunks can keep a probe running past
    ``timeout``.

    Args:
        endpoint_url: URL of the endpoint to probe.
        conditions: Optional mapping with ``status_code_equals_to`` and/or
            ``body_contains``.
        options: Optional request options passed through to ``client.get``
            (headers, params, cookies, auth, follow_redirects...). The
            ``connect_timeout``, ``read_timeout`` and ``timeout`` keys are
            always present after construction. ``timeout`` may also be an
            ``httpx.Timeout``, which is used as is.
        client: HTTP client to issue the request with. When omitted, the
            checker creates and owns an ``httpx.Client``.

    Raises:
        InvalidInput: If the URL is not a string, or the conditions or
            options are malformed.
    """

    def __init__(
        self,
        endpoint_url: str,
        conditions: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
        *,
        client: Optional[HttpClient] = None,
    ) -> None:
        if not isinstance(endpoint_url, str):
            raise InvalidInput("An endpoint URL must be provided.")

        self._conditions = HealthConditions.from_mapping(conditions)

        if options is not None and not isinstance(options, Mapping):
            raise InvalidInput("Request options must be a mapping.")

        self._endpoint_url = endpoint_url
        self._raw_conditions = MappingProxyType(dict(conditions or {}))
        self._options = MappingProxyType(grant_finite_timeout(options or {}))
        self._timeout = build_timeout(self._options)

        self._owned_client: Optional[httpx.Client] = httpx.Client() if client is None else None
        self._client: HttpClient = client if client is not None else self._owned_client

    @property
    def endpoint_url(self) -> str:
        return self._endpoint_url

    @property
    def conditions(self) -> Mapping[str, Any]:
        """The conditions as provided by the caller (read-only)."""
        return self._raw_conditions

    @property
    def options(self) -> Mapping[str, Any]:
        """Effective request options, timeouts included (read-only)."""
        return self._options

    def _request_kwargs(self) -> dict[str, Any]:
        """Translate the effective options into ``client.get`` keyword arguments."""
        kwargs = {k: v for k, v in self._options.items() if k not in TIMEOUT_OPTIONS}
        kwargs["timeout"] = self._timeout
        return kwargs

    def is_healthy(self) -> bool:
        """Determine whether the endpoint is healthy.

        Returns:
            False if the request failed at the transport level or any
            configured condition is unmet, True otherwise.
        """
        log = logger.bind(endpoint_url=self._endpoint_url)
        log.debug("Issuing health probe", conditions_configured=not self._conditions.is_empty)

        try:
            response = self._client.get(self._endpoint_url, **self._request_kwargs())
        except Exception as exc:
            log.warning(
                "Health probe transport failure",
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return False

        failed = self._conditions.failed_conditions(response)
        if failed:
            log.info(
                "Health probe conditions not met",
                failed_conditions=failed,
                status_code=response.status_code,
            )

        healthy = not failed
        log.debug("Health probe completed", healthy=healthy, status_code=response.status_code)
        return healthy

    is_alive = is_healthy

    def close(self) -> None:
        """Release the HTTP client if this checker created it."""
        if self._owned_client is not None:
            self._owned_client.close()

    def __enter__(self) -> 'HealthChecker':
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
