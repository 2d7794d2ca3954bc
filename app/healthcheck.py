"""HTTP health check probe for container orchestration.

Execute a single HTTP GET request against the configured health endpoint and
return an exit code suitable for container runtime health probes.

Exit Codes:
    0: Healthy - Request completed and every configured condition was met.
    1: Unhealthy - Connection failed, timed out, or a condition was not met.

Environment Variables:
    HEALTHCHECK_HOST: Target host address (default: 127.0.0.1).
    HEALTHCHECK_PORT: Target port number (default: 8000).
    HEALTHCHECK_PATH: Health endpoint path (default: /health).
    HEALTHCHECK_URL: Full endpoint URL, overriding host/port/path.
    HEALTHCHECK_STATUS_CODE_EQUALS_TO: Expected status code (default: 200, 0 disables).
    HEALTHCHECK_BODY_CONTAINS: Text the response body must contain.

See `httpcheck.config.Settings` for the complete list.
"""

import logging.config
import sys
import uuid
from typing import Optional

from httpcheck import HealthChecker, HttpClient
from httpcheck.config import Settings, get_settings
from httpcheck.core.logging_config import (
    bind_contextvars,
    clear_contextvars,
    configure_structlog_wrapper,
    get_logger,
    get_logging_config,
)

EXIT_HEALTHY = 0
EXIT_UNHEALTHY = 1


def main(settings: Optional[Settings] = None, client: Optional[HttpClient] = None) -> int:
    """Run one health probe and return the process exit code.

    Args:
        settings: Probe settings. Loaded from the environment when omitted.
        client: HTTP client override, mainly for tests.

    Returns:
        EXIT_HEALTHY or EXIT_UNHEALTHY.
    """
    settings = settings or get_settings()

    logging.config.dictConfig(get_logging_config(settings))
    configure_structlog_wrapper(settings)

    # Correlate every log line emitted during this probe run.
    clear_contextvars()
    bind_contextvars(probe_id=str(uuid.uuid4()))

    logger = get_logger("healthcheck")

    with HealthChecker(
        settings.ENDPOINT_URL,
        settings.build_conditions(),
        settings.build_request_options(),
        client=client,
    ) as checker:
        healthy = checker.is_healthy()

    if healthy:
        logger.info("Endpoint is healthy", endpoint_url=settings.ENDPOINT_URL)
        return EXIT_HEALTHY

    logger.error("Endpoint is unhealthy", endpoint_url=settings.ENDPOINT_URL)
    return EXIT_UNHEALTHY


if __name__ == "__main__":
    sys.exit(main())
