"""Test configuration and shared fixtures.

Provide isolated probe settings, a FastAPI application acting as the probed
upstream service, and HTTP client fixtures. All fixtures ensure tests run
without network access, environment files or secrets.
"""
from typing import Callable, Generator
from unittest import mock

import httpx
import pytest
import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from fastapi.testclient import TestClient

from httpcheck.config import Settings

UPSTREAM_BASE_URL = "http://upstream"

# ==============================================================================
# UPSTREAM SERVICE
# ==============================================================================

upstream_app = FastAPI(title="Probed upstream")


@upstream_app.get("/health")
async def upstream_health() -> dict[str, str]:
    return {"status": "ok"}


@upstream_app.get("/health/ready")
async def upstream_not_ready() -> dict[str, str]:
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="System is starting up",
    )


@upstream_app.get("/lorem", response_class=PlainTextResponse)
async def upstream_lorem() -> str:
    return "Lorem ipsum dolor $it amet"


@upstream_app.get("/moved")
async def upstream_moved() -> RedirectResponse:
    return RedirectResponse(url="/health", status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@upstream_app.get("/headers")
async def upstream_headers(request: Request) -> dict[str, str]:
    return dict(request.headers)


@upstream_app.get("/boom")
async def upstream_boom() -> dict[str, str]:
    raise RuntimeError("upstream exploded")


# ==============================================================================
# CLIENT FIXTURES
# ==============================================================================

@pytest.fixture(scope="function")
def upstream_client() -> Generator[TestClient, None, None]:
    """Provide an HTTP client wired to the in-process upstream service.

    Yields:
        TestClient: httpx-compatible client injected into health checkers.
    """
    with TestClient(upstream_app, base_url=UPSTREAM_BASE_URL) as test_client:
        yield test_client


@pytest.fixture
def failing_client() -> Generator[httpx.Client, None, None]:
    """Provide an httpx client whose transport refuses every connection.

    Yields:
        httpx.Client: Client raising httpx.ConnectError on each request.
    """
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    with httpx.Client(transport=httpx.MockTransport(refuse)) as client:
        yield client


@pytest.fixture
def stub_client() -> Callable[..., mock.Mock]:
    """Provide a factory for mocked clients returning a canned response.

    Returns:
        Callable building a Mock whose ``get`` returns an httpx.Response
        with the given status code and body.
    """
    def build(status_code: int = 200, text: str = "") -> mock.Mock:
        client = mock.Mock(spec=["get"])
        client.get.return_value = httpx.Response(status_code, text=text)
        return client

    return build


# ==============================================================================
# CONFIGURATION FIXTURES
# ==============================================================================

@pytest.fixture
def mock_settings() -> Settings:
    """Provide isolated probe configuration pointing at the upstream service.

    Returns:
        Settings: Development configuration with file-based secrets disabled.
    """
    return Settings(
        ENVIRONMENT="development",
        LOG_LEVEL="debug",
        HEALTHCHECK_URL=f"{UPSTREAM_BASE_URL}/health",
        HEALTHCHECK_AUTH_TOKEN_FILE=None,
        _env_file=None  # Bypass local environment file
    )


# ==============================================================================
# MOCKING HELPERS
# ==============================================================================

@pytest.fixture
def mock_fs_open():
    """Provide mock for file system operations.

    Yields:
        Mock: Patched builtins.open to intercept file I/O during configuration tests.
    """
    with mock.patch("builtins.open", mock.mock_open()) as mock_file:
        yield mock_file


@pytest.fixture(autouse=True)
def clean_log_context() -> Generator[None, None, None]:
    """Drop context variables bound by a test so they do not leak into the next."""
    yield
    structlog.contextvars.clear_contextvars()
