"""Probe configuration management via pydantic-settings.

Centralize the configuration parameters of the container health probe. Load
settings from environment variables and/or a `.env` file. Provide type
validation, default values, and dynamic construction of the probed endpoint
URL and of the request options handed to the health checker.
"""

from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import (
    Field,
    SecretStr,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Health probe configuration settings.

    Attributes:
        PROJECT_NAME: Display name for the probe.
        VERSION: Semantic version string.
        ENVIRONMENT: Deployment environment identifier.
        LOG_LEVEL: Minimum logging verbosity level.
        LOGGING_NOISY_MODULES: Loggers capped at WARNING level.
        HEALTHCHECK_SCHEME: Scheme of the probed endpoint.
        HEALTHCHECK_HOST: Target host address.
        HEALTHCHECK_PORT: Target port number.
        HEALTHCHECK_PATH: Path of the health endpoint on the target.
        HEALTHCHECK_URL: Full endpoint URL, overriding scheme/host/port/path.
        HEALTHCHECK_STATUS_CODE_EQUALS_TO: Expected status code (0 disables the check).
        HEALTHCHECK_BODY_CONTAINS: Literal text expected in the response body.
        HEALTHCHECK_TIMEOUT: Overall request timeout in seconds.
        HEALTHCHECK_CONNECT_TIMEOUT: Connection timeout in seconds.
        HEALTHCHECK_READ_TIMEOUT: Read timeout in seconds.
        HEALTHCHECK_HEADERS: Extra request headers (JSON object in the environment).
        HEALTHCHECK_FOLLOW_REDIRECTS: Whether redirects are followed.
        HEALTHCHECK_AUTH_TOKEN_FILE: Path to Docker secret containing a bearer token.
        HEALTHCHECK_AUTH_TOKEN: Environment variable fallback for the bearer token.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # ==========================================================================
    # PROJECT METADATA
    # ==========================================================================
    PROJECT_NAME: str = "http-health-check"
    VERSION: str = "0.1.0"

    # ==========================================================================
    # ENVIRONMENT & LOGGING
    # ==========================================================================
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    LOG_LEVEL: Literal["debug", "info", "warning", "error", "critical"] = "info"
    LOGGING_NOISY_MODULES: list[str] = [
        "httpx",
        "httpcore",
    ]

    # ==========================================================================
    # TARGET ENDPOINT
    # ==========================================================================
    HEALTHCHECK_SCHEME: Literal["http", "https"] = "http"
    HEALTHCHECK_HOST: str = "127.0.0.1"
    HEALTHCHECK_PORT: int = Field(default=8000, ge=1, le=65535)
    HEALTHCHECK_PATH: str = "/health"
    HEALTHCHECK_URL: Optional[str] = None

    # ==========================================================================
    # RESPONSE CONDITIONS
    # ==========================================================================
    HEALTHCHECK_STATUS_CODE_EQUALS_TO: Optional[int] = 200
    HEALTHCHECK_BODY_CONTAINS: Optional[str] = None

    # ==========================================================================
    # REQUEST OPTIONS
    # ==========================================================================
    # Unset timeouts fall back to the checker's DEFAULT_TIMEOUT.
    HEALTHCHECK_TIMEOUT: Optional[float] = Field(default=None, gt=0)
    HEALTHCHECK_CONNECT_TIMEOUT: Optional[float] = Field(default=None, gt=0)
    HEALTHCHECK_READ_TIMEOUT: Optional[float] = Field(default=None, gt=0)
    HEALTHCHECK_HEADERS: dict[str, str] = {}
    HEALTHCHECK_FOLLOW_REDIRECTS: bool = False

    # ==========================================================================
    # AUTHENTICATION
    # ==========================================================================
    # Token resolution priority: FILE (Docker Secret) > ENV VAR > None
    HEALTHCHECK_AUTH_TOKEN_FILE: Optional[str] = None
    HEALTHCHECK_AUTH_TOKEN: Optional[SecretStr] = None

    @field_validator("HEALTHCHECK_PATH")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Ensure the health endpoint path is absolute.

        Args:
            v: The HEALTHCHECK_PATH value to validate.

        Returns:
            The path with a leading slash.
        """
        return v if v.startswith("/") else f"/{v}"

    @model_validator(mode="after")
    def validate_token_transport(self) -> "Settings":
        """Refuse to send a bearer token over plain HTTP in production.

        Raises:
            ValueError: If a token is configured and the endpoint is not HTTPS
                in the production environment.
        """
        has_token = bool(self.HEALTHCHECK_AUTH_TOKEN_FILE or self.HEALTHCHECK_AUTH_TOKEN)
        if self.ENVIRONMENT == "production" and has_token:
            if self.ENDPOINT_URL.startswith("http://"):
                raise ValueError(
                    "CRITICAL SECURITY ERROR: Cannot send a bearer token over plain HTTP "
                    "in production. Use an https:// endpoint."
                )
        return self

    @computed_field
    @property
    def ENDPOINT_URL(self) -> str:
        """Construct the probed endpoint URL.

        HEALTHCHECK_URL wins when set; otherwise the URL is composed from
        scheme, host, port and path.

        Returns:
            The fully-qualified endpoint URL.
        """
        if self.HEALTHCHECK_URL:
            return self.HEALTHCHECK_URL

        return (
            f"{self.HEALTHCHECK_SCHEME}://"
            f"{self.HEALTHCHECK_HOST}:{self.HEALTHCHECK_PORT}{self.HEALTHCHECK_PATH}"
        )

    def resolve_auth_token(self) -> Optional[str]:
        """Resolve the bearer token.

        Token resolution priority:
            1. HEALTHCHECK_AUTH_TOKEN_FILE (Docker Secrets)
            2. HEALTHCHECK_AUTH_TOKEN (environment variable)
            3. No token

        Returns:
            The token, or None when no token is configured.

        Raises:
            ValueError: If HEALTHCHECK_AUTH_TOKEN_FILE is defined but the file is missing.
        """
        if self.HEALTHCHECK_AUTH_TOKEN_FILE:
            try:
                with open(self.HEALTHCHECK_AUTH_TOKEN_FILE, "r") as f:
                    return f.read().strip()
            except FileNotFoundError:
                raise ValueError(
                    f"CRITICAL: Auth token file defined at '{self.HEALTHCHECK_AUTH_TOKEN_FILE}' but not found."
                )
        if self.HEALTHCHECK_AUTH_TOKEN:
            return self.HEALTHCHECK_AUTH_TOKEN.get_secret_value()
        return None

    def build_conditions(self) -> dict[str, Any]:
        """Return the condition mapping for the health checker."""
        conditions: dict[str, Any] = {}
        if self.HEALTHCHECK_STATUS_CODE_EQUALS_TO is not None:
            conditions["status_code_equals_to"] = self.HEALTHCHECK_STATUS_CODE_EQUALS_TO
        if self.HEALTHCHECK_BODY_CONTAINS is not None:
            conditions["body_contains"] = self.HEALTHCHECK_BODY_CONTAINS
        return conditions

    def build_request_options(self) -> dict[str, Any]:
        """Return the request options for the health checker.

        Only explicitly configured timeouts are included so the checker's
        defaults apply to the rest.

        Returns:
            Options mapping with headers, redirect policy and timeouts.
        """
        headers = dict(self.HEALTHCHECK_HEADERS)

        token = self.resolve_auth_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        options: dict[str, Any] = {"follow_redirects": self.HEALTHCHECK_FOLLOW_REDIRECTS}
        if headers:
            options["headers"] = headers

        timeouts = {
            "timeout": self.HEALTHCHECK_TIMEOUT,
            "connect_timeout": self.HEALTHCHECK_CONNECT_TIMEOUT,
            "read_timeout": self.HEALTHCHECK_READ_TIMEOUT,
        }
        options.update({k: v for k, v in timeouts.items() if v is not None})

        return options


# ==============================================================================
# DEPENDENCY INJECTION
# ==============================================================================


@lru_cache()
def get_settings() -> Settings:
    """Return a cached singleton instance of the probe settings.

    Returns:
        The singleton Settings instance.
    """
    return Settings()
