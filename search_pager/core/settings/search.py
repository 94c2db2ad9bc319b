"""Search store connection settings.

Provides the connection settings for the Elasticsearch-compatible store,
loaded from environment variables with SEARCH_ prefix.

Example: SEARCH_URL=https://search.internal:9200, SEARCH_USERNAME=reader
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ._sanitizers import sanitize_inline_value


class SearchSettings(BaseSettings):
    """Search store connection settings.

    Credentials are optional: either basic auth (username/password) or an
    API key may be set. When both are present the API key wins.
    """

    url: str = Field(
        default="http://localhost:9200",
        description="Base URL of the search store",
    )
    username: str | None = Field(default=None, description="Basic auth username")
    password: SecretStr | None = Field(default=None, description="Basic auth password")
    api_key: SecretStr | None = Field(default=None, description="Base64 encoded API key")

    # Transport tuning
    timeout: float = Field(default=30.0, gt=0, le=600, description="Request timeout in seconds")
    max_retries: int = Field(default=3, ge=1, le=10, description="Attempts per request")
    retry_initial_delay: float = Field(
        default=0.5, ge=0.0, le=30.0, description="First retry delay in seconds"
    )
    retry_max_delay: float = Field(
        default=10.0, ge=0.0, le=120.0, description="Retry delay ceiling in seconds"
    )
    verify_tls: bool = Field(default=True, description="Verify the store's TLS certificate")

    @field_validator("url", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, value: Any) -> Any:
        if isinstance(value, str):
            return sanitize_inline_value(value).rstrip("/")
        return value

    @field_validator("timeout", "max_retries", "retry_initial_delay", "retry_max_delay", mode="before")
    @classmethod
    def _normalize_numeric(cls, value: Any) -> Any:
        """Allow numeric env vars with inline comments (e.g., "30  # seconds")."""
        return sanitize_inline_value(value)

    @property
    def auth_headers(self) -> dict[str, str]:
        """Authorization header for API key auth, empty otherwise."""
        if self.api_key is not None:
            return {"Authorization": f"ApiKey {self.api_key.get_secret_value()}"}
        return {}

    @property
    def basic_auth(self) -> tuple[str, str] | None:
        """Basic auth pair when API key auth is not configured."""
        if self.api_key is not None or self.username is None:
            return None
        password = self.password.get_secret_value() if self.password else ""
        return (self.username, password)

    model_config = SettingsConfigDict(
        env_prefix="SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )


__all__ = ["SearchSettings"]
