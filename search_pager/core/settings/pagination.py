"""Pagination settings for search traversals.

Centralizes the page size and point-in-time keep-alive used by every
paginator so traversals behave the same across indices.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_PAGE_SIZE=5000, PAGINATION_PIT_KEEP_ALIVE=2m
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ._sanitizers import sanitize_inline_value

_TIME_VALUE = re.compile(r"^\d+(nanos|micros|ms|s|m|h|d)$")


class PaginationSettings(BaseSettings):
    """Pagination configuration settings.

    Attributes:
        page_size: Documents requested per page. The store's default result
            window is 10,000, which is also the largest page it serves.
        pit_keep_alive: How long the store keeps a point-in-time snapshot
            alive between two page requests, as a store time value.

    Example:
        settings = PaginationSettings()
        paginator = Paginator(client, "findings", page_size=settings.page_size)
    """

    page_size: int = Field(
        default=10000,
        ge=1,
        le=10000,
        description="Documents per page request",
    )
    pit_keep_alive: str = Field(
        default="1m",
        description="Point-in-time keep-alive (e.g. 30s, 1m, 1h)",
    )

    @field_validator("page_size", mode="before")
    @classmethod
    def _normalize_page_size(cls, value: Any) -> Any:
        return sanitize_inline_value(value)

    @field_validator("pit_keep_alive", mode="before")
    @classmethod
    def _validate_keep_alive(cls, value: Any) -> Any:
        value = sanitize_inline_value(value)
        if isinstance(value, str) and not _TIME_VALUE.match(value):
            msg = f"pit_keep_alive must be a time value like '1m', got {value!r}"
            raise ValueError(msg)
        return value

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )


__all__ = ["PaginationSettings"]
