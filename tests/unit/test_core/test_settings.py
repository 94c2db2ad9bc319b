"""Unit tests for Pydantic Settings v2 configuration."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from search_pager.core.settings import (
    LoggingSettings,
    PaginationSettings,
    SearchSettings,
    clear_all_caches,
    get_logging_settings,
    get_pagination_settings,
    get_search_settings,
)
from search_pager.core.settings._sanitizers import sanitize_inline_value, strip_inline_comment


@pytest.mark.unit
class TestSearchSettings:
    """Test suite for SearchSettings."""

    def test_defaults(self):
        settings = SearchSettings()

        assert settings.url == "http://localhost:9200"
        assert settings.timeout == 30.0
        assert settings.max_retries == 3
        assert settings.verify_tls is True
        assert settings.auth_headers == {}
        assert settings.basic_auth is None

    def test_env_prefix_and_trailing_slash(self, monkeypatch):
        monkeypatch.setenv("SEARCH_URL", "https://search.internal:9200/")
        monkeypatch.setenv("SEARCH_TIMEOUT", "5  # seconds")

        settings = SearchSettings()

        assert settings.url == "https://search.internal:9200"
        assert settings.timeout == 5.0

    def test_basic_auth(self):
        settings = SearchSettings(username="reader", password="s3cret")

        assert settings.basic_auth == ("reader", "s3cret")
        assert "s3cret" not in repr(settings)

    def test_api_key_wins_over_basic_auth(self):
        settings = SearchSettings(username="reader", password="s3cret", api_key="a2V5")

        assert settings.auth_headers == {"Authorization": "ApiKey a2V5"}
        assert settings.basic_auth is None

    def test_frozen(self):
        settings = SearchSettings()

        with pytest.raises(ValidationError):
            settings.url = "http://other:9200"

    def test_max_retries_bounds(self):
        with pytest.raises(ValidationError):
            SearchSettings(max_retries=0)


@pytest.mark.unit
class TestPaginationSettings:
    """Test suite for PaginationSettings."""

    def test_defaults(self):
        settings = PaginationSettings()

        assert settings.page_size == 10000
        assert settings.pit_keep_alive == "1m"

    @pytest.mark.parametrize("page_size", [0, 10001])
    def test_page_size_within_result_window(self, page_size):
        with pytest.raises(ValidationError):
            PaginationSettings(page_size=page_size)

    @pytest.mark.parametrize("keep_alive", ["30s", "1m", "2h", "500ms", "1d"])
    def test_valid_keep_alive(self, keep_alive):
        assert PaginationSettings(pit_keep_alive=keep_alive).pit_keep_alive == keep_alive

    @pytest.mark.parametrize("keep_alive", ["1 minute", "m", "-1m", "1y"])
    def test_invalid_keep_alive(self, keep_alive):
        with pytest.raises(ValidationError):
            PaginationSettings(pit_keep_alive=keep_alive)

    def test_env_with_inline_comment(self, monkeypatch):
        monkeypatch.setenv("PAGINATION_PAGE_SIZE", "5000  # smaller pages")

        assert PaginationSettings().page_size == 5000


@pytest.mark.unit
class TestLoggingSettings:
    """Test suite for LoggingSettings."""

    def test_level_normalized(self):
        settings = LoggingSettings(level="debug")

        assert settings.level == "DEBUG"
        assert settings.level_int == 10

    def test_to_logging_kwargs(self):
        kwargs = LoggingSettings(json_logs=False, file_path="/tmp/search-pager.log").to_logging_kwargs()

        assert kwargs["log_level"] == "INFO"
        assert kwargs["json_logs"] is False
        assert kwargs["file_path"] == "/tmp/search-pager.log"
        assert kwargs["service_name"] == "search-pager"
        assert "include_queries" not in kwargs


@pytest.mark.unit
class TestSettingsLoaders:
    """Test suite for cached settings loaders."""

    def test_loaders_are_cached(self):
        assert get_search_settings() is get_search_settings()
        assert get_pagination_settings() is get_pagination_settings()
        assert get_logging_settings() is get_logging_settings()

    def test_clear_all_caches_reloads(self, monkeypatch):
        first = get_pagination_settings()
        monkeypatch.setenv("PAGINATION_PAGE_SIZE", "200")

        clear_all_caches()

        assert get_pagination_settings() is not first
        assert get_pagination_settings().page_size == 200


@pytest.mark.unit
class TestSanitizers:
    """Test suite for env value sanitizers."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("10000  # ES window", "10000"),
            ("abc#def", "abc#def"),
            ("# only a comment", ""),
            ("  1m  ", "1m"),
        ],
    )
    def test_strip_inline_comment(self, raw, expected):
        assert strip_inline_comment(raw) == expected

    def test_sanitize_keeps_non_strings(self):
        assert sanitize_inline_value(5) == 5

    def test_sanitize_keeps_original_when_only_comment(self):
        assert sanitize_inline_value("# nothing") == "# nothing"
