"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest

from stock_inference.core.config import Settings, get_settings

_ENV_VARS = (
    "BIGCOMMERCE_STORE_HASH",
    "BIGCOMMERCE_ACCESS_TOKEN",
    "BIGCOMMERCE_API_URL",
    "ORDERS_PAGE_SIZE",
    "LINE_ITEMS_BATCH_DELAY_MS",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No inherited variables and no .env file in the working directory."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


def test_defaults(clean_env):
    """Paging and batching defaults match BigCommerce limits."""
    settings = Settings(bigcommerce_store_hash="abc123", bigcommerce_access_token="tok")

    assert settings.orders_page_size == 250
    assert settings.orders_page_delay == pytest.approx(0.2)
    assert settings.line_items_batch_size == 10
    assert settings.line_items_batch_delay == pytest.approx(0.1)
    assert settings.http_timeout_seconds == 30
    assert settings.http_max_retries == 1
    assert settings.default_lookback_days == 730


def test_api_base_url_from_store_hash(clean_env):
    """Base URL is derived from the store hash."""
    settings = Settings(bigcommerce_store_hash="abc123", bigcommerce_access_token="tok")

    assert settings.api_base_url == "https://api.bigcommerce.com/stores/abc123"


def test_api_base_url_override(clean_env):
    """An explicit URL wins and loses its trailing slash."""
    settings = Settings(
        bigcommerce_store_hash="abc123",
        bigcommerce_access_token="tok",
        bigcommerce_api_url="http://localhost:8080/stores/abc123/",
    )

    assert settings.api_base_url == "http://localhost:8080/stores/abc123"


def test_reads_environment(clean_env):
    """Environment variables are matched case-insensitively."""
    clean_env.setenv("BIGCOMMERCE_STORE_HASH", "envhash")
    clean_env.setenv("BIGCOMMERCE_ACCESS_TOKEN", "envtok")
    clean_env.setenv("ORDERS_PAGE_SIZE", "100")
    clean_env.setenv("LINE_ITEMS_BATCH_DELAY_MS", "0")

    settings = get_settings()

    assert settings.bigcommerce_store_hash == "envhash"
    assert settings.orders_page_size == 100
    assert settings.line_items_batch_delay == 0.0
    assert get_settings() is settings


def test_missing_credentials(clean_env):
    """Missing required variables produce a readable error."""
    with pytest.raises(RuntimeError) as exc_info:
        get_settings()

    message = str(exc_info.value)
    assert "BIGCOMMERCE_STORE_HASH" in message
    assert "BIGCOMMERCE_ACCESS_TOKEN" in message
