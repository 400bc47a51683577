"""
Tests for environment settings and logging configuration.
"""

import pytest
import structlog

from sitemap_forge.logging_config import configure_logging, get_logger
from sitemap_forge.settings import SitemapSettings, get_settings
from sitemap_forge.types import SitemapConfig, SitemapIndexConfig


@pytest.fixture
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestSitemapSettings:
    """Test settings loading."""

    def test_defaults(self):
        settings = SitemapSettings()
        assert settings.log_level == "INFO"
        assert settings.log_format == "json"
        assert settings.max_items == 50000
        assert settings.max_sitemaps == 50000
        assert settings.pretty is False

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("SITEMAP_MAX_ITEMS", "10")
        monkeypatch.setenv("SITEMAP_PRETTY", "true")
        monkeypatch.setenv("SITEMAP_BASE_URL", "https://example.com")

        settings = SitemapSettings()
        assert settings.max_items == 10
        assert settings.pretty is True
        assert settings.base_url == "https://example.com"

    def test_get_settings_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()


class TestConfigFromSettings:
    """Test building instance configuration from settings."""

    def test_sitemap_config(self):
        settings = SitemapSettings(max_items=5, validate_items=False, base_url="https://example.com", pretty=True)
        config = SitemapConfig.from_settings(settings)

        assert config.max_items == 5
        assert config.validate is False
        assert config.base_url == "https://example.com"
        assert config.pretty is True
        assert config.escaping is True

    def test_index_config(self):
        settings = SitemapSettings(max_sitemaps=3, escaping=False)
        config = SitemapIndexConfig.from_settings(settings)

        assert config.max_sitemaps == 3
        assert config.escaping is False
        assert config.validate is True


class TestConfigureLogging:
    """Test structured logging setup."""

    def test_json_renderer(self, reset_structlog):
        configure_logging(SitemapSettings(log_format="json"))
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer(self, reset_structlog):
        configure_logging(SitemapSettings(log_format="console", log_level="debug"))
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_level_filtering_left_to_wrapper(self, reset_structlog):
        """Test that level filtering is left to the bound logger wrapper."""
        configure_logging(SitemapSettings(log_level="WARNING"))
        config = structlog.get_config()

        assert all(type(p).__module__.startswith("structlog") or p.__module__.startswith("structlog")
                   for p in config["processors"])

    def test_get_logger(self, reset_structlog):
        configure_logging(SitemapSettings())
        logger = get_logger("sitemap_forge.tests")
        logger.info("Logger configured", component="tests")
