from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class SitemapSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SITEMAP_")

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # json or console

    # Document defaults
    escaping: bool = True
    validate_items: bool = True
    pretty: bool = False
    base_url: str = ""

    # Limits
    max_items: int = 50000
    max_sitemaps: int = 50000


@lru_cache()
def get_settings() -> SitemapSettings:
    return SitemapSettings()
