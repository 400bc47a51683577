"""
XML sitemap generation with validation.

This package provides sitemaps.org documents with:
- Standard entries (loc, lastmod, changefreq, priority)
- Image, video, hreflang and Google News extensions
- Sitemap index documents
- Field-level validation that reports every problem at once
- Optional lxml-based structural checking of rendered output
"""

from .dates import (
    format_date, format_news_date, format_w3c_date, get_current_date, is_same_day,
    is_valid_date, is_valid_lastmod_date, parse_date
)
from .logging_config import configure_logging, get_logger
from .output_validator import OutputValidator
from .settings import SitemapSettings, get_settings
from .sitemap import Sitemap
from .sitemap_index import SitemapIndex
from .types import (
    AlternateItem, ChangeFrequency, DateParseError, ErrorKind, ExtraOptions, FieldError,
    FormatNotImplementedError, ImageItem, InvalidDateError, InvalidInputError, LimitExceededError,
    NewsItem, OutputValidationError, RenderOptions, SitemapConfig, SitemapError, SitemapFormat,
    SitemapIndexConfig, SitemapIndexItem, SitemapItem, SitemapStats, TranslationItem,
    ValidationFailedError, ValidationResult, VideoItem
)
from .urls import (
    extract_domain, has_valid_web_extension, is_accessible_url, is_domain_allowed,
    is_valid_url, normalize_url, resolve_url
)
from .validator import DataValidator, validate_index_item, validate_item
from .xml_utils import create_element, escape_xml, format_xml, wrap_cdata

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "Sitemap",
    "SitemapIndex",
    "DataValidator",
    "OutputValidator",
    # Configuration
    "SitemapConfig",
    "SitemapIndexConfig",
    "SitemapSettings",
    "RenderOptions",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Records
    "SitemapItem",
    "SitemapIndexItem",
    "ImageItem",
    "VideoItem",
    "TranslationItem",
    "AlternateItem",
    "NewsItem",
    "ExtraOptions",
    "ChangeFrequency",
    "SitemapFormat",
    "SitemapStats",
    "FieldError",
    "ErrorKind",
    "ValidationResult",
    # Exceptions
    "SitemapError",
    "InvalidInputError",
    "InvalidDateError",
    "DateParseError",
    "ValidationFailedError",
    "LimitExceededError",
    "FormatNotImplementedError",
    "OutputValidationError",
    # Utilities
    "validate_item",
    "validate_index_item",
    "is_valid_url",
    "normalize_url",
    "resolve_url",
    "is_domain_allowed",
    "extract_domain",
    "has_valid_web_extension",
    "is_accessible_url",
    "format_date",
    "format_news_date",
    "format_w3c_date",
    "get_current_date",
    "parse_date",
    "is_valid_date",
    "is_valid_lastmod_date",
    "is_same_day",
    "escape_xml",
    "wrap_cdata",
    "create_element",
    "format_xml",
]
