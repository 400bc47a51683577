"""
Type definitions for sitemap generation.
"""

import copy
from dataclasses import dataclass, field, fields
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .settings import SitemapSettings


DateInput = Union[str, date]

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
IMAGE_NAMESPACE = "http://www.google.com/schemas/sitemap-image/1.1"
VIDEO_NAMESPACE = "http://www.google.com/schemas/sitemap-video/1.1"
XHTML_NAMESPACE = "http://www.w3.org/1999/xhtml"
NEWS_NAMESPACE = "http://www.google.com/schemas/sitemap-news/0.9"

MAX_SITEMAP_ITEMS = 50000


class SitemapError(Exception):
    """Base exception for sitemap errors."""
    pass


class InvalidInputError(SitemapError, ValueError):
    """Malformed argument passed to a utility function."""
    pass


class InvalidDateError(InvalidInputError):
    """Date value cannot be formatted."""
    pass


class DateParseError(InvalidDateError):
    """Date value cannot be parsed."""
    pass


class ValidationFailedError(SitemapError):
    """One or more validation rules failed for a record."""

    def __init__(self, errors: List["FieldError"], loc: Optional[str] = None):
        self.errors = list(errors)
        self.loc = loc
        messages = ", ".join(f"{error.field}: {error.message}" for error in self.errors)
        if loc is not None:
            super().__init__(f"Validation failed for {loc}: {messages}")
        else:
            super().__init__(f"Validation failed: {messages}")


class LimitExceededError(SitemapError):
    """Configured hard cap reached."""

    def __init__(self, message: str, limit: int):
        self.limit = limit
        super().__init__(message)


class FormatNotImplementedError(SitemapError, NotImplementedError):
    """Requested output format has no renderer."""

    def __init__(self, requested: str, message: Optional[str] = None):
        self.format = requested
        super().__init__(
            message or f"Format '{requested}' not yet implemented. Currently only 'xml' is supported."
        )


class OutputValidationError(SitemapError):
    """Rendered document failed the structural output check."""

    def __init__(self, result: "ValidationResult"):
        self.result = result
        super().__init__(f"Rendered sitemap failed output check: {'; '.join(result.errors)}")


class ChangeFrequency(str, Enum):
    """Change frequency values defined by the sitemaps.org protocol."""
    ALWAYS = "always"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    NEVER = "never"


class ErrorKind(str, Enum):
    """Kinds of field validation errors."""
    URL = "url"
    PRIORITY = "priority"
    DATE = "date"
    REQUIRED = "required"
    FORMAT = "format"


class SitemapFormat(str, Enum):
    """Output formats known to the renderer dispatch."""
    XML = "xml"
    TXT = "txt"
    HTML = "html"
    GOOGLE_NEWS = "google-news"
    RSS = "rss"
    ROR_RDF = "ror-rdf"


@dataclass(frozen=True)
class FieldError:
    """A single rule violation found on a record."""

    kind: ErrorKind
    field: str
    message: str
    value: Any = None

    def with_prefix(self, prefix: str) -> "FieldError":
        """Return a copy whose field path is nested under ``prefix``."""
        return FieldError(self.kind, f"{prefix}.{self.field}", self.message, self.value)


def _pick(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


class _Record:
    """Mixin giving dataclass records a sparse dict form."""

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or value == []:
                continue
            if isinstance(value, list):
                value = [v.to_dict() if isinstance(v, _Record) else v for v in value]
            elif isinstance(value, _Record):
                value = value.to_dict()
            result[f.name] = value
        return result


@dataclass
class ImageItem(_Record):
    """Image metadata (Google image extension)."""

    url: str
    title: Optional[str] = None
    caption: Optional[str] = None
    geo_location: Optional[str] = None
    license: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImageItem":
        return cls(
            url=_pick(data, "url", "loc"),
            title=data.get("title"),
            caption=data.get("caption"),
            geo_location=_pick(data, "geo_location", "geoLocation"),
            license=data.get("license"),
        )


@dataclass
class VideoItem(_Record):
    """Video metadata (Google video extension)."""

    title: str
    description: str
    thumbnail_url: str
    duration: Optional[int] = None
    expiration_date: Optional[DateInput] = None
    rating: Optional[float] = None
    view_count: Optional[int] = None
    publication_date: Optional[DateInput] = None
    family_friendly: Optional[bool] = None
    restriction: Optional[str] = None
    gallery_loc: Optional[str] = None
    price: Optional[str] = None
    requires_subscription: Optional[bool] = None
    platform: Optional[str] = None
    live: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VideoItem":
        return cls(
            title=data.get("title"),
            description=data.get("description"),
            thumbnail_url=_pick(data, "thumbnail_url", "thumbnailUrl", "thumbnail_loc"),
            duration=data.get("duration"),
            expiration_date=_pick(data, "expiration_date", "expirationDate"),
            rating=data.get("rating"),
            view_count=_pick(data, "view_count", "viewCount"),
            publication_date=_pick(data, "publication_date", "publicationDate"),
            family_friendly=_pick(data, "family_friendly", "familyFriendly"),
            restriction=data.get("restriction"),
            gallery_loc=_pick(data, "gallery_loc", "galleryLoc"),
            price=data.get("price"),
            requires_subscription=_pick(data, "requires_subscription", "requiresSubscription"),
            platform=data.get("platform"),
            live=data.get("live"),
        )


@dataclass
class TranslationItem(_Record):
    """Alternate-language version of a page (hreflang)."""

    language: str
    url: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TranslationItem":
        return cls(language=_pick(data, "language", "hreflang"), url=_pick(data, "url", "href"))


@dataclass
class AlternateItem(_Record):
    """Device or format variant of a page (mobile, AMP, print)."""

    url: str
    media: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AlternateItem":
        return cls(url=_pick(data, "url", "href"), media=data.get("media"))


@dataclass
class NewsItem(_Record):
    """Google News metadata."""

    site_name: str
    language: str
    publication_date: DateInput
    title: Optional[str] = None
    keywords: Optional[str] = None
    stock_tickers: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NewsItem":
        return cls(
            site_name=_pick(data, "site_name", "sitename", "siteName"),
            language=data.get("language"),
            publication_date=_pick(data, "publication_date", "publicationDate"),
            title=data.get("title"),
            keywords=data.get("keywords"),
            stock_tickers=_pick(data, "stock_tickers", "stockTickers"),
        )


def _build_list(values: Optional[List[Any]], item_cls) -> List[Any]:
    if not values:
        return []
    return [value if isinstance(value, item_cls) else item_cls.from_dict(value) for value in values]


@dataclass
class SitemapItem(_Record):
    """One URL entry with optional rich metadata."""

    loc: str
    lastmod: Optional[DateInput] = None
    priority: Optional[float] = None
    changefreq: Optional[str] = None
    title: Optional[str] = None
    images: List[ImageItem] = field(default_factory=list)
    videos: List[VideoItem] = field(default_factory=list)
    translations: List[TranslationItem] = field(default_factory=list)
    alternates: List[AlternateItem] = field(default_factory=list)
    news: Optional[NewsItem] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SitemapItem":
        """Build an item from a mapping, accepting protocol or camelCase keys."""
        news = _pick(data, "news", "googlenews", "newsMetadata")
        if news is not None and not isinstance(news, NewsItem):
            news = NewsItem.from_dict(news)

        changefreq = _pick(data, "changefreq", "changeFrequency")
        if isinstance(changefreq, ChangeFrequency):
            changefreq = changefreq.value

        return cls(
            loc=_pick(data, "loc", "location", "url"),
            lastmod=_pick(data, "lastmod", "lastModified"),
            priority=data.get("priority"),
            changefreq=changefreq,
            title=data.get("title"),
            images=_build_list(data.get("images"), ImageItem),
            videos=_build_list(data.get("videos"), VideoItem),
            translations=_build_list(data.get("translations"), TranslationItem),
            alternates=_build_list(data.get("alternates"), AlternateItem),
            news=news,
        )

    @property
    def has_images(self) -> bool:
        return bool(self.images)

    @property
    def has_videos(self) -> bool:
        return bool(self.videos)

    @property
    def has_translations(self) -> bool:
        return bool(self.translations)

    @property
    def has_alternates(self) -> bool:
        return bool(self.alternates)

    @property
    def has_news(self) -> bool:
        return self.news is not None


@dataclass
class SitemapIndexItem(_Record):
    """Reference to a rendered sitemap file."""

    loc: str
    lastmod: Optional[DateInput] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SitemapIndexItem":
        return cls(loc=_pick(data, "loc", "location", "url"), lastmod=_pick(data, "lastmod", "lastModified"))


@dataclass
class ExtraOptions:
    """Optional rich metadata accepted by ``Sitemap.add``."""

    title: Optional[str] = None
    images: List[ImageItem] = field(default_factory=list)
    videos: List[VideoItem] = field(default_factory=list)
    translations: List[TranslationItem] = field(default_factory=list)
    alternates: List[AlternateItem] = field(default_factory=list)
    news: Optional[NewsItem] = None


@dataclass
class SitemapConfig:
    """Configuration for a sitemap document."""

    escaping: bool = True
    validate: bool = True
    max_items: int = MAX_SITEMAP_ITEMS
    base_url: str = ""
    pretty: bool = False
    stylesheet: str = ""
    namespaces: Dict[str, str] = field(default_factory=dict)

    # Structural check of rendered output with lxml
    validate_output: bool = False

    @classmethod
    def for_production(cls) -> "SitemapConfig":
        """Compact, validating configuration."""
        return cls(pretty=False, validate=True, escaping=True)

    @classmethod
    def for_debugging(cls) -> "SitemapConfig":
        """Pretty-printed configuration that also checks rendered output."""
        return cls(pretty=True, validate=True, validate_output=True)

    @classmethod
    def from_settings(cls, settings: SitemapSettings) -> "SitemapConfig":
        return cls(
            escaping=settings.escaping,
            validate=settings.validate_items,
            max_items=settings.max_items,
            base_url=settings.base_url,
            pretty=settings.pretty,
        )

    def copy(self) -> "SitemapConfig":
        return copy.deepcopy(self)


@dataclass
class SitemapIndexConfig:
    """Configuration for a sitemap index document."""

    escaping: bool = True
    validate: bool = True
    base_url: str = ""
    pretty: bool = False
    stylesheet: str = ""
    max_sitemaps: int = MAX_SITEMAP_ITEMS
    validate_output: bool = False

    @classmethod
    def from_settings(cls, settings: SitemapSettings) -> "SitemapIndexConfig":
        return cls(
            escaping=settings.escaping,
            validate=settings.validate_items,
            base_url=settings.base_url,
            pretty=settings.pretty,
            max_sitemaps=settings.max_sitemaps,
        )

    def copy(self) -> "SitemapIndexConfig":
        return copy.deepcopy(self)


@dataclass
class RenderOptions:
    """Per-call rendering overrides. ``None`` means use the stored configuration."""

    pretty: Optional[bool] = None
    stylesheet: Optional[str] = None
    namespaces: Optional[Dict[str, str]] = None


@dataclass
class SitemapStats:
    """Statistics about a sitemap document."""

    urls: int = 0
    with_images: int = 0
    with_videos: int = 0
    with_translations: int = 0
    with_alternates: int = 0
    with_news: int = 0
    total_images: int = 0
    total_videos: int = 0
    estimated_size: int = 0


@dataclass
class ValidationResult:
    """Outcome of the structural check of a rendered sitemap or sitemap index."""

    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    entry_count: int = 0
    validation_time: float = 0.0

    # Every problem with its severity and source position
    issues: List[Dict[str, Any]] = field(default_factory=list)

    def _record(self, severity: str, message: str, line: Optional[int], column: Optional[int]) -> None:
        self.issues.append({"severity": severity, "message": message, "line": line, "column": column})

    def add_error(self, message: str, line: Optional[int] = None, column: Optional[int] = None) -> None:
        self.errors.append(message)
        self._record("error", message, line, column)
        self.is_valid = False

    def add_warning(self, message: str, line: Optional[int] = None, column: Optional[int] = None) -> None:
        self.warnings.append(message)
        self._record("warning", message, line, column)

    def summary(self) -> str:
        if not self.is_valid:
            return f"Sitemap output invalid: {len(self.errors)} errors, {len(self.warnings)} warnings"

        warning_text = f", {len(self.warnings)} warnings" if self.warnings else ""
        return f"Sitemap output valid: {self.entry_count} entries{warning_text}"
