"""
Main sitemap document: record store, mutation pipeline and rendering.
"""

import copy
import dataclasses
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

import structlog

from .dates import format_date
from .model import SitemapModel
from .output_validator import OutputValidator
from .renderer import XMLRenderer
from .types import (
    AlternateItem, ChangeFrequency, DateInput, ExtraOptions, FieldError, FormatNotImplementedError,
    ImageItem, InvalidInputError, NewsItem, OutputValidationError, RenderOptions, SitemapConfig,
    SitemapFormat, SitemapItem, SitemapStats, TranslationItem, ValidationFailedError,
    ValidationResult, VideoItem
)
from .urls import is_valid_url, normalize_url, resolve_url
from .validator import DataValidator


logger = structlog.get_logger(__name__)

ItemInput = Union[SitemapItem, Dict[str, Any]]

# Size estimate weights, in bytes
_DOCUMENT_OVERHEAD = 500
_ITEM_OVERHEAD = 150
_TITLE_OVERHEAD = 15
_LASTMOD_SIZE = 30
_IMAGE_SIZE = 200
_VIDEO_SIZE = 500
_TRANSLATION_SIZE = 100
_ALTERNATE_SIZE = 100
_NEWS_SIZE = 300


def _extras_from_dict(data: Dict[str, Any]) -> ExtraOptions:
    item = SitemapItem.from_dict({"loc": "", **data})
    return ExtraOptions(
        title=item.title,
        images=item.images,
        videos=item.videos,
        translations=item.translations,
        alternates=item.alternates,
        news=item.news,
    )


class Sitemap:
    """
    Ordered collection of sitemap records rendered to the sitemaps.org XML
    grammar with image, video, hreflang and Google News extensions.

    Records are rendered in insertion order. When validation is enabled in
    the configuration every record is checked before it is stored and an
    invalid record raises ``ValidationFailedError`` without being stored.
    """

    def __init__(self, config: Optional[SitemapConfig] = None):
        """
        Initialize sitemap document.

        Args:
            config: Sitemap configuration
        """
        self.model = SitemapModel(config)
        self.validator = DataValidator()
        self.logger = logger.bind(component="Sitemap")

    def __len__(self) -> int:
        return self.model.get_item_count()

    # Mutation

    def add(
        self,
        url: str,
        lastmod: Optional[DateInput] = None,
        priority: Optional[float] = None,
        changefreq: Optional[Union[str, ChangeFrequency]] = None,
        options: Optional[Union[ExtraOptions, Dict[str, Any]]] = None,
    ) -> "Sitemap":
        """
        Add a single URL.

        Args:
            url: Page URL, resolved against ``base_url`` when relative
            lastmod: Last modification date; date values are converted to a UTC timestamp
            priority: Priority between 0.0 and 1.0
            changefreq: Change frequency
            options: Title, images, videos, translations, alternates and news metadata

        Returns:
            This sitemap, for chaining

        Raises:
            ValidationFailedError: if validation is enabled and the record is invalid
        """
        if options is None:
            extras = ExtraOptions()
        elif isinstance(options, ExtraOptions):
            extras = options
        else:
            extras = _extras_from_dict(options)

        item = SitemapItem(
            loc=url,
            lastmod=lastmod,
            priority=priority,
            changefreq=changefreq,
            title=extras.title,
            images=list(extras.images),
            videos=list(extras.videos),
            translations=list(extras.translations),
            alternates=list(extras.alternates),
            news=extras.news,
        )

        item = self._prepare(item)
        self._check(item)
        self.model.add_item(item)

        self.logger.debug("Item added", loc=item.loc)
        return self

    def add_item(self, items: Union[ItemInput, Iterable[ItemInput]]) -> "Sitemap":
        """
        Add one or more prebuilt records.

        Records are processed in order. If a record fails validation the error
        names its location, and the records before it in the batch remain
        stored.
        """
        if isinstance(items, (SitemapItem, dict)):
            items = [items]

        added = 0
        for raw in items:
            item = raw if isinstance(raw, SitemapItem) else SitemapItem.from_dict(raw)
            item = self._prepare(item)
            self._check(item, loc=item.loc)
            self.model.add_item(item)
            added += 1

        self.logger.debug("Items added", count=added)
        return self

    def _resolve_loc(self, url: str) -> str:
        base_url = self.model.get_config().base_url
        loc = normalize_url(url)
        if base_url and not is_valid_url(loc):
            loc = normalize_url(resolve_url(url, base_url))
        return loc

    def _prepare(self, item: SitemapItem) -> SitemapItem:
        """Copy ``item`` with its location resolved and dates formatted."""
        item = copy.deepcopy(item)
        item.loc = self._resolve_loc(item.loc)

        if isinstance(item.lastmod, date):
            item.lastmod = format_date(item.lastmod)

        if isinstance(item.changefreq, ChangeFrequency):
            item.changefreq = item.changefreq.value

        item.images = [i if isinstance(i, ImageItem) else ImageItem.from_dict(i) for i in item.images or []]
        item.videos = [v if isinstance(v, VideoItem) else VideoItem.from_dict(v) for v in item.videos or []]
        item.translations = [
            t if isinstance(t, TranslationItem) else TranslationItem.from_dict(t)
            for t in item.translations or []
        ]
        item.alternates = [
            a if isinstance(a, AlternateItem) else AlternateItem.from_dict(a) for a in item.alternates or []
        ]
        if item.news is not None and not isinstance(item.news, NewsItem):
            item.news = NewsItem.from_dict(item.news)

        return item

    def _check(self, item: SitemapItem, loc: Optional[str] = None) -> None:
        if not self.model.get_config().validate:
            return

        errors = self.validator.validate_item(item)
        if errors:
            self.logger.warning("Rejected invalid item", loc=item.loc, error_count=len(errors))
            raise ValidationFailedError(errors, loc=loc)

    def clear(self) -> "Sitemap":
        self.model.clear()
        return self

    def remove_items(self, predicate: Callable[[SitemapItem], bool]) -> "Sitemap":
        """Remove items matching ``predicate``, keeping the order of the rest."""
        removed = self.model.remove_items(predicate)
        self.logger.debug("Items removed", count=removed)
        return self

    # Inspection

    def get_items(self) -> List[SitemapItem]:
        """Return a copy of the stored items."""
        return self.model.get_items()

    def count(self) -> int:
        return self.model.get_item_count()

    def get_config(self) -> SitemapConfig:
        return self.model.get_config()

    def set_config(self, **changes: Any) -> "Sitemap":
        """Update configuration fields by name."""
        config = self.model.get_config()
        known = {f.name for f in dataclasses.fields(config)}
        unknown = set(changes) - known
        if unknown:
            raise InvalidInputError(f"Unknown configuration option(s): {', '.join(sorted(unknown))}")

        self.model.set_config(dataclasses.replace(config, **changes))
        return self

    def get_stats(self) -> SitemapStats:
        """
        Count records by feature and estimate the rendered size.

        The size estimate is a heuristic used to decide when to split a
        sitemap; it is not the exact length of ``to_xml()``.
        """
        stats = SitemapStats()
        estimated_size = _DOCUMENT_OVERHEAD

        for item in self.model.iter_items():
            stats.urls += 1

            if item.images:
                stats.with_images += 1
                stats.total_images += len(item.images)
            if item.videos:
                stats.with_videos += 1
                stats.total_videos += len(item.videos)
            if item.translations:
                stats.with_translations += 1
            if item.alternates:
                stats.with_alternates += 1
            if item.news is not None:
                stats.with_news += 1

            item_size = _ITEM_OVERHEAD + len(item.loc or "")
            if item.title:
                item_size += _TITLE_OVERHEAD + len(item.title)
            if item.lastmod:
                item_size += _LASTMOD_SIZE
            item_size += len(item.images) * _IMAGE_SIZE
            item_size += len(item.videos) * _VIDEO_SIZE
            item_size += len(item.translations) * _TRANSLATION_SIZE
            item_size += len(item.alternates) * _ALTERNATE_SIZE
            if item.news is not None:
                item_size += _NEWS_SIZE

            estimated_size += item_size

        stats.estimated_size = estimated_size
        return stats

    def should_split(self) -> bool:
        """True once the item count reaches ``max_items``."""
        return self.model.should_split()

    def validate_all(self) -> List[FieldError]:
        """
        Validate every stored item, however it was inserted.

        Field paths are prefixed with the item position, e.g. ``item[2].loc``.
        """
        errors: List[FieldError] = []
        for index, item in enumerate(self.model.iter_items()):
            errors.extend(e.with_prefix(f"item[{index}]") for e in self.validator.validate_item(item))
        return errors

    # Rendering

    def render(self, format: Union[str, SitemapFormat] = SitemapFormat.XML,
               options: Optional[RenderOptions] = None) -> str:
        """
        Render in the requested format. Only XML is supported.

        Raises:
            FormatNotImplementedError: for any other format
        """
        requested = format.value if isinstance(format, SitemapFormat) else str(format)
        if requested != SitemapFormat.XML.value:
            raise FormatNotImplementedError(requested)
        return self.to_xml(options)

    def _render_xml(self, options: Optional[RenderOptions]) -> str:
        options = options or RenderOptions()
        config = self.model.get_config()

        pretty = config.pretty if options.pretty is None else options.pretty
        stylesheet = config.stylesheet if options.stylesheet is None else options.stylesheet
        namespaces = config.namespaces if options.namespaces is None else options.namespaces

        renderer = XMLRenderer(escaping=config.escaping, pretty=pretty)
        return renderer.render_urlset(self.model.iter_items(), stylesheet=stylesheet, namespaces=namespaces)

    def to_xml(self, options: Optional[RenderOptions] = None) -> str:
        """
        Render the sitemap as XML.

        Options override ``pretty``, ``stylesheet`` and ``namespaces`` for this
        call only; stored configuration is not changed.

        Raises:
            OutputValidationError: if ``validate_output`` is enabled and the
                rendered document fails the structural check
        """
        xml = self._render_xml(options)
        self.logger.debug("Sitemap rendered", items=self.count(), length=len(xml))

        config = self.model.get_config()
        if config.validate_output:
            result = OutputValidator(max_entries=config.max_items).validate_xml_string(xml)
            if not result.is_valid:
                raise OutputValidationError(result)

        return xml

    def to_txt(self) -> str:
        """Render one location per line."""
        return "\n".join(item.loc or "" for item in self.model.iter_items())

    def to_html(self, options: Optional[RenderOptions] = None) -> str:
        raise FormatNotImplementedError("html", "HTML rendering is not yet implemented")

    def check_output(self, options: Optional[RenderOptions] = None) -> ValidationResult:
        """Render and run the structural output check without raising."""
        max_items = self.model.get_config().max_items
        return OutputValidator(max_entries=max_items).validate_xml_string(self._render_xml(options))
