"""
Sitemap index: a document referencing other sitemap files.
"""

import copy
import dataclasses
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

import structlog

from .dates import format_date
from .output_validator import OutputValidator
from .renderer import XMLRenderer
from .types import (
    DateInput, FieldError, InvalidInputError, LimitExceededError, OutputValidationError,
    RenderOptions, SitemapIndexConfig, SitemapIndexItem, SitemapStats, ValidationFailedError,
    ValidationResult
)
from .urls import is_valid_url, normalize_url, resolve_url
from .validator import DataValidator


logger = structlog.get_logger(__name__)

IndexItemInput = Union[SitemapIndexItem, Dict[str, Any]]

_DOCUMENT_OVERHEAD = 200
_ENTRY_OVERHEAD = 100
_LASTMOD_SIZE = 30


class SitemapIndex:
    """
    Ordered list of sitemap file references rendered as ``<sitemapindex>``.

    Unlike ``Sitemap.should_split`` the ``max_sitemaps`` limit is enforced:
    adding past it raises ``LimitExceededError``.
    """

    def __init__(self, config: Optional[SitemapIndexConfig] = None):
        self._config = config.copy() if config else SitemapIndexConfig()
        self._items: List[SitemapIndexItem] = []
        self.validator = DataValidator()
        self.logger = logger.bind(component="SitemapIndex")

    def __len__(self) -> int:
        return len(self._items)

    def _resolve_loc(self, url: str) -> str:
        loc = normalize_url(url)
        if self._config.base_url and not is_valid_url(loc):
            loc = normalize_url(resolve_url(url, self._config.base_url))
        return loc

    def add_sitemap(self, loc: str, lastmod: Optional[DateInput] = None) -> "SitemapIndex":
        """
        Add a sitemap reference.

        Raises:
            ValidationFailedError: if validation is enabled and the entry is invalid
            LimitExceededError: if the index already holds ``max_sitemaps`` entries
        """
        item = SitemapIndexItem(loc=self._resolve_loc(loc), lastmod=lastmod)

        if isinstance(item.lastmod, date):
            item.lastmod = format_date(item.lastmod)

        if self._config.validate:
            errors = self.validator.validate_index_item(item)
            if errors:
                self.logger.warning("Rejected invalid sitemap reference", loc=item.loc, error_count=len(errors))
                raise ValidationFailedError(errors, loc=item.loc)

        if len(self._items) >= self._config.max_sitemaps:
            raise LimitExceededError(
                f"Maximum number of sitemaps ({self._config.max_sitemaps}) exceeded",
                limit=self._config.max_sitemaps,
            )

        self._items.append(item)
        self.logger.debug("Sitemap reference added", loc=item.loc)
        return self

    def add_sitemaps(self, items: Iterable[IndexItemInput]) -> "SitemapIndex":
        """Add references in order; entries before a failing one remain stored."""
        for raw in items:
            item = raw if isinstance(raw, SitemapIndexItem) else SitemapIndexItem.from_dict(raw)
            self.add_sitemap(item.loc, item.lastmod)
        return self

    def get_sitemaps(self) -> List[SitemapIndexItem]:
        return copy.deepcopy(self._items)

    def count(self) -> int:
        return len(self._items)

    def clear(self) -> "SitemapIndex":
        self._items = []
        return self

    def remove_sitemaps(self, predicate: Callable[[SitemapIndexItem], bool]) -> "SitemapIndex":
        self._items = [item for item in self._items if not predicate(copy.deepcopy(item))]
        return self

    def reset_sitemaps(self, items: Iterable[IndexItemInput]) -> "SitemapIndex":
        """Replace all references with ``items``."""
        self._items = []
        return self.add_sitemaps(items)

    def has_sitemap(self, url: str) -> bool:
        loc = normalize_url(url)
        return any(item.loc == loc for item in self._items)

    def get_stats(self) -> SitemapStats:
        """Entry count and a heuristic size estimate."""
        estimated_size = _DOCUMENT_OVERHEAD
        for item in self._items:
            estimated_size += _ENTRY_OVERHEAD + len(item.loc or "")
            if item.lastmod:
                estimated_size += _LASTMOD_SIZE
        return SitemapStats(urls=len(self._items), estimated_size=estimated_size)

    def validate_all(self) -> List[FieldError]:
        """Validate every stored reference; field paths are prefixed ``sitemap[i]``."""
        errors: List[FieldError] = []
        for index, item in enumerate(self._items):
            errors.extend(e.with_prefix(f"sitemap[{index}]") for e in self.validator.validate_index_item(item))
        return errors

    def should_split(self) -> bool:
        return len(self._items) >= self._config.max_sitemaps

    def get_config(self) -> SitemapIndexConfig:
        return self._config.copy()

    def set_config(self, **changes: Any) -> "SitemapIndex":
        known = {f.name for f in dataclasses.fields(self._config)}
        unknown = set(changes) - known
        if unknown:
            raise InvalidInputError(f"Unknown configuration option(s): {', '.join(sorted(unknown))}")

        self._config = dataclasses.replace(self._config, **changes)
        return self

    def _render_xml(self, options: Optional[RenderOptions]) -> str:
        options = options or RenderOptions()
        pretty = self._config.pretty if options.pretty is None else options.pretty
        stylesheet = self._config.stylesheet if options.stylesheet is None else options.stylesheet

        renderer = XMLRenderer(escaping=self._config.escaping, pretty=pretty)
        return renderer.render_sitemapindex(self._items, stylesheet=stylesheet)

    def render(self, options: Optional[RenderOptions] = None) -> str:
        return self.to_xml(options)

    def to_xml(self, options: Optional[RenderOptions] = None) -> str:
        """Render the index as XML."""
        xml = self._render_xml(options)
        self.logger.debug("Sitemap index rendered", sitemaps=len(self._items), length=len(xml))

        if self._config.validate_output:
            result = OutputValidator(max_entries=self._config.max_sitemaps).validate_xml_string(xml)
            if not result.is_valid:
                raise OutputValidationError(result)

        return xml

    def check_output(self, options: Optional[RenderOptions] = None) -> ValidationResult:
        validator = OutputValidator(max_entries=self._config.max_sitemaps)
        return validator.validate_xml_string(self._render_xml(options))
