"""
In-memory storage for sitemap records and their configuration.
"""

import copy
from typing import Callable, Iterable, List, Optional

from .types import SitemapConfig, SitemapItem


class SitemapModel:
    """
    Ordered record collection plus configuration.

    Insertion order is output order. Records are copied on the way in and on
    the way out, so callers never hold a reference into the stored list.
    """

    def __init__(self, config: Optional[SitemapConfig] = None):
        self._config = config.copy() if config else SitemapConfig()
        self._items: List[SitemapItem] = []

    def add_item(self, item: SitemapItem) -> None:
        self._items.append(copy.deepcopy(item))

    def get_items(self) -> List[SitemapItem]:
        return copy.deepcopy(self._items)

    def iter_items(self) -> Iterable[SitemapItem]:
        """Iterate stored records without copying. Read-only use within the package."""
        return iter(self._items)

    def clear(self) -> None:
        self._items = []

    def remove_items(self, predicate: Callable[[SitemapItem], bool]) -> int:
        """Drop records matching ``predicate``; returns how many were removed."""
        kept = [item for item in self._items if not predicate(copy.deepcopy(item))]
        removed = len(self._items) - len(kept)
        self._items = kept
        return removed

    def get_config(self) -> SitemapConfig:
        return self._config.copy()

    def set_config(self, config: SitemapConfig) -> None:
        self._config = config.copy()

    def get_item_count(self) -> int:
        return len(self._items)

    def should_split(self) -> bool:
        """True once the record count reaches ``max_items``."""
        return len(self._items) >= self._config.max_items
