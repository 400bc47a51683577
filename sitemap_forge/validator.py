"""
Field-level validation of sitemap records.

Validation never mutates its input and never stops at the first problem:
every applicable rule is checked and all violations are returned together.
"""

import math
from typing import Any, List

import structlog

from .dates import is_valid_date, is_valid_lastmod_date
from .types import (
    AlternateItem, ChangeFrequency, ErrorKind, FieldError, ImageItem,
    NewsItem, SitemapIndexItem, SitemapItem, TranslationItem, VideoItem
)
from .urls import is_valid_url


logger = structlog.get_logger(__name__)

VALID_FREQUENCIES = [freq.value for freq in ChangeFrequency]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class DataValidator:
    """
    Rule checker for sitemap items and sitemap index items.

    Field paths of nested errors are indexed so a caller can locate the
    failing entry, e.g. ``images[1].image.url``.
    """

    def is_valid_url(self, url: Any) -> bool:
        return is_valid_url(url)

    def is_valid_priority(self, priority: Any) -> bool:
        return _is_number(priority) and math.isfinite(priority) and 0.0 <= priority <= 1.0

    def is_valid_date(self, value: Any) -> bool:
        return is_valid_date(value)

    def is_valid_changefreq(self, freq: Any) -> bool:
        if isinstance(freq, ChangeFrequency):
            return True
        return freq in VALID_FREQUENCIES

    def _check_url(self, errors: List[FieldError], field: str, value: Any, label: str) -> None:
        if not value:
            errors.append(FieldError(ErrorKind.REQUIRED, field, f"{label} is required", value))
        elif not self.is_valid_url(value):
            errors.append(FieldError(ErrorKind.URL, field, f"{label} is not valid", value))

    def validate_image_item(self, image: ImageItem) -> List[FieldError]:
        errors: List[FieldError] = []
        self._check_url(errors, "image.url", image.url, "Image URL")
        return errors

    def validate_video_item(self, video: VideoItem) -> List[FieldError]:
        errors: List[FieldError] = []

        if not video.title:
            errors.append(FieldError(ErrorKind.REQUIRED, "video.title", "Video title is required", video.title))

        if not video.description:
            errors.append(FieldError(
                ErrorKind.REQUIRED, "video.description", "Video description is required", video.description
            ))

        self._check_url(errors, "video.thumbnail_url", video.thumbnail_url, "Video thumbnail URL")

        if video.duration is not None and not (
            isinstance(video.duration, int) and not isinstance(video.duration, bool) and video.duration >= 0
        ):
            errors.append(FieldError(
                ErrorKind.FORMAT, "video.duration",
                "Video duration must be a non-negative integer (seconds)", video.duration
            ))

        if video.rating is not None and not (
            _is_number(video.rating) and 0.0 <= video.rating <= 5.0
        ):
            errors.append(FieldError(
                ErrorKind.FORMAT, "video.rating", "Video rating must be between 0.0 and 5.0", video.rating
            ))

        return errors

    def validate_translation_item(self, translation: TranslationItem) -> List[FieldError]:
        errors: List[FieldError] = []

        if not translation.language:
            errors.append(FieldError(
                ErrorKind.REQUIRED, "translation.language", "Translation language is required",
                translation.language
            ))

        self._check_url(errors, "translation.url", translation.url, "Translation URL")
        return errors

    def validate_alternate_item(self, alternate: AlternateItem) -> List[FieldError]:
        errors: List[FieldError] = []
        self._check_url(errors, "alternate.url", alternate.url, "Alternate URL")
        return errors

    def validate_news_item(self, news: NewsItem) -> List[FieldError]:
        """Check news metadata. Future publication dates are allowed."""
        errors: List[FieldError] = []

        if not news.site_name:
            errors.append(FieldError(
                ErrorKind.REQUIRED, "news.site_name", "News site name is required", news.site_name
            ))

        if not news.language:
            errors.append(FieldError(
                ErrorKind.REQUIRED, "news.language", "News language is required", news.language
            ))

        if not news.publication_date:
            errors.append(FieldError(
                ErrorKind.REQUIRED, "news.publication_date", "News publication date is required",
                news.publication_date
            ))
        elif not self.is_valid_date(news.publication_date):
            errors.append(FieldError(
                ErrorKind.DATE, "news.publication_date", "News publication date is not valid",
                news.publication_date
            ))

        return errors

    def validate_item(self, item: SitemapItem) -> List[FieldError]:
        """
        Validate a complete sitemap item.

        Args:
            item: Item to validate

        Returns:
            All rule violations, empty when the item is valid
        """
        errors: List[FieldError] = []

        self._check_url(errors, "loc", item.loc, "URL (loc)")

        if item.priority is not None and not self.is_valid_priority(item.priority):
            errors.append(FieldError(
                ErrorKind.PRIORITY, "priority", "Priority must be a number between 0.0 and 1.0", item.priority
            ))

        if item.lastmod is not None:
            if not self.is_valid_date(item.lastmod):
                errors.append(FieldError(
                    ErrorKind.DATE, "lastmod", "Last modification date is not valid", item.lastmod
                ))
            elif not is_valid_lastmod_date(item.lastmod):
                errors.append(FieldError(
                    ErrorKind.DATE, "lastmod", "Last modification date cannot be in the future", item.lastmod
                ))

        if item.changefreq is not None and not self.is_valid_changefreq(item.changefreq):
            errors.append(FieldError(
                ErrorKind.FORMAT, "changefreq",
                f"Change frequency must be one of: {', '.join(VALID_FREQUENCIES)}", item.changefreq
            ))

        for index, image in enumerate(item.images or []):
            errors.extend(e.with_prefix(f"images[{index}]") for e in self.validate_image_item(image))

        for index, video in enumerate(item.videos or []):
            errors.extend(e.with_prefix(f"videos[{index}]") for e in self.validate_video_item(video))

        for index, translation in enumerate(item.translations or []):
            errors.extend(
                e.with_prefix(f"translations[{index}]") for e in self.validate_translation_item(translation)
            )

        for index, alternate in enumerate(item.alternates or []):
            errors.extend(e.with_prefix(f"alternates[{index}]") for e in self.validate_alternate_item(alternate))

        if item.news is not None:
            errors.extend(self.validate_news_item(item.news))

        if errors:
            logger.debug("Item failed validation", loc=item.loc, error_count=len(errors))

        return errors

    def validate_index_item(self, item: SitemapIndexItem) -> List[FieldError]:
        """Validate a sitemap index entry. Future ``lastmod`` values are accepted."""
        errors: List[FieldError] = []

        self._check_url(errors, "loc", item.loc, "Sitemap URL (loc)")

        if item.lastmod is not None and not self.is_valid_date(item.lastmod):
            errors.append(FieldError(
                ErrorKind.DATE, "lastmod", "Last modification date is not valid", item.lastmod
            ))

        return errors


_default_validator = DataValidator()


def validate_item(item: SitemapItem) -> List[FieldError]:
    return _default_validator.validate_item(item)


def validate_index_item(item: SitemapIndexItem) -> List[FieldError]:
    return _default_validator.validate_index_item(item)
