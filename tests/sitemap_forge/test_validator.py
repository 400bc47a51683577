"""
Unit tests for record validation.
"""

import copy

import pytest

from sitemap_forge.types import (
    AlternateItem, ChangeFrequency, ErrorKind, FieldError, ImageItem, NewsItem,
    SitemapIndexItem, SitemapItem, TranslationItem, VideoItem
)
from sitemap_forge.validator import DataValidator, validate_index_item, validate_item


def _fields(errors):
    return [error.field for error in errors]


class TestValidateItem:
    """Test validation of sitemap items."""

    def test_valid_item(self, rich_item):
        """Test that a fully populated valid item has no errors."""
        assert validate_item(rich_item) == []

    def test_invalid_location(self):
        errors = validate_item(SitemapItem(loc="not a url"))
        assert len(errors) == 1
        assert errors[0].kind == ErrorKind.URL
        assert errors[0].field == "loc"
        assert errors[0].value == "not a url"

    def test_missing_location(self):
        errors = validate_item(SitemapItem(loc=""))
        assert errors[0].kind == ErrorKind.REQUIRED
        assert errors[0].message == "URL (loc) is required"

    def test_collects_every_error(self):
        """Test that validation does not stop at the first failing rule."""
        item = SitemapItem(loc="bad", priority=1.5, lastmod="garbage", changefreq="sometimes")
        errors = validate_item(item)

        assert _fields(errors) == ["loc", "priority", "lastmod", "changefreq"]
        assert [e.kind for e in errors] == [
            ErrorKind.URL, ErrorKind.PRIORITY, ErrorKind.DATE, ErrorKind.FORMAT
        ]

    @pytest.mark.parametrize("priority", [0, 0.0, 0.5, 1, 1.0])
    def test_priority_bounds_inclusive(self, priority):
        assert validate_item(SitemapItem(loc="https://example.com/", priority=priority)) == []

    @pytest.mark.parametrize("priority", [-0.1, 1.01, float("nan"), True, "0.5"])
    def test_priority_rejected(self, priority):
        errors = validate_item(SitemapItem(loc="https://example.com/", priority=priority))
        assert [e.kind for e in errors] == [ErrorKind.PRIORITY]

    def test_future_lastmod(self):
        errors = validate_item(SitemapItem(loc="https://example.com/", lastmod="2999-01-01"))
        assert errors[0].kind == ErrorKind.DATE
        assert "future" in errors[0].message

    def test_natural_language_lastmod(self):
        assert validate_item(SitemapItem(loc="https://example.com/", lastmod="Jan 15, 2024")) == []

    @pytest.mark.parametrize("lastmod", ["0001-01-01T00:00:00+01:00", "9999-12-31T23:59:59-01:00"])
    def test_out_of_range_lastmod_reported(self, lastmod):
        """Test that a date outside the UTC range is an error, not an exception."""
        errors = validate_item(SitemapItem(loc="https://example.com/", lastmod=lastmod))
        assert [(e.field, e.kind) for e in errors] == [("lastmod", ErrorKind.DATE)]

    def test_changefreq_enum_accepted(self):
        item = SitemapItem(loc="https://example.com/", changefreq=ChangeFrequency.MONTHLY)
        assert validate_item(item) == []

    def test_does_not_mutate_input(self, rich_item):
        rich_item.priority = 3
        before = copy.deepcopy(rich_item)
        validate_item(rich_item)
        assert rich_item == before


class TestNestedValidation:
    """Test field paths of nested records."""

    def test_image_index_in_path(self):
        item = SitemapItem(
            loc="https://example.com/",
            images=[ImageItem(url="https://example.com/a.jpg"), ImageItem(url="bad")],
        )
        errors = validate_item(item)
        assert _fields(errors) == ["images[1].image.url"]
        assert errors[0].kind == ErrorKind.URL

    def test_video_rules(self):
        item = SitemapItem(
            loc="https://example.com/",
            videos=[VideoItem(title="", description="", thumbnail_url="", duration=-1, rating=6)],
        )
        errors = validate_item(item)
        assert _fields(errors) == [
            "videos[0].video.title",
            "videos[0].video.description",
            "videos[0].video.thumbnail_url",
            "videos[0].video.duration",
            "videos[0].video.rating",
        ]
        assert [e.kind for e in errors] == [
            ErrorKind.REQUIRED, ErrorKind.REQUIRED, ErrorKind.REQUIRED, ErrorKind.FORMAT, ErrorKind.FORMAT
        ]

    @pytest.mark.parametrize("duration", [1.5, True, "120"])
    def test_video_duration_must_be_integer(self, duration):
        video = VideoItem(title="T", description="D", thumbnail_url="https://example.com/t.jpg", duration=duration)
        errors = DataValidator().validate_video_item(video)
        assert _fields(errors) == ["video.duration"]

    def test_video_zero_duration_and_rating(self):
        video = VideoItem(title="T", description="D", thumbnail_url="https://example.com/t.jpg",
                          duration=0, rating=0.0)
        assert DataValidator().validate_video_item(video) == []

    def test_translation_and_alternate(self):
        item = SitemapItem(
            loc="https://example.com/",
            translations=[TranslationItem(language="", url="https://example.com/fr")],
            alternates=[AlternateItem(url="/mobile")],
        )
        errors = validate_item(item)
        assert _fields(errors) == ["translations[0].translation.language", "alternates[0].alternate.url"]

    def test_news_fields_unprefixed(self):
        item = SitemapItem(
            loc="https://example.com/",
            news=NewsItem(site_name="", language="", publication_date=""),
        )
        errors = validate_item(item)
        assert _fields(errors) == ["news.site_name", "news.language", "news.publication_date"]
        assert all(e.kind == ErrorKind.REQUIRED for e in errors)

    def test_news_future_publication_allowed(self):
        news = NewsItem(site_name="Example", language="en", publication_date="2999-01-01T00:00:00Z")
        assert DataValidator().validate_news_item(news) == []

    def test_news_invalid_publication_date(self):
        news = NewsItem(site_name="Example", language="en", publication_date="yesterday")
        errors = DataValidator().validate_news_item(news)
        assert errors[0].kind == ErrorKind.DATE


class TestValidateIndexItem:
    """Test validation of sitemap index entries."""

    def test_valid(self):
        assert validate_index_item(SitemapIndexItem(loc="https://example.com/sitemap.xml")) == []

    def test_future_lastmod_allowed(self):
        item = SitemapIndexItem(loc="https://example.com/sitemap.xml", lastmod="2999-01-01")
        assert validate_index_item(item) == []

    def test_invalid(self):
        errors = validate_index_item(SitemapIndexItem(loc="sitemap.xml", lastmod="never"))
        assert _fields(errors) == ["loc", "lastmod"]
        assert errors[0].message == "Sitemap URL (loc) is not valid"


class TestFieldError:
    """Test field error value type."""

    def test_with_prefix(self):
        error = FieldError(ErrorKind.URL, "image.url", "Image URL is not valid", "bad")
        prefixed = error.with_prefix("item[2].images[0]")

        assert prefixed.field == "item[2].images[0].image.url"
        assert prefixed.kind == error.kind
        assert prefixed.message == error.message
        assert error.field == "image.url"
