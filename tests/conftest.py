import pytest

from sitemap_forge import (
    AlternateItem, ImageItem, NewsItem, Sitemap, SitemapConfig, SitemapItem,
    TranslationItem, VideoItem
)


@pytest.fixture
def sitemap() -> Sitemap:
    """Sitemap with default configuration."""
    return Sitemap()


@pytest.fixture
def pretty_sitemap() -> Sitemap:
    """Sitemap rendering with indentation."""
    return Sitemap(SitemapConfig(pretty=True))


@pytest.fixture
def rich_item() -> SitemapItem:
    """Sample item using every extension."""
    return SitemapItem(
        loc="https://example.com/article",
        lastmod="2024-01-15T10:30:00.000Z",
        priority=0.8,
        changefreq="weekly",
        title="Sample Article",
        images=[
            ImageItem(url="https://example.com/image.jpg", title="Image Title", caption="Image Caption"),
        ],
        videos=[
            VideoItem(
                title="Video Title",
                description="Video description & more",
                thumbnail_url="https://example.com/thumb.jpg",
                duration=120,
            ),
        ],
        translations=[
            TranslationItem(language="es", url="https://example.com/es/article"),
        ],
        alternates=[
            AlternateItem(url="https://m.example.com/article", media="only screen and (max-width: 640px)"),
        ],
        news=NewsItem(
            site_name="Example News",
            language="en",
            publication_date="2024-01-15T10:00:00Z",
            title="News Article Title",
        ),
    )
