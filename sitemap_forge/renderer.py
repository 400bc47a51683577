"""
Serialization of sitemap records to the sitemaps.org XML grammar.
"""

from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from .dates import format_date
from .types import (
    IMAGE_NAMESPACE, NEWS_NAMESPACE, SITEMAP_NAMESPACE, VIDEO_NAMESPACE, XHTML_NAMESPACE,
    AlternateItem, DateInput, ImageItem, NewsItem, SitemapIndexItem, SitemapItem,
    TranslationItem, VideoItem
)
from .xml_utils import cdata, create_namespace_declarations, escape_xml, xml_declaration, xml_stylesheet


BUILTIN_PREFIXES = ("image", "video", "xhtml", "news")
_DEFAULT_PREFIXES = ("", "default", "sitemap")


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"


class XMLRenderer:
    """
    Single-pass string renderer for sitemaps and sitemap indexes.

    Pretty mode indents two spaces per nesting level below the root; compact
    mode writes one tag per line with no indentation. Free text is escaped
    unless escaping is disabled, in which case it is written verbatim.
    Video titles and descriptions are always written as CDATA.
    """

    def __init__(self, escaping: bool = True, pretty: bool = False):
        self.escaping = escaping
        self.pretty = pretty
        self._lines: List[str] = []

    def _escape(self, text) -> str:
        text = str(text)
        return escape_xml(text) if self.escaping else text

    def _date_text(self, value: DateInput) -> str:
        if isinstance(value, date):
            return format_date(value)
        return self._escape(value)

    def _emit(self, level: int, text: str) -> None:
        indent = "  " * level if self.pretty else ""
        self._lines.append(indent + text)

    def _element(self, level: int, tag: str, text: str) -> None:
        self._emit(level, f"<{tag}>{text}</{tag}>")

    def _start(self, stylesheet: Optional[str]) -> None:
        self._lines = [xml_declaration()]
        if stylesheet:
            self._lines.append(xml_stylesheet(stylesheet, escaping=self.escaping))

    def _finish(self) -> str:
        xml = "\n".join(self._lines)
        self._lines = []
        return xml

    # Sitemap (urlset)

    def namespaces_for(self, items: Sequence[SitemapItem],
                       custom: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """
        Namespace declarations for the urlset root.

        Extension namespaces are declared only when at least one item uses the
        extension. Custom namespaces follow; they cannot replace the default or
        a built-in prefix.
        """
        namespaces = {"sitemap": SITEMAP_NAMESPACE}

        if any(item.images for item in items):
            namespaces["image"] = IMAGE_NAMESPACE
        if any(item.videos for item in items):
            namespaces["video"] = VIDEO_NAMESPACE
        if any(item.translations or item.alternates for item in items):
            namespaces["xhtml"] = XHTML_NAMESPACE
        if any(item.news is not None for item in items):
            namespaces["news"] = NEWS_NAMESPACE

        for prefix, uri in (custom or {}).items():
            if prefix in _DEFAULT_PREFIXES or prefix in BUILTIN_PREFIXES:
                continue
            namespaces[prefix] = uri

        return namespaces

    def render_urlset(self, items: Iterable[SitemapItem], stylesheet: Optional[str] = None,
                      namespaces: Optional[Dict[str, str]] = None) -> str:
        items = list(items)
        self._start(stylesheet)
        self._lines.append(f"<urlset{create_namespace_declarations(self.namespaces_for(items, namespaces))}>")

        for item in items:
            self._render_item(item)

        self._lines.append("</urlset>")
        return self._finish()

    def _render_item(self, item: SitemapItem) -> None:
        self._emit(1, "<url>")
        self._element(2, "loc", self._escape(item.loc))

        if item.lastmod:
            self._element(2, "lastmod", self._date_text(item.lastmod))

        if item.changefreq:
            changefreq = getattr(item.changefreq, "value", item.changefreq)
            self._element(2, "changefreq", self._escape(changefreq))

        if item.priority is not None:
            self._element(2, "priority", self._escape(item.priority))

        for image in item.images or []:
            self._render_image(image)

        for video in item.videos or []:
            self._render_video(video)

        for translation in item.translations or []:
            self._render_translation(translation)

        for alternate in item.alternates or []:
            self._render_alternate(alternate)

        if item.news is not None:
            self._render_news(item.news)

        self._emit(1, "</url>")

    def _render_image(self, image: ImageItem) -> None:
        self._emit(2, "<image:image>")
        self._element(3, "image:loc", self._escape(image.url))
        if image.title:
            self._element(3, "image:title", self._escape(image.title))
        if image.caption:
            self._element(3, "image:caption", self._escape(image.caption))
        if image.geo_location:
            self._element(3, "image:geo_location", self._escape(image.geo_location))
        if image.license:
            self._element(3, "image:license", self._escape(image.license))
        self._emit(2, "</image:image>")

    def _render_video(self, video: VideoItem) -> None:
        self._emit(2, "<video:video>")
        self._element(3, "video:thumbnail_loc", self._escape(video.thumbnail_url))
        self._element(3, "video:title", cdata(video.title))
        self._element(3, "video:description", cdata(video.description))

        if video.duration is not None:
            self._element(3, "video:duration", self._escape(video.duration))
        if video.expiration_date:
            self._element(3, "video:expiration_date", self._date_text(video.expiration_date))
        if video.rating is not None:
            self._element(3, "video:rating", self._escape(video.rating))
        if video.view_count is not None:
            self._element(3, "video:view_count", self._escape(video.view_count))
        if video.publication_date:
            self._element(3, "video:publication_date", self._date_text(video.publication_date))
        if video.family_friendly is not None:
            self._element(3, "video:family_friendly", _yes_no(video.family_friendly))
        if video.restriction:
            self._emit(3, f'<video:restriction relationship="allow">{self._escape(video.restriction)}'
                          f'</video:restriction>')
        if video.gallery_loc:
            self._element(3, "video:gallery_loc", self._escape(video.gallery_loc))
        if video.price:
            self._element(3, "video:price", self._escape(video.price))
        if video.requires_subscription is not None:
            self._element(3, "video:requires_subscription", _yes_no(video.requires_subscription))
        if video.platform:
            self._emit(3, f'<video:platform relationship="allow">{self._escape(video.platform)}'
                          f'</video:platform>')
        if video.live is not None:
            self._element(3, "video:live", _yes_no(video.live))

        self._emit(2, "</video:video>")

    def _render_translation(self, translation: TranslationItem) -> None:
        self._emit(2, f'<xhtml:link rel="alternate" hreflang="{self._escape(translation.language)}" '
                      f'href="{self._escape(translation.url)}" />')

    def _render_alternate(self, alternate: AlternateItem) -> None:
        media = f' media="{self._escape(alternate.media)}"' if alternate.media else ""
        self._emit(2, f'<xhtml:link rel="alternate"{media} href="{self._escape(alternate.url)}" />')

    def _render_news(self, news: NewsItem) -> None:
        self._emit(2, "<news:news>")
        self._emit(3, "<news:publication>")
        self._element(4, "news:name", self._escape(news.site_name))
        self._element(4, "news:language", self._escape(news.language))
        self._emit(3, "</news:publication>")
        self._element(3, "news:publication_date", self._date_text(news.publication_date))
        if news.title:
            self._element(3, "news:title", self._escape(news.title))
        if news.keywords:
            self._element(3, "news:keywords", self._escape(news.keywords))
        if news.stock_tickers:
            self._element(3, "news:stock_tickers", self._escape(news.stock_tickers))
        self._emit(2, "</news:news>")

    # Sitemap index

    def render_sitemapindex(self, items: Iterable[SitemapIndexItem],
                            stylesheet: Optional[str] = None) -> str:
        self._start(stylesheet)
        self._lines.append(f'<sitemapindex xmlns="{SITEMAP_NAMESPACE}">')

        for item in items:
            self._emit(1, "<sitemap>")
            self._element(2, "loc", self._escape(item.loc))
            if item.lastmod:
                self._element(2, "lastmod", self._date_text(item.lastmod))
            self._emit(1, "</sitemap>")

        self._lines.append("</sitemapindex>")
        return self._finish()
