"""
URL validation and normalization for sitemap entries.
"""

import ipaddress
import posixpath
import re
from typing import Iterable, Optional
from urllib.parse import SplitResult, urljoin, urlsplit, urlunsplit


MAX_URL_LENGTH = 2048

VALID_WEB_EXTENSIONS = (
    ".html", ".htm", ".php", ".asp", ".aspx", ".jsp", ".cfm",
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
    ".txt", ".xml", ".rss", ".atom",
)

LOCALHOST_NAMES = {"localhost", "localhost.localdomain"}

PRIVATE_NETWORKS = (
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
)

_INVALID_HOST_CHARS = re.compile(r"[\s<>\"{}|\\^`]")


def _split(url: str) -> Optional[SplitResult]:
    """Split ``url`` if it is a valid absolute http(s) URL, else ``None``."""
    if not url or not isinstance(url, str):
        return None

    if len(url) > MAX_URL_LENGTH:
        return None

    try:
        parts = urlsplit(url)
        hostname = parts.hostname
    except ValueError:
        return None

    if parts.scheme.lower() not in ("http", "https"):
        return None

    if not hostname or _INVALID_HOST_CHARS.search(hostname):
        return None

    return parts


def is_valid_url(url: str) -> bool:
    """
    Check that ``url`` is an absolute http(s) URL with a hostname.

    URLs longer than 2048 characters are rejected.
    """
    return _split(url) is not None


def normalize_url(url: str) -> str:
    """Strip the fragment and give an empty path a ``/``. Invalid input is returned as-is."""
    parts = _split(url)
    if parts is None:
        return url

    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", parts.query, ""))


def resolve_url(url: str, base_url: str) -> str:
    """
    Resolve a possibly relative URL against ``base_url``.

    Absolute URLs are returned unchanged. When the base itself is not an
    absolute URL the original string is returned.
    """
    if not url:
        return url

    if is_valid_url(url):
        return url

    if not base_url:
        return url

    try:
        base = urlsplit(base_url)
    except ValueError:
        return url

    if not base.scheme or not base.netloc:
        return url

    try:
        resolved = urljoin(base_url, url)
    except ValueError:
        return url

    # urljoin leaves an empty path on bare hosts
    resolved_parts = urlsplit(resolved)
    if not resolved_parts.path and resolved_parts.netloc:
        resolved = urlunsplit(resolved_parts._replace(path="/"))

    return resolved


def is_domain_allowed(url: str, allowed_domains: Optional[Iterable[str]] = None) -> bool:
    """Exact or subdomain match against ``allowed_domains``; no restrictions when empty."""
    allowed = [domain.lower() for domain in (allowed_domains or [])]
    if not allowed:
        return True

    parts = _split(url)
    if parts is None:
        return False

    hostname = parts.hostname.lower()
    return any(hostname == domain or hostname.endswith(f".{domain}") for domain in allowed)


def extract_domain(url: str) -> Optional[str]:
    parts = _split(url)
    if parts is None:
        return None
    return parts.hostname


def has_valid_web_extension(url: str) -> bool:
    """True when the path has no extension or a known web/document/feed extension."""
    parts = _split(url)
    if parts is None:
        return False

    extension = posixpath.splitext(parts.path)[1].lower()
    if not extension:
        return True

    return extension in VALID_WEB_EXTENSIONS


def is_accessible_url(url: str) -> bool:
    """
    Heuristic check that a crawler could reach ``url``.

    Rejects localhost, loopback addresses and the RFC 1918 private ranges.
    No network request is made.
    """
    parts = _split(url)
    if parts is None:
        return False

    hostname = parts.hostname.lower()
    if hostname in LOCALHOST_NAMES:
        return False

    try:
        address = ipaddress.ip_address(hostname)
    except ValueError:
        return True

    if address.is_loopback:
        return False

    return not any(address in network for network in PRIVATE_NETWORKS)
