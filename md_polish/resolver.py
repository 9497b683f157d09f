"""Relative URL resolution."""

from __future__ import annotations

import logging
from urllib.parse import urljoin, urlsplit

from .constants import HOST_SCHEMES, SCHEME_PATTERN
from .exceptions import InvalidBaseURLError

logger = logging.getLogger(__name__)


def is_absolute_base(base_url: str) -> bool:
    """Check whether `base_url` can anchor relative references.

    Args:
        base_url: Candidate base URL.

    Returns:
        bool: True when the URL parses and has a scheme, plus a host for
            web schemes such as ``http`` and ``https``.

    Examples:
        is_absolute_base("https://example.com/docs/")  # True
        is_absolute_base("file:///srv/docs/page.md")  # True
        is_absolute_base("not a url")  # False
    """
    try:
        parts = urlsplit(base_url)
    except ValueError:
        return False
    if not parts.scheme:
        return False
    return bool(parts.netloc) or parts.scheme not in HOST_SCHEMES


def resolve_url(url_text: str, base_url: str) -> str:
    """Resolve a link destination against the page URL.

    Destinations that are empty, carry a scheme (``https:``, ``mailto:``,
    ``data:``), or point at a same-page fragment are returned unchanged, as is
    anything that fails to parse. Everything else goes through RFC 3986
    reference resolution.

    Args:
        url_text: Destination with escapes already resolved.
        base_url: URL of the page the Markdown came from.

    Returns:
        str: The absolute URL, or `url_text` when resolution does not apply.

    Examples:
        resolve_url("../r", "https://ex.com/x/y")  # "https://ex.com/r"
        resolve_url("#frag", "https://ex.com/x/y")  # "#frag"
    """
    if not url_text or url_text.startswith("#") or SCHEME_PATTERN.match(url_text):
        return url_text

    if not is_absolute_base(base_url):
        logger.debug("Base URL %r is not absolute; leaving %r unresolved", base_url, url_text)
        return url_text

    try:
        return urljoin(base_url, url_text)
    except ValueError as error:
        logger.debug("Could not resolve %r against %r: %s", url_text, base_url, error)
        return url_text


def require_absolute_base(base_url: str) -> None:
    """Reject a base URL that cannot anchor relative references.

    Raises:
        InvalidBaseURLError: If `base_url` lacks a scheme, or a host for a web
            scheme.

    Examples:
        require_absolute_base("/docs/page")  # raises InvalidBaseURLError
    """
    if not is_absolute_base(base_url):
        raise InvalidBaseURLError(base_url)
