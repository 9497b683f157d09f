"""Splitting and rendering link destinations."""

from __future__ import annotations

from .constants import BRACKETED_ESCAPES, PLAIN_ESCAPES
from .models import DestinationSyntax, LinkConstruct, ParsedDestination


def unescape_destination(raw_destination: str, syntax: DestinationSyntax) -> str:
    r"""Resolve the escapes that collide with a destination's delimiters.

    Plain destinations unescape ``\(``, ``\)`` and ``\ ``; bracketed
    destinations unescape ``\>``. Any other backslash pair is kept as written.

    Args:
        raw_destination: Destination text as it appears in the document.
        syntax: Syntax the destination was written in.

    Returns:
        str: Destination with delimiter escapes resolved.

    Examples:
        unescape_destination(r"\(a\)b", DestinationSyntax.PLAIN)  # "(a)b"
        unescape_destination(r"a\_b", DestinationSyntax.PLAIN)  # r"a\_b"
    """
    escapes = PLAIN_ESCAPES if syntax is DestinationSyntax.PLAIN else BRACKETED_ESCAPES

    parts: list[str] = []
    i = 0
    while i < len(raw_destination):
        char = raw_destination[i]
        if char == "\\" and i + 1 < len(raw_destination):
            escaped = raw_destination[i + 1]
            parts.append(escaped if escaped in escapes else char + escaped)
            i += 2
            continue
        parts.append(char)
        i += 1

    return "".join(parts)


def parse_destination(
    raw_destination: str,
    raw_title: str | None = None,
    syntax: DestinationSyntax = DestinationSyntax.PLAIN,
) -> ParsedDestination:
    """Split a raw destination and title into their text values.

    Args:
        raw_destination: Destination without surrounding ``<``/``>``.
        raw_title: Title including its delimiting quotes or parentheses.
        syntax: Syntax the destination was written in.

    Returns:
        ParsedDestination: URL text and title text (None when absent).

    Examples:
        parse_destination(r"a\\ b", '"title"')  # url_text="a b", title_text="title"
    """
    title_text = None
    if raw_title is not None and len(raw_title) >= 2:
        title_text = raw_title[1:-1]

    return ParsedDestination(
        url_text=unescape_destination(raw_destination, syntax),
        title_text=title_text,
    )


def parse_construct(text: str, construct: LinkConstruct) -> ParsedDestination:
    """Parse the destination and title of a scanned construct."""
    dest_start, dest_end = construct.destination_span
    raw_title = None
    if construct.title_span is not None:
        title_start, title_end = construct.title_span
        raw_title = text[title_start:title_end]
    return parse_destination(text[dest_start:dest_end], raw_title, construct.syntax)


def _has_balanced_parentheses(url: str) -> bool:
    depth = 0
    for char in url:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def format_destination(url: str, syntax: DestinationSyntax) -> str:
    r"""Render a URL as destination text for the given syntax.

    The inverse of `unescape_destination`. Plain destinations escape spaces
    and, when they do not pair up, parentheses; balanced parentheses are
    written literally. Bracketed destinations escape ``>``. The surrounding
    ``<``/``>`` are not added.

    Examples:
        format_destination("https://ex.com/(a)b", DestinationSyntax.PLAIN)  # unchanged
        format_destination("https://ex.com/a b)", DestinationSyntax.PLAIN)
        # r"https://ex.com/a\ b\)"
    """
    if syntax is DestinationSyntax.BRACKETED:
        return url.replace(">", "\\>")

    escape_parentheses = not _has_balanced_parentheses(url)
    parts: list[str] = []
    for char in url:
        if char == " " or (escape_parentheses and char in "()"):
            parts.append("\\")
        parts.append(char)
    return "".join(parts)
