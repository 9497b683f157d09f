"""Polishing pipeline: link resolution followed by table compaction."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from itertools import groupby

from .config import PolishConfig
from .constants import FENCE_PATTERN
from .destination import format_destination, parse_construct
from .fences import classify_fences
from .models import FenceTag
from .resolver import resolve_url
from .scanner import scan_links
from .tables import compact_tables

logger = logging.getLogger(__name__)


def resolve_links_in_text(text: str, base_url: str) -> str:
    """Rewrite the link and image destinations of unfenced text.

    Only destinations whose resolved URL differs from the written one are
    re-rendered; all other bytes are copied through.

    Args:
        text: Markdown text containing no fenced code.
        base_url: URL of the page the Markdown came from.

    Returns:
        str: Text with relative destinations made absolute.

    Examples:
        resolve_links_in_text("![a](img.png)", "https://ex.com/p/")
        # "![a](https://ex.com/p/img.png)"
    """
    parts: list[str] = []
    cursor = 0
    for construct in scan_links(text):
        parsed = parse_construct(text, construct)
        resolved = resolve_url(parsed.url_text, base_url)
        if resolved == parsed.url_text:
            continue

        dest_start, dest_end = construct.destination_span
        parts.append(text[cursor:dest_start])
        parts.append(format_destination(resolved, construct.syntax))
        cursor = dest_end
        logger.debug("Resolved %r to %r", parsed.url_text, resolved)

    if not parts:
        return text
    parts.append(text[cursor:])
    return "".join(parts)


def _is_fenced(line: str, tag: FenceTag) -> bool:
    # Closing delimiters are tagged outside; their backticks never open a code span
    return tag.inside or bool(FENCE_PATTERN.match(line.lstrip()))


def _fence_runs(lines: Sequence[str], tags: Sequence[FenceTag]) -> Iterator[tuple[bool, list[str]]]:
    """Group consecutive lines by whether they belong to a fence."""
    for fenced, group in groupby(zip(lines, tags), key=lambda pair: _is_fenced(*pair)):
        yield fenced, [line for line, _ in group]


def _resolve_links(lines: Sequence[str], tags: Sequence[FenceTag], base_url: str) -> list[str]:
    resolved: list[str] = []
    for fenced, run in _fence_runs(lines, tags):
        if fenced:
            resolved.extend(run)
            continue
        # Destinations never span a line break, so the run keeps its line count
        resolved.extend(resolve_links_in_text("".join(run), base_url).splitlines(keepends=True))
    return resolved


def resolve_markdown_urls(markdown_text: str, base_url: str) -> str:
    """Make every relative link and image destination absolute.

    Fenced code blocks are left untouched.

    Args:
        markdown_text: Markdown document.
        base_url: URL of the page the Markdown came from.

    Returns:
        str: The document with resolved destinations.

    Examples:
        resolve_markdown_urls("[link](../two)", "https://example.com/docs/en/page.md")
        # "[link](https://example.com/docs/two)"
    """
    lines = markdown_text.splitlines(keepends=True)
    return "".join(_resolve_links(lines, classify_fences(lines), base_url))


def process(markdown_text: str, base_url: str, config: PolishConfig | None = None) -> str:
    """Polish converted Markdown for publication.

    Classifies fences once, resolves link and image destinations against
    `base_url`, then compacts tables. Fenced code is never modified and
    malformed constructs are left as they are; the function never raises on
    bad Markdown or bad URLs. The trailing newline, if any, is preserved.

    Args:
        markdown_text: Markdown produced by an HTML to Markdown conversion.
        base_url: URL of the page the Markdown came from.
        config: Configuration selecting the passes and separator width.
            Defaults to a new `PolishConfig` when omitted.

    Returns:
        str: The polished Markdown.

    Examples:
        process("| a   |  bb |\\n|----|----|\\n[x](/p/q)", "https://ex.com/x/y")
        # "| a | bb |\\n| - | - |\\n[x](https://ex.com/p/q)"
    """
    config = config or PolishConfig()
    lines = markdown_text.splitlines(keepends=True)
    tags = classify_fences(lines)

    if config.resolve_urls:
        lines = _resolve_links(lines, tags, base_url)
    if config.compact_tables:
        lines = compact_tables(lines, tags, config)

    return "".join(lines)
