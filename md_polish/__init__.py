"""
md-polish: publication cleanup for Markdown converted from web pages.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    md-polish page.md --base-url https://example.com/docs/page -o page.md

Library Usage:
    from md_polish import process

    polished = process(markdown, "https://example.com/docs/page")
"""

from .config import ConfigError, PolishConfig
from .destination import format_destination, parse_construct, parse_destination
from .exceptions import InputTooLargeError, InvalidBaseURLError, PolishError
from .fences import classify_fences
from .models import (
    DestinationSyntax,
    FenceState,
    FenceTag,
    LinkConstruct,
    LinkKind,
    ParsedDestination,
    TableBlock,
)
from .pipeline import process, resolve_markdown_urls
from .resolver import resolve_url
from .scanner import scan_links
from .tables import compact_markdown_tables, find_table_blocks

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "process",
    "resolve_markdown_urls",
    "compact_markdown_tables",
    "classify_fences",
    "scan_links",
    "parse_destination",
    "parse_construct",
    "format_destination",
    "resolve_url",
    "find_table_blocks",
    # Data models
    "DestinationSyntax",
    "FenceState",
    "FenceTag",
    "LinkConstruct",
    "LinkKind",
    "ParsedDestination",
    "TableBlock",
    "PolishConfig",
    # Exceptions
    "ConfigError",
    "InputTooLargeError",
    "InvalidBaseURLError",
    "PolishError",
    # Version
    "__version__",
]
