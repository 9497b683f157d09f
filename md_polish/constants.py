"""Constants used across the md-polish package."""

from __future__ import annotations

import re

from .config import PolishConfig

DEFAULT_CONFIG = PolishConfig()

# Fences are matched against the line with leading whitespace removed.
FENCE_PATTERN = re.compile(r"^(?P<fence>`{3,}|~{3,})")

# Inline code spans never continue past a blank line
BLANK_LINE_PATTERN = re.compile(r"\n[ \t]*\r?\n")

# RFC 3986 scheme: ALPHA *( ALPHA / DIGIT / "+" / "-" / "." ) ":"
SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")

# Schemes whose URLs cannot be a resolution base without a host
HOST_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp"})

# Link destinations
PLAIN_ESCAPES = frozenset("() ")
BRACKETED_ESCAPES = frozenset(">")
TITLE_DELIMITERS = {'"': '"', "'": "'", "(": ")"}
MAX_LABEL_DEPTH = 2

# Tables
SEPARATOR_LINE_PATTERN = re.compile(r"^[\s|:\-]+$")
SEPARATOR_CELL_PATTERN = re.compile(r"^(?P<left>:?)-+(?P<right>:?)$")

# Limits
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size
