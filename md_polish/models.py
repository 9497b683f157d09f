"""Data models for md-polish."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class FenceState(Enum):
    """Per-line fence classification.

    Attributes:
        OUTSIDE: Regular Markdown that later passes may rewrite.
        INSIDE: Fenced code that must survive byte for byte.
    """

    OUTSIDE = auto()
    INSIDE = auto()


@dataclass
class FenceContext:
    """Mutable state used while walking lines for fences.

    Attributes:
        state: Current fence state.
        fence_char: Character that opened the active fence, if any.
        fence_length: Number of fence characters that opened the block.
    """

    state: FenceState = FenceState.OUTSIDE
    fence_char: str | None = None
    fence_length: int = 0


@dataclass(frozen=True)
class FenceTag:
    """Fence classification of a single line.

    Attributes:
        state: Whether the line is inside or outside a fence.
        marker: Run of fence characters that is open for this line, or None.
    """

    state: FenceState
    marker: str | None = None

    @property
    def inside(self) -> bool:
        return self.state is FenceState.INSIDE


class LinkKind(Enum):
    LINK = auto()
    IMAGE = auto()


class DestinationSyntax(Enum):
    """How a link destination was written.

    Attributes:
        BRACKETED: Between ``<`` and ``>``; literal spaces allowed, ``\\>`` escapes.
        PLAIN: Bare text ended by whitespace or ``)``; ``\\(``, ``\\)`` and
            ``\\ `` escapes.
    """

    BRACKETED = auto()
    PLAIN = auto()


Span = tuple[int, int]


@dataclass(frozen=True)
class LinkConstruct:
    """A link or image located in scanned text.

    All spans are half-open offsets into the scanned text.

    Attributes:
        kind: Link or image.
        label_span: Text between the label brackets.
        destination_span: Raw destination, without ``<``/``>`` when bracketed.
        title_span: Raw title including its delimiters, or None.
        syntax: Destination syntax in effect.
        span: Whole construct, from ``!``/``[`` through the closing ``)``.
    """

    kind: LinkKind
    label_span: Span
    destination_span: Span
    title_span: Span | None
    syntax: DestinationSyntax
    span: Span


@dataclass(frozen=True)
class ParsedDestination:
    """Destination split into its URL and optional title.

    Attributes:
        url_text: URL with the syntax's delimiter escapes resolved.
        title_text: Title without its delimiters, or None.
    """

    url_text: str
    title_text: str | None = None


@dataclass
class TableBlock:
    """A recognized Markdown table.

    Attributes:
        start: Zero-based index of the header line.
        header_row: Header line as found in the document.
        separator_row: Separator line as found in the document.
        body_rows: Body lines, in order, including malformed ones.
        column_count: Number of columns fixed by header and separator.
    """

    start: int
    header_row: str
    separator_row: str
    body_rows: list[str] = field(default_factory=list)
    column_count: int = 0

    @property
    def end(self) -> int:
        """Index one past the last line of the block."""
        return self.start + 2 + len(self.body_rows)
