"""Link and image destination scanning."""

from __future__ import annotations

from collections.abc import Iterator

from .constants import BLANK_LINE_PATTERN, MAX_LABEL_DEPTH, TITLE_DELIMITERS
from .models import DestinationSyntax, LinkConstruct, LinkKind

_INLINE_WHITESPACE = " \t\r\n"
_LINE_BREAKS = "\n\r\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029"


def is_escaped(text: str, pos: int) -> bool:
    """Determine whether a character is escaped by preceding backslashes.

    Counts consecutive backslashes immediately before `pos`; an odd count marks
    the character as escaped.

    Args:
        text: Text containing the character.
        pos: Zero-based index of the character to inspect.

    Returns:
        bool: True when the character is escaped, otherwise False.

    Examples:
        is_escaped("\\\\[", 2)  # False, two backslashes
        is_escaped("\\[", 1)  # True, one backslash
    """
    backslash_count = 0
    i = pos - 1
    while i >= 0 and text[i] == "\\":
        backslash_count += 1
        i -= 1

    return backslash_count % 2 == 1


def _code_span_end(text: str, pos: int, end: int) -> int:
    """Return the index just past the inline code span opened at `pos`.

    A span opened by N backticks closes at the next run of exactly N
    backticks within the same paragraph. When no such run exists, the
    opening run is literal text and the index past that run is returned.

    Examples:
        _code_span_end("`[a](b)` c", 0, 10)  # 8
        _code_span_end("``a` b", 0, 6)  # 2
    """
    run_end = pos
    while run_end < end and text[run_end] == "`":
        run_end += 1
    run_length = run_end - pos

    paragraph_break = BLANK_LINE_PATTERN.search(text, run_end, end)
    limit = paragraph_break.start() if paragraph_break else end

    i = run_end
    while i < limit:
        if text[i] != "`":
            i += 1
            continue
        close_start = i
        while i < limit and text[i] == "`":
            i += 1
        if i - close_start == run_length:
            return i

    return run_end


def _skip_whitespace(text: str, pos: int, end: int) -> int:
    while pos < end and text[pos] in _INLINE_WHITESPACE:
        pos += 1
    return pos


def _match_label(text: str, open_pos: int, end: int) -> int | None:
    """Find the `]` closing the label opened at `open_pos`.

    Nested brackets are allowed one level deep; escaped brackets do not
    count.

    Returns:
        int | None: Index of the closing bracket, or None when the label is
            unterminated or nested too deeply.
    """
    depth = 0
    i = open_pos
    while i < end:
        char = text[i]
        if char == "\\":
            i += 2
            continue
        if char == "[":
            depth += 1
            if depth > MAX_LABEL_DEPTH:
                return None
        elif char == "]":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


def _match_bracketed_destination(text: str, start: int, end: int) -> int | None:
    """Return the index of the `>` ending a bracketed destination at `start`."""
    i = start
    while i < end:
        char = text[i]
        if char == "\\" and i + 1 < end and text[i + 1] not in _LINE_BREAKS:
            i += 2
            continue
        if char == ">":
            return i
        if char == "<" or char in _LINE_BREAKS:
            return None
        i += 1
    return None


def _match_plain_destination(text: str, start: int, end: int) -> int | None:
    """Return the index just past a plain destination starting at `start`.

    The destination ends at unescaped whitespace or at a `)` that has no
    unescaped `(` to pair with. `\\(`, `\\)` and `\\ ` belong to the
    destination.

    Returns:
        int | None: End index, or None when parentheses are left unbalanced or
            the text runs out.
    """
    depth = 0
    i = start
    while i < end:
        char = text[i]
        if char == "\\" and i + 1 < end and (text[i + 1] == " " or not text[i + 1].isspace()):
            i += 2
            continue
        if char.isspace():
            break
        if char == "(":
            depth += 1
        elif char == ")":
            if depth == 0:
                break
            depth -= 1
        i += 1
    else:
        return None

    if depth != 0:
        return None
    return i


def _match_title(text: str, start: int, end: int) -> int | None:
    """Return the index just past a title whose opening delimiter is at `start`."""
    closer = TITLE_DELIMITERS[text[start]]
    i = start + 1
    while i < end:
        char = text[i]
        if char == "\\":
            i += 2
            continue
        if char == closer:
            return i + 1
        i += 1
    return None


def _match_construct(
    text: str, marker_start: int, open_pos: int, kind: LinkKind, end: int
) -> LinkConstruct | None:
    """Match a complete inline link or image whose label opens at `open_pos`.

    Args:
        text: Text being scanned.
        marker_start: Index of `!` for images, or of `[` for links.
        open_pos: Index of the label's opening bracket.
        kind: Link or image.
        end: Exclusive upper bound of the scan.

    Returns:
        LinkConstruct | None: The construct, or None when the text at
            `open_pos` is not a well-formed inline link.
    """
    label_close = _match_label(text, open_pos, end)
    if label_close is None:
        return None

    paren_pos = label_close + 1
    if paren_pos >= end or text[paren_pos] != "(":
        return None

    dest_start = _skip_whitespace(text, paren_pos + 1, end)
    if dest_start < end and text[dest_start] == "<":
        syntax = DestinationSyntax.BRACKETED
        dest_start += 1
        dest_end = _match_bracketed_destination(text, dest_start, end)
        if dest_end is None:
            return None
        cursor = dest_end + 1
    else:
        syntax = DestinationSyntax.PLAIN
        dest_end = _match_plain_destination(text, dest_start, end)
        if dest_end is None:
            return None
        cursor = dest_end

    title_span = None
    after = _skip_whitespace(text, cursor, end)
    if after > cursor and after < end and text[after] in TITLE_DELIMITERS:
        title_end = _match_title(text, after, end)
        if title_end is None:
            return None
        title_span = (after, title_end)
        after = _skip_whitespace(text, title_end, end)

    if after >= end or text[after] != ")":
        return None

    return LinkConstruct(
        kind=kind,
        label_span=(open_pos + 1, label_close),
        destination_span=(dest_start, dest_end),
        title_span=title_span,
        syntax=syntax,
        span=(marker_start, after + 1),
    )


def _scan(text: str, start: int, end: int) -> Iterator[LinkConstruct]:
    i = start
    while i < end:
        char = text[i]

        if char == "`":
            i = _code_span_end(text, i, end)
            continue

        if char == "\\":
            i += 2
            continue

        if char == "!" and i + 1 < end and text[i + 1] == "[":
            kind, open_pos = LinkKind.IMAGE, i + 1
        elif char == "[":
            kind, open_pos = LinkKind.LINK, i
        else:
            i += 1
            continue

        construct = _match_construct(text, i, open_pos, kind, end)
        if construct is None:
            i = open_pos + 1
            continue

        # Images inside a label (badges wrapped in links) come first
        yield from _scan(text, *construct.label_span)
        yield construct
        i = construct.span[1]


def scan_links(text: str) -> Iterator[LinkConstruct]:
    r"""Locate inline links and images in unfenced Markdown text.

    Constructs are yielded in order of their destinations, so an image nested
    in a link label comes before the enclosing link. Inline code spans and
    titles are never searched. Text that only resembles a link (unmatched
    brackets, missing parenthesis, unterminated destination) yields nothing.

    Args:
        text: Markdown text containing no fenced code.

    Returns:
        Iterator[LinkConstruct]: Located constructs.

    Examples:
        list(scan_links("[a](./b)"))[0].destination_span  # (4, 7)
        list(scan_links(r"![x](<a b> 'c')"))[0].syntax  # DestinationSyntax.BRACKETED
    """
    return _scan(text, 0, len(text))
