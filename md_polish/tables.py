"""Markdown table compaction."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .config import PolishConfig
from .constants import FENCE_PATTERN, SEPARATOR_CELL_PATTERN, SEPARATOR_LINE_PATTERN
from .fences import classify_fences
from .models import FenceTag, TableBlock
from .scanner import is_escaped

logger = logging.getLogger(__name__)


def _split_line_ending(line: str) -> tuple[str, str]:
    parts = line.splitlines()
    body = parts[0] if parts else ""
    return body, line[len(body) :]


def _has_unescaped_pipe(text: str) -> bool:
    return any(char == "|" and not is_escaped(text, i) for i, char in enumerate(text))


def _is_table_line(text: str) -> bool:
    # A closing fence line stays a fence delimiter even when it holds a pipe
    return _has_unescaped_pipe(text) and not FENCE_PATTERN.match(text.lstrip())


def split_cells(row: str) -> list[str]:
    r"""Split a table row into raw cells on unescaped pipes.

    One leading and one trailing outer pipe are dropped first. Cell text is
    returned unstripped; escaped pipes (``\|``) stay inside their cell.

    Args:
        row: Table row without its line ending.

    Returns:
        list[str]: Raw cell contents.

    Examples:
        split_cells("| a | b |")  # [" a ", " b "]
        split_cells(r"a \| b | c")  # [r"a \| b ", " c"]
    """
    content = row.strip()
    if content.startswith("|"):
        content = content[1:]
    if content.endswith("|") and not is_escaped(content, len(content) - 1):
        content = content[:-1]

    cells: list[str] = []
    start = 0
    for i, char in enumerate(content):
        if char == "|" and not is_escaped(content, i):
            cells.append(content[start:i])
            start = i + 1
    cells.append(content[start:])
    return cells


def _is_separator_row(row: str) -> bool:
    # A bare dash line under text is a setext heading, not a separator
    if "-" not in row or "|" not in row or not SEPARATOR_LINE_PATTERN.match(row):
        return False
    return all(SEPARATOR_CELL_PATTERN.match(cell.strip()) for cell in split_cells(row))


def find_table_blocks(lines: Sequence[str], tags: Sequence[FenceTag]) -> list[TableBlock]:
    """Locate table blocks among unfenced lines.

    A block is a header line with an unescaped pipe, a separator line with
    the same number of cells, and the run of non-blank piped lines that
    follows. Fenced lines never belong to a block.

    Args:
        lines: Document lines, with or without line endings.
        tags: Fence tags for `lines`.

    Returns:
        list[TableBlock]: Blocks in document order.
    """
    blocks: list[TableBlock] = []
    i = 0
    while i + 1 < len(lines):
        header, _ = _split_line_ending(lines[i])
        separator, _ = _split_line_ending(lines[i + 1])
        if (
            tags[i].inside
            or tags[i + 1].inside
            or not _is_table_line(header)
            or not _is_separator_row(separator)
        ):
            i += 1
            continue

        column_count = len(split_cells(header))
        if len(split_cells(separator)) != column_count:
            i += 1
            continue

        block = TableBlock(
            start=i,
            header_row=lines[i],
            separator_row=lines[i + 1],
            column_count=column_count,
        )
        j = i + 2
        while j < len(lines) and not tags[j].inside:
            row, _ = _split_line_ending(lines[j])
            if not row.strip() or not _is_table_line(row):
                break
            block.body_rows.append(lines[j])
            j += 1

        blocks.append(block)
        i = j

    return blocks


def _compact_separator_cell(cell: str, dashes: int) -> str:
    match = SEPARATOR_CELL_PATTERN.match(cell.strip())
    return f"{match.group('left')}{'-' * dashes}{match.group('right')}"


def _render_row(line: str, cells: list[str], zero_width: list[bool]) -> str:
    body, ending = _split_line_ending(line)
    indent = body[: len(body) - len(body.lstrip())]
    rendered = "|".join(
        "" if not cell and empty_column else f" {cell} "
        for cell, empty_column in zip(cells, zero_width)
    )
    return f"{indent}|{rendered}|{ending}"


def compact_table(block: TableBlock, min_separator_dashes: int = 1) -> list[str]:
    """Rewrite one table block with minimal padding.

    Every cell gets exactly one space of padding on each side, except empty
    cells of a column that is empty in every row, which get none. Separator
    cells keep their alignment colons around `min_separator_dashes` dashes.
    Body rows with the wrong number of cells are returned as they were.

    Args:
        block: Table to compact.
        min_separator_dashes: Dashes written in each separator cell.

    Returns:
        list[str]: Replacement lines for the block, line endings preserved.

    Examples:
        compact_table(block)  # ["| a | bb |\\n", "| - | - |\\n"]
    """
    header_cells = [cell.strip() for cell in split_cells(_split_line_ending(block.header_row)[0])]
    body_cells: list[list[str] | None] = []
    for row in block.body_rows:
        cells = [cell.strip() for cell in split_cells(_split_line_ending(row)[0])]
        body_cells.append(cells if len(cells) == block.column_count else None)

    well_formed = [header_cells, *(cells for cells in body_cells if cells is not None)]
    zero_width = [
        not any(cells[column] for cells in well_formed) for column in range(block.column_count)
    ]

    separator_cells = [
        _compact_separator_cell(cell, min_separator_dashes)
        for cell in split_cells(_split_line_ending(block.separator_row)[0])
    ]

    compacted = [
        _render_row(block.header_row, header_cells, zero_width),
        _render_row(block.separator_row, separator_cells, [False] * block.column_count),
    ]
    for row, cells in zip(block.body_rows, body_cells):
        compacted.append(row if cells is None else _render_row(row, cells, zero_width))
    return compacted


def compact_tables(
    lines: Sequence[str], tags: Sequence[FenceTag], config: PolishConfig | None = None
) -> list[str]:
    """Compact every table block in a document.

    Args:
        lines: Document lines, line endings included.
        tags: Fence tags for `lines`.
        config: Configuration supplying `min_separator_dashes`. Defaults to a
            new `PolishConfig` when omitted.

    Returns:
        list[str]: New list of lines; lines outside tables are the same objects.
    """
    config = config or PolishConfig()
    result = list(lines)
    blocks = find_table_blocks(lines, tags)
    for block in blocks:
        result[block.start : block.end] = compact_table(block, config.min_separator_dashes)
    logger.debug("Compacted %d table(s)", len(blocks))
    return result


def compact_markdown_tables(text: str, config: PolishConfig | None = None) -> str:
    """Compact the tables of a Markdown string, leaving fenced code intact.

    Examples:
        compact_markdown_tables("| a   |  bb |\\n|----|----|")  # "| a | bb |\\n| - | - |"
    """
    lines = text.splitlines(keepends=True)
    return "".join(compact_tables(lines, classify_fences(lines), config))
