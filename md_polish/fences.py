"""Code fence classification."""

from __future__ import annotations

from collections.abc import Sequence

from .constants import FENCE_PATTERN
from .models import FenceContext, FenceState, FenceTag


def _try_open_fence(ctx: FenceContext, line: str) -> bool:
    """Detect the start of a fenced code block.

    Leading whitespace is ignored; any run of three or more backticks or
    tildes opens a fence, whatever follows it on the line.

    Args:
        ctx: Fence context to update when a fence opens.
        line: Current line being scanned.

    Returns:
        bool: True when the line begins a fence and the context is updated.

    Examples:
        _try_open_fence(FenceContext(), "```python\\n")  # True
    """
    if ctx.state is not FenceState.OUTSIDE:
        return False

    fence_match = FENCE_PATTERN.match(line.lstrip())
    if not fence_match:
        return False

    fence_sequence = fence_match.group("fence")
    ctx.state = FenceState.INSIDE
    ctx.fence_char = fence_sequence[0]
    ctx.fence_length = len(fence_sequence)
    return True


def _try_close_fence(ctx: FenceContext, line: str) -> bool:
    """Attempt to close the active fenced code block.

    A fence closes on a line whose stripped content starts with at least as
    many of the opening character as the opening run had.

    Args:
        ctx: Fence context describing the active fence.
        line: Current line being scanned.

    Returns:
        bool: True when the line closes the fence; otherwise False.

    Examples:
        ctx = FenceContext(state=FenceState.INSIDE, fence_char="`", fence_length=3)
        _try_close_fence(ctx, "````\\n")  # True
    """
    if ctx.state is not FenceState.INSIDE or ctx.fence_char is None:
        return False

    stripped_line = line.lstrip()
    fence_run_length = len(stripped_line) - len(stripped_line.lstrip(ctx.fence_char))
    if fence_run_length < ctx.fence_length:
        return False

    ctx.state = FenceState.OUTSIDE
    ctx.fence_char = None
    ctx.fence_length = 0
    return True


def classify_fences(lines: Sequence[str]) -> list[FenceTag]:
    """Tag every line as inside or outside a code fence.

    The opening line of a fence is tagged inside; the closing line and the
    lines after it are tagged outside. A fence that is never closed keeps
    the rest of the document inside.

    Args:
        lines: Document lines, with or without line endings.

    Returns:
        list[FenceTag]: One tag per line, in order.

    Examples:
        classify_fences(["text\\n", "```\\n", "code\\n", "```\\n"])
    """
    ctx = FenceContext()
    tags: list[FenceTag] = []

    for line in lines:
        if ctx.state is FenceState.INSIDE:
            if _try_close_fence(ctx, line):
                tags.append(FenceTag(FenceState.OUTSIDE))
                continue
        elif not _try_open_fence(ctx, line):
            tags.append(FenceTag(FenceState.OUTSIDE))
            continue

        tags.append(FenceTag(FenceState.INSIDE, ctx.fence_char * ctx.fence_length))

    return tags
