"""
Slide splitting.

Three rules create slide breaks:

1. ``---`` with a blank line on both sides
2. three or more consecutive blank lines
3. a ``# `` heading when the current slide already has content

Rules 1 and 2 are first unified into a single break marker so overlapping
signals collapse into one boundary; rule 3 is applied per chunk afterwards.
"""
import logging
from typing import List

from .text_utils import fence_opening, is_directive, is_fence_close

logger = logging.getLogger(__name__)

# Stands in for a slide break inside the line stream. Being an object rather
# than a string, it can never collide with document text.
_BREAK = object()


def split(body: str) -> List[str]:
    """
    Split a document body (frontmatter already removed) into raw slide texts.

    Args:
        body: Markdown text of the whole deck.

    Returns:
        Non-empty, whitespace-trimmed slide strings in document order.
    """
    lines = body.replace("\r\n", "\n").split("\n")

    stream = _mark_dash_separators(lines)
    stream = _mark_blank_runs(stream)

    slides: List[str] = []
    for chunk in _split_on_breaks(stream):
        slides.extend(_split_by_heading(chunk))

    logger.debug(f"Split body into {len(slides)} slide(s)")
    return slides


def is_dash_separator(line: str) -> bool:
    return len(line) >= 3 and set(line) == {"-"}


def _is_blank(line) -> bool:
    return line is not _BREAK and not line.strip()


def _mark_dash_separators(lines: List[str]) -> list:
    output: list = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if is_dash_separator(line.strip()):
            prev_blank = i == 0 or (bool(output) and (output[-1] is _BREAK or _is_blank(output[-1])))
            next_blank = i + 1 >= len(lines) or not lines[i + 1].strip()
            if prev_blank and next_blank:
                if output and _is_blank(output[-1]):
                    output.pop()
                output.append(_BREAK)
                if i + 1 < len(lines) and not lines[i + 1].strip():
                    i += 1
                i += 1
                continue
        output.append(line)
        i += 1
    return output


def _mark_blank_runs(stream: list) -> list:
    output: list = []
    blank_count = 0
    for line in stream:
        if line is _BREAK:
            blank_count = 0
            output.append(line)
        elif not line.strip():
            blank_count += 1
            if blank_count < 3:
                output.append(line)
            elif blank_count == 3:
                # The two blank lines already kept become part of the break.
                del output[-2:]
                output.append(_BREAK)
        else:
            blank_count = 0
            output.append(line)
    return output


def _split_on_breaks(stream: list) -> List[str]:
    chunks: List[str] = []
    current: List[str] = []
    for line in stream:
        if line is _BREAK:
            chunks.append("\n".join(current).strip())
            current = []
        else:
            current.append(line)
    chunks.append("\n".join(current).strip())
    return [chunk for chunk in chunks if chunk]


def _split_by_heading(chunk: str) -> List[str]:
    """Start a new slide at each ``# `` line once the current slide has content.

    Lines inside fenced code blocks are never headings; directive lines do
    not count as content.
    """
    slides: List[str] = []
    current: List[str] = []
    has_content = False
    fence = None  # (char, length) while inside a fenced block

    for line in chunk.split("\n"):
        trimmed = line.strip()

        if fence is not None:
            if is_fence_close(trimmed, *fence):
                fence = None
        else:
            fence = fence_opening(trimmed)

        if fence is None and line.startswith("# ") and has_content:
            text = "\n".join(current).strip()
            if text:
                slides.append(text)
            current = []
            has_content = False

        current.append(line)

        if trimmed and not is_directive(trimmed):
            has_content = True

    text = "\n".join(current).strip()
    if text:
        slides.append(text)
    return slides
