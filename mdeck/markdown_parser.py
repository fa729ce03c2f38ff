"""
Block-level markdown parser.

Turns the content of one slide (directives already removed) into an ordered
list of blocks. The scan dispatches on each line's leading pattern, most
specific first, and every branch consumes at least one line.
"""
import logging
import re
from typing import List, Optional, Tuple

from .inline_parser import parse_inlines
from .models import (
    Block,
    BlockQuote,
    CodeBlock,
    ColumnSeparator,
    Diagram,
    Heading,
    HorizontalRule,
    Image,
    ImageDirectives,
    Inline,
    ListBlock,
    ListItem,
    ListMarker,
    Paragraph,
    Table,
)
from .text_utils import fence_opening, is_fence_close, line_indent, split_lines

logger = logging.getLogger(__name__)

ORDERED_ITEM_RE = re.compile(r"^[0-9]+\. ")
HIGHLIGHT_NUMBER_RE = re.compile(r"^[0-9]+$")

UNORDERED_MARKERS = {
    "-": ListMarker.STATIC,
    "+": ListMarker.NEXT_STEP,
    "*": ListMarker.WITH_PREV,
}

# Highlight ranges spanning more lines than this are treated as malformed.
MAX_HIGHLIGHT_RANGE = 10_000

# Deeper list indentation is flattened into the deepest allowed level.
MAX_LIST_DEPTH = 32


def parse_blocks(content: str) -> List[Block]:
    """
    Parse a slide's content into blocks.

    Args:
        content: Slide markdown without leading directives.

    Returns:
        Blocks in source order.
    """
    lines = split_lines(content)
    blocks: List[Block] = []
    i = 0

    while i < len(lines):
        trimmed = lines[i].strip()

        if not trimmed:
            i += 1
            continue

        if trimmed == "+++":
            blocks.append(ColumnSeparator())
            i += 1
            continue

        if is_horizontal_rule(trimmed):
            blocks.append(HorizontalRule())
            i += 1
            continue

        heading = parse_heading(trimmed)
        if heading is not None:
            blocks.append(heading)
            i += 1
            continue

        fence = fence_opening(trimmed)
        if fence is not None:
            block, i = _parse_fenced(lines, i, *fence)
            blocks.append(block)
            continue

        if trimmed.startswith("!["):
            image = parse_image(trimmed)
            if image is not None:
                blocks.append(image)
                i += 1
                continue

        if _is_quote(trimmed):
            block, i = _parse_blockquote(lines, i)
            blocks.append(block)
            continue

        if _is_table_line(trimmed):
            table, end = _parse_table(lines, i)
            if table is not None:
                blocks.append(table)
                i = end
                continue
            logger.debug(f"Single table line treated as paragraph: {trimmed!r}")

        if is_list_start(trimmed) or is_ordered_list_start(trimmed):
            block, i = _parse_list(lines, i)
            blocks.append(block)
            continue

        block, i = _parse_paragraph(lines, i)
        blocks.append(block)

    return blocks


# ---------------------------------------------------------------------------
# Line classifiers
# ---------------------------------------------------------------------------

def is_horizontal_rule(line: str) -> bool:
    chars = [c for c in line if not c.isspace()]
    if len(chars) < 3:
        return False
    return chars[0] in "*_" and all(c == chars[0] for c in chars)


def is_list_start(line: str) -> bool:
    return len(line) >= 2 and line[0] in UNORDERED_MARKERS and line[1] == " "


def is_ordered_list_start(line: str) -> bool:
    return ORDERED_ITEM_RE.match(line) is not None


def _is_quote(line: str) -> bool:
    return line.startswith("> ") or line == ">"


def _is_table_line(line: str) -> bool:
    return line.startswith("|") and line.endswith("|")


def _starts_block(line: str) -> bool:
    """True if *line* would open a block other than a paragraph."""
    return (
        line == "+++"
        or is_horizontal_rule(line)
        or parse_heading(line) is not None
        or fence_opening(line) is not None
        or (line.startswith("![") and parse_image(line) is not None)
        or _is_quote(line)
        or _is_table_line(line)
        or is_list_start(line)
        or is_ordered_list_start(line)
    )


# ---------------------------------------------------------------------------
# Single-line blocks
# ---------------------------------------------------------------------------

def parse_heading(line: str) -> Optional[Heading]:
    """``#`` to ``######`` followed by a space or the end of the line."""
    level = len(line) - len(line.lstrip("#"))
    if level == 0 or level > 6:
        return None
    rest = line[level:]
    if rest and not rest.startswith(" "):
        return None
    return Heading(level=level, inlines=parse_inlines(rest.strip()))


def parse_image(line: str) -> Optional[Image]:
    """``![alt](path)``; returns ``None`` when the brackets do not line up."""
    if not line.startswith("!["):
        return None
    close_bracket = line.find("](")
    if close_bracket < 0:
        return None

    path_start = close_bracket + 2
    depth = 1
    path_end = None
    for i in range(path_start, len(line)):
        if line[i] == "(":
            depth += 1
        elif line[i] == ")":
            depth -= 1
            if depth == 0:
                path_end = i
                break
    if path_end is None:
        return None

    alt, directives = parse_image_alt(line[2:close_bracket])
    return Image(alt=alt, path=line[path_start:path_end], directives=directives)


def parse_image_alt(alt_text: str) -> Tuple[str, ImageDirectives]:
    """Separate ``@fill``/``@width:80%``-style tokens from the visible alt text."""
    options = {}
    words = []
    for word in alt_text.split():
        if not word.startswith("@"):
            words.append(word)
            continue
        token = word[1:]
        if token in ("fill", "fit"):
            options[token] = True
        elif token in ("left", "right", "center"):
            options["align"] = token
        elif token.startswith("width:"):
            options["width"] = token[len("width:"):]
        elif token.startswith("height:"):
            options["height"] = token[len("height:"):]
        # Unknown @-tokens are dropped from the alt text.
    return " ".join(words), ImageDirectives(**options)


# ---------------------------------------------------------------------------
# Fenced blocks
# ---------------------------------------------------------------------------

def _parse_fenced(lines: List[str], start: int, fence_char: str, fence_len: int) -> Tuple[Block, int]:
    info = lines[start].strip()[fence_len:].strip()

    body: List[str] = []
    i = start + 1
    while i < len(lines):
        if is_fence_close(lines[i].strip(), fence_char, fence_len):
            i += 1
            break
        body.append(lines[i])
        i += 1
    else:
        logger.debug(f"Unclosed {fence_char * fence_len} fence runs to the end of the slide")

    code = "\n".join(body)
    if info.startswith("@diagram"):
        return Diagram(content=code), i

    language, highlight_lines = parse_code_info(info)
    return CodeBlock(language=language, code=code, highlight_lines=highlight_lines), i


def parse_code_info(info: str) -> Tuple[Optional[str], List[int]]:
    """Split a fence info string like ``python{3,5-7}`` into language and lines."""
    if not info:
        return None, []

    brace = info.find("{")
    if brace >= 0:
        language = info[:brace].strip()
        close = info.find("}", brace)
        highlight = parse_highlight_spec(info[brace + 1:close]) if close >= 0 else []
    else:
        language = info.split()[0]
        highlight = []
    return language or None, highlight


def parse_highlight_spec(spec: str) -> List[int]:
    """
    Expand a highlight spec into line numbers.

    ``"3,5-7"`` becomes ``[3, 5, 6, 7]``. Tokens that are not a number or a
    ``start-end`` range are skipped.
    """
    numbers: List[int] = []
    for part in spec.split(","):
        part = part.strip()
        if "-" in part:
            first, _, last = part.partition("-")
            first, last = first.strip(), last.strip()
            if not (HIGHLIGHT_NUMBER_RE.match(first) and HIGHLIGHT_NUMBER_RE.match(last)):
                continue
            low, high = int(first), int(last)
            if high - low >= MAX_HIGHLIGHT_RANGE:
                logger.debug(f"Skipping oversized highlight range {part}")
                continue
            numbers.extend(range(low, high + 1))
        elif HIGHLIGHT_NUMBER_RE.match(part):
            numbers.append(int(part))
    return numbers


# ---------------------------------------------------------------------------
# Multi-line blocks
# ---------------------------------------------------------------------------

def _parse_blockquote(lines: List[str], start: int) -> Tuple[BlockQuote, int]:
    parts: List[str] = []
    i = start
    while i < len(lines):
        trimmed = lines[i].strip()
        if trimmed.startswith("> "):
            parts.append(trimmed[2:])
        elif trimmed != ">":
            break
        i += 1
    return BlockQuote(inlines=parse_inlines(" ".join(parts))), i


def _parse_table(lines: List[str], start: int) -> Tuple[Optional[Table], int]:
    rows: List[str] = []
    i = start
    while i < len(lines):
        trimmed = lines[i].strip()
        if not _is_table_line(trimmed):
            break
        rows.append(trimmed)
        i += 1

    if len(rows) < 2:
        return None, start

    # rows[1] is the |---|---| separator
    table = Table(
        headers=_parse_table_row(rows[0]),
        rows=[_parse_table_row(row) for row in rows[2:]],
    )
    if i < len(lines) and not lines[i].strip():
        i += 1
    return table, i


def _parse_table_row(line: str) -> List[List[Inline]]:
    return [parse_inlines(cell.strip()) for cell in line.strip("|").split("|")]


def _parse_paragraph(lines: List[str], start: int) -> Tuple[Paragraph, int]:
    parts = [lines[start].strip()]
    i = start + 1
    while i < len(lines):
        trimmed = lines[i].strip()
        if not trimmed or _starts_block(trimmed):
            break
        parts.append(trimmed)
        i += 1
    return Paragraph(inlines=parse_inlines(" ".join(parts))), i


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------

def _list_item(line: str) -> Optional[Tuple[str, ListMarker]]:
    """Return ``(text, marker)`` for a trimmed list item line."""
    if is_list_start(line):
        return line[2:].strip(), UNORDERED_MARKERS[line[0]]
    match = ORDERED_ITEM_RE.match(line)
    if match:
        return line[match.end():].strip(), ListMarker.ORDERED
    return None


def _next_non_blank(lines: List[str], start: int) -> int:
    i = start
    while i < len(lines) and not lines[i].strip():
        i += 1
    return i


def _parse_list(lines: List[str], start: int) -> Tuple[ListBlock, int]:
    """Parse a list whose first item sits on ``lines[start]``."""
    ordered = is_ordered_list_start(lines[start].strip())
    base_indent = line_indent(lines[start])
    items: List[ListItem] = []
    i = start

    while i < len(lines):
        line = lines[i]
        trimmed = line.strip()

        if not trimmed:
            # Blank lines only separate items of the same list.
            j = _next_non_blank(lines, i)
            if j < len(lines) and _list_item(lines[j].strip()) is not None:
                i = j
                continue
            break

        indent = line_indent(line)
        parsed = _list_item(trimmed)
        if parsed is None:
            break

        text, marker = parsed
        if (marker is ListMarker.ORDERED) != ordered:
            break

        children, i = _collect_children(lines, i + 1, indent, 1)
        items.append(ListItem(marker=marker, inlines=parse_inlines(text), children=children))

    return ListBlock(ordered=ordered, items=items), i


def _collect_children(lines: List[str], start: int, parent_indent: int, depth: int) -> Tuple[List[ListItem], int]:
    """Collect the items indented deeper than *parent_indent*, recursively."""
    children: List[ListItem] = []
    i = start

    while i < len(lines):
        line = lines[i]
        trimmed = line.strip()

        if not trimmed:
            j = _next_non_blank(lines, i)
            if j < len(lines) and line_indent(lines[j]) > parent_indent and _list_item(lines[j].strip()):
                i = j
                continue
            break

        indent = line_indent(line)
        if indent <= parent_indent:
            break
        parsed = _list_item(trimmed)
        if parsed is None:
            break

        text, marker = parsed
        i += 1
        grandchildren: List[ListItem] = []
        if depth < MAX_LIST_DEPTH:
            grandchildren, i = _collect_children(lines, i, indent, depth + 1)
        children.append(ListItem(marker=marker, inlines=parse_inlines(text), children=grandchildren))

    return children, i
