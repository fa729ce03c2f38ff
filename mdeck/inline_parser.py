"""
Inline formatting parser.

Turns a span of text into a tree of :mod:`mdeck.models` inline nodes::

    `code`   **bold**   *italic*   ~~struck~~   [text](url)

Anything that never finds its closing delimiter stays literal text, so the
parser accepts every input.
"""
from typing import Callable, Dict, List, Optional, Tuple

from .models import Bold, Code, Inline, Italic, Link, Strikethrough, Text

# Deeper nesting is kept as literal text instead of recursing further.
MAX_NESTING = 64

_Parsed = Optional[Tuple[Inline, int]]


def parse_inlines(text: str, _depth: int = 0) -> List[Inline]:
    """
    Parse inline markup in *text*.

    Args:
        text: A span already extracted by the block parser.

    Returns:
        Inline nodes in source order; adjacent literal characters are merged
        into a single :class:`~mdeck.models.Text`.
    """
    if _depth > MAX_NESTING:
        return [Text(text)] if text else []

    result: List[Inline] = []
    literal: List[str] = []
    i = 0
    length = len(text)
    # Bracket and parenthesis pairs, computed on the first "[" seen
    pairs: Optional[Tuple[Dict[int, int], Dict[int, int]]] = None

    while i < length:
        char = text[i]
        following = text[i + 1] if i + 1 < length else ""

        parsed: _Parsed = None
        if char == "`":
            parsed = _parse_code(text, i)
        elif char == "*" and following == "*":
            parsed = _parse_wrapped(text, i, "**", Bold, _depth)
        elif char == "~" and following == "~":
            parsed = _parse_wrapped(text, i, "~~", Strikethrough, _depth)
        elif char == "*":
            parsed = _parse_wrapped(text, i, "*", Italic, _depth)
        elif char == "[":
            if pairs is None:
                pairs = _bracket_pairs(text, "[", "]"), _bracket_pairs(text, "(", ")")
            parsed = _parse_link(text, i, _depth, *pairs)

        if parsed is None:
            literal.append(char)
            i += 1
            continue

        inline, i = parsed
        if literal:
            result.append(Text("".join(literal)))
            literal = []
        result.append(inline)

    if literal:
        result.append(Text("".join(literal)))
    return result


def _parse_code(text: str, start: int) -> _Parsed:
    """`code` up to the next backtick that is not escaped with a backslash."""
    i = start + 1
    while i < len(text):
        if text[i] == "`" and text[i - 1] != "\\":
            return Code(text[start + 1:i]), i + 1
        i += 1
    return None


def _find_closing(text: str, start: int, delimiter: str) -> Optional[int]:
    """Index of the closing *delimiter* for content beginning at *start*.

    The content must be non-empty and a delimiter inside an open backtick
    span does not count.
    """
    in_code = False
    i = start
    while i < len(text):
        if not in_code and i > start and text.startswith(delimiter, i):
            return i
        if text[i] == "`":
            in_code = not in_code
        i += 1
    return None


def _parse_wrapped(text: str, start: int, delimiter: str, node: Callable, depth: int) -> _Parsed:
    content_start = start + len(delimiter)
    end = _find_closing(text, content_start, delimiter)
    if end is None:
        return None
    children = parse_inlines(text[content_start:end], depth + 1)
    return node(children), end + len(delimiter)


def _bracket_pairs(text: str, opening: str, closing: str) -> Dict[int, int]:
    """Map the index of every balanced *opening* character to its *closing* one.

    Unbalanced openers are absent from the result.
    """
    pairs: Dict[int, int] = {}
    stack: List[int] = []
    for i, char in enumerate(text):
        if char == opening:
            stack.append(i)
        elif char == closing and stack:
            pairs[stack.pop()] = i
    return pairs


def _parse_link(text: str, start: int, depth: int, brackets: Dict[int, int], parens: Dict[int, int]) -> _Parsed:
    """[text](url) with nested brackets and parentheses balanced."""
    text_end = brackets.get(start)
    if text_end is None:
        return None
    url_start = text_end + 1
    if url_start >= len(text) or text[url_start] != "(":
        return None
    url_end = parens.get(url_start)
    if url_end is None:
        return None

    label = parse_inlines(text[start + 1:text_end], depth + 1)
    return Link(text=label, url=text[url_start + 1:url_end]), url_end + 1
