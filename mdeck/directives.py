"""Per-slide ``@name: value`` directive extraction."""
from typing import List, Tuple

from .models import Directive
from .text_utils import parse_directive, split_lines


def extract_directives(raw: str) -> Tuple[List[Directive], str]:
    """
    Pull leading directives off a raw slide.

    Blank lines between directives are skipped. The first non-blank line that
    is not a directive ends the directive region; it and everything after it
    is returned verbatim as the slide content.

    Args:
        raw: One slide chunk as produced by the splitter.

    Returns:
        ``(directives, remaining_content)``
    """
    directives: List[Directive] = []
    lines = split_lines(raw)

    start = len(lines)
    for index, line in enumerate(lines):
        trimmed = line.strip()
        if not trimmed:
            continue
        parsed = parse_directive(trimmed)
        if parsed is None:
            start = index
            break
        directives.append(Directive(name=parsed[0], value=parsed[1]))

    return directives, "\n".join(lines[start:])
