"""Line-level helpers shared by the splitter and the block parser."""
import re
from typing import List, Optional, Tuple

# @name: value -- the name may be padded by whitespace, the value is trimmed.
DIRECTIVE_RE = re.compile(r"^@\s*([A-Za-z0-9_-]+)\s*:(.*)$", re.DOTALL)

FENCE_CHARS = ("`", "~")


def split_lines(text: str) -> List[str]:
    """Split *text* on ``\\n`` and ``\\r\\n``; a final line ending is optional.

    Unlike :meth:`str.splitlines` this never breaks on form feeds or other
    Unicode separators, which keeps code blocks byte-for-byte intact.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def line_indent(line: str) -> int:
    return len(line) - len(line.lstrip())


def parse_directive(line: str) -> Optional[Tuple[str, str]]:
    """Return ``(name, value)`` if the trimmed *line* is an ``@name: value`` directive."""
    match = DIRECTIVE_RE.match(line)
    if not match:
        return None
    return match.group(1), match.group(2).strip()


def is_directive(line: str) -> bool:
    return parse_directive(line) is not None


def fence_run(trimmed: str, char: str) -> int:
    """Length of the leading run of *char* in *trimmed*."""
    return len(trimmed) - len(trimmed.lstrip(char))


def fence_opening(trimmed: str) -> Optional[Tuple[str, int]]:
    """Return ``(fence_char, run_length)`` if *trimmed* opens a code fence."""
    for char in FENCE_CHARS:
        if trimmed.startswith(char * 3):
            return char, fence_run(trimmed, char)
    return None


def is_fence_close(trimmed: str, char: str, length: int) -> bool:
    """A closing fence repeats the opening character at least as many times."""
    run = fence_run(trimmed, char)
    return run >= length and not trimmed[run:].strip()
