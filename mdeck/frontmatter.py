"""
Frontmatter extraction.

A document may open with a YAML-like header delimited by ``---`` lines::

    ---
    title: "Quarterly review"
    @theme: dark
    ---

Keys starting with ``@`` are not valid YAML, so headers using them fall back
to a forgiving ``key: value`` line parser.
"""
import datetime
import logging
from typing import Any, Dict, Optional, Tuple

import yaml

from .models import PresentationMeta

logger = logging.getLogger(__name__)

# Frontmatter key -> PresentationMeta field
META_KEYS = {
    "title": "title",
    "author": "author",
    "date": "date",
    "@theme": "theme",
    "@transition": "transition",
    "@aspect": "aspect",
    "@code-theme": "code_theme",
    "@footer": "footer",
}


def extract_frontmatter(content: str) -> Tuple[PresentationMeta, str]:
    """
    Split a document into its metadata and body.

    Args:
        content: Full document text, optionally starting with a BOM.

    Returns:
        ``(meta, body)``. Without a complete frontmatter block the metadata
        is empty and the body is the whole (BOM-stripped) document.
    """
    text = content.lstrip("\ufeff")

    if text.startswith("---\r\n"):
        after_opening = text[5:]
    elif text.startswith("---\n"):
        after_opening = text[4:]
    else:
        return PresentationMeta(), text

    lines = after_opening.split("\n")
    offset = 0
    closing = None
    for index, line in enumerate(lines):
        # The line right after the opening delimiter never closes the block.
        if index > 0 and line.strip() == "---":
            closing = index
            break
        offset += len(line) + 1

    if closing is None:
        logger.debug("Frontmatter opened but never closed; treating it as body")
        return PresentationMeta(), text

    header = after_opening[:offset]
    body = "\n".join(lines[closing + 1:])
    return parse_frontmatter(header), body


def parse_frontmatter(header: str) -> PresentationMeta:
    """Parse the text between the ``---`` delimiters."""
    try:
        data = yaml.safe_load(header)
    except (yaml.YAMLError, RecursionError) as exc:
        logger.debug(f"Frontmatter is not valid YAML ({exc}); using line parser")
        return _parse_frontmatter_manual(header)

    if data is None:
        return PresentationMeta()
    if not isinstance(data, dict):
        return _parse_frontmatter_manual(header)

    values: Dict[str, Optional[str]] = {}
    for key, attr in META_KEYS.items():
        if key in data:
            values[attr] = _stringify(data[key])
    return PresentationMeta(**values)


def _stringify(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return str(value)


def _parse_frontmatter_manual(header: str) -> PresentationMeta:
    """Fallback parser: one ``key: value`` pair per line, malformed lines skipped."""
    values: Dict[str, str] = {}
    for raw_line in header.splitlines():
        key, sep, value = raw_line.strip().partition(":")
        if not sep:
            continue
        attr = META_KEYS.get(key.strip())
        if attr:
            values[attr] = value.strip().strip('"').strip("'")
    return PresentationMeta(**values)
