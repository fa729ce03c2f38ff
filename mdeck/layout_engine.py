"""Layout inference and incremental-reveal step counting."""
import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from .models import (
    Block,
    BlockQuote,
    CodeBlock,
    ColumnSeparator,
    Diagram,
    Directive,
    Heading,
    Image,
    Layout,
    ListBlock,
    ListItem,
    ListMarker,
    Paragraph,
)

logger = logging.getLogger(__name__)

LAYOUT_ALIASES = {
    "twocolumn": Layout.TWO_COLUMN,
    "two-columns": Layout.TWO_COLUMN,
    "columns": Layout.TWO_COLUMN,
}


def layout_from_name(name: str) -> Optional[Layout]:
    """Map an ``@layout:`` value to a :class:`Layout`; unknown names give ``None``."""
    key = name.strip().lower().replace("_", "-")
    try:
        return Layout(key)
    except ValueError:
        return LAYOUT_ALIASES.get(key)


def infer_layout(blocks: List[Block], directives: Sequence[Directive] = ()) -> Layout:
    """
    Choose the layout for a slide.

    An explicit ``@layout:`` directive naming a known layout always wins;
    otherwise the shape of the block list decides.

    Args:
        blocks: Parsed blocks of the slide.
        directives: The slide's directives.

    Returns:
        The selected layout, ``Layout.CONTENT`` when nothing more specific fits.
    """
    for directive in reversed(directives):
        if directive.name == "layout":
            layout = layout_from_name(directive.value)
            if layout is not None:
                return layout
            logger.debug(f"Ignoring unknown layout {directive.value!r}")
            break

    return _infer_from_blocks(blocks)


def _infer_from_blocks(blocks: List[Block]) -> Layout:
    if not blocks:
        return Layout.CONTENT

    def only(*kinds) -> bool:
        return all(isinstance(block, kinds) for block in blocks)

    def has(kind) -> bool:
        return any(isinstance(block, kind) for block in blocks)

    images = [block for block in blocks if isinstance(block, Image)]
    headings = [block for block in blocks if isinstance(block, Heading)]

    if has(ColumnSeparator):
        return Layout.TWO_COLUMN
    if has(Diagram):
        return Layout.DIAGRAM
    if len(images) >= 2:
        return Layout.GALLERY
    if len(images) == 1 and (images[0].directives.fill or only(Image, Heading, Paragraph)):
        return Layout.IMAGE
    if has(CodeBlock) and only(CodeBlock, Heading):
        return Layout.CODE
    if has(BlockQuote) and only(BlockQuote, Paragraph):
        return Layout.QUOTE
    if has(ListBlock) and only(ListBlock, Heading):
        return Layout.BULLET

    if len(blocks) == 1 and headings:
        return Layout.SECTION
    if len(blocks) == 2 and isinstance(blocks[0], Heading) and blocks[0].level == 1:
        second = blocks[1]
        if isinstance(second, Paragraph) or (isinstance(second, Heading) and second.level == 2):
            return Layout.TITLE

    return Layout.CONTENT


def iter_reveal_steps(blocks: List[Block]) -> Iterator[Tuple[ListItem, int]]:
    """
    Yield every list item of a slide with the reveal step it appears on.

    The step counter is shared by all lists on the slide and walks each list
    depth-first: ``+`` advances it, ``*`` reuses the current value, ``-`` and
    numbered items are always visible (step 0).
    """
    counter = 0

    def walk(items: List[ListItem]) -> Iterator[Tuple[ListItem, int]]:
        nonlocal counter
        for item in items:
            if item.marker is ListMarker.NEXT_STEP:
                counter += 1
                step = counter
            elif item.marker is ListMarker.WITH_PREV:
                step = counter
            else:
                step = 0
            yield item, step
            yield from walk(item.children)

    for block in blocks:
        if isinstance(block, ListBlock):
            yield from walk(block.items)


def compute_max_steps(blocks: List[Block]) -> int:
    """Highest reveal step used on the slide (0 when nothing is gated)."""
    return max((step for _, step in iter_reveal_steps(blocks)), default=0)
