"""
Data models for the deck compiler.

Blocks and inlines are closed unions of dataclasses; consumers dispatch on
them with ``isinstance``. Leaf values (text, code, directives, metadata)
are frozen and hashable; nodes holding child lists are plain dataclasses.
"""
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, List, Optional, Union


# ---------------------------------------------------------------------------
# Inline content
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Text:
    value: str


@dataclass
class Bold:
    children: List["Inline"] = field(default_factory=list)


@dataclass
class Italic:
    children: List["Inline"] = field(default_factory=list)


@dataclass
class Strikethrough:
    children: List["Inline"] = field(default_factory=list)


@dataclass(frozen=True)
class Code:
    """Verbatim inline code; never parsed for further markup."""
    value: str


@dataclass
class Link:
    text: List["Inline"]
    url: str


Inline = Union[Text, Bold, Italic, Strikethrough, Code, Link]


# ---------------------------------------------------------------------------
# Block content
# ---------------------------------------------------------------------------

class ListMarker(Enum):
    """Bullet character of a list item; decides reveal grouping."""
    STATIC = "-"
    NEXT_STEP = "+"
    WITH_PREV = "*"
    ORDERED = "N."


@dataclass
class ListItem:
    marker: ListMarker
    inlines: List[Inline] = field(default_factory=list)
    children: List["ListItem"] = field(default_factory=list)


@dataclass(frozen=True)
class ImageDirectives:
    """Presentation hints parsed out of an image's alt text."""
    fill: bool = False
    fit: bool = False
    align: Optional[str] = None  # "left", "right" or "center"
    width: Optional[str] = None
    height: Optional[str] = None


@dataclass
class Heading:
    level: int
    inlines: List[Inline] = field(default_factory=list)


@dataclass
class Paragraph:
    inlines: List[Inline] = field(default_factory=list)


@dataclass
class ListBlock:
    ordered: bool
    items: List[ListItem] = field(default_factory=list)


@dataclass
class CodeBlock:
    language: Optional[str]
    code: str
    highlight_lines: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class Diagram:
    content: str

    def graph(self) -> "DiagramGraph":
        """Parse the diagram source into nodes and edges."""
        from .diagram import parse_diagram
        return parse_diagram(self.content)


@dataclass(frozen=True)
class Image:
    alt: str
    path: str
    directives: ImageDirectives = field(default_factory=ImageDirectives)


@dataclass
class BlockQuote:
    inlines: List[Inline] = field(default_factory=list)


@dataclass
class Table:
    headers: List[List[Inline]] = field(default_factory=list)
    rows: List[List[List[Inline]]] = field(default_factory=list)


@dataclass(frozen=True)
class HorizontalRule:
    pass


@dataclass(frozen=True)
class ColumnSeparator:
    pass


Block = Union[
    Heading,
    Paragraph,
    ListBlock,
    CodeBlock,
    Diagram,
    Image,
    BlockQuote,
    Table,
    HorizontalRule,
    ColumnSeparator,
]


# ---------------------------------------------------------------------------
# Diagrams
# ---------------------------------------------------------------------------

@dataclass
class DiagramNode:
    name: str
    label: str


@dataclass
class DiagramEdge:
    from_node: str
    to_node: str
    label: str = ""


@dataclass
class DiagramGraph:
    nodes: List[DiagramNode] = field(default_factory=list)
    edges: List[DiagramEdge] = field(default_factory=list)

    def is_empty(self) -> bool:
        """True when nothing could be parsed; renderers show a placeholder."""
        return not self.nodes and not self.edges


# ---------------------------------------------------------------------------
# Slides and presentation
# ---------------------------------------------------------------------------

class Layout(Enum):
    """Presentational archetype of a slide; values match ``@layout:`` names."""
    TITLE = "title"
    SECTION = "section"
    QUOTE = "quote"
    BULLET = "bullet"
    CODE = "code"
    IMAGE = "image"
    GALLERY = "gallery"
    DIAGRAM = "diagram"
    TWO_COLUMN = "two-column"
    CONTENT = "content"


@dataclass(frozen=True)
class Directive:
    name: str
    value: str


@dataclass(frozen=True)
class PresentationMeta:
    title: Optional[str] = None
    author: Optional[str] = None
    date: Optional[str] = None
    theme: Optional[str] = None
    transition: Optional[str] = None
    aspect: Optional[str] = None
    code_theme: Optional[str] = None
    footer: Optional[str] = None


@dataclass
class Slide:
    directives: List[Directive] = field(default_factory=list)
    blocks: List[Block] = field(default_factory=list)
    layout: Layout = Layout.CONTENT

    def directive(self, name: str) -> Optional[str]:
        """Return the value of the last directive called *name*, if any."""
        value = None
        for directive in self.directives:
            if directive.name == name:
                value = directive.value
        return value

    @property
    def max_steps(self) -> int:
        """Number of reveal steps the slide supports."""
        from .layout_engine import compute_max_steps
        return compute_max_steps(self.blocks)

    def heading_text(self) -> Optional[str]:
        """Plain text of the first non-empty heading on the slide."""
        for block in self.blocks:
            if isinstance(block, Heading):
                text = inlines_to_text(block.inlines)
                if text:
                    return text
        return None


@dataclass
class Presentation:
    meta: PresentationMeta = field(default_factory=PresentationMeta)
    slides: List[Slide] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def inlines_to_text(inlines: List[Inline]) -> str:
    """Flatten an inline tree to plain text (link URLs are dropped)."""
    parts = []
    for inline in inlines:
        if isinstance(inline, (Text, Code)):
            parts.append(inline.value)
        elif isinstance(inline, Link):
            parts.append(inlines_to_text(inline.text))
        else:
            parts.append(inlines_to_text(inline.children))
    return "".join(parts)


def to_dict(obj: Any) -> Any:
    """Convert a model value into JSON-ready builtins.

    Each dataclass becomes a dict whose ``type`` key names the variant, so
    block and inline unions survive serialisation.
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        data = {"type": type(obj).__name__}
        for f in fields(obj):
            data[f.name] = to_dict(getattr(obj, f.name))
        return data
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [to_dict(item) for item in obj]
    return obj
