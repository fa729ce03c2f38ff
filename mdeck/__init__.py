"""
mdeck

Compiles a markdown document into a renderer-agnostic deck of slides.
"""

from .config import DeckConfig, load_config
from .diagram import parse_diagram
from .directives import extract_directives
from .frontmatter import extract_frontmatter
from .generator import DeckGenerator, NoSlidesError, parse, parse_file
from .inline_parser import parse_inlines
from .layout_engine import compute_max_steps, infer_layout, iter_reveal_steps
from .markdown_parser import parse_blocks, parse_highlight_spec
from .models import Layout, ListMarker, Presentation, PresentationMeta, Slide
from .splitter import split

__all__ = [
    'DeckConfig',
    'DeckGenerator',
    'Layout',
    'ListMarker',
    'NoSlidesError',
    'Presentation',
    'PresentationMeta',
    'Slide',
    'compute_max_steps',
    'extract_directives',
    'extract_frontmatter',
    'infer_layout',
    'iter_reveal_steps',
    'load_config',
    'parse',
    'parse_blocks',
    'parse_diagram',
    'parse_file',
    'parse_highlight_spec',
    'parse_inlines',
    'split',
]
