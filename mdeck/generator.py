#!/usr/bin/env python3
"""
Main deck module that ties together the parsing stages.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .config import DeckConfig, load_config
from .directives import extract_directives
from .frontmatter import extract_frontmatter
from .layout_engine import infer_layout
from .markdown_parser import parse_blocks
from .models import Image, Presentation, Slide, to_dict
from .paths import is_remote, resolve_asset
from .splitter import split

logger = logging.getLogger(__name__)


class NoSlidesError(ValueError):
    """A non-empty document produced no slides."""


class DeckGenerator:
    """
    Compiles markdown documents into :class:`~mdeck.models.Presentation` values.
    """

    def __init__(
        self,
        *,
        base_dir: Optional[str] = None,
        config: Optional[DeckConfig] = None,
        debug: bool = False,
    ):
        """Create a new :class:`DeckGenerator`.

        Parameters
        ----------
        base_dir
            Base directory for resolving relative image paths. If None, the
            directory of the file passed to :meth:`generate_file`, or the
            current working directory for plain text.
        config
            Defaults for unset frontmatter settings. If None, metadata is
            left exactly as written in the document.
        debug
            Log per-slide details while compiling.
        """
        self.base_dir = Path(base_dir) if base_dir else None
        # Directory of the file most recently read by generate_file
        self._file_dir: Optional[Path] = None
        self.config = config
        self.debug = debug

    def generate(self, markdown_text: str) -> Presentation:
        """
        Compile markdown text into a presentation.

        Args:
            markdown_text: The full document, frontmatter included

        Returns:
            Presentation: metadata plus slides in document order
        """
        self._file_dir = None
        meta, body = extract_frontmatter(markdown_text)
        if self.config is not None:
            meta = self.config.apply(meta)

        slides = [self._build_slide(raw) for raw in split(body)]

        if self.debug:
            logger.info(f"Compiled {len(slides)} slides")
            for i, slide in enumerate(slides, 1):
                logger.info(
                    f"  Slide {i}: {slide.layout.value}, {len(slide.blocks)} blocks, "
                    f"{slide.max_steps} reveal steps"
                )

        return Presentation(meta=meta, slides=slides)

    def generate_file(self, path, *, require_slides: bool = False) -> Presentation:
        """
        Read and compile a markdown file.

        Args:
            path: Markdown file to read (UTF-8)
            require_slides: Raise :class:`NoSlidesError` if a non-empty
                file yields no slides

        Returns:
            Presentation
        """
        path = Path(path)
        text = path.read_text(encoding="utf-8")
        presentation = self.generate(text)
        self._file_dir = path.parent
        if require_slides and text.strip() and not presentation.slides:
            raise NoSlidesError(f"No slides found in {path}")
        return presentation

    def asset_base(self) -> Path:
        """Directory relative image paths resolve against for the last compiled deck."""
        return self.base_dir or self._file_dir or Path.cwd()

    def image_assets(self, presentation: Presentation) -> List[Tuple[int, Image, str]]:
        """
        List every image of the deck with its resolved location.

        Call it right after :meth:`generate_file` so relative paths resolve
        against that file's directory.

        Returns:
            ``(slide_number, image, resolved)`` tuples; slide numbers start at 1
        """
        base_dir = self.asset_base()
        assets = []
        for number, slide in enumerate(presentation.slides, 1):
            for block in slide.blocks:
                if not isinstance(block, Image):
                    continue
                resolved = resolve_asset(block.path, base_dir=base_dir)
                if not is_remote(resolved) and not Path(resolved).exists():
                    logger.warning(f"Slide {number}: image not found: {resolved}")
                assets.append((number, block, resolved))
        return assets

    def _build_slide(self, raw: str) -> Slide:
        directives, content = extract_directives(raw)
        blocks = parse_blocks(content)
        return Slide(directives=directives, blocks=blocks, layout=infer_layout(blocks, directives))


def parse(markdown_text: str) -> Presentation:
    """Compile *markdown_text* with default settings."""
    return DeckGenerator().generate(markdown_text)


def parse_file(path) -> Presentation:
    """Compile the markdown file at *path* with default settings."""
    return DeckGenerator().generate_file(path)


def format_outline(presentation: Presentation) -> str:
    """One line per slide: number, layout, reveal steps and heading."""
    lines = []
    title = presentation.meta.title
    if title:
        lines.append(title)
        lines.append("=" * len(title))
    for number, slide in enumerate(presentation.slides, 1):
        heading = slide.heading_text() or ""
        lines.append(f"{number:>3}  {slide.layout.value:<10}  {slide.max_steps:>2}  {heading}".rstrip())
    return "\n".join(lines)


def main(argv=None):
    """Command-line entry point for the deck compiler."""
    import argparse
    import sys

    def _build_parser() -> argparse.ArgumentParser:
        p = argparse.ArgumentParser(prog="mdeck", description="Compile a markdown deck and print its structure.")
        p.add_argument("markdown", type=Path, help="Markdown file to compile")
        p.add_argument("--json", action="store_true", help="Print the compiled presentation as JSON")
        p.add_argument("--config", type=Path, help="Config file with deck defaults (default: $MDECK_CONFIG or ~/.config/mdeck/config.yaml)")
        p.add_argument("--asset-base", type=Path, help="Base directory for resolving relative image paths (default: parent of markdown file)")
        p.add_argument("--check-assets", action="store_true", help="Warn about images that cannot be found")
        p.add_argument("--debug", action="store_true", help="Enable verbose logging")
        return p

    args = _build_parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO, format="%(levelname)s  %(message)s")

    md_path: Path = args.markdown
    if not md_path.exists():
        logger.error(f"Markdown file '{md_path}' not found")
        sys.exit(1)

    generator = DeckGenerator(
        base_dir=args.asset_base,
        config=load_config(args.config),
        debug=args.debug,
    )

    try:
        presentation = generator.generate_file(md_path, require_slides=True)
    except NoSlidesError as e:
        logger.error(str(e))
        sys.exit(1)

    if args.check_assets:
        generator.image_assets(presentation)

    if args.json:
        print(json.dumps(to_dict(presentation), indent=2, ensure_ascii=False))
    else:
        print(format_outline(presentation))


if __name__ == "__main__":
    main()
