#!/usr/bin/env python3
"""
Test the DeckGenerator pipeline and command-line entry point.
"""
import json
from pathlib import Path

import pytest
from mdeck.config import DeckConfig
from mdeck.generator import DeckGenerator, NoSlidesError, format_outline, main, parse, parse_file
from mdeck.models import BlockQuote, Heading, Layout, ListBlock

DECK = """---
title: "Quarterly Review"
author: Ops
---

# Quarterly Review
Numbers and next steps

---

@layout: bullet
## Highlights
+ Revenue up
+ Churn down
* Hiring on track



> Ship it.

Team motto
"""


@pytest.fixture
def no_user_config(tmp_path, monkeypatch):
    """Point config lookup at a file that does not exist."""
    monkeypatch.setenv("MDECK_CONFIG", str(tmp_path / "no-config.yaml"))


def test_generate_full_pipeline():
    """Test frontmatter, splitting, directives, blocks and layouts together."""
    presentation = DeckGenerator().generate(DECK)

    assert presentation.meta.title == "Quarterly Review"
    assert presentation.meta.author == "Ops"
    assert presentation.meta.theme is None

    slides = presentation.slides
    assert [s.layout for s in slides] == [Layout.TITLE, Layout.BULLET, Layout.QUOTE]

    assert isinstance(slides[1].blocks[0], Heading)
    assert isinstance(slides[1].blocks[1], ListBlock)
    assert slides[1].directive("layout") == "bullet"
    assert slides[1].max_steps == 2
    assert slides[1].heading_text() == "Highlights"

    assert isinstance(slides[2].blocks[0], BlockQuote)
    assert slides[2].heading_text() is None


def test_config_fills_unset_metadata():
    """Test that config defaults apply only where frontmatter is silent."""
    generator = DeckGenerator(config=DeckConfig(theme="dark"))
    presentation = generator.generate("---\n@transition: fade\n---\n# Hi")

    assert presentation.meta.theme == "dark"
    assert presentation.meta.transition == "fade"
    assert presentation.meta.aspect == "16:9"


def test_parse_without_frontmatter():
    presentation = parse("# One\n\n# Two")
    assert len(presentation.slides) == 2
    assert presentation.meta.title is None


def test_empty_document():
    """Test that empty input is not an error."""
    assert parse("").slides == []


def test_generate_file(tmp_path):
    """Test reading a file and defaulting the asset base to its directory."""
    path = tmp_path / "deck.md"
    path.write_text(DECK, encoding="utf-8")

    generator = DeckGenerator()
    presentation = generator.generate_file(path)

    assert len(presentation.slides) == 3
    assert generator.base_dir is None
    assert generator.asset_base() == tmp_path
    assert parse_file(path) == presentation


def test_generate_file_keeps_explicit_base_dir(tmp_path):
    path = tmp_path / "deck.md"
    path.write_text("# Hi", encoding="utf-8")

    generator = DeckGenerator(base_dir="/srv/assets")
    generator.generate_file(path)

    assert str(generator.base_dir) == "/srv/assets"


def test_reused_generator_resolves_against_each_file(tmp_path):
    """Test that images resolve against the directory of the file just read."""
    first = tmp_path / "a"
    second = tmp_path / "b"
    for directory in (first, second):
        directory.mkdir()
        (directory / "deck.md").write_text("![Pic](pic.png)", encoding="utf-8")

    generator = DeckGenerator()
    generator.generate_file(first / "deck.md")
    assets = generator.image_assets(generator.generate_file(second / "deck.md"))

    assert assets[0][2] == str((second / "pic.png").resolve())
    assert generator.base_dir is None


def test_generate_text_after_file_uses_cwd(tmp_path, monkeypatch):
    path = tmp_path / "deck.md"
    path.write_text("# Hi", encoding="utf-8")
    monkeypatch.chdir(tmp_path / "..")

    generator = DeckGenerator()
    generator.generate_file(path)
    generator.generate("![Pic](pic.png)")

    assert generator.asset_base() == Path.cwd()


def test_no_slides_error(tmp_path):
    """Test that a document of bare separators is rejected when slides are required."""
    path = tmp_path / "deck.md"
    path.write_text("\n\n---\n\n", encoding="utf-8")

    assert DeckGenerator().generate_file(path).slides == []
    with pytest.raises(NoSlidesError):
        DeckGenerator().generate_file(path, require_slides=True)


def test_empty_file_is_not_an_error(tmp_path):
    path = tmp_path / "deck.md"
    path.write_text("", encoding="utf-8")
    assert DeckGenerator().generate_file(path, require_slides=True).slides == []


def test_image_assets(tmp_path, caplog):
    """Test resolution of local and remote images and warnings for missing files."""
    (tmp_path / "logo.png").write_bytes(b"")
    path = tmp_path / "deck.md"
    path.write_text(
        "![Logo](logo.png)\n\n---\n\n![Remote](https://example.com/x.png)\n\n---\n\n![Gone](missing.png)",
        encoding="utf-8",
    )

    generator = DeckGenerator()
    assets = generator.image_assets(generator.generate_file(path))

    assert [number for number, _, _ in assets] == [1, 2, 3]
    assert assets[0][1].alt == "Logo"
    assert assets[0][2] == str((tmp_path / "logo.png").resolve())
    assert assets[1][2] == "https://example.com/x.png"
    assert "image not found" in caplog.text
    assert "missing.png" in caplog.text


def test_format_outline():
    """Test one row per slide under the deck title."""
    lines = format_outline(parse(DECK)).splitlines()

    assert lines[0] == "Quarterly Review"
    assert lines[1] == "=" * len("Quarterly Review")
    assert lines[2].split() == ["1", "title", "0", "Quarterly", "Review"]
    assert lines[3].split() == ["2", "bullet", "2", "Highlights"]
    assert lines[4].split() == ["3", "quote", "0"]


def test_main_json(tmp_path, capsys, no_user_config):
    """Test --json output with config defaults applied."""
    path = tmp_path / "deck.md"
    path.write_text(DECK, encoding="utf-8")

    main([str(path), "--json"])
    data = json.loads(capsys.readouterr().out)

    assert data["meta"]["title"] == "Quarterly Review"
    assert data["meta"]["theme"] == "light"
    assert [s["layout"] for s in data["slides"]] == ["title", "bullet", "quote"]
    assert data["slides"][1]["blocks"][1]["type"] == "ListBlock"
    assert data["slides"][1]["blocks"][1]["items"][0]["marker"] == "+"


def test_main_outline(tmp_path, capsys, no_user_config):
    path = tmp_path / "deck.md"
    path.write_text(DECK, encoding="utf-8")

    main([str(path)])
    out = capsys.readouterr().out

    assert out.startswith("Quarterly Review\n")
    assert "bullet" in out


def test_main_missing_file(tmp_path, no_user_config):
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / "nope.md")])
    assert exc.value.code == 1


def test_main_no_slides(tmp_path, no_user_config):
    """Test that a non-empty document without slides exits with an error."""
    path = tmp_path / "deck.md"
    path.write_text("---\n\n\n\n---\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        main([str(path)])
    assert exc.value.code == 1
