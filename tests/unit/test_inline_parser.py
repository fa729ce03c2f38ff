"""Test inline formatting: bold, italic, strikethrough, code and links."""

import pytest
from mdeck.inline_parser import parse_inlines
from mdeck.models import Bold, Code, Italic, Link, Strikethrough, Text, inlines_to_text


def test_plain_text():
    """Test text without markup."""
    assert parse_inlines("Hello world") == [Text("Hello world")]


def test_empty_text():
    assert parse_inlines("") == []


def test_bold():
    """Test **bold** after plain text."""
    assert parse_inlines("Hello **world**") == [Text("Hello "), Bold([Text("world")])]


def test_italic():
    """Test *italic* after plain text."""
    assert parse_inlines("Hello *world*") == [Text("Hello "), Italic([Text("world")])]


def test_strikethrough():
    """Test ~~struck~~ text in the middle of a sentence."""
    result = parse_inlines("This is ~~deleted~~ text")

    assert len(result) == 3
    assert result[1] == Strikethrough([Text("deleted")])


def test_inline_code():
    """Test that code spans split the surrounding text."""
    result = parse_inlines("Use `println!` here")
    assert result == [Text("Use "), Code("println!"), Text(" here")]


def test_code_is_verbatim():
    """Test that markup inside a code span is not parsed."""
    assert parse_inlines("`**not bold**`") == [Code("**not bold**")]


def test_escaped_backtick_inside_code():
    """Test that a backslash-escaped backtick does not close the span."""
    assert parse_inlines("`a\\`b`") == [Code("a\\`b")]


def test_link():
    """Test [text](url)."""
    result = parse_inlines("Click [here](https://example.com)")
    assert result == [Text("Click "), Link(text=[Text("here")], url="https://example.com")]


def test_link_with_nested_brackets_and_parens():
    """Test depth-aware matching of link text and URL."""
    result = parse_inlines("[a [b] c](https://en.wikipedia.org/wiki/Foo_(bar))")
    assert result == [Link(text=[Text("a [b] c")], url="https://en.wikipedia.org/wiki/Foo_(bar)")]


def test_link_text_is_formatted():
    """Test that link text is parsed recursively."""
    result = parse_inlines("[**docs**](/docs)")
    assert result == [Link(text=[Bold([Text("docs")])], url="/docs")]


def test_mixed_formatting():
    """Test several constructs in one span."""
    result = parse_inlines("**bold** and *italic*")
    assert result == [Bold([Text("bold")]), Text(" and "), Italic([Text("italic")])]


def test_nested_formatting():
    """Test italic inside bold."""
    assert parse_inlines("**a *b* c**") == [Bold([Text("a "), Italic([Text("b")]), Text(" c")])]


@pytest.mark.parametrize(
    "text",
    [
        "**bold",
        "*italic",
        "~~struck",
        "`code",
        "[text](url",
        "[text] (url)",
        "[text",
        "a ** b",
    ],
)
def test_unclosed_markup_is_literal(text):
    """Test that unclosed delimiters survive as a single Text node."""
    assert parse_inlines(text) == [Text(text)]


def test_empty_delimiters_are_literal():
    """Test that ** and ~~ with nothing between them are not formatting."""
    assert parse_inlines("a **** b") == [Text("a **** b")]


def test_closing_delimiter_inside_code_is_ignored():
    """Test that ** inside an open code span does not close bold."""
    result = parse_inlines("**a `**` b**")
    assert result == [Bold([Text("a "), Code("**"), Text(" b")])]


def test_deep_nesting_terminates():
    """Test pathological bracket nesting."""
    text = "[" * 500 + "x" + "]" * 500 + "(u)"
    result = parse_inlines(text)
    assert inlines_to_text(result).count("x") == 1


def test_inlines_to_text():
    """Test flattening of an inline tree."""
    inlines = parse_inlines("A **b** [c `d`](url) ~~e~~")
    assert inlines_to_text(inlines) == "A b c d e"


def test_many_unmatched_brackets():
    """Test a long run of openers with no closer."""
    text = "[" * 20000 + "x"
    assert parse_inlines(text) == [Text(text)]


def test_unmatched_bracket_before_link():
    """Test that a stray opener does not swallow a later link."""
    result = parse_inlines("[ stray [docs](/docs)")
    assert result == [Text("[ stray "), Link(text=[Text("docs")], url="/docs")]
