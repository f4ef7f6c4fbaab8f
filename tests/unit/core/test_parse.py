"""Unit tests for core/parse.py"""

import pytest

from mddocs.core.parse import ParsedMarkdown, parse_markdown, strip_frontmatter


def test_strip_frontmatter_with_yaml():
    """strip_frontmatter extracts YAML header and returns body."""
    text = "---\ntitle: Hello\n---\n# Body\n"
    fm, body = strip_frontmatter(text)
    assert fm == {"title": "Hello"}
    assert body == "# Body\n"


def test_strip_frontmatter_no_frontmatter():
    """strip_frontmatter returns empty dict and full text when no header."""
    text = "# No frontmatter\n"
    fm, body = strip_frontmatter(text)
    assert fm == {}
    assert body == text


@pytest.mark.parametrize("text", [
    "---\nkey: [unclosed\n---\nBody\n",
    "---\n- a\n- b\n---\nBody\n",
    "---\nIntro\n---\nBody\n",
])
def test_strip_frontmatter_keeps_non_mapping_blocks(text):
    """Blocks that are not a YAML mapping are left in the markdown untouched."""
    assert strip_frontmatter(text) == ({}, text)


def test_parse_markdown_tokens_exclude_frontmatter():
    """parse_markdown tokenizes only the body; the YAML header never becomes an hr."""
    parsed = parse_markdown("---\ntitle: T\n---\n# Body\n", frontmatter=True)
    assert isinstance(parsed, ParsedMarkdown)
    assert parsed.frontmatter == {"title": "T"}
    assert [t.type for t in parsed.tokens] == ["heading_open", "inline", "heading_close"]


def test_parse_markdown_preset_controls_extensions():
    """Tables parse under gfm-like but not under the commonmark preset."""
    md = "| a | b |\n|---|---|\n| 1 | 2 |\n"
    assert any(t.type == "table_open" for t in parse_markdown(md, "gfm-like").tokens)
    assert not any(t.type == "table_open" for t in parse_markdown(md, "commonmark").tokens)


def test_parse_markdown_tokenizes_leading_block_by_default():
    """Frontmatter splitting is opt-in; the header parses as a rule and a heading."""
    parsed = parse_markdown("---\ntitle: T\n---\n# Body\n")
    assert parsed.frontmatter == {}
    assert [t.type for t in parsed.tokens][:2] == ["hr", "heading_open"]
