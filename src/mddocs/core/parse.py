"""Optional frontmatter extraction and markdown-it tokenization"""

import logging
import re
from dataclasses import dataclass
from typing import Any

import yaml
from markdown_it import MarkdownIt


logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*\n', re.DOTALL)


@dataclass
class ParsedMarkdown:
    """Parse result carrying markdown-it tokens; not persisted."""
    markdown:    str               # text that was tokenized
    frontmatter: dict[str, Any]
    tokens:      list              # markdown-it Token objects


def make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with a YAML mapping header removed.

    A leading `---` block that is not a YAML mapping is ordinary markdown
    (a thematic break and a setext heading), so the text comes back whole.
    """
    m = FRONTMATTER_RE.match(text)
    if not m:
        return {}, text
    try:
        fm = yaml.safe_load(m.group(1))
    except yaml.YAMLError as e:
        logger.info("Leading block is not YAML, keeping it as markdown: %s", e)
        return {}, text
    if not isinstance(fm, dict):
        logger.info("Leading block is %s, not a mapping; keeping it as markdown", type(fm).__name__)
        return {}, text
    return fm, text[m.end():]


def parse_markdown(text: str, parser_config: str = 'gfm-like', frontmatter: bool = False) -> ParsedMarkdown:
    """Tokenize `text`; with `frontmatter`, a leading YAML mapping is split off first."""
    fm, body = strip_frontmatter(text) if frontmatter else ({}, text)
    return ParsedMarkdown(
        markdown=body,
        frontmatter=fm,
        tokens=make_parser(parser_config).parse(body),
    )
