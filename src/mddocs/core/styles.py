"""Style resolution: markdown-it tokens to StyleSets, and semantic styles to target attributes"""

from typing import Any

from mddocs.core.models import PLAIN, StyleSet


# Inline token types that open a style scope; closing tokens pop it.
STYLE_OPEN: dict[str, StyleSet] = {
    'strong_open': StyleSet(bold=True),
    'em_open':     StyleSet(italic=True),
    's_open':      StyleSet(strikethrough=True),
}
STYLE_CLOSE = {'strong_close', 'em_close', 's_close', 'link_close'}

NORMAL_TEXT = "NORMAL_TEXT"

# Bullet list presets for the Google Docs API
BULLET_PRESET_UNORDERED = "BULLET_DISC_CIRCLE_SQUARE"
BULLET_PRESET_ORDERED = "NUMBERED_DECIMAL_ALPHA_ROMAN"

# Every text style request sets all of these so plain runs reset inherited formatting.
DOCS_TEXT_FIELDS = "bold,italic,strikethrough,link,weightedFontFamily"


def resolve(token) -> StyleSet:
    """Return the StyleSet an inline token contributes; PLAIN for anything without one."""
    if token.type in STYLE_OPEN:
        return STYLE_OPEN[token.type]
    if token.type == 'code_inline':
        return StyleSet(code=True)
    if token.type == 'link_open':
        return StyleSet(link=token.attrGet('href') or None)
    return PLAIN


def heading_level(token) -> int | None:
    """Return the heading level (1-6) for a heading_open token, else None."""
    if token.type == 'heading_open' and token.tag and token.tag[0] == 'h' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def heading_style(level: int) -> str:
    """Docs named style for a heading level (1 -> HEADING_1)."""
    return f"HEADING_{level}"


def docx_heading_style(level: int) -> str:
    return f"Heading {level}"


def is_ordered(token) -> bool:
    """Ordered-vs-unordered comes from the list syntax, never from depth."""
    return token.type == 'ordered_list_open'


def list_start(token) -> int:
    """First ordinal of an ordered list (markdown-it only sets `start` when it is not 1)."""
    start = token.attrGet('start') if is_ordered(token) else None
    return int(start) if start is not None else 1


def bullet_preset(ordered: bool) -> str:
    return BULLET_PRESET_ORDERED if ordered else BULLET_PRESET_UNORDERED


def list_indent_pt(depth: int, step: float = 36.0) -> float:
    """Left indent in points for a list item at `depth`."""
    return step * (depth + 1)


def docx_list_style(depth: int, ordered: bool) -> str:
    """Built-in DOCX list style; the default template defines levels 1-3 only."""
    base = 'List Number' if ordered else 'List Bullet'
    level = min(depth + 1, 3)
    return base if level == 1 else f"{base} {level}"


def docs_text_style(style: StyleSet, code_font: str) -> tuple[dict[str, Any], str]:
    """Return (textStyle, fields) for a Docs updateTextStyle request."""
    text_style: dict[str, Any] = {
        "bold": style.bold,
        "italic": style.italic,
        "strikethrough": style.strikethrough,
    }
    if style.link:
        text_style["link"] = {"url": style.link}
    if style.code:
        text_style["weightedFontFamily"] = {"fontFamily": code_font}
    return text_style, DOCS_TEXT_FIELDS
