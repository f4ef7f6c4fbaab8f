"""Target-agnostic document model produced by the builder and read by both emitters"""

from dataclasses import dataclass
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class StyleSet(_Frozen):
    """Inline style flags; any combination is valid and no flag implies another."""
    bold:          bool = False
    italic:        bool = False
    code:          bool = False
    strikethrough: bool = False
    link:          Optional[str] = None

    def union(self, other: "StyleSet") -> "StyleSet":
        """Combine two sets; booleans OR together and the inner (other) link wins."""
        return StyleSet(
            bold=self.bold or other.bold,
            italic=self.italic or other.italic,
            code=self.code or other.code,
            strikethrough=self.strikethrough or other.strikethrough,
            link=other.link or self.link,
        )

    @property
    def plain(self) -> bool:
        return self == PLAIN


PLAIN = StyleSet()


class Run(_Frozen):
    """A contiguous span of text sharing one StyleSet."""
    kind: Literal["run"] = "run"
    text: str
    style: StyleSet = PLAIN


class LineBreak(_Frozen):
    """Hard line break inside a run sequence, or a thematic break between blocks."""
    kind: Literal["line_break"] = "line_break"


Inline = Annotated[Union[Run, LineBreak], Field(discriminator="kind")]


class Heading(_Frozen):
    kind:  Literal["heading"] = "heading"
    level: int = Field(ge=1, le=6)
    runs:  tuple[Inline, ...] = ()


class Paragraph(_Frozen):
    kind: Literal["paragraph"] = "paragraph"
    runs: tuple[Inline, ...] = ()


class ListItem(_Frozen):
    """One list paragraph.

    `number` is the item's ordinal within its own list and `start` is the first
    ordinal of that list, so `number == start` marks where a list begins.
    """
    kind:    Literal["list_item"] = "list_item"
    depth:   int = Field(ge=0)
    ordered: bool = False
    number:  int = Field(default=1, ge=0)
    start:   int = Field(default=1, ge=0)
    runs:    tuple[Inline, ...] = ()


class CodeBlock(_Frozen):
    kind:     Literal["code_block"] = "code_block"
    language: Optional[str] = None
    text:     str = ""


DocumentElement = Annotated[
    Union[Heading, Paragraph, ListItem, CodeBlock, LineBreak],
    Field(discriminator="kind"),
]


def inline_text(runs: tuple, line_break: str = "\n") -> str:
    """Concatenate run texts, rendering LineBreak entries as `line_break`."""
    return "".join(line_break if isinstance(r, LineBreak) else r.text for r in runs)


def element_text(element: Any, line_break: str = "\n") -> str:
    """Visible text of one element (code verbatim, thematic break empty)."""
    if isinstance(element, CodeBlock):
        return element.text
    if isinstance(element, LineBreak):
        return ""
    return inline_text(element.runs, line_break)


def plain_text(elements: list) -> str:
    """Render a model back to plain text, one line per element."""
    return "\n".join(element_text(e) for e in elements)


@dataclass
class Conversion:
    """Per-request result of parse + build; discarded after emission."""
    title:       str
    frontmatter: dict[str, Any]
    elements:    list
