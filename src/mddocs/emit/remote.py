"""Remote-Doc Emitter: DocumentElements to ordered Google Docs batchUpdate operations.

The Docs API addresses content by absolute character offset into one growing
text buffer, so every insertion shifts all later offsets. The cursor is
therefore threaded through emission as an explicit value: each element's
operations are computed from the cursor before its insertion, and the next
element starts where the previous one ended. Batches carry their start and
end cursor so splitting (or replaying a batch) never recomputes offsets.
"""

import logging
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from mddocs.core.models import (
    CodeBlock,
    Heading,
    LineBreak,
    ListItem,
    Run,
    StyleSet,
)
from mddocs.core.styles import (
    NORMAL_TEXT,
    bullet_preset,
    docs_text_style,
    heading_style,
)
from mddocs.errors import UnsupportedNesting


logger = logging.getLogger(__name__)

PARAGRAPH_END = "\n"
SOFT_BREAK = "\v"           # Docs line break that stays inside the paragraph
LIST_LEVEL = "\t"           # leading tabs set the nesting level of a bulleted paragraph
MAX_NESTING_LEVEL = 8       # deepest bullet nesting level the Docs API accepts
DEFAULT_START_INDEX = 1     # body content starts at index 1


class _Op(BaseModel):
    model_config = ConfigDict(frozen=True)


class TextRange(_Op):
    """Half-open [start, end) character range."""
    start: int = Field(ge=0)
    end:   int = Field(ge=0)


class InsertText(_Op):
    kind:  Literal["insert_text"] = "insert_text"
    index: int = Field(ge=0)
    text:  str


class UpdateStyle(_Op):
    kind:  Literal["update_style"] = "update_style"
    range: TextRange
    style: StyleSet


class UpdateParagraphStyle(_Op):
    kind:        Literal["update_paragraph_style"] = "update_paragraph_style"
    range:       TextRange
    named_style: str = NORMAL_TEXT


class InsertParagraphBullet(_Op):
    """Bullets for one whole list; the API strips `tabs` leading tabs from the range."""
    kind:    Literal["insert_paragraph_bullet"] = "insert_paragraph_bullet"
    range:   TextRange
    depth:   int = Field(ge=0)
    ordered: bool = False
    tabs:    int = Field(default=0, ge=0)


class RemoveParagraphBullet(_Op):
    kind:  Literal["remove_paragraph_bullet"] = "remove_paragraph_bullet"
    range: TextRange


RemoteOperation = Annotated[
    Union[InsertText, UpdateStyle, UpdateParagraphStyle, InsertParagraphBullet, RemoveParagraphBullet],
    Field(discriminator="kind"),
]


class Batch(_Op):
    """One ordered sub-batch and the cursor values around it."""
    start_index: int
    end_index:   int
    operations:  tuple[RemoteOperation, ...]


def insert_text(cursor: int, text: str) -> tuple[InsertText, int]:
    """Insert `text` at `cursor`; return the operation and the advanced cursor."""
    return InsertText(index=cursor, text=text), cursor + len(text)


def _layout(element) -> tuple[str, list[tuple[int, int, StyleSet]]]:
    """Return (inserted text, styled spans relative to the insertion point)."""
    if isinstance(element, LineBreak):
        return PARAGRAPH_END, []
    if isinstance(element, CodeBlock):
        body = element.text
        spans = [(0, len(body), StyleSet(code=True))] if body else []
        return body + PARAGRAPH_END, spans

    prefix = LIST_LEVEL * element.depth if isinstance(element, ListItem) else ""
    pieces: list[str] = [prefix]
    spans = []
    offset = len(prefix)
    for item in element.runs:
        piece = SOFT_BREAK if isinstance(item, LineBreak) else item.text
        if isinstance(item, Run) and piece:
            spans.append((offset, offset + len(piece), item.style))
        pieces.append(piece)
        offset += len(piece)
    return "".join(pieces) + PARAGRAPH_END, spans


def emit_element(element, cursor: int, after_list: bool = False) -> tuple[list, int]:
    """Operations for one element inserted at `cursor`; returns (operations, new cursor)."""
    if isinstance(element, ListItem) and element.depth > MAX_NESTING_LEVEL:
        raise UnsupportedNesting(
            f"list depth {element.depth} exceeds the Docs maximum of {MAX_NESTING_LEVEL}"
        )

    text, spans = _layout(element)
    insert, end = insert_text(cursor, text)
    ops: list = [insert]
    for start, stop, style in spans:
        ops.append(UpdateStyle(range=TextRange(start=cursor + start, end=cursor + stop), style=style))

    paragraph = TextRange(start=cursor, end=end)
    named = heading_style(element.level) if isinstance(element, Heading) else NORMAL_TEXT
    ops.append(UpdateParagraphStyle(range=paragraph, named_style=named))

    if after_list and not isinstance(element, ListItem):
        # New paragraphs inherit the bullet of the list item they follow.
        ops.append(RemoveParagraphBullet(range=paragraph))

    logger.debug("Element %s: %d op(s), cursor %d -> %d", element.kind, len(ops), cursor, end)
    return ops, end


def _continues_list(element) -> bool:
    """A list item that belongs to the list being emitted (not a new top-level list)."""
    return isinstance(element, ListItem) and not (element.depth == 0 and element.number == element.start)


def _element_groups(elements: list, start_index: int):
    """Yield (start cursor, operations, end cursor) per element, threading the cursor.

    A list gets one InsertParagraphBullet over all of its items, appended to its
    last item. Nesting comes from each item's leading tabs, which the API removes
    when it creates the bullets, so the cursor moves back by that many characters.
    """
    cursor = start_index
    after_list = False
    list_start = None
    first = None
    tabs = 0
    for n, element in enumerate(elements):
        ops, end = emit_element(element, cursor, after_list)
        if isinstance(element, ListItem):
            if list_start is None:
                list_start, first, tabs = cursor, element, 0
            tabs += element.depth
            following = elements[n + 1] if n + 1 < len(elements) else None
            if not _continues_list(following):
                ops.append(InsertParagraphBullet(
                    range=TextRange(start=list_start, end=end),
                    depth=first.depth,
                    ordered=first.ordered,
                    tabs=tabs,
                ))
                end -= tabs
                list_start = None
        yield cursor, ops, end
        after_list = isinstance(element, ListItem)
        cursor = end


def emit(elements: list, start_index: int = DEFAULT_START_INDEX) -> list:
    """Return the full ordered operation sequence for `elements`."""
    return [op for _, ops, _ in _element_groups(elements, start_index) for op in ops]


def plan_batches(
    elements: list,
    start_index: int = DEFAULT_START_INDEX,
    max_operations: int = 500,
    ) -> list[Batch]:
    """Split operations into ordered batches of at most `max_operations`.

    Batches break at element boundaries; an element is split only when its own
    operations exceed the limit, and then its InsertText stays in the first part.
    """
    if max_operations < 1:
        raise ValueError("max_operations must be at least 1")

    batches: list[Batch] = []
    pending: list = []
    batch_start = start_index
    cursor = start_index

    def _close(end: int) -> None:
        nonlocal pending, batch_start
        if pending:
            batches.append(Batch(start_index=batch_start, end_index=end, operations=tuple(pending)))
        pending = []
        batch_start = end

    for begin, ops, end in _element_groups(elements, start_index):
        if pending and len(pending) + len(ops) > max_operations:
            _close(begin)
        if len(ops) > max_operations:
            # The InsertText lands in the first chunk; only the chunk holding the bullets sees the tab removal.
            shift = sum(op.tabs for op in ops if isinstance(op, InsertParagraphBullet))
            for n in range(0, len(ops), max_operations):
                pending = ops[n:n + max_operations]
                _close(end if n + max_operations >= len(ops) else end + shift)
        else:
            pending.extend(ops)
        cursor = end
    _close(cursor)

    logger.debug("Planned %d batch(es) over index %d..%d", len(batches), start_index, cursor)
    return batches


def _range(r: TextRange) -> dict[str, int]:
    return {"startIndex": r.start, "endIndex": r.end}


def to_request(op, code_font: str = "Courier New") -> list[dict[str, Any]]:
    """Docs API request bodies for one operation."""
    if isinstance(op, InsertText):
        return [{"insertText": {"location": {"index": op.index}, "text": op.text}}]
    if isinstance(op, UpdateStyle):
        text_style, fields = docs_text_style(op.style, code_font)
        return [{"updateTextStyle": {"range": _range(op.range), "textStyle": text_style, "fields": fields}}]
    if isinstance(op, UpdateParagraphStyle):
        return [{"updateParagraphStyle": {
            "range": _range(op.range),
            "paragraphStyle": {"namedStyleType": op.named_style},
            "fields": "namedStyleType",
        }}]
    if isinstance(op, InsertParagraphBullet):
        return [{"createParagraphBullets": {"range": _range(op.range), "bulletPreset": bullet_preset(op.ordered)}}]
    if isinstance(op, RemoveParagraphBullet):
        return [{"deleteParagraphBullets": {"range": _range(op.range)}}]
    raise TypeError(f"Unknown remote operation: {op!r}")


def to_requests(operations, code_font: str = "Courier New") -> list[dict[str, Any]]:
    """Flatten operations into the `requests` array of one batchUpdate call."""
    return [req for op in operations for req in to_request(op, code_font)]
