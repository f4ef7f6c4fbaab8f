"""Document Model Builder: markdown-it tokens to an ordered, flat list of DocumentElements"""

import logging
from dataclasses import dataclass, field

from mddocs.core.models import (
    PLAIN,
    CodeBlock,
    Heading,
    LineBreak,
    ListItem,
    Paragraph,
    Run,
)
from mddocs.core.styles import (
    STYLE_CLOSE,
    STYLE_OPEN,
    heading_level,
    is_ordered,
    list_start,
    resolve,
)
from mddocs.errors import MalformedInput


logger = logging.getLogger(__name__)

# Structural tokens carrying no text of their own; their children arrive as separate tokens.
PASSTHROUGH = {
    'paragraph_open', 'paragraph_close',
    'blockquote_open', 'blockquote_close',
    'table_open', 'table_close',
    'thead_open', 'thead_close',
    'tbody_open', 'tbody_close',
    'th_open', 'th_close',
    'td_open', 'td_close',
}
LIST_OPEN = {'bullet_list_open', 'ordered_list_open'}
LIST_CLOSE = {'bullet_list_close', 'ordered_list_close'}
CELL_SEPARATOR = "\t"


@dataclass
class _OpenList:
    ordered: bool
    start:   int
    count:   int = 0


@dataclass
class _PendingItem:
    """A list item whose runs are still being collected."""
    level:   int
    ordered: bool
    number:  int
    start:   int
    runs:    list = field(default_factory=list)
    emitted: bool = False


@dataclass
class ListContext:
    """Open lists and items (innermost last) plus the depth of the last emitted item."""
    max_depth:  int = 8
    lists:      list[_OpenList] = field(default_factory=list)
    items:      list[_PendingItem] = field(default_factory=list)
    last_depth: int = -1

    @property
    def current_item(self) -> _PendingItem | None:
        return self.items[-1] if self.items else None

    def open_list(self, ordered: bool, start: int) -> None:
        self.lists.append(_OpenList(ordered=ordered, start=start))

    def close_list(self) -> None:
        if not self.lists:
            raise MalformedInput("list close without a matching list open")
        self.lists.pop()
        if not self.lists:
            self.last_depth = -1

    def open_item(self) -> _PendingItem:
        if not self.lists:
            raise MalformedInput("list item outside of a list")
        current = self.lists[-1]
        item = _PendingItem(
            level=len(self.lists) - 1,
            ordered=current.ordered,
            number=current.start + current.count,
            start=current.start,
        )
        current.count += 1
        self.items.append(item)
        return item

    def close_item(self) -> _PendingItem:
        if not self.items:
            raise MalformedInput("list item close without a matching open")
        return self.items.pop()

    def depth_for(self, item: _PendingItem) -> int:
        """Depth for an item about to be emitted: at most one deeper than the last one."""
        depth = min(item.level, self.last_depth + 1, self.max_depth)
        if depth != item.level:
            logger.warning("Clamped list depth %d to %d", item.level, depth)
        self.last_depth = depth
        return depth


def _merge(runs: list) -> list:
    """Drop empty runs and join neighbours that share a StyleSet."""
    merged: list = []
    for r in runs:
        if isinstance(r, Run):
            if not r.text:
                continue
            if merged and isinstance(merged[-1], Run) and merged[-1].style == r.style:
                merged[-1] = Run(text=merged[-1].text + r.text, style=r.style)
                continue
        merged.append(r)
    return merged


def inline_runs(children: list) -> list:
    """Fold the children of an inline token into Runs; nested styles compose by union."""
    stack = [PLAIN]
    out: list = []
    for child in children:
        t = child.type
        if t in STYLE_OPEN or t == 'link_open':
            stack.append(stack[-1].union(resolve(child)))
        elif t in STYLE_CLOSE:
            if len(stack) == 1:
                raise MalformedInput(f"inline '{t}' without a matching open")
            stack.pop()
        elif t == 'text':
            out.append(Run(text=child.content, style=stack[-1]))
        elif t == 'code_inline':
            out.append(Run(text=child.content, style=stack[-1].union(resolve(child))))
        elif t == 'softbreak':
            out.append(Run(text=" ", style=stack[-1]))
        elif t == 'hardbreak':
            out.append(LineBreak())
        elif child.content:
            # image alt text, raw inline html, plugin tokens
            logger.debug("Degrading inline %r to text", t)
            out.append(Run(text=child.content, style=stack[-1]))
    return _merge(out)


class _Builder:
    def __init__(self, max_list_depth: int):
        self.elements: list = []
        self.lists = ListContext(max_depth=max_list_depth)
        self.heading: int | None = None
        self.row: list | None = None

    def run(self, tokens: list) -> list:
        for i, tok in enumerate(tokens):
            kind = getattr(tok, 'type', None)
            if not isinstance(kind, str):
                raise MalformedInput(f"token {i} is not a markdown node: {tok!r}")
            self._handle(tok)
        if self.lists.lists or self.lists.items:
            raise MalformedInput("token stream ended inside an open list")
        return self.elements

    def _handle(self, tok) -> None:
        t = tok.type
        logger.debug("Token: type=%s, tag=%s, nesting=%s", t, tok.tag, tok.nesting)
        if t == 'inline':
            self._inline(tok)
        elif t == 'heading_open':
            self._flush_item(nested=True)
            self.heading = heading_level(tok) or 1
        elif t == 'heading_close':
            self.heading = None
        elif t in LIST_OPEN:
            self._flush_item(nested=True)
            self.lists.open_list(is_ordered(tok), list_start(tok))
        elif t in LIST_CLOSE:
            self.lists.close_list()
        elif t == 'list_item_open':
            self.lists.open_item()
        elif t == 'list_item_close':
            self._flush_item()
            self.lists.close_item()
        elif t in ('fence', 'code_block'):
            self._flush_item(nested=True)
            self.elements.append(_code_block(tok))
        elif t == 'hr':
            self._flush_item(nested=True)
            self.elements.append(LineBreak())
        elif t == 'tr_open':
            self.row = []
        elif t == 'tr_close':
            self._table_row()
        elif t in PASSTHROUGH:
            pass
        elif tok.content:
            # html_block and unknown plugin blocks keep their raw text
            self._flush_item(nested=True)
            text = tok.content.rstrip("\n")
            logger.debug("Degrading block %r to a paragraph", t)
            self.elements.append(Paragraph(runs=(Run(text=text),)))
        else:
            logger.debug("Skipping empty token %r", t)

    def _inline(self, tok) -> None:
        runs = inline_runs(tok.children or [])
        if self.heading is not None:
            self.elements.append(Heading(level=self.heading, runs=tuple(runs)))
            return
        if self.row is not None:
            self.row.append(runs)
            return
        item = self.lists.current_item
        if item is not None and not item.emitted:
            if item.runs:
                item.runs.append(LineBreak())
            item.runs.extend(runs)
            return
        self.elements.append(Paragraph(runs=tuple(runs)))

    def _flush_item(self, nested: bool = False) -> None:
        """Emit the innermost open item; items holding only a nested block are skipped."""
        item = self.lists.current_item
        if item is None or item.emitted:
            return
        item.emitted = True
        if nested and not item.runs:
            return
        self.elements.append(ListItem(
            depth=self.lists.depth_for(item),
            ordered=item.ordered,
            number=item.number,
            start=item.start,
            runs=tuple(_merge(item.runs)),
        ))

    def _table_row(self) -> None:
        cells, self.row = self.row or [], None
        runs: list = []
        for n, cell in enumerate(cells):
            if n:
                runs.append(Run(text=CELL_SEPARATOR))
            runs.extend(cell)
        self.elements.append(Paragraph(runs=tuple(_merge(runs))))


def _code_block(tok) -> CodeBlock:
    info = (tok.info or "").strip()
    text = tok.content[:-1] if tok.content.endswith("\n") else tok.content
    return CodeBlock(language=info.split()[0] if info else None, text=text)


def build(tokens: list, max_list_depth: int = 8) -> list:
    """Walk markdown-it block tokens in document order and return DocumentElements."""
    elements = _Builder(max_list_depth).run(tokens)
    logger.debug("Built %d element(s) from %d token(s)", len(elements), len(tokens))
    return elements
