"""Local-File Emitter: DocumentElements to a python-docx Document and DOCX bytes"""

import io
import logging
from typing import Optional

import docx
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor

from mddocs.config import Settings
from mddocs.core.models import CodeBlock, Heading, LineBreak, ListItem, Paragraph, StyleSet
from mddocs.core.styles import docx_heading_style, docx_list_style, list_indent_pt
from mddocs.errors import SerializationFailure, UnsupportedNesting


logger = logging.getLogger(__name__)

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
MAX_NESTING_LEVEL = 8   # w:ilvl runs 0-8
LINK_COLOR = RGBColor(0x05, 0x63, 0xC1)


def _apply_style(run, style: StyleSet, settings: Settings) -> None:
    """Set native run properties; unset flags are left to inherit from the paragraph style."""
    if style.plain:
        return
    if style.bold:
        run.bold = True
    if style.italic:
        run.italic = True
    if style.strikethrough:
        run.font.strike = True
    if style.code:
        run.font.name = settings.code_font
        run.font.size = Pt(settings.code_font_size)
    if style.link:
        run.font.underline = True
        run.font.color.rgb = LINK_COLOR


def _wrap_hyperlink(paragraph, run, url: str) -> None:
    """Move `run` inside a w:hyperlink pointing at an external relationship for `url`."""
    r_id = paragraph.part.relate_to(url, RT.HYPERLINK, is_external=True)
    hyperlink = OxmlElement('w:hyperlink')
    hyperlink.set(qn('r:id'), r_id)
    run._r.addprevious(hyperlink)
    hyperlink.append(run._r)


def _add_runs(paragraph, runs: tuple, settings: Settings) -> None:
    for item in runs:
        if isinstance(item, LineBreak):
            paragraph.add_run().add_break()
            continue
        run = paragraph.add_run(item.text)
        _apply_style(run, item.style, settings)
        if item.style.link:
            _wrap_hyperlink(paragraph, run, item.style.link)


def _new_numbering(document, paragraph, start: int) -> Optional[tuple[int, int]]:
    """Add a w:num for the paragraph's list style counting from `start`; return (numId, ilvl)."""
    p_pr = paragraph.style.element.pPr
    num_pr = p_pr.numPr if p_pr is not None else None
    if num_pr is None or num_pr.numId is None:
        logger.debug("Style %r has no numbering; list continues", paragraph.style.name)
        return None
    ilvl = num_pr.ilvl.val if num_pr.ilvl is not None else 0
    numbering = document.part.numbering_part.element
    try:
        base = numbering.num_having_numId(num_pr.numId.val)
    except KeyError:
        logger.debug("Numbering %s missing from template; list continues", num_pr.numId.val)
        return None
    num = numbering.add_num(base.abstractNumId.val)
    num.add_lvlOverride(ilvl=ilvl).add_startOverride(start)
    return num.numId, ilvl


def _set_numbering(paragraph, numbering: tuple[int, int]) -> None:
    num_id, ilvl = numbering
    own = paragraph._p.get_or_add_pPr().get_or_add_numPr()
    own.get_or_add_ilvl().val = ilvl
    own.get_or_add_numId().val = num_id


def _add_list_item(document, element: ListItem, settings: Settings, lists: dict) -> None:
    """Add one list paragraph; `lists` maps depth to the numbering of the ordered list open there."""
    if element.depth > MAX_NESTING_LEVEL:
        raise UnsupportedNesting(
            f"list depth {element.depth} exceeds the DOCX maximum of {MAX_NESTING_LEVEL}"
        )
    paragraph = document.add_paragraph(style=docx_list_style(element.depth, element.ordered))
    paragraph.paragraph_format.left_indent = Pt(list_indent_pt(element.depth, settings.list_indent_pt))
    for depth in [d for d in lists if d > element.depth]:
        del lists[depth]
    if not element.ordered:
        lists.pop(element.depth, None)
    elif element.number == element.start or element.depth not in lists:
        lists[element.depth] = _new_numbering(document, paragraph, element.start)
    if element.ordered and lists[element.depth] is not None:
        _set_numbering(paragraph, lists[element.depth])
    _add_runs(paragraph, element.runs, settings)


def _add_code_block(document, element: CodeBlock, settings: Settings) -> None:
    """One monospace paragraph; source newlines become line breaks inside it."""
    paragraph = document.add_paragraph()
    run = paragraph.add_run()
    for n, line in enumerate(element.text.split("\n")):
        if n:
            run.add_break()
        run.add_text(line)
    _apply_style(run, StyleSet(code=True), settings)


def build_docx(elements: list, title: Optional[str] = None, settings: Settings = None):
    """Populate a python-docx Document from the element sequence."""
    settings = settings or Settings()
    document = docx.Document()
    if title:
        document.core_properties.title = title

    lists: dict = {}
    for element in elements:
        if not isinstance(element, ListItem):
            lists.clear()
        if isinstance(element, Heading):
            paragraph = document.add_paragraph(style=docx_heading_style(element.level))
            _add_runs(paragraph, element.runs, settings)
        elif isinstance(element, Paragraph):
            _add_runs(document.add_paragraph(), element.runs, settings)
        elif isinstance(element, ListItem):
            _add_list_item(document, element, settings, lists)
        elif isinstance(element, CodeBlock):
            _add_code_block(document, element, settings)
        elif isinstance(element, LineBreak):
            document.add_paragraph()
        else:
            raise TypeError(f"Unknown document element: {element!r}")
    return document


def emit(elements: list, title: Optional[str] = None, settings: Settings = None) -> bytes:
    """Serialize the elements to DOCX bytes."""
    document = build_docx(elements, title, settings)
    buf = io.BytesIO()
    try:
        document.save(buf)
    except Exception as e:
        raise SerializationFailure(f"Failed to serialize DOCX: {e}") from e
    logger.debug("Serialized %d element(s) to %d bytes", len(elements), buf.tell())
    return buf.getvalue()
