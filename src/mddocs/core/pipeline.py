"""Pipeline step functions: prepare the model, then emit DOCX bytes or a Google Doc"""

import logging
from typing import Optional

from mddocs.config import Settings
from mddocs.core.build import build
from mddocs.core.models import Conversion
from mddocs.core.parse import parse_markdown
from mddocs.emit import local
from mddocs.emit.remote import plan_batches
from mddocs.remote.client import ApplyResult, DocsClient, apply


logger = logging.getLogger(__name__)


def prepare(markdown: str, title: Optional[str] = None, settings: Settings = None) -> Conversion:
    """Parse and build; title falls back to frontmatter `title` (when enabled), then settings.default_title."""
    settings = settings or Settings()
    parsed = parse_markdown(markdown, settings.parser_config, settings.frontmatter)

    elements = build(parsed.tokens, settings.max_list_depth)
    resolved = title or str(parsed.frontmatter.get('title') or '') or settings.default_title
    return Conversion(title=resolved, frontmatter=parsed.frontmatter, elements=elements)


def convert_to_docx(markdown: str, title: Optional[str] = None, settings: Settings = None) -> bytes:
    """Markdown to DOCX bytes."""
    settings = settings or Settings()
    conversion = prepare(markdown, title, settings)
    return local.emit(conversion.elements, conversion.title, settings)


def convert_to_google_doc(
    markdown: str,
    access_token: str,
    title: Optional[str] = None,
    settings: Settings = None,
    client: Optional[DocsClient] = None,
    deadline: Optional[float] = None,
    ) -> ApplyResult:
    """Markdown to a new Google Doc. All batches are planned before the first network call."""
    settings = settings or Settings()
    conversion = prepare(markdown, title, settings)
    batches = plan_batches(conversion.elements, settings.start_index, settings.batch_size)

    client = client or DocsClient(access_token, settings.docs_api_base, settings.request_timeout)
    document_id = client.create_document(conversion.title)
    result = apply(client, document_id, batches, settings, deadline)
    logger.info("Converted %d element(s) into %s", len(conversion.elements), result.url)
    return result.model_copy(update={"title": conversion.title})
