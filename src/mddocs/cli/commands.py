"""CLI command implementations"""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from mddocs.config import Settings, load_config
from mddocs.core.pipeline import convert_to_docx, convert_to_google_doc, prepare
from mddocs.emit.remote import emit
from mddocs.errors import ConversionError
from mddocs.validate import validate_markdown, validate_title


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and configure logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    return settings


def _read(path: str, settings: Settings, title: Optional[str]) -> str:
    """Read markdown from path and check caller preconditions."""
    try:
        markdown = Path(path).read_text(encoding='utf-8')
    except OSError as e:
        _fail(f"Cannot read {path}", e)
    try:
        validate_markdown(markdown, settings.max_content_length)
        if title is not None:
            validate_title(title, settings.max_title_length)
    except ConversionError as e:
        _fail(str(e))
    return markdown


def docx_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file to convert")],
    out: Annotated[Optional[str], typer.Option("--out", "-o", help="Output .docx path")] = None,
    title: Annotated[Optional[str], typer.Option("--title", help="Document title")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    frontmatter: Annotated[Optional[bool], typer.Option("--frontmatter/--no-frontmatter", help="Read a leading YAML mapping as metadata")] = None,
    ):
    """Convert a markdown file into a local .docx file."""
    settings = _settings(overrides={"parser_config": parser, "frontmatter": frontmatter})
    markdown = _read(path, settings, title)
    out_path = Path(out) if out else Path(path).with_suffix('.docx')

    try:
        data = convert_to_docx(markdown, title, settings)
    except ConversionError as e:
        _fail("Conversion failed", e)
    out_path.write_bytes(data)
    typer.echo(f"  {path} -> {out_path} ({len(data)} bytes)")


def gdoc_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file to convert")],
    token: Annotated[str, typer.Option("--token", envvar="MDDOCS_ACCESS_TOKEN", help="OAuth bearer token")],
    title: Annotated[Optional[str], typer.Option("--title", help="Document title")] = None,
    batch_size: Annotated[Optional[int], typer.Option("--batch-size", help="Max operations per batchUpdate")] = None,
    timeout: Annotated[Optional[float], typer.Option("--timeout", help="HTTP timeout in seconds")] = None,
    frontmatter: Annotated[Optional[bool], typer.Option("--frontmatter/--no-frontmatter", help="Read a leading YAML mapping as metadata")] = None,
    ):
    """Create a Google Doc from a markdown file."""
    settings = _settings(overrides={"batch_size": batch_size, "request_timeout": timeout, "frontmatter": frontmatter})
    markdown = _read(path, settings, title)

    try:
        result = convert_to_google_doc(markdown, token, title, settings)
    except ConversionError as e:
        _fail("Google Docs conversion failed", e)
    typer.echo(f"Created '{result.title}' ({result.batches_applied} batch(es))")
    typer.echo(f"  id:  {result.document_id}")
    typer.echo(f"  url: {result.url}")


def inspect_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file to inspect")],
    ops: Annotated[bool, typer.Option("--ops", help="Print Docs operations instead of the document model")] = False,
    start_index: Annotated[Optional[int], typer.Option("--start-index", help="Docs index of the first element")] = None,
    ):
    """Print the document model (or remote operations) as JSON."""
    settings = _settings(overrides={"start_index": start_index})
    markdown = _read(path, settings, None)

    try:
        conversion = prepare(markdown, None, settings)
        items = emit(conversion.elements, settings.start_index) if ops else conversion.elements
    except ConversionError as e:
        _fail("Conversion failed", e)
    typer.echo(json.dumps([i.model_dump() for i in items], indent=2))
