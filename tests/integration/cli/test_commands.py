"""Integration tests for the docx, gdoc and inspect commands"""

import io
import json

import docx
import pytest
from typer.testing import CliRunner

from mddocs.cli import commands
from mddocs.cli.cli import app
from mddocs.errors import RemoteApplyFailure
from mddocs.remote.client import ApplyResult


@pytest.fixture(autouse=True)
def chdir_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "hello.md").write_text("# Hello\n\n- a\n- b\n\nWorld **bold**\n")


def test_docx_cmd_writes_file(tmp_path):
    """docx converts a markdown file into a .docx next to it by default."""
    result = CliRunner().invoke(app, ["docx", "hello.md", "--title", "Greeting"])
    assert result.exit_code == 0, result.output
    document = docx.Document(io.BytesIO((tmp_path / "hello.docx").read_bytes()))
    assert [p.text for p in document.paragraphs] == ["Hello", "a", "b", "World bold"]
    assert document.core_properties.title == "Greeting"


@pytest.mark.parametrize("flag,title,first", [
    ([], "Converted from Markdown", ""),
    (["--frontmatter"], "Doc", "Body"),
])
def test_docx_cmd_frontmatter_flag(tmp_path, flag, title, first):
    """A YAML header is only read as metadata when asked; otherwise it stays markdown."""
    (tmp_path / "fm.md").write_text("---\ntitle: Doc\n---\nBody\n")
    result = CliRunner().invoke(app, ["docx", "fm.md", *flag])
    assert result.exit_code == 0, result.output
    document = docx.Document(io.BytesIO((tmp_path / "fm.docx").read_bytes()))
    assert document.core_properties.title == title
    assert document.paragraphs[0].text == first


def test_docx_cmd_rejects_bad_title():
    result = CliRunner().invoke(app, ["docx", "hello.md", "--title", "a/b"])
    assert result.exit_code == 1
    assert "invalid characters" in result.output


def test_docx_cmd_missing_file():
    result = CliRunner().invoke(app, ["docx", "missing.md"])
    assert result.exit_code == 1


def test_inspect_cmd_prints_model():
    result = CliRunner().invoke(app, ["inspect", "hello.md"])
    assert result.exit_code == 0, result.output
    kinds = [e["kind"] for e in json.loads(result.output)]
    assert kinds == ["heading", "list_item", "list_item", "paragraph"]


def test_inspect_cmd_prints_operations():
    result = CliRunner().invoke(app, ["inspect", "hello.md", "--ops", "--start-index", "5"])
    assert result.exit_code == 0, result.output
    ops = json.loads(result.output)
    assert ops[0] == {"kind": "insert_text", "index": 5, "text": "Hello\n"}


def test_gdoc_cmd_requires_token(monkeypatch):
    monkeypatch.delenv("MDDOCS_ACCESS_TOKEN", raising=False)
    result = CliRunner().invoke(app, ["gdoc", "hello.md"])
    assert result.exit_code != 0


def test_gdoc_cmd_reports_document(monkeypatch):
    seen = {}

    def fake_convert(markdown, token, title, settings):
        seen.update(token=token, batch_size=settings.batch_size)
        return ApplyResult(document_id="doc-1", url="https://docs.google.com/document/d/doc-1/edit",
                           title="Hello", batches_applied=1)

    monkeypatch.setattr(commands, "convert_to_google_doc", fake_convert)
    monkeypatch.setenv("MDDOCS_ACCESS_TOKEN", "tok")
    result = CliRunner().invoke(app, ["gdoc", "hello.md", "--batch-size", "10"])
    assert result.exit_code == 0, result.output
    assert "doc-1/edit" in result.output
    assert seen == {"token": "tok", "batch_size": 10}


def test_gdoc_cmd_reports_remote_failure(monkeypatch):
    def fake_convert(markdown, token, title, settings):
        raise RemoteApplyFailure("Docs API rejected /documents", status=403)

    monkeypatch.setattr(commands, "convert_to_google_doc", fake_convert)
    result = CliRunner().invoke(app, ["gdoc", "hello.md", "--token", "tok"])
    assert result.exit_code == 1
    assert "status 403" in result.output
