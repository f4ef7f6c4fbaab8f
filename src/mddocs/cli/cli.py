"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mddocs.cli.commands import docx_cmd, gdoc_cmd, inspect_cmd


app = typer.Typer(name="mddocs", no_args_is_help=True, help="Markdown to Google Docs and DOCX converter")

app.command(name="docx")(docx_cmd)
app.command(name="gdoc")(gdoc_cmd)
app.command(name="inspect")(inspect_cmd)
