"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDDOCS_"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    app_name:           str   = "mddocs"
    parser_config:      str   = Field(default="gfm-like", description="MarkdownIt parser preset name")
    frontmatter:        bool  = Field(default=False, description="Split a leading YAML mapping off as metadata")
    default_title:      str   = Field(default="Converted from Markdown", description="Title when none is given")
    max_content_length: int   = Field(default=1_000_000, ge=1, description="Max markdown characters per request")
    max_title_length:   int   = Field(default=255, ge=1, description="Max document title length")
    max_list_depth:     int   = Field(default=8, ge=0, le=8, description="Deepest list level before clamping")
    start_index:        int   = Field(default=1, ge=1, description="Docs insertion index of the first element")
    batch_size:         int   = Field(default=500, ge=1, description="Max operations per batchUpdate call")
    docs_api_base:      str   = Field(default="https://docs.googleapis.com/v1", description="Docs REST API root")
    request_timeout:    float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    code_font:          str   = Field(default="Courier New", description="Monospace font for code")
    code_font_size:     float = Field(default=9.0, gt=0, description="DOCX code font size in points")
    list_indent_pt:     float = Field(default=36.0, ge=0, description="DOCX indent per list level in points")
    log_level:          str   = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDDOCS_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
