"""Caller-side preconditions checked before a conversion starts"""

import re

from mddocs.errors import InvalidInput


DANGEROUS_CHARS_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def validate_markdown(content, max_length: int = 1_000_000) -> str:
    """Require a non-empty markdown string no longer than max_length."""
    if not content or not isinstance(content, str):
        raise InvalidInput("Markdown content is required")
    if len(content) > max_length:
        raise InvalidInput(f"Markdown content must be at most {max_length} characters")
    return content


def validate_title(title, max_length: int = 255) -> str:
    """Require a short title free of path and control characters."""
    if not title or not isinstance(title, str):
        raise InvalidInput("Title is required")
    if len(title) > max_length:
        raise InvalidInput(f"Title must be at most {max_length} characters")
    if DANGEROUS_CHARS_RE.search(title):
        raise InvalidInput("Title contains invalid characters")
    return title
