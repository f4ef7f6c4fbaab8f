"""Conversion error taxonomy shared by the pipeline, emitters, and Docs client"""

from typing import Any, Optional


class ConversionError(Exception):
    """Base class for every error raised by a conversion request."""
    retryable = False


class InvalidInput(ConversionError):
    """Caller-side precondition failed (content too large, bad title)."""


class MalformedInput(ConversionError):
    """Token stream cannot be walked, not even by degrading to plain text."""


class UnsupportedNesting(ConversionError):
    """List or heading structure deeper than the target format can represent."""


class SerializationFailure(ConversionError):
    """The DOCX writer failed to produce bytes."""


class RemoteApplyFailure(ConversionError):
    """The Docs API rejected a request; carries the status and decoded error payload."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        payload: Any = None,
        retryable: bool = False,
        ):
        super().__init__(message)
        self.status = status
        self.payload = payload
        self.retryable = retryable

    def __str__(self) -> str:
        base = super().__str__()
        return f"{base} (status {self.status})" if self.status is not None else base


class RequestCancelled(ConversionError):
    """Caller deadline passed between batches; `applied` batches already reached the API."""

    def __init__(self, message: str, applied: int = 0):
        super().__init__(message)
        self.applied = applied
