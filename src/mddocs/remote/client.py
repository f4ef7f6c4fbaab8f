"""Google Docs REST client: create a document and apply planned operation batches"""

import logging
import time
from typing import Any, Optional

import requests
from pydantic import BaseModel

from mddocs.config import Settings
from mddocs.emit.remote import Batch, to_requests
from mddocs.errors import RemoteApplyFailure, RequestCancelled


logger = logging.getLogger(__name__)

DOCS_URL = "https://docs.google.com/document/d/{document_id}/edit"
RETRYABLE_STATUS = {408, 429}


class ApplyResult(BaseModel):
    document_id:        str
    url:                str
    title:              str = ""
    batches_applied:    int = 0
    operations_applied: int = 0


def _payload(response) -> Any:
    """Decoded error body; the Docs API wraps details in {"error": {...}}."""
    try:
        return response.json()
    except ValueError:
        return response.text


class DocsClient:
    """Thin wrapper over the Docs v1 REST endpoints using a bearer token."""

    def __init__(
        self,
        access_token: str,
        api_base: str = "https://docs.googleapis.com/v1",
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
        ):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {access_token}"})

    def _post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.api_base}{path}"
        try:
            response = self.session.post(url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteApplyFailure(f"Docs API request failed: {e}", retryable=True) from e
        if not response.ok:
            status = response.status_code
            raise RemoteApplyFailure(
                f"Docs API rejected {path}",
                status=status,
                payload=_payload(response),
                retryable=status in RETRYABLE_STATUS or status >= 500,
            )
        return response.json()

    def create_document(self, title: str) -> str:
        """Create an empty document and return its id."""
        reply = self._post("/documents", {"title": title})
        logger.info("Created document %s", reply.get("documentId"))
        return reply["documentId"]

    def batch_update(self, document_id: str, updates: list[dict[str, Any]]) -> dict[str, Any]:
        """Submit one atomic batchUpdate."""
        return self._post(f"/documents/{document_id}:batchUpdate", {"requests": updates})

    @staticmethod
    def document_url(document_id: str) -> str:
        return DOCS_URL.format(document_id=document_id)


def apply(
    client: DocsClient,
    document_id: str,
    batches: list[Batch],
    settings: Settings = None,
    deadline: Optional[float] = None,
    ) -> ApplyResult:
    """Apply batches in order; stop with RequestCancelled once `deadline` (time.monotonic) passes."""
    settings = settings or Settings()
    applied = operations = 0
    for batch in batches:
        if deadline is not None and time.monotonic() > deadline:
            raise RequestCancelled(
                f"Deadline passed after {applied} of {len(batches)} batch(es)", applied=applied,
            )
        body = to_requests(batch.operations, settings.code_font)
        client.batch_update(document_id, body)
        applied += 1
        operations += len(batch.operations)
        logger.debug("Applied batch %d/%d (index %d..%d)", applied, len(batches), batch.start_index, batch.end_index)

    return ApplyResult(
        document_id=document_id,
        url=client.document_url(document_id),
        batches_applied=applied,
        operations_applied=operations,
    )
