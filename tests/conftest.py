"""Root test configuration: markdown-to-model helper and a fake Docs HTTP session"""

import pytest

from mddocs.core.build import build
from mddocs.core.parse import make_parser


SAMPLE_MD = """\
# Title

Intro with **bold**, *italic* and `code`.

- first
  - nested
    - deeper
- second

1. one
2. two

```python
print("hello")
```

Line one
line two
"""


class FakeResponse:
    def __init__(self, status_code: int = 200, body=None):
        self.status_code = status_code
        self._body = {} if body is None else body

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def text(self) -> str:
        return str(self._body)

    def json(self):
        if isinstance(self._body, str):
            raise ValueError("not json")
        return self._body


class FakeSession:
    """Records POSTs and answers from a queue (default: empty 200 reply)."""

    def __init__(self, responses: list = None):
        self.headers: dict = {}
        self.calls: list = []
        self.responses = list(responses or [])

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.responses:
            reply = self.responses.pop(0)
            if isinstance(reply, Exception):
                raise reply
            return reply
        return FakeResponse()


@pytest.fixture(name="parser")
def parser_fixture():
    return make_parser("gfm-like")


@pytest.fixture(name="to_model")
def to_model_fixture(parser):
    """Return a function mapping markdown text to DocumentElements."""
    def _to_model(md: str, max_list_depth: int = 8) -> list:
        return build(parser.parse(md), max_list_depth)
    return _to_model


@pytest.fixture(name="sample_elements")
def sample_elements_fixture(to_model):
    return to_model(SAMPLE_MD)


@pytest.fixture(name="fake_session")
def fake_session_fixture():
    return FakeSession()


@pytest.fixture(name="response")
def response_fixture():
    """Factory for canned Docs API responses."""
    return FakeResponse
