import json
from typing import Any, List

import pytest
import requests


def make_response(status_code: int, body: Any = None, content: bytes = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = content if content is not None else json.dumps(body).encode("utf-8")
    response.headers["Content-Type"] = "application/json"
    response.encoding = "utf-8"
    return response


class RecordedCall:
    def __init__(self, method, url, headers=None, data=None, timeout=None):
        self.method = method
        self.url = url
        self.headers = headers or {}
        self.data = data
        self.timeout = timeout

    @property
    def body(self):
        return json.loads(self.data) if self.data is not None else None


class FakeTransport:
    """Stands in for requests.request and records every call"""

    def __init__(self):
        self.calls: List[RecordedCall] = []
        self.responses: List[requests.Response] = []
        self.error = None

    def respond(self, status_code: int, body: Any = None, content: bytes = None):
        self.responses.append(make_response(status_code, body, content))

    def __call__(self, method, url, headers=None, data=None, timeout=None, **kwargs):
        self.calls.append(RecordedCall(method, url, headers, data, timeout))
        if self.error is not None:
            raise self.error
        if self.responses:
            return self.responses.pop(0)
        return make_response(200, {"status": "success", "data": {}})

    @property
    def last(self) -> RecordedCall:
        return self.calls[-1]


@pytest.fixture
def transport(monkeypatch: pytest.MonkeyPatch) -> FakeTransport:
    fake = FakeTransport()
    monkeypatch.setattr("textwave_client.api_caller.requests.request", fake)
    return fake


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    for var in ("TEXTWAVE_API_KEY", "TEXTWAVE_BASE_URL", "TEXTWAVE_CONFIG", "LOG_FILE", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    return tmp_path
