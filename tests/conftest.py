import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import api_client


class FakeResponse:
    def __init__(self, text: Any, status_code: int = 200) -> None:
        self.text = text
        self.status_code = status_code


class FakeSession:
    """Stands in for requests.Session and records every call made through it."""

    calls: List[Dict[str, Any]] = []
    opened = 0
    closed = 0
    response_text: Any = "{}"
    status_code = 200
    raise_exc: Optional[Exception] = None

    def __enter__(self) -> "FakeSession":
        FakeSession.opened += 1
        return self

    def __exit__(self, *exc_info: Any) -> None:
        FakeSession.closed += 1

    def _send(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        FakeSession.calls.append({"method": method, "url": url, **kwargs})
        if FakeSession.raise_exc is not None:
            raise FakeSession.raise_exc
        return FakeResponse(FakeSession.response_text, FakeSession.status_code)

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._send("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._send("POST", url, **kwargs)


@pytest.fixture
def fake_session(monkeypatch: pytest.MonkeyPatch):
    FakeSession.calls = []
    FakeSession.opened = 0
    FakeSession.closed = 0
    FakeSession.response_text = "{}"
    FakeSession.status_code = 200
    FakeSession.raise_exc = None
    monkeypatch.setattr(api_client.requests, "Session", FakeSession)
    return FakeSession


@pytest.fixture
def client() -> api_client.APIClient:
    return api_client.APIClient("sk-test", organization="org-123")
