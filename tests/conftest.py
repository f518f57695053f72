import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

import pytest
import requests

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from email_capture.config import ExternalCredentials, Settings
from email_capture.klaviyo.client import KlaviyoClient

BASE_URL = "https://klaviyo.test/api"

Body = Union[Dict[str, Any], str, None]


def make_response(status: int, body: Body, url: str) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.encoding = "utf-8"
    if body is None:
        response._content = b""
    elif isinstance(body, str):
        response._content = body.encode("utf-8")
    else:
        response._content = json.dumps(body).encode("utf-8")
    return response


@dataclass
class Call:
    method: str
    url: str
    kwargs: Dict[str, Any]

    @property
    def path(self) -> str:
        return self.url[len(BASE_URL):]


@dataclass
class FakeSession:
    """Stands in for ``requests.Session``; replays queued responses."""

    responses: List[Any] = field(default_factory=list)
    calls: List[Call] = field(default_factory=list)
    closed: bool = False

    def queue(self, status: int, body: Body = None) -> "FakeSession":
        self.responses.append((status, body))
        return self

    def fail(self, exc: Exception) -> "FakeSession":
        self.responses.append(exc)
        return self

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append(Call(method, url, kwargs))
        if not self.responses:
            raise AssertionError(f"unexpected request {method} {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        status, body = item
        return make_response(status, body, url)

    def close(self) -> None:
        self.closed = True


def profile_body(profile_id: str) -> Dict[str, Any]:
    return {
        "data": {
            "type": "profile",
            "id": profile_id,
            "attributes": {"email": "user@example.com"},
        }
    }


def lookup_body(*profile_ids: str) -> Dict[str, Any]:
    return {"data": [{"type": "profile", "id": pid} for pid in profile_ids]}


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(session: FakeSession) -> KlaviyoClient:
    return KlaviyoClient(BASE_URL, timeout_seconds=3.0, session=session)


@pytest.fixture
def credentials() -> ExternalCredentials:
    return ExternalCredentials(api_key="pk_test_0123456789abcdef", list_id="LIST123")


@pytest.fixture
def settings() -> Settings:
    return Settings(base_url=BASE_URL, timeout_seconds=3.0)
