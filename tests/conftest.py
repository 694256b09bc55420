from __future__ import annotations

from pathlib import Path

import logging

import pytest
import requests

from termconnector.client import TerminologyClient
from termconnector.credentials import StaticCredentialStore
from termconnector.models import Credentials
from termconnector.settings import AccountDescriptor, Settings

FIXTURES = Path(__file__).parent / "fixtures"
BASE_URL = "https://www.tausdata.org"


class DummyResponse:
    def __init__(self, content: bytes, status_code: int = 200) -> None:
        self.content = content
        self.status_code = status_code
        self.closed = False

    def raise_for_status(self) -> None:
        if not 200 <= self.status_code < 300:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def close(self) -> None:
        self.closed = True


class DummySession:
    """Stands in for requests.Session; replies are consumed in order."""

    def __init__(self, *replies: DummyResponse | Exception) -> None:
        self.replies = list(replies)
        self.calls: list[dict] = []
        self.closed = False

    def queue(self, reply: DummyResponse | Exception) -> None:
        self.replies.append(reply)

    def get(self, url, params=None, auth=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "auth": auth, "headers": headers, "timeout": timeout})
        if not self.replies:
            raise AssertionError(f"Unexpected request to {url}")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def close(self) -> None:
        self.closed = True


def fixture_response(name: str, status_code: int = 200) -> DummyResponse:
    return DummyResponse((FIXTURES / name).read_bytes(), status_code=status_code)


@pytest.fixture(autouse=True)
def package_logger():
    """Restore the package logger after tests that configure it."""
    logger = logging.getLogger("termconnector")
    saved = (logger.level, list(logger.handlers), logger.propagate)
    yield logger
    logger.setLevel(saved[0])
    logger.handlers[:] = saved[1]
    logger.propagate = saved[2]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        base_url=BASE_URL,
        account_file=tmp_path / "account.xml",
        request_timeout=3.0,
        ui_locale="en",
        log_level="INFO",
    )


@pytest.fixture
def account() -> AccountDescriptor:
    return AccountDescriptor(url=BASE_URL, auth_scheme="Basic")


@pytest.fixture
def credential_store() -> StaticCredentialStore:
    return StaticCredentialStore({BASE_URL: ("jane", "s3cret")})


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(scope_url=BASE_URL, username="jane", secret="s3cret")


@pytest.fixture
def session() -> DummySession:
    return DummySession()


@pytest.fixture
def client(session: DummySession) -> TerminologyClient:
    return TerminologyClient(BASE_URL, timeout=3.0, session=session)
