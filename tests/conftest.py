"""
Pytest configuration and shared fixtures for sharefile_client tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from pathlib import Path
from urllib.parse import parse_qs, urlsplit

import pytest

from sharefile_client import ShareFileClient
from sharefile_client.api import ItemsApi, make_session
from sharefile_client.logging import SilentLogger, set_global_logger

BASE_URL = "https://acmecorp.sf-api.com/sf/v3"
CHUNK_URI = "https://storage.example.com/upload-streaming-2.aspx?uploadid=rsu-123"


class RecordingLogger:
    """Logger that keeps every message for assertions."""

    def __init__(self) -> None:
        self.steps: list[tuple[int, int, str]] = []
        self.messages: list[tuple[str, str, str]] = []

    def step(self, step: int, total: int, message: str) -> None:
        self.steps.append((step, total, message))

    def verbose(self, prefix: str, message: str) -> None:
        self.messages.append(("verbose", prefix, message))

    def debug(self, prefix: str, message: str) -> None:
        self.messages.append(("debug", prefix, message))


def query_of(request) -> dict[str, str]:
    """Return the query string of a recorded request, case preserved."""
    return {k: v[0] for k, v in parse_qs(urlsplit(request.url).query).items()}


@pytest.fixture(autouse=True)
def silent_global_logger():
    """Reset the global logger so tests never leak configuration."""
    set_global_logger(SilentLogger())
    yield
    set_global_logger(SilentLogger())


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def base_url() -> str:
    return BASE_URL


@pytest.fixture
def chunk_uri() -> str:
    return CHUNK_URI


@pytest.fixture
def query():
    """Provide query_of() for inspecting recorded request URLs."""
    return query_of


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def session():
    """Provide an authenticated session, closed after the test."""
    s = make_session("test-token")
    yield s
    s.close()


@pytest.fixture
def items_api(session) -> ItemsApi:
    return ItemsApi(session, BASE_URL, timeout=5)


@pytest.fixture
def client():
    """Provide a client for the 'acmecorp' account with a small chunk size."""
    with ShareFileClient("acmecorp", "test-token", timeout=5, chunk_size=4) as c:
        yield c


@pytest.fixture
def upload_spec_json() -> dict:
    """
    Provide a typical UploadSpecification response body.
    """
    return {
        "Method": "Streamed",
        "ChunkUri": CHUNK_URI,
        "FinishUri": CHUNK_URI + "&finish=true",
        "IsResume": False,
        "ResumeIndex": 0,
        "ResumeOffset": 0,
        "ResumeFileHash": "",
        "MaxNumberOfThreads": 4,
        "odata.type": "ShareFile.Api.Models.UploadSpecification",
    }
