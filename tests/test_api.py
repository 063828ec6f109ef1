"""
Tests for sharefile_client.api package.

Tests API access including:
- Bearer-authenticated sessions
- Request journal
- Upload session acquisition
- Item content fetch
"""

from __future__ import annotations

import pytest
import requests
import requests_mock

from sharefile_client.api import (
    BearerAuth,
    ItemsApi,
    RequestJournal,
    UploadSpecification,
    format_query_value,
    make_session,
)
from sharefile_client.exceptions import NetworkError, SessionError
from sharefile_client.options import UploadMethod


class TestMakeSession:
    """Tests for make_session and BearerAuth."""

    def test_bearer_header_sent(self):
        """Test that every request carries the bearer token."""
        with make_session("abc") as s, requests_mock.Mocker() as m:
            m.get("https://example.com/x", text="ok")
            s.get("https://example.com/x")

        assert m.last_request.headers["Authorization"] == "Bearer abc"

    def test_user_agent(self):
        """Test that the configured User-Agent is used."""
        with make_session("abc", user_agent="my-agent/1.0") as s:
            assert s.headers["User-Agent"] == "my-agent/1.0"

    def test_identity_encoding_requested(self):
        """Test that responses are requested without content encoding."""
        with make_session("abc") as s, requests_mock.Mocker() as m:
            m.get("https://example.com/x", text="ok")
            s.get("https://example.com/x")

        assert m.last_request.headers["Accept-Encoding"] == "identity"

    def test_bearer_auth_equality(self):
        assert BearerAuth("a") == BearerAuth("a")
        assert BearerAuth("a") != BearerAuth("b")


class TestRequestJournal:
    """Tests for RequestJournal."""

    def test_records_requests_in_order(self):
        """Test that the journal records each request/response pair."""
        journal = RequestJournal()
        with make_session("abc", journal=journal) as s, requests_mock.Mocker() as m:
            m.get("https://example.com/a", text="A")
            m.post("https://example.com/b", status_code=201, text="B")
            s.get("https://example.com/a")
            s.post("https://example.com/b", data=b"payload")

        assert len(journal) == 2
        first_request, first_response = journal.entries[0]
        assert first_request.method == "GET"
        assert first_response.text == "A"
        assert journal.last[1].status_code == 201

    def test_max_entries(self):
        """Test that old entries are dropped beyond max_entries."""
        journal = RequestJournal(max_entries=1)
        with make_session("abc", journal=journal) as s, requests_mock.Mocker() as m:
            m.get("https://example.com/a", text="A")
            m.get("https://example.com/b", text="B")
            s.get("https://example.com/a")
            s.get("https://example.com/b")

        assert len(journal) == 1
        assert journal.last[1].text == "B"

    def test_clear(self):
        journal = RequestJournal()
        assert journal.last is None
        journal.entries.append(("req", "resp"))
        journal.clear()
        assert len(journal) == 0


class TestFormatQueryValue:
    """Tests for format_query_value."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (True, "true"),
            (False, "false"),
            (0, 0),
            ("json", "json"),
            (UploadMethod.STANDARD, "standard"),
        ],
    )
    def test_values(self, value, expected):
        assert format_query_value(value) == expected


class TestUploadSpecification:
    """Tests for UploadSpecification.from_json."""

    def test_from_json(self, upload_spec_json, chunk_uri):
        """Test that API fields map onto the dataclass."""
        spec = UploadSpecification.from_json(upload_spec_json)

        assert spec.chunk_uri == chunk_uri
        assert spec.method == "Streamed"
        assert spec.max_number_of_threads == 4
        assert spec.is_resume is False

    def test_missing_chunk_uri_raises(self):
        """Test that a specification without ChunkUri is rejected."""
        with pytest.raises(SessionError, match="ChunkUri"):
            UploadSpecification.from_json({"Method": "Standard"})


class TestCreateUploadSession:
    """Tests for ItemsApi.create_upload_session."""

    def test_success(self, items_api, base_url, upload_spec_json, chunk_uri, query):
        """Test that options are sent as query parameters."""
        with requests_mock.Mocker() as m:
            m.get(f"{base_url}/Items(fo123)/Upload", json=upload_spec_json)
            spec = items_api.create_upload_session(
                "fo123",
                {
                    "fileName": "report.pdf",
                    "fileSize": 10,
                    "raw": False,
                    "method": UploadMethod.STREAMED,
                },
            )

        assert spec.chunk_uri == chunk_uri
        q = query(m.last_request)
        assert q == {
            "fileName": "report.pdf",
            "fileSize": "10",
            "raw": "false",
            "method": "streamed",
        }
        assert m.last_request.headers["Authorization"] == "Bearer test-token"

    def test_http_error_raises_session_error(self, items_api, base_url):
        """Test that a non-2xx answer is a SessionError."""
        with requests_mock.Mocker() as m:
            m.get(f"{base_url}/Items(fo123)/Upload", status_code=403, reason="Forbidden")
            with pytest.raises(SessionError, match="403 Forbidden"):
                items_api.create_upload_session("fo123", {"fileName": "a"})

    def test_transport_error_raises_session_error(self, items_api, base_url):
        """Test that connection failures are a SessionError."""
        with requests_mock.Mocker() as m:
            m.get(
                f"{base_url}/Items(fo123)/Upload",
                exc=requests.exceptions.ConnectionError,
            )
            with pytest.raises(SessionError, match="Failed to request"):
                items_api.create_upload_session("fo123", {"fileName": "a"})

    def test_non_json_raises_session_error(self, items_api, base_url):
        """Test that an unparseable body is a SessionError."""
        with requests_mock.Mocker() as m:
            m.get(f"{base_url}/Items(fo123)/Upload", text="<html>login</html>")
            with pytest.raises(SessionError, match="not JSON"):
                items_api.create_upload_session("fo123", {"fileName": "a"})

    def test_missing_chunk_uri_raises_session_error(self, items_api, base_url):
        with requests_mock.Mocker() as m:
            m.get(f"{base_url}/Items(fo123)/Upload", json={"Method": "Standard"})
            with pytest.raises(SessionError):
                items_api.create_upload_session("fo123", {"fileName": "a"})


class TestFetchItemContent:
    """Tests for ItemsApi.fetch_item_content."""

    def test_follows_redirect(self, items_api, base_url, query):
        """Test that the content redirect to storage is followed."""
        storage = "https://storage.example.com/download.ashx?dt=xyz"
        with requests_mock.Mocker() as m:
            m.get(
                f"{base_url}/Items(fi1)/Download",
                status_code=302,
                headers={"Location": storage},
            )
            m.get(storage, content=b"bytes")
            response = items_api.fetch_item_content("fi1", {"redirect": True})
            assert response.content == b"bytes"

        assert query(m.request_history[0]) == {"redirect": "true"}

    def test_http_error_raises_network_error(self, items_api, base_url):
        with requests_mock.Mocker() as m:
            m.get(f"{base_url}/Items(fi1)/Download", status_code=404, reason="Not Found")
            with pytest.raises(NetworkError, match="404"):
                items_api.fetch_item_content("fi1")
