# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Authenticated HTTP session for the ShareFile API.

Key Features:

- **Bearer authentication** - Every request carries the OAuth token given
  at construction time through a requests auth handler, including requests
  to chunk URIs on storage hosts.
- **No retries** - No retry adapter is mounted. Retry policy belongs to
  the caller.
- **Request journal** - An optional RequestJournal records every
  request/response pair for debugging.

Example:
    Build a session with a journal:

        >>> from sharefile_client.api.http import RequestJournal, make_session
        >>> journal = RequestJournal()
        >>> session = make_session("eyJ0eXAi...", journal=journal)
        >>> session.get("https://acmecorp.sf-api.com/sf/v3/Items")
        >>> journal.last[1].status_code
        200
"""

from __future__ import annotations

from typing import Any

import requests
from requests.auth import AuthBase

from sharefile_client.config import DEFAULT_USER_AGENT

__all__ = ["BearerAuth", "RequestJournal", "make_session"]


class BearerAuth(AuthBase):
    """Attach an ``Authorization: Bearer <token>`` header to each request."""

    def __init__(self, token: str) -> None:
        self.token = token

    def __call__(self, r: requests.PreparedRequest) -> requests.PreparedRequest:
        r.headers["Authorization"] = f"Bearer {self.token}"
        return r

    def __eq__(self, other: object) -> bool:
        return isinstance(other, BearerAuth) and other.token == self.token

    def __ne__(self, other: object) -> bool:
        return not self == other


class RequestJournal:
    """In-memory history of the requests a session has sent.

    Entries are (PreparedRequest, Response) tuples in send order. Response
    bodies are whatever requests already read; streamed downloads are not
    forced into memory.
    """

    def __init__(self, max_entries: int | None = None) -> None:
        self.max_entries = max_entries
        self.entries: list[tuple[requests.PreparedRequest, requests.Response]] = []

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def last(self) -> tuple[requests.PreparedRequest, requests.Response] | None:
        """Most recent entry, or None if nothing was recorded."""
        return self.entries[-1] if self.entries else None

    def record(self, response: requests.Response, *args: Any, **kwargs: Any) -> None:
        """Response hook: store the response and the request that caused it."""
        self.entries.append((response.request, response))
        if self.max_entries is not None and len(self.entries) > self.max_entries:
            del self.entries[: len(self.entries) - self.max_entries]

    def clear(self) -> None:
        self.entries.clear()


def make_session(
    token: str,
    *,
    user_agent: str = DEFAULT_USER_AGENT,
    journal: RequestJournal | None = None,
) -> requests.Session:
    """Create a requests.Session authenticated with a bearer token.

    Args:
        token: OAuth access token.
        user_agent: Value for the User-Agent header.
        journal: Optional journal that records every response.

    Returns:
        A configured session. The caller is responsible for closing it.
    """
    s = requests.Session()
    s.auth = BearerAuth(token)
    # identity keeps Content-Length equal to the bytes written by save_content
    s.headers.update(
        {
            "User-Agent": user_agent,
            "Accept": "application/json",
            "Accept-Encoding": "identity",
        }
    )
    if journal is not None:
        s.hooks["response"].append(journal.record)
    return s
