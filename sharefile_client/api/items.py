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

"""Items endpoints of the ShareFile v3 API.

The upload and download code only needs three things from the remote
service, described by the RemoteItemService protocol:

- create_upload_session(): ask for an upload specification (chunk URI)
- fetch_item_content(): GET the raw content of an item
- session: an authenticated requests.Session for everything else

ItemsApi is the concrete implementation on top of requests. Any other
object with the same shape can be passed to ShareFileClient instead (a
generated client wrapper, a test double, ...).

Endpoints:

- ``GET Items(<parentId>)/Upload?method=...&fileName=...`` returns an
  UploadSpecification JSON object with ChunkUri, FinishUri, ...
- ``GET Items(<id>)/Download`` returns (or redirects to) the file bytes.

Example:
    Request an upload session:
        ```python
        from sharefile_client.api import ItemsApi, make_session

        api = ItemsApi(make_session(token), "https://acmecorp.sf-api.com/sf/v3")
        spec = api.create_upload_session(
            "fo1234", {"fileName": "a.bin", "method": "streamed", "fileSize": 3}
        )
        print(spec.chunk_uri)
        ```
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

import requests

from sharefile_client.config import DEFAULT_TIMEOUT
from sharefile_client.exceptions import NetworkError, SessionError
from sharefile_client.logging import Logger, resolve_logger

__all__ = [
    "RemoteItemService",
    "UploadSpecification",
    "ItemsApi",
    "format_query_value",
    "to_query_params",
]


@dataclass(frozen=True)
class UploadSpecification:
    """Upload session handed out by the API for one upload attempt.

    Attributes:
        chunk_uri: URI that receives file data. Chunk parameters are
            appended to it as extra query parameters.
        method: Upload method the server prepared the session for.
        finish_uri: URI that finalizes threaded uploads.
        prepare_uri: URI used by the threaded method before sending data.
        resume_index: Chunk index to resume from (resumable uploads only).
        resume_offset: Byte offset to resume from.
        resume_file_hash: Hash of the bytes already received.
        is_resume: Whether the server considers this a resumed upload.
        max_number_of_threads: Parallelism the server allows.
    """

    chunk_uri: str
    method: str | None = None
    finish_uri: str | None = None
    prepare_uri: str | None = None
    resume_index: int | None = None
    resume_offset: int | None = None
    resume_file_hash: str | None = None
    is_resume: bool = False
    max_number_of_threads: int | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> UploadSpecification:
        """Build from the API's UploadSpecification object.

        Raises:
            SessionError: If the object has no ChunkUri.
        """
        chunk_uri = data.get("ChunkUri")
        if not chunk_uri:
            raise SessionError("Upload specification has no ChunkUri")
        return cls(
            chunk_uri=chunk_uri,
            method=data.get("Method"),
            finish_uri=data.get("FinishUri"),
            prepare_uri=data.get("PrepareUri"),
            resume_index=data.get("ResumeIndex"),
            resume_offset=data.get("ResumeOffset"),
            resume_file_hash=data.get("ResumeFileHash"),
            is_resume=bool(data.get("IsResume", False)),
            max_number_of_threads=data.get("MaxNumberOfThreads"),
        )


class RemoteItemService(Protocol):
    """Capabilities the upload/download code needs from the API."""

    session: requests.Session

    def create_upload_session(
        self, parent_id: str, options: Mapping[str, Any]
    ) -> UploadSpecification:
        """Request an upload session for a new item under parent_id."""
        ...

    def fetch_item_content(
        self, item_id: str, query_parameters: Mapping[str, Any] | None = None
    ) -> requests.Response:
        """GET the raw content of an item. The response is not yet consumed."""
        ...


def format_query_value(value: Any) -> Any:
    """Render a value the way the API's query parser expects.

    Booleans become the literal strings "true"/"false"; enums are reduced
    to their value. Everything else is returned unchanged.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return value.value
    return value


def to_query_params(params: Mapping[str, Any]) -> dict[str, Any]:
    """Apply format_query_value to every entry, dropping None values."""
    return {k: format_query_value(v) for k, v in params.items() if v is not None}


class ItemsApi:
    """RemoteItemService implementation backed by requests."""

    def __init__(
        self,
        session: requests.Session,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        logger: Logger | None = None,
    ) -> None:
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._logger = logger

    @property
    def logger(self) -> Logger:
        return resolve_logger(self._logger)

    def item_url(self, item_id: str, action: str) -> str:
        """URL of an action on an item, e.g. ``.../Items(abc)/Upload``."""
        return f"{self.base_url}/Items({item_id})/{action}"

    def create_upload_session(
        self, parent_id: str, options: Mapping[str, Any]
    ) -> UploadSpecification:
        """Request an upload session for a new item under parent_id.

        Args:
            parent_id: Id of the folder receiving the upload.
            options: Resolved upload options (see resolve_upload_options).

        Returns:
            The upload specification carrying the chunk URI.

        Raises:
            SessionError: On transport failure, a non-2xx status, a body
                that is not JSON, or a specification without ChunkUri.
        """
        url = self.item_url(parent_id, "Upload")
        self.logger.verbose("SESSION", f"Requesting upload session: {url}")
        self.logger.debug("SESSION", f"Upload options: {dict(options)}")

        try:
            response = self.session.get(
                url, params=to_query_params(options), timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as err:
            raise SessionError(
                f"Upload session request for parent {parent_id!r} failed: "
                f"{response.status_code} {response.reason}"
            ) from err
        except requests.exceptions.RequestException as err:
            raise SessionError(f"Failed to request upload session: {err}") from err

        try:
            data = response.json()
        except ValueError as err:
            raise SessionError(
                f"Upload session response is not JSON: {response.text[:200]!r}"
            ) from err
        if not isinstance(data, Mapping):
            raise SessionError(f"Unexpected upload session response: {data!r}")

        spec = UploadSpecification.from_json(data)
        self.logger.verbose("SESSION", f"Chunk URI: {spec.chunk_uri}")
        return spec

    def fetch_item_content(
        self, item_id: str, query_parameters: Mapping[str, Any] | None = None
    ) -> requests.Response:
        """GET the content of an item, following redirects.

        Raises:
            NetworkError: On transport failure or a non-2xx status.
        """
        url = self.item_url(item_id, "Download")
        self.logger.verbose("HTTP", f"GET {url}")

        try:
            response = self.session.get(
                url,
                params=to_query_params(query_parameters or {}),
                headers={"Accept": "*/*"},
                stream=True,
                allow_redirects=True,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as err:
            response.close()
            raise NetworkError(
                f"download failed for item {item_id!r}: "
                f"{response.status_code} {response.reason}"
            ) from err
        except requests.exceptions.RequestException as err:
            raise NetworkError(f"download failed for item {item_id!r}: {err}") from err

        self.logger.verbose("HTTP", f"Response: {response.status_code} {response.reason}")
        return response
