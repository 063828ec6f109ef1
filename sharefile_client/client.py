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

"""High-level ShareFile client.

ShareFileClient ties the pieces together for the two operations most
callers need:

upload_file:
    1. Derive SourceMetadata from the stream (unless given)
    2. Resolve the upload options (fails before any network call)
    3. Request an upload session for the parent folder
    4. Send the bytes with the standard or streamed method

download_file / save_file:
    Fetch an item's content, either into memory or onto disk.

Example:
    Upload and download:
        ```python
        from pathlib import Path
        from sharefile_client import ShareFileClient

        with ShareFileClient("acmecorp", token) as client:
            with open("report.pdf", "rb") as f:
                result = client.upload_file(
                    f, "fo1234", {"fileName": "report.pdf", "method": "streamed"}
                )
            print(result.finished, result.body)

            content = client.download_file("fi5678")
            Path("copy.pdf").write_bytes(content.read())
        ```
"""

from __future__ import annotations

from collections.abc import Mapping
import io
from pathlib import Path
from typing import Any, BinaryIO

from sharefile_client.api.http import RequestJournal, make_session
from sharefile_client.api.items import ItemsApi, RemoteItemService
from sharefile_client.config import (
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    UPLOAD_CHUNK_SIZE,
    ClientSettings,
)
from sharefile_client.exceptions import ConfigError
from sharefile_client.io.download import fetch_content, save_content
from sharefile_client.io.upload import upload_standard, upload_streamed
from sharefile_client.logging import Logger, resolve_logger
from sharefile_client.options import (
    SourceMetadata,
    UploadMethod,
    resolve_upload_options,
)
from sharefile_client.results import DownloadResult, UploadResult

__all__ = ["ShareFileClient"]


class ShareFileClient:
    """Upload/download client for one ShareFile account.

    Args:
        subdomain: Account subdomain ("acmecorp" for acmecorp.sf-api.com).
        token: OAuth bearer token.
        journal: Optional RequestJournal recording every request sent.
        logger: Optional logger; defaults to the global logger.
        timeout: Per-request timeout (seconds).
        chunk_size: Chunk size for streamed uploads.
        user_agent: User-Agent header value.
        service: Remote item service to use instead of building an
            ItemsApi. The client does not close an injected service.

    Raises:
        ConfigError: If the settings are invalid.
    """

    def __init__(
        self,
        subdomain: str,
        token: str,
        *,
        journal: RequestJournal | None = None,
        logger: Logger | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        chunk_size: int = UPLOAD_CHUNK_SIZE,
        user_agent: str = DEFAULT_USER_AGENT,
        service: RemoteItemService | None = None,
    ) -> None:
        self.settings = ClientSettings(
            subdomain=subdomain,
            token=token,
            timeout=timeout,
            chunk_size=chunk_size,
            user_agent=user_agent,
        ).validate()
        self.journal = journal
        self._logger = logger
        self._owns_service = service is None
        if service is None:
            session = make_session(
                token, user_agent=self.settings.user_agent, journal=journal
            )
            service = ItemsApi(
                session, self.settings.base_url, timeout=timeout, logger=logger
            )
        self.service = service

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        *,
        journal: RequestJournal | None = None,
        logger: Logger | None = None,
        service: RemoteItemService | None = None,
    ) -> ShareFileClient:
        """Build a client from a ClientSettings value."""
        return cls(
            settings.subdomain,
            settings.token,
            journal=journal,
            logger=logger,
            timeout=settings.timeout,
            chunk_size=settings.chunk_size,
            user_agent=settings.user_agent,
            service=service,
        )

    @property
    def logger(self) -> Logger:
        return resolve_logger(self._logger)

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_service:
            self.service.session.close()

    def __enter__(self) -> ShareFileClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def upload_file(
        self,
        stream: BinaryIO,
        parent_id: str,
        options: Mapping[str, Any] | None = None,
        *,
        metadata: SourceMetadata | None = None,
    ) -> UploadResult:
        """Upload a stream into the folder parent_id.

        Args:
            stream: Readable binary stream positioned at its first byte.
                Never closed by the client.
            parent_id: Id of the destination folder.
            options: Upload options keyed by API name. fileName is
                required; method defaults to "standard".
            metadata: Size and timestamps of the stream. Derived from the
                stream when omitted.

        Returns:
            The upload result. A streamed upload the server stopped early
                has finished=False and carries the server's answer.

        Raises:
            ConfigError: For invalid options or the "threaded" method.
            SessionError: If no upload session could be created.
            ServerRejectedError: On HTTP 404 for a standard upload.
            StreamReadError: If the stream fails before EOF.
            NetworkError: On transport failure.
        """
        logger = self.logger
        if metadata is None:
            metadata = SourceMetadata.from_stream(stream)

        logger.step(1, 3, "Resolving upload options...")
        resolved = resolve_upload_options(options, metadata)
        method = resolved["method"]
        if method is UploadMethod.THREADED:
            raise ConfigError(
                "Upload method 'threaded' is not supported. Use 'standard' or 'streamed'"
            )

        logger.step(2, 3, "Requesting upload session...")
        spec = self.service.create_upload_session(parent_id, resolved)

        logger.step(3, 3, f"Uploading {resolved['fileName']} ({method.value})...")
        if method is UploadMethod.STANDARD:
            return upload_standard(
                self.service.session,
                stream,
                spec.chunk_uri,
                file_name=resolved["fileName"],
                timeout=self.settings.timeout,
                logger=logger,
            )
        return upload_streamed(
            self.service.session,
            stream,
            spec.chunk_uri,
            chunk_size=self.settings.chunk_size,
            expected_size=metadata.size,
            timeout=self.settings.timeout,
            logger=logger,
        )

    def download_file(
        self, item_id: str, query_parameters: Mapping[str, Any] | None = None
    ) -> io.BytesIO:
        """Return an item's content as a stream positioned at its start.

        Raises:
            NetworkError: On transport failure or a non-2xx status.
        """
        return fetch_content(
            self.service, item_id, query_parameters, logger=self.logger
        )

    def save_file(
        self,
        item_id: str,
        destination_folder: Path,
        *,
        file_name: str | None = None,
        query_parameters: Mapping[str, Any] | None = None,
    ) -> DownloadResult:
        """Download an item's content into destination_folder atomically.

        Raises:
            NetworkError: On transport failure or a non-2xx status.
        """
        return save_content(
            self.service,
            item_id,
            destination_folder,
            file_name=file_name,
            query_parameters=query_parameters,
            logger=self.logger,
        )
