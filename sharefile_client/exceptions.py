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

"""Exception hierarchy for sharefile_client.

This module defines a custom exception hierarchy that allows library users
to distinguish between different types of errors:

- ConfigError: Invalid upload options or client settings
- NetworkError: HTTP/transport failures talking to the ShareFile API
- SessionError: The API did not hand out an upload session
- ServerRejectedError: A standard upload was answered with HTTP 404
- StreamReadError: The source stream failed before reaching EOF

All exceptions inherit from ShareFileError, allowing users to catch all
library errors with a single except clause if needed.

A streamed chunk that the server refuses is NOT an exception. The upload
stops and the server's answer is handed back in the UploadResult.

Example:
    Catching specific error types:
        ```python
        from sharefile_client import ShareFileClient
        from sharefile_client.exceptions import ConfigError, SessionError

        try:
            result = client.upload_file(stream, parent_id, {"fileName": "a.bin"})
        except ConfigError as e:
            print(f"Bad options: {e}")
        except SessionError as e:
            print(f"No upload session: {e}")
        ```

    Catching all library errors:
        ```python
        from sharefile_client.exceptions import ShareFileError

        try:
            client.download_file("abc123")
        except ShareFileError as e:
            print(f"ShareFile error: {e}")
        ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import requests

__all__ = [
    "ShareFileError",
    "ConfigError",
    "NetworkError",
    "SessionError",
    "ServerRejectedError",
    "StreamReadError",
]


class ShareFileError(Exception):
    """Base exception for all sharefile_client errors.

    All library-specific exceptions inherit from this class, allowing users
    to catch every error raised by the client with a single except clause.
    """

    pass


class ConfigError(ShareFileError):
    """Raised for configuration-related errors.

    This exception is raised synchronously, before any network activity,
    when there are problems with:

    - Missing required upload options (fileName, method)
    - Unrecognized upload option keys
    - Invalid upload method values, or the unsupported "threaded" method
    - Invalid client settings (empty token, malformed subdomain, etc.)

    Example:
        Catching configuration errors:
            ```python
            from sharefile_client.exceptions import ConfigError

            try:
                resolve_upload_options({}, metadata)
            except ConfigError as e:
                print(f"Config error: {e}")
            ```
    """

    pass


class NetworkError(ShareFileError):
    """Raised for network/HTTP-related errors.

    This exception is raised when there are problems with:

    - Download failures (HTTP errors, connection timeouts)
    - API responses that cannot be interpreted
    """

    pass


class SessionError(NetworkError):
    """Raised when an upload session cannot be created.

    Any non-success answer to the session request is terminal for the upload
    attempt; no chunk is ever sent without a valid chunk URI.
    """

    pass


class ServerRejectedError(NetworkError):
    """Raised when a standard upload is answered with HTTP 404.

    A 404 on the chunk URI means the upload session expired or never
    existed. The original request and response are kept for diagnostics.

    Attributes:
        request: The prepared request that was sent.
        response: The response received from the server.
    """

    def __init__(
        self,
        message: str,
        request: requests.PreparedRequest | None = None,
        response: requests.Response | None = None,
    ) -> None:
        super().__init__(message)
        self.request = request
        self.response = response


class StreamReadError(ShareFileError):
    """Raised when the source stream stops delivering data before EOF.

    This indicates a corrupted, truncated or externally closed source and
    aborts the upload immediately.
    """

    pass
