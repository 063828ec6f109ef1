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

"""Public API return types for sharefile_client.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Example:
    Inspecting an upload:
        ```python
        result = client.upload_file(stream, parent_id, {"fileName": "a.bin"})
        if not result.finished:
            print(f"Server stopped the upload: {result.body}")
        ```

Note:
    Only public API return types belong in this module. Wire-level types
    (like UploadSpecification and Chunk) stay next to the code that uses
    them.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sharefile_client.options import UploadMethod

# Body a chunk endpoint returns when it accepted a chunk.
CHUNK_SUCCESS_TOKEN = "true"


@dataclass(frozen=True)
class UploadResult:
    """Result from uploading a stream.

    Attributes:
        method: Upload method that was used.
        body: Response body of the last request sent, verbatim.
        status_code: HTTP status of the last request sent.
        chunks_sent: Number of requests that carried file data.
        finished: False when a streamed upload stopped because the server
            did not accept a chunk; True once the last request was sent.
        file_hash: MD5 (hex) of every byte read from the stream, for
            streamed uploads. None for standard uploads.
    """

    method: UploadMethod
    body: str
    status_code: int
    chunks_sent: int
    finished: bool
    file_hash: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the upload ran to completion with a successful status."""
        return self.finished and 200 <= self.status_code < 300


@dataclass(frozen=True)
class DownloadResult:
    """Result from saving an item's content to disk.

    Attributes:
        file_path: Path to the written file.
        md5: MD5 (hex) of the written bytes.
        size: Number of bytes written.
        headers: HTTP response headers of the content request.
    """

    file_path: Path
    md5: str
    size: int
    headers: dict[str, str]
