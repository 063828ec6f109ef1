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

"""sharefile_client - ShareFile upload/download client

A small Python library on top of the ShareFile v3 REST API for moving file
content in and out of a ShareFile account.

sharefile_client provides:

- Upload option validation with API defaults
- Standard (single multipart request) uploads
- Streamed uploads in 8 MiB chunks with per-chunk and whole-file MD5 hashes
- Item content download, in memory or atomically to disk
- Optional request journal and leveled logging

Quick Start:

    from sharefile_client import ShareFileClient

    with ShareFileClient("acmecorp", token) as client:
        with open("report.pdf", "rb") as f:
            result = client.upload_file(
                f, "fo1234", {"fileName": "report.pdf", "method": "streamed"}
            )

Package Structure:

client : module
    ShareFileClient facade.
options : module
    Upload option resolution and source metadata.
api : package
    Authenticated HTTP session and Items endpoints.
io : package
    Upload engine and content download.

For more details, see the individual module docstrings.
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "ShareFile v3 API client with chunked uploads"

# Re-export commonly used names for convenience
from sharefile_client.api import RequestJournal, UploadSpecification
from sharefile_client.client import ShareFileClient
from sharefile_client.config import UPLOAD_CHUNK_SIZE, ClientSettings
from sharefile_client.exceptions import (
    ConfigError,
    NetworkError,
    ServerRejectedError,
    SessionError,
    ShareFileError,
    StreamReadError,
)
from sharefile_client.options import (
    SourceMetadata,
    UploadMethod,
    resolve_upload_options,
)
from sharefile_client.results import DownloadResult, UploadResult

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "ShareFileClient",
    "ClientSettings",
    "RequestJournal",
    "UploadSpecification",
    "UPLOAD_CHUNK_SIZE",
    "SourceMetadata",
    "UploadMethod",
    "resolve_upload_options",
    "UploadResult",
    "DownloadResult",
    "ShareFileError",
    "ConfigError",
    "NetworkError",
    "SessionError",
    "ServerRejectedError",
    "StreamReadError",
]
