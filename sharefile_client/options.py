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

"""Upload option resolution for sharefile_client.

Before an upload session is requested, the caller's (possibly sparse)
option bag is checked and completed:

1. Unknown keys are rejected.
2. Every recognized option receives its default ("declare all").
3. fileName and method must be set.
4. Every option whose value is None is removed ("then prune nulls"), so the
   API only sees parameters that were actually given a value.

fileSize and the client timestamps are never taken from the caller; they
come from a SourceMetadata value describing the stream being uploaded.

Example:
    Resolve options for a stream:
        ```python
        from sharefile_client.options import SourceMetadata, resolve_upload_options

        with open("report.pdf", "rb") as f:
            metadata = SourceMetadata.from_stream(f)
            options = resolve_upload_options(
                {"fileName": "report.pdf", "method": "streamed"}, metadata
            )
        # {'fileName': 'report.pdf', 'fileSize': 48213, 'raw': False,
        #  'tool': 'apiv3', 'responseFormat': 'json', 'method': 'streamed', ...}
        ```
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
import io
import os
from typing import Any, BinaryIO

from sharefile_client.exceptions import ConfigError

__all__ = [
    "UploadMethod",
    "SourceMetadata",
    "OPTION_DEFAULTS",
    "REQUIRED_OPTIONS",
    "resolve_upload_options",
]


class UploadMethod(str, Enum):
    """Upload methods understood by the ShareFile upload endpoint."""

    STANDARD = "standard"
    STREAMED = "streamed"
    # Accepted by the resolver because the API knows it, refused by the client.
    THREADED = "threaded"


OPTION_DEFAULTS: dict[str, Any] = {
    "fileName": None,
    "fileSize": 0,
    "title": None,
    "batchId": None,
    "raw": False,
    "tool": "apiv3",
    "details": None,
    "sendGuid": None,
    "opid": None,
    "threadCount": None,
    "responseFormat": "json",
    "clientCreatedDateUTC": None,
    "clientModifiedDateUTC": None,
    "expirationDays": None,
    "baseFileId": None,
    "method": UploadMethod.STANDARD,
}

REQUIRED_OPTIONS = ("fileName", "method")


@dataclass(frozen=True)
class SourceMetadata:
    """Size and timestamps of the stream being uploaded.

    Attributes:
        size: Stream size in bytes, or None when it cannot be determined.
        created_at: Creation (or inode change) time in UTC, if known.
        modified_at: Last modification time in UTC, if known.
    """

    size: int | None = None
    created_at: datetime | None = None
    modified_at: datetime | None = None

    @classmethod
    def from_stream(cls, stream: BinaryIO) -> SourceMetadata:
        """Derive metadata from a stream once, up front.

        The size is the number of bytes left to read from the current
        position, which is what an upload will send. Streams backed by a
        real file descriptor are inspected with os.fstat. Other seekable
        streams (io.BytesIO, ...) are measured via seek/tell with the
        position restored afterwards. Anything else yields empty metadata.
        """
        try:
            fd = stream.fileno()
        except (AttributeError, OSError, io.UnsupportedOperation):
            fd = None

        if fd is not None:
            st = os.fstat(fd)
            try:
                position = stream.tell()
            except (OSError, io.UnsupportedOperation):
                # pipes and sockets have no position
                position = 0
            return cls(
                size=max(0, st.st_size - position),
                created_at=datetime.fromtimestamp(st.st_ctime, tz=timezone.utc),
                modified_at=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
            )

        seekable = getattr(stream, "seekable", None)
        if seekable is not None and seekable():
            position = stream.tell()
            end = stream.seek(0, io.SEEK_END)
            stream.seek(position)
            return cls(size=max(0, end - position))

        return cls()


def _format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def resolve_upload_options(
    options: Mapping[str, Any] | None, metadata: SourceMetadata
) -> dict[str, Any]:
    """Validate, default and prune an upload option bag.

    Args:
        options: Caller-supplied options keyed by their API names
            (fileName, title, batchId, ...). May be None or sparse.
        metadata: Size and timestamps of the source stream. These always
            override fileSize, clientCreatedDateUTC and
            clientModifiedDateUTC.

    Returns:
        A new dict containing only options with a non-None value. method is
            an UploadMethod; timestamps are ISO 8601 UTC strings.

    Raises:
        ConfigError: If an unknown option key is supplied, a required option
            (fileName, method) is missing, or method is not a known upload
            method.

    Example:
        Missing fileName is refused before any network call:
            ```python
            try:
                resolve_upload_options({"title": "x"}, SourceMetadata(size=3))
            except ConfigError as e:
                print(e)  # Missing required upload option(s): fileName
            ```
    """
    supplied = dict(options or {})

    unknown = sorted(k for k in supplied if k not in OPTION_DEFAULTS)
    if unknown:
        raise ConfigError(
            f"Unknown upload option(s): {', '.join(unknown)}. "
            f"Accepted: {', '.join(OPTION_DEFAULTS)}"
        )

    supplied["fileSize"] = metadata.size if metadata.size is not None else 0
    supplied["clientCreatedDateUTC"] = _format_timestamp(metadata.created_at)
    supplied["clientModifiedDateUTC"] = _format_timestamp(metadata.modified_at)

    resolved: dict[str, Any] = {**OPTION_DEFAULTS, **supplied}

    missing = [k for k in REQUIRED_OPTIONS if resolved.get(k) is None]
    if missing:
        raise ConfigError(f"Missing required upload option(s): {', '.join(missing)}")

    try:
        resolved["method"] = UploadMethod(resolved["method"])
    except ValueError as err:
        accepted = ", ".join(m.value for m in UploadMethod)
        raise ConfigError(
            f"Invalid upload method: {resolved['method']!r}. Accepted: {accepted}"
        ) from err

    return {k: v for k, v in resolved.items() if v is not None}
