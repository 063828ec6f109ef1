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

"""File upload to a ShareFile upload session.

Given a readable byte stream and the chunk URI of an upload session, this
module sends the bytes using one of two methods:

- **Standard** - One multipart/form-data POST with a single file part named
  ``File1``. An HTTP 404 means the session expired or never existed and is
  raised as ServerRejectedError; any other status is handed back.
- **Streamed** - Sequential POSTs of up to 8 MiB each, sent as
  application/octet-stream with ``index``, ``byteOffset`` and ``hash`` (MD5 of
  the chunk) appended to the chunk URI. The final chunk also carries
  ``filehash`` (MD5 of the whole stream) and ``finish=true``.

Streamed Protocol:

- Chunk i covers bytes [i * chunk_size, (i + 1) * chunk_size). Indices start
  at 0 and increase by one with no gaps.
- A chunk is final when the stream ends with it. A full-size chunk that
  coincides with EOF is final, and an empty stream is sent as one empty
  final chunk.
- Every non-final chunk must be answered with the body ``true``. Any other
  body stops the upload; that body is returned to the caller as data, not
  raised.
- The final chunk's answer is returned verbatim without inspection.

Exception Classes:

- ServerRejectedError: HTTP 404 on a standard upload.
- StreamReadError: The stream stopped delivering bytes before EOF.
- NetworkError: Transport failures (connection errors, timeouts).

Constants:

- UPLOAD_CHUNK_SIZE (int): Streamed chunk size (8 MiB).

Example:
    Streamed upload with an existing session:

        >>> from sharefile_client.io.upload import upload_streamed
        >>> with open("big.iso", "rb") as f:
        ...     result = upload_streamed(session, f, spec.chunk_uri)
        >>> result.finished, result.chunks_sent
        (True, 3)

Notes:
- The caller owns the stream: it is read sequentially and never closed.
- No retries; a failed upload must be restarted with a new session.
- Timeouts are per request, not per upload.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
import hashlib
from typing import Any, BinaryIO
from urllib.parse import urlencode, urlsplit

import requests

from sharefile_client.api.items import to_query_params
from sharefile_client.config import DEFAULT_TIMEOUT, UPLOAD_CHUNK_SIZE
from sharefile_client.exceptions import (
    NetworkError,
    ServerRejectedError,
    StreamReadError,
)
from sharefile_client.logging import Logger, resolve_logger
from sharefile_client.options import UploadMethod
from sharefile_client.results import CHUNK_SUCCESS_TOKEN, UploadResult

__all__ = [
    "UPLOAD_CHUNK_SIZE",
    "Chunk",
    "read_chunk",
    "iter_chunks",
    "build_query",
    "append_query",
    "upload_chunk",
    "upload_standard",
    "upload_streamed",
]


@dataclass(frozen=True)
class Chunk:
    """A contiguous slice of the source stream.

    Attributes:
        index: Zero-based position of the chunk.
        byte_offset: Offset of the first byte (index * chunk_size).
        data: The chunk's bytes.
        is_final: True when the stream ends with this chunk.
    """

    index: int
    byte_offset: int
    data: bytes
    is_final: bool

    def __len__(self) -> int:
        return len(self.data)

    @property
    def md5(self) -> str:
        """MD5 (hex) of this chunk's bytes only."""
        return hashlib.md5(self.data).hexdigest()


def read_chunk(stream: BinaryIO, size: int) -> bytes:
    """Read up to size bytes, looping over short reads until full or EOF.

    Args:
        stream: Binary stream to read from.
        size: Maximum number of bytes to return.

    Returns:
        Exactly size bytes, or fewer if the stream reached EOF.

    Raises:
        StreamReadError: If a read returns None (no data available from a
            non-blocking source) or the stream is already closed.
    """
    buf = bytearray()
    remaining = size
    while remaining > 0:
        try:
            part = stream.read(remaining)
        except ValueError as err:
            # read() on a closed file
            raise StreamReadError(f"Error reading from stream: {err}") from err
        if part is None:
            raise StreamReadError(
                f"Error reading from stream: no data after {len(buf)} of "
                f"{size} bytes"
            )
        if not part:
            break
        buf += part
        remaining -= len(part)
    return bytes(buf)


def iter_chunks(
    stream: BinaryIO,
    chunk_size: int = UPLOAD_CHUNK_SIZE,
    expected_size: int | None = None,
) -> Iterator[Chunk]:
    """Split a stream into chunks, flagging the one that ends the stream.

    One chunk of lookahead is kept so a full-size chunk at EOF is still
    recognized as final. An empty stream yields a single empty final chunk.

    Args:
        stream: Binary stream positioned at the first byte to send.
        chunk_size: Maximum chunk length in bytes.
        expected_size: Number of bytes the stream is known to hold. When
            given, reaching EOF earlier raises StreamReadError.

    Yields:
        Chunk objects in stream order.

    Raises:
        StreamReadError: If the stream fails or ends early.
        ValueError: If chunk_size is not positive.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    index = 0
    total = 0
    current = read_chunk(stream, chunk_size)
    while True:
        total += len(current)
        if len(current) < chunk_size:
            upcoming = b""
        else:
            upcoming = read_chunk(stream, chunk_size)

        if not upcoming and expected_size is not None and total < expected_size:
            raise StreamReadError(
                f"Error reading from stream: reached EOF after {total} of "
                f"{expected_size} bytes"
            )

        yield Chunk(
            index=index,
            byte_offset=index * chunk_size,
            data=current,
            is_final=not upcoming,
        )
        if not upcoming:
            return
        index += 1
        current = upcoming


def build_query(parameters: Mapping[str, Any]) -> str:
    """URL-encode parameters, rendering booleans as ``true``/``false``."""
    return urlencode(to_query_params(parameters))


def append_query(uri: str, query: str) -> str:
    """Append an encoded query string to a URI that may already have one."""
    if not query:
        return uri
    if not urlsplit(uri).query:
        return f"{uri.rstrip('?')}?{query}"
    return f"{uri}&{query}"


def upload_chunk(
    session: requests.Session,
    uri: str,
    data: bytes,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Response:
    """POST raw bytes to a chunk URI.

    Raises:
        NetworkError: On transport failure.
    """
    headers = {
        "Content-Type": "application/octet-stream",
        "Content-Length": str(len(data)),
    }
    try:
        return session.post(uri, data=data, headers=headers, timeout=timeout)
    except requests.exceptions.RequestException as err:
        raise NetworkError(f"chunk upload failed: {err}") from err


def upload_standard(
    session: requests.Session,
    stream: BinaryIO,
    chunk_uri: str,
    *,
    file_name: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    logger: Logger | None = None,
) -> UploadResult:
    """Send the whole stream as one multipart/form-data request.

    Args:
        session: Authenticated session.
        stream: Source stream. Read to the end, not closed.
        chunk_uri: Chunk URI of the upload session.
        file_name: Filename reported in the File1 part.
        timeout: Per-request timeout (seconds).
        logger: Optional logger; defaults to the global logger.

    Returns:
        The server's answer. Non-2xx statuses other than 404 are returned,
            not raised.

    Raises:
        ServerRejectedError: On HTTP 404 (expired or invalid session).
        NetworkError: On transport failure.
    """
    logger = resolve_logger(logger)
    logger.verbose("UPLOAD", f"Standard upload to: {chunk_uri}")

    files = {"File1": (file_name or "File1", stream, "application/octet-stream")}
    try:
        response = session.post(chunk_uri, files=files, timeout=timeout)
    except requests.exceptions.RequestException as err:
        raise NetworkError(f"standard upload failed: {err}") from err

    logger.debug("HTTP", f"Response: {response.status_code} {response.reason}")
    if response.status_code == 404:
        raise ServerRejectedError(
            f"Upload session rejected: {response.status_code} {response.reason}",
            request=response.request,
            response=response,
        )

    return UploadResult(
        method=UploadMethod.STANDARD,
        body=response.text,
        status_code=response.status_code,
        chunks_sent=1,
        finished=True,
    )


def upload_streamed(
    session: requests.Session,
    stream: BinaryIO,
    chunk_uri: str,
    *,
    chunk_size: int = UPLOAD_CHUNK_SIZE,
    expected_size: int | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    logger: Logger | None = None,
) -> UploadResult:
    """Send the stream as sequential hashed chunks.

    Args:
        session: Authenticated session.
        stream: Source stream. Read to the end, not closed.
        chunk_uri: Chunk URI of the upload session.
        chunk_size: Chunk length in bytes (8 MiB unless testing).
        expected_size: Known stream size; enables truncation detection and
            step totals in log output.
        timeout: Per-request timeout (seconds).
        logger: Optional logger; defaults to the global logger.

    Returns:
        The answer to the final chunk (finished=True), or the answer to the
            first non-final chunk that was not accepted (finished=False).

    Raises:
        StreamReadError: If the stream fails or ends before expected_size.
        NetworkError: On transport failure.
    """
    logger = resolve_logger(logger)
    total_chunks = 0
    if expected_size is not None:
        total_chunks = max(1, -(-expected_size // chunk_size))
    logger.verbose("UPLOAD", f"Streamed upload to: {chunk_uri}")

    file_md5 = hashlib.md5()
    for chunk in iter_chunks(stream, chunk_size, expected_size):
        file_md5.update(chunk.data)
        parameters: dict[str, Any] = {
            "index": chunk.index,
            "byteOffset": chunk.byte_offset,
            "hash": chunk.md5,
        }
        if chunk.is_final:
            parameters["filehash"] = file_md5.hexdigest()
            parameters["finish"] = True

        uri = append_query(chunk_uri, build_query(parameters))
        logger.step(
            chunk.index + 1,
            max(total_chunks, chunk.index + 1) if total_chunks else 0,
            f"Uploading chunk {chunk.index} ({len(chunk)} bytes)",
        )
        logger.debug("HTTP", f"POST {uri}")
        response = upload_chunk(session, uri, chunk.data, timeout=timeout)
        body = response.text
        logger.debug("HTTP", f"Response: {response.status_code} {body[:200]!r}")

        if not chunk.is_final and body != CHUNK_SUCCESS_TOKEN:
            logger.verbose(
                "UPLOAD", f"Chunk {chunk.index} not accepted, stopping: {body[:200]!r}"
            )
            return UploadResult(
                method=UploadMethod.STREAMED,
                body=body,
                status_code=response.status_code,
                chunks_sent=chunk.index + 1,
                finished=False,
            )

    # The loop ends right after the final chunk was sent.
    file_hash = file_md5.hexdigest()
    logger.verbose("UPLOAD", f"Upload finished, file hash {file_hash}")
    return UploadResult(
        method=UploadMethod.STREAMED,
        body=body,
        status_code=response.status_code,
        chunks_sent=chunk.index + 1,
        finished=True,
        file_hash=file_hash,
    )
