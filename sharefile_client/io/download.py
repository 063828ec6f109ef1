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

"""Item content download for sharefile_client.

Two entry points:

- fetch_content(): passthrough of the API's content call. The body is
  returned untouched as an in-memory stream positioned at its start.
- save_content(): stream the content to a file on disk, hashing while
  writing, with an atomic rename once the last byte is written.

Key Features of save_content:

- **Atomic Writes** - Downloads to a temporary .part file and renames it
  on success, so partial files never appear under the final name.
- **Stream Hashing** - MD5 is computed while writing (the same digest the
  API reports for items), avoiding a second read of the file.
- **Filename Detection** - An explicit file_name wins, then the
  Content-Disposition header, then the item id.

Constants:

- DEFAULT_CHUNK (int): Write block size (1 MiB).

Example:
    Save an item to disk:

        >>> from pathlib import Path
        >>> from sharefile_client.io.download import save_content
        >>> result = save_content(api, "fi1234", Path("./downloads"))
        >>> print(result.file_path, result.md5)
"""

from __future__ import annotations

from collections.abc import Mapping
import hashlib
import io
from pathlib import Path
import time
from typing import Any

import requests

from sharefile_client.api.items import RemoteItemService
from sharefile_client.exceptions import NetworkError
from sharefile_client.logging import Logger, resolve_logger
from sharefile_client.results import DownloadResult

__all__ = ["DEFAULT_CHUNK", "fetch_content", "save_content"]

# Write block size (1 MiB).
DEFAULT_CHUNK = 1024 * 1024


def _filename_from_cd(content_disposition: str) -> str | None:
    """
    Extract a filename from a Content-Disposition header if present.

    Example header:
      'attachment; filename="report.pdf"'
    """
    if not content_disposition:
        return None
    parts = [s.strip() for s in content_disposition.split(";")]
    for part in parts:
        if part.lower().startswith("filename="):
            value = part.split("=", 1)[1].strip().strip('"')
            # Never let a server-supplied name escape the destination folder.
            name = Path(value).name
            if name in ("", ".", ".."):
                return None
            return name
    return None


def fetch_content(
    service: RemoteItemService,
    item_id: str,
    query_parameters: Mapping[str, Any] | None = None,
    *,
    logger: Logger | None = None,
) -> io.BytesIO:
    """Return an item's content as a readable, seekable byte stream.

    Args:
        service: Remote item service used to fetch the content.
        item_id: Id of the item to download.
        query_parameters: Extra query parameters for the content call.
        logger: Optional logger; defaults to the global logger.

    Returns:
        The exact response body, positioned at offset 0.

    Raises:
        NetworkError: On transport failure or a non-2xx status.
    """
    logger = resolve_logger(logger)
    response = service.fetch_item_content(item_id, query_parameters)
    try:
        content = response.content
    except requests.exceptions.RequestException as err:
        raise NetworkError(f"download failed for item {item_id!r}: {err}") from err
    finally:
        response.close()

    logger.verbose("HTTP", f"Received {len(content)} bytes for item {item_id}")
    return io.BytesIO(content)


def save_content(
    service: RemoteItemService,
    item_id: str,
    destination_folder: Path,
    *,
    file_name: str | None = None,
    query_parameters: Mapping[str, Any] | None = None,
    logger: Logger | None = None,
) -> DownloadResult:
    """Download an item's content into destination_folder.

    Writes to <filename>.part then renames to <filename> on success. The
    folder is created if missing.

    Args:
        service: Remote item service used to fetch the content.
        item_id: Id of the item to download.
        destination_folder: Folder to save into.
        file_name: Name of the written file. Defaults to the
            Content-Disposition filename, then the item id.
        query_parameters: Extra query parameters for the content call.
        logger: Optional logger; defaults to the global logger.

    Returns:
        Path, MD5, size and response headers of the saved file.

    Raises:
        NetworkError: On transport failure or a non-2xx status. The .part
            file is removed on this and any other error.
    """
    logger = resolve_logger(logger)
    destination_folder = Path(destination_folder)
    destination_folder.mkdir(parents=True, exist_ok=True)

    response = service.fetch_item_content(item_id, query_parameters)
    try:
        cd_name = _filename_from_cd(response.headers.get("Content-Disposition", ""))
        target = destination_folder / (file_name or cd_name or item_id)
        tmp = target.with_suffix(target.suffix + ".part")
        logger.verbose("FILE", f"Downloading to: {tmp}")

        md5 = hashlib.md5()
        written = 0
        started_at = time.time()
        try:
            with tmp.open("wb") as f:
                for block in response.iter_content(chunk_size=DEFAULT_CHUNK):
                    if not block:
                        continue
                    f.write(block)
                    md5.update(block)
                    written += len(block)
        except requests.exceptions.RequestException as err:
            tmp.unlink(missing_ok=True)
            raise NetworkError(f"download failed for item {item_id!r}: {err}") from err
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
        headers = dict(response.headers)
    finally:
        response.close()

    logger.verbose("FILE", f"Atomic rename: {tmp.name} -> {target.name}")
    tmp.replace(target)

    digest = md5.hexdigest()
    logger.verbose(
        "FILE",
        f"Download complete: {target} ({written} bytes, md5 {digest}) "
        f"in {time.time() - started_at:.1f}s",
    )
    return DownloadResult(file_path=target, md5=digest, size=written, headers=headers)
