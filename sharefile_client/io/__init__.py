"""Input/Output operations for sharefile_client.

Modules:

upload : module
    Standard (multipart) and streamed (chunked, MD5-framed) uploads to an
    upload session.
download : module
    Item content passthrough and atomic save-to-disk.

Public API:

upload_standard : function
    Send a whole stream as one multipart request.
upload_streamed : function
    Send a stream as sequential 8 MiB chunks with per-chunk hashes.
fetch_content : function
    Return an item's content as an in-memory stream.
save_content : function
    Write an item's content to a file atomically.

Example:
    from sharefile_client.io import upload_streamed

    with open("big.iso", "rb") as f:
        result = upload_streamed(session, f, spec.chunk_uri)
    print(result.body)

"""

from .download import fetch_content, save_content
from .upload import UPLOAD_CHUNK_SIZE, Chunk, iter_chunks, upload_standard, upload_streamed

__all__ = [
    "UPLOAD_CHUNK_SIZE",
    "Chunk",
    "iter_chunks",
    "upload_standard",
    "upload_streamed",
    "fetch_content",
    "save_content",
]
