"""
Tests for sharefile_client.options module.

Tests upload option resolution including:
- Defaults for every recognized option
- Required options (fileName, method)
- Unknown option keys
- Pruning of None values
- Source metadata derivation
"""

from __future__ import annotations

from datetime import datetime, timezone
import io

import pytest

from sharefile_client.exceptions import ConfigError
from sharefile_client.options import (
    OPTION_DEFAULTS,
    SourceMetadata,
    UploadMethod,
    resolve_upload_options,
)


class TestResolveUploadOptions:
    """Tests for resolve_upload_options."""

    def test_defaults_applied(self):
        """Test that defaults fill in every unset non-null option."""
        resolved = resolve_upload_options(
            {"fileName": "report.pdf"}, SourceMetadata(size=42)
        )

        assert resolved == {
            "fileName": "report.pdf",
            "fileSize": 42,
            "raw": False,
            "tool": "apiv3",
            "responseFormat": "json",
            "method": UploadMethod.STANDARD,
        }

    def test_none_values_are_pruned(self):
        """Test that no resolved key carries a None value."""
        resolved = resolve_upload_options(
            {"fileName": "a.bin", "title": None, "batchId": None, "details": "d"},
            SourceMetadata(),
        )

        assert all(v is not None for v in resolved.values())
        assert "title" not in resolved
        assert "batchId" not in resolved
        assert resolved["details"] == "d"

    def test_missing_file_name_raises(self):
        """Test that a missing fileName is rejected."""
        with pytest.raises(ConfigError, match="fileName"):
            resolve_upload_options({"title": "x"}, SourceMetadata(size=1))

    def test_none_options_raises_missing_file_name(self):
        """Test that an absent option bag is rejected for lack of fileName."""
        with pytest.raises(ConfigError, match="Missing required"):
            resolve_upload_options(None, SourceMetadata())

    def test_explicit_none_method_raises(self):
        """Test that method=None does not fall back to the default."""
        with pytest.raises(ConfigError, match="method"):
            resolve_upload_options(
                {"fileName": "a.bin", "method": None}, SourceMetadata()
            )

    def test_unknown_key_raises(self):
        """Test that unrecognized option keys are rejected."""
        with pytest.raises(ConfigError, match="Unknown upload option.*overwrite"):
            resolve_upload_options(
                {"fileName": "a.bin", "overwrite": True}, SourceMetadata()
            )

    def test_invalid_method_raises(self):
        """Test that an unknown method value is rejected."""
        with pytest.raises(ConfigError, match="Invalid upload method"):
            resolve_upload_options(
                {"fileName": "a.bin", "method": "carrier-pigeon"}, SourceMetadata()
            )

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("standard", UploadMethod.STANDARD),
            ("streamed", UploadMethod.STREAMED),
            ("threaded", UploadMethod.THREADED),
            (UploadMethod.STREAMED, UploadMethod.STREAMED),
        ],
    )
    def test_method_coerced_to_enum(self, value, expected):
        """Test that method strings are converted to UploadMethod."""
        resolved = resolve_upload_options(
            {"fileName": "a.bin", "method": value}, SourceMetadata()
        )
        assert resolved["method"] is expected

    def test_metadata_overrides_caller_file_size(self):
        """Test that fileSize always comes from the source metadata."""
        resolved = resolve_upload_options(
            {"fileName": "a.bin", "fileSize": 999}, SourceMetadata(size=7)
        )
        assert resolved["fileSize"] == 7

    def test_timestamps_formatted_as_utc(self):
        """Test that metadata timestamps become ISO 8601 UTC strings."""
        metadata = SourceMetadata(
            size=1,
            created_at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            modified_at=datetime(2024, 6, 7, 8, 9, 10),
        )

        resolved = resolve_upload_options({"fileName": "a.bin"}, metadata)

        assert resolved["clientCreatedDateUTC"] == "2024-01-02T03:04:05Z"
        assert resolved["clientModifiedDateUTC"] == "2024-06-07T08:09:10Z"

    def test_input_mapping_not_mutated(self):
        """Test that the caller's option bag is left untouched."""
        options = {"fileName": "a.bin"}
        resolve_upload_options(options, SourceMetadata(size=3))
        assert options == {"fileName": "a.bin"}

    def test_every_default_is_a_recognized_key(self):
        """Test that all defaulted options can be passed explicitly."""
        options = {k: v for k, v in OPTION_DEFAULTS.items() if v is not None}
        options["fileName"] = "a.bin"
        resolved = resolve_upload_options(options, SourceMetadata())
        assert resolved["fileName"] == "a.bin"


class TestSourceMetadata:
    """Tests for SourceMetadata.from_stream."""

    def test_from_real_file(self, tmp_test_dir):
        """Test that file streams report size and timestamps."""
        path = tmp_test_dir / "data.bin"
        path.write_bytes(b"x" * 123)

        with path.open("rb") as f:
            metadata = SourceMetadata.from_stream(f)

        assert metadata.size == 123
        assert metadata.created_at is not None
        assert metadata.modified_at is not None
        assert metadata.modified_at.tzinfo is timezone.utc

    def test_from_partly_read_file(self, tmp_test_dir):
        """Test that a file opened past its start reports the bytes left."""
        path = tmp_test_dir / "data.bin"
        path.write_bytes(b"HDR" + b"x" * 100)

        with path.open("rb") as f:
            f.read(3)
            metadata = SourceMetadata.from_stream(f)
            position = f.tell()

        assert metadata.size == 100
        assert position == 3

    def test_from_bytes_io_restores_position(self):
        """Test that seekable streams report the remaining size without moving."""
        stream = io.BytesIO(b"hello world")
        stream.seek(3)

        metadata = SourceMetadata.from_stream(stream)

        assert metadata.size == 8
        assert metadata.created_at is None
        assert stream.tell() == 3

    def test_from_unseekable_stream(self):
        """Test that unseekable streams yield empty metadata."""

        class Pipe(io.RawIOBase):
            def readable(self):
                return True

            def readinto(self, b):
                return 0

        assert SourceMetadata.from_stream(Pipe()) == SourceMetadata()
