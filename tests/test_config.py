"""
Tests for sharefile_client.config module.
"""

from __future__ import annotations

import pytest

from sharefile_client.config import UPLOAD_CHUNK_SIZE, ClientSettings
from sharefile_client.exceptions import ConfigError


class TestClientSettings:
    """Tests for ClientSettings validation."""

    def test_defaults(self):
        settings = ClientSettings(subdomain="acmecorp", token="tok").validate()

        assert settings.base_url == "https://acmecorp.sf-api.com/sf/v3"
        assert settings.chunk_size == UPLOAD_CHUNK_SIZE == 8 * 1024 * 1024
        assert settings.timeout == 60

    @pytest.mark.parametrize(
        "kwargs, match",
        [
            ({"subdomain": "", "token": "t"}, "subdomain cannot be empty"),
            ({"subdomain": "acme.sf-api.com", "token": "t"}, "Invalid subdomain"),
            ({"subdomain": "https://acme", "token": "t"}, "Invalid subdomain"),
            ({"subdomain": "acme", "token": "  "}, "token cannot be empty"),
            ({"subdomain": "acme", "token": "t", "timeout": 0}, "timeout"),
            ({"subdomain": "acme", "token": "t", "chunk_size": -1}, "chunk_size"),
        ],
    )
    def test_invalid_settings(self, kwargs, match):
        with pytest.raises(ConfigError, match=match):
            ClientSettings(**kwargs).validate()
