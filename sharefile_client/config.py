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

"""Client settings for sharefile_client.

The client is a library and reads no configuration files or environment
variables. Everything it needs is passed explicitly and collected in a
ClientSettings value, which is validated once before the HTTP session is
built.

Example:
    Build settings and a client:
        ```python
        from sharefile_client import ShareFileClient
        from sharefile_client.config import ClientSettings

        settings = ClientSettings(subdomain="acmecorp", token="eyJ0eXAi...")
        client = ShareFileClient.from_settings(settings)
        print(settings.base_url)  # https://acmecorp.sf-api.com/sf/v3
        ```
"""

from __future__ import annotations

from dataclasses import dataclass

from sharefile_client.exceptions import ConfigError

__all__ = [
    "API_HOST_SUFFIX",
    "API_PATH",
    "DEFAULT_TIMEOUT",
    "DEFAULT_USER_AGENT",
    "UPLOAD_CHUNK_SIZE",
    "ClientSettings",
]

API_HOST_SUFFIX = "sf-api.com"
API_PATH = "/sf/v3"

# Per-request timeout in seconds, handed to every requests call.
DEFAULT_TIMEOUT = 60

# Streamed uploads send 8 MiB per request.
UPLOAD_CHUNK_SIZE = 8 * 1024 * 1024

DEFAULT_USER_AGENT = "sharefile-client/0.1"


@dataclass(frozen=True)
class ClientSettings:
    """Connection settings for a ShareFile account.

    Attributes:
        subdomain: Account subdomain, e.g. "acmecorp" for
            https://acmecorp.sf-api.com/sf/v3.
        token: OAuth bearer token sent with every request.
        timeout: Per-request timeout in seconds.
        chunk_size: Chunk size for streamed uploads, in bytes.
        user_agent: User-Agent header value.
    """

    subdomain: str
    token: str
    timeout: float = DEFAULT_TIMEOUT
    chunk_size: int = UPLOAD_CHUNK_SIZE
    user_agent: str = DEFAULT_USER_AGENT

    @property
    def base_url(self) -> str:
        """Root URL of the v3 API for this account."""
        return f"https://{self.subdomain}.{API_HOST_SUFFIX}{API_PATH}"

    def validate(self) -> ClientSettings:
        """Check the settings and return them unchanged.

        Raises:
            ConfigError: If the subdomain or token is empty, the subdomain
                is not a bare host label, or timeout/chunk_size is not
                positive.
        """
        if not self.subdomain or not self.subdomain.strip():
            raise ConfigError("subdomain cannot be empty")
        if "/" in self.subdomain or "." in self.subdomain:
            raise ConfigError(
                f"Invalid subdomain: {self.subdomain!r}. Expected the account "
                f"label only (e.g. 'acmecorp'), not a URL or host name"
            )
        if not self.token or not self.token.strip():
            raise ConfigError("token cannot be empty")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout!r}")
        if self.chunk_size <= 0:
            raise ConfigError(f"chunk_size must be positive, got {self.chunk_size!r}")
        return self
