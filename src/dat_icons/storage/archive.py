"""Archive readers: byte-range access to the archive blob.

Usage::

    reader = FileArchiveReader("data/client_portal.dat")
    payload = await reader.fetch(offset=record.offset + 28, length=4096)

    async with HttpArchiveReader("https://bucket.example/client_portal.dat") as reader:
        payload = await reader.fetch(offset, length)

Readers never retry. Any failure surfaces immediately as ``FetchFailure``.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import httpx

from dat_icons.core.errors import FetchFailure

logger = logging.getLogger(__name__)


class FileArchiveReader:
    """Reads byte ranges from a local archive file.

    Each call opens its own file handle, so concurrent reads share no state.
    The blocking read runs in the default thread pool.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def fetch(self, offset: int, length: int) -> bytes:
        try:
            data = await asyncio.to_thread(self._read_range, offset, length)
        except OSError as exc:
            raise FetchFailure(
                f"Error while reading byte range {offset}+{length} "
                f"from {self._path}: {exc}"
            ) from exc
        if not data:
            raise FetchFailure(f"Failed to get byte range {offset}+{length}.")
        return data

    def _read_range(self, offset: int, length: int) -> bytes:
        with open(self._path, "rb") as f:
            f.seek(offset)
            return f.read(length)


class HttpArchiveReader:
    """Reads byte ranges from an archive object over HTTP ``Range`` requests.

    Suitable for S3/R2-style object storage. Owns its ``httpx.AsyncClient``
    unless one is passed in.
    """

    def __init__(
        self,
        url: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._url = url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "HttpArchiveReader":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, offset: int, length: int) -> bytes:
        if length <= 0:
            raise FetchFailure(f"Refusing empty byte range {offset}+{length}")
        headers = {"Range": f"bytes={offset}-{offset + length - 1}"}
        try:
            response = await self._client.get(self._url, headers=headers)
        except httpx.HTTPError as exc:
            raise FetchFailure(f"Error while getting byte range: {exc}") from exc

        if response.status_code == 206:
            data = response.content
        elif response.status_code == 200:
            # Server ignored the Range header and sent the whole object
            data = response.content[offset:offset + length]
        else:
            raise FetchFailure(
                f"Failed to get byte range {offset}+{length}: "
                f"HTTP {response.status_code}"
            )

        if not data:
            raise FetchFailure("Failed to get byte range.")
        return data
