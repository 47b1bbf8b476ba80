"""
Blob Store Service

Fetches uploaded resume files by URL, either from remote storage over HTTP
or from the local uploads directory (URLs starting with /uploads/).
Both paths enforce the byte-size ceiling before and after reading.
"""
import os
import mimetypes
import logging
from typing import Optional
from urllib.parse import unquote

import aiofiles
import httpx
from pydantic import BaseModel

from ..exceptions import DocumentFetchFailed, FileTooLarge

logger = logging.getLogger(__name__)

LOCAL_PREFIX = "/uploads/"


class FetchedBlob(BaseModel):
    content: bytes
    content_type: Optional[str] = None
    byte_length: int


def _too_large(size: int, max_bytes: int) -> FileTooLarge:
    return FileTooLarge(
        f"File too large ({round(size / 1024 / 1024, 2)}MB). "
        f"Maximum size is {round(max_bytes / 1024 / 1024)}MB."
    )


class BlobStore:
    def __init__(
        self,
        uploads_dir: str = "uploads",
        max_bytes: int = 16 * 1024 * 1024,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.uploads_dir = uploads_dir
        self.max_bytes = max_bytes
        self.timeout = timeout
        self._transport = transport

    async def fetch(self, url: str) -> FetchedBlob:
        if url.startswith(LOCAL_PREFIX):
            return await self._fetch_local(url)
        if url.startswith(("http://", "https://")):
            return await self._fetch_remote(url)
        raise DocumentFetchFailed(f"Unsupported file URL: {url[:200]}")

    async def _fetch_local(self, url: str) -> FetchedBlob:
        base_dir = os.path.realpath(self.uploads_dir)
        local_path = os.path.realpath(os.path.join(base_dir, unquote(url[len(LOCAL_PREFIX):])))

        if os.path.commonpath([base_dir, local_path]) != base_dir or not os.path.isfile(local_path):
            raise DocumentFetchFailed("Resume file not found. Please upload again.")

        size = os.path.getsize(local_path)
        if size > self.max_bytes:
            raise _too_large(size, self.max_bytes)

        async with aiofiles.open(local_path, "rb") as f:
            content = await f.read()

        if len(content) > self.max_bytes:
            raise _too_large(len(content), self.max_bytes)

        content_type, _ = mimetypes.guess_type(local_path)
        logger.info(f"Loaded resume from local storage: {local_path}")
        return FetchedBlob(content=content, content_type=content_type, byte_length=len(content))

    async def _fetch_remote(self, url: str) -> FetchedBlob:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport, follow_redirects=True) as client:
                async with client.stream("GET", url) as response:
                    if not response.is_success:
                        raise DocumentFetchFailed(
                            f"Could not fetch resume from storage ({response.status_code})."
                        )

                    declared = response.headers.get("content-length")
                    if declared and declared.isdigit() and int(declared) > self.max_bytes:
                        raise _too_large(int(declared), self.max_bytes)

                    chunks = []
                    received = 0
                    async for chunk in response.aiter_bytes():
                        received += len(chunk)
                        if received > self.max_bytes:
                            raise _too_large(received, self.max_bytes)
                        chunks.append(chunk)

                    content_type = response.headers.get("content-type")
        except httpx.TimeoutException as e:
            raise DocumentFetchFailed("Timed out fetching resume from storage.", details=str(e))
        except httpx.HTTPError as e:
            raise DocumentFetchFailed(details=str(e))

        content = b"".join(chunks)
        logger.info(f"Loaded resume from remote storage: {url} ({len(content)} bytes)")
        return FetchedBlob(content=content, content_type=content_type, byte_length=len(content))
