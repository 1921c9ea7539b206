"""
AutoBackup - Transfer Backend
=============================

Performs single HTTP exchanges for the relay strategies:
- Multipart file upload (webhook attachments, staging upload)
- JSON POST (webhook messages)

Every call returns the raw response body or raises TransportError.
No retries.

Author: حَـــــنَّـــــا
"""

import asyncio
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

import aiohttp

from autobackup.core.errors import TransportError
from autobackup.core.logger import logger
from autobackup.services.backup.config import DEFAULT_HTTP_TIMEOUT, UPLOAD_FIELD


class TransferBackend(ABC):
    """One HTTP exchange per call."""

    @abstractmethod
    async def post_file(
        self,
        url: str,
        file_path: Path,
        params: Optional[Dict[str, str]] = None,
    ) -> bytes:
        """Upload `file_path` as a single multipart `file` field."""

    @abstractmethod
    async def post_json(self, url: str, payload: Dict[str, Any]) -> bytes:
        """POST `payload` as application/json."""

    async def close(self) -> None:
        """Release any held connections."""


class AiohttpTransferBackend(TransferBackend):
    """TransferBackend over a persistent aiohttp session."""

    def __init__(self, timeout_seconds: float = DEFAULT_HTTP_TIMEOUT) -> None:
        self._timeout_seconds = timeout_seconds
        # Uploads have no size cap, so only stalls time out, not total duration
        self._upload_timeout = aiohttp.ClientTimeout(
            total=None,
            sock_connect=timeout_seconds,
            sock_read=timeout_seconds,
        )
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create persistent HTTP session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close HTTP session on shutdown."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _read(self, response: aiohttp.ClientResponse) -> bytes:
        body = await response.read()
        if response.status >= 400:
            raise TransportError(f"HTTP {response.status} from {response.url.host}")
        return body

    async def post_file(
        self,
        url: str,
        file_path: Path,
        params: Optional[Dict[str, str]] = None,
    ) -> bytes:
        session = await self._get_session()
        start_time = time.monotonic()

        try:
            with open(file_path, "rb") as f:
                form = aiohttp.FormData()
                form.add_field(
                    UPLOAD_FIELD,
                    f,
                    filename=Path(file_path).name,
                    content_type="application/octet-stream",
                )
                async with session.post(
                    url,
                    data=form,
                    params=params,
                    timeout=self._upload_timeout,
                ) as response:
                    body = await self._read(response)
        except asyncio.TimeoutError as e:
            raise TransportError(f"upload stalled for {self._timeout_seconds}s") from e
        except aiohttp.ClientError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e
        except OSError as e:
            raise TransportError(f"cannot read {file_path}: {e}") from e

        logger.tree("File Uploaded", [
            ("File", Path(file_path).name),
            ("Duration", f"{int((time.monotonic() - start_time) * 1000)}ms"),
        ], emoji="📤")
        return body

    async def post_json(self, url: str, payload: Dict[str, Any]) -> bytes:
        session = await self._get_session()

        try:
            async with session.post(
                url,
                json=payload,
                headers={"Content-Type": "application/json"},
            ) as response:
                return await self._read(response)
        except asyncio.TimeoutError as e:
            raise TransportError(f"request timed out after {self._timeout_seconds}s") from e
        except aiohttp.ClientError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e


__all__ = ["TransferBackend", "AiohttpTransferBackend"]
