"""
AutoBackup - Staging Uploader
=============================

Uploads oversized artifacts to anonymous file storage and returns the
retrieval link, so only the link has to go through the webhook.

Author: حَـــــنَّـــــا
"""

import json
from pathlib import Path
from typing import Optional

from autobackup.core.errors import ResponseFormatError, TransportError
from autobackup.core.logger import logger
from autobackup.services.backup.config import STAGING_EXPIRY, STAGING_URL
from autobackup.services.backup.transport import TransferBackend
from autobackup.utils.text import truncate


def _extract_link(body: bytes) -> str:
    """Pull the `link` field out of a staging response body."""
    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise ResponseFormatError("staging response is not JSON") from e

    if not isinstance(data, dict):
        raise ResponseFormatError("staging response is not a JSON object")

    link = data.get("link")
    if not isinstance(link, str) or not link:
        raise ResponseFormatError("staging response has no link")
    return link


class StagingUploader:
    """Stages files on the anonymous storage endpoint."""

    def __init__(
        self,
        backend: TransferBackend,
        url: str = STAGING_URL,
        expiry: str = STAGING_EXPIRY,
    ) -> None:
        self._backend = backend
        self._url = url
        self._expiry = expiry

    async def upload(self, file_path: Path) -> Optional[str]:
        """
        Upload a file and return its retrieval link.

        Returns None on any transport or response format failure.
        """
        try:
            body = await self._backend.post_file(
                self._url,
                file_path,
                params={"expires": self._expiry},
            )
            link = _extract_link(body)
        except ResponseFormatError:
            logger.error("Staging Upload Failed", [
                ("File", Path(file_path).name),
                ("Reason", "Unexpected response"),
            ])
            return None
        except TransportError as e:
            logger.error("Staging Upload Failed", [
                ("File", Path(file_path).name),
                ("Error", truncate(str(e))),
            ])
            return None

        logger.tree("Artifact Staged", [
            ("File", Path(file_path).name),
            ("Expires", self._expiry),
        ], emoji="☁️")
        return link


__all__ = ["StagingUploader"]
