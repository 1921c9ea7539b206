"""
AutoBackup - Transfer Router
============================

Chooses how an artifact reaches its webhook:
- Direct relay: attach the file to a single multipart POST
- Staged relay: upload to file storage, then POST only the link

The choice depends on artifact size alone.

Author: حَـــــنَّـــــا
"""

from pathlib import Path
from typing import Sequence

from autobackup.core.errors import TransportError
from autobackup.core.logger import logger
from autobackup.services.backup.config import (
    DEFAULT_MENTION,
    MAX_DIRECT_UPLOAD_SIZE,
    STAGED_MESSAGE_TEMPLATE,
)
from autobackup.services.backup.selector import EndpointSelector
from autobackup.services.backup.staging import StagingUploader
from autobackup.services.backup.transport import TransferBackend
from autobackup.utils.text import format_size, truncate


def build_staged_message(link: str, artifact_path: Path, mention: str = DEFAULT_MENTION) -> str:
    """Render the webhook message for a staged artifact."""
    return STAGED_MESSAGE_TEMPLATE.format(
        mention=mention,
        artifact=Path(artifact_path).name,
        link=link,
    )


def is_direct(artifact_size: int) -> bool:
    """Whether an artifact of this size is attached directly."""
    return artifact_size < MAX_DIRECT_UPLOAD_SIZE


class TransferRouter:
    """Routes artifacts to one webhook by size."""

    def __init__(
        self,
        webhooks: Sequence[str],
        backend: TransferBackend,
        staging: StagingUploader,
        selector: EndpointSelector,
        mention: str = DEFAULT_MENTION,
    ) -> None:
        self._webhooks = tuple(webhooks)
        self._backend = backend
        self._staging = staging
        self._selector = selector
        self._mention = mention

    async def route(self, artifact_path: Path, artifact_size: int) -> bool:
        """Relay the artifact. Returns True when the webhook accepted it."""
        webhook_url = self._selector.select(self._webhooks)

        if is_direct(artifact_size):
            return await self._relay_direct(webhook_url, artifact_path, artifact_size)
        return await self._relay_staged(webhook_url, artifact_path, artifact_size)

    async def _relay_direct(self, webhook_url: str, artifact_path: Path, artifact_size: int) -> bool:
        try:
            await self._backend.post_file(webhook_url, artifact_path)
        except TransportError as e:
            logger.error("Direct Relay Failed", [
                ("File", Path(artifact_path).name),
                ("Error", truncate(str(e))),
            ])
            return False

        logger.tree("Backup Relayed", [
            ("Mode", "Direct"),
            ("File", Path(artifact_path).name),
            ("Size", format_size(artifact_size)),
        ], emoji="📨")
        return True

    async def _relay_staged(self, webhook_url: str, artifact_path: Path, artifact_size: int) -> bool:
        link = await self._staging.upload(artifact_path)
        if link is None:
            return False

        payload = {"content": build_staged_message(link, artifact_path, self._mention)}
        try:
            await self._backend.post_json(webhook_url, payload)
        except TransportError as e:
            logger.error("Staged Relay Failed", [
                ("File", Path(artifact_path).name),
                ("Error", truncate(str(e))),
            ])
            return False

        logger.tree("Backup Relayed", [
            ("Mode", "Staged"),
            ("File", Path(artifact_path).name),
            ("Size", format_size(artifact_size)),
        ], emoji="📨")
        return True


__all__ = ["TransferRouter", "build_staged_message", "is_direct"]
