"""
AutoBackup - Backup Cycle
=========================

One end-to-end backup attempt: archive the source folder, measure the
artifact, and route it to a webhook. At most one cycle runs at a time.

Author: حَـــــنَّـــــا
"""

import threading
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from autobackup.core.errors import ArchiveError
from autobackup.core.logger import logger
from autobackup.services.backup.archiver import Archiver
from autobackup.services.backup.config import (
    ARTIFACT_EXTENSION,
    ARTIFACT_PREFIX,
    BackupConfiguration,
)
from autobackup.services.backup.router import TransferRouter
from autobackup.utils.text import format_size, truncate


class CycleOutcome(str, Enum):
    """Result of one BackupCycle.run_once() call."""

    SUCCESS = "success"
    ALREADY_IN_PROGRESS = "already_in_progress"
    ARCHIVE_FAILED = "archive_failed"
    TRANSFER_FAILED = "transfer_failed"


class SingleFlightGuard:
    """
    Non-blocking lock that admits one holder at a time.

    Backed by threading.Lock so a trigger from another thread or event
    loop sees the same state as the scheduler.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def try_acquire(self) -> bool:
        """Take the guard if free. Returns False when already held."""
        return self._lock.acquire(blocking=False)

    def release(self) -> None:
        self._lock.release()

    @property
    def active(self) -> bool:
        return self._lock.locked()


def artifact_path_for(backup_folder: Path, now: datetime) -> Path:
    """
    Destination path for an artifact created at `now`.

    Aware times are stamped in UTC so the repeated hour at a DST change
    cannot produce the same name twice.
    """
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    stamp = now.strftime("%Y-%m-%d_%H-%M-%S")
    return Path(backup_folder) / f"{ARTIFACT_PREFIX}_{stamp}{ARTIFACT_EXTENSION}"


class BackupCycle:
    """Runs single-flight backup attempts."""

    def __init__(
        self,
        config: BackupConfiguration,
        archiver: Archiver,
        router: TransferRouter,
        guard: Optional[SingleFlightGuard] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._config = config
        self._archiver = archiver
        self._router = router
        self._guard = guard or SingleFlightGuard()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def guard(self) -> SingleFlightGuard:
        return self._guard

    async def run_once(self) -> CycleOutcome:
        """Archive and relay once, unless a cycle is already running."""
        if not self._guard.try_acquire():
            logger.warning("Backup Already In Progress")
            return CycleOutcome.ALREADY_IN_PROGRESS

        try:
            return await self._execute()
        finally:
            self._guard.release()

    async def _execute(self) -> CycleOutcome:
        destination = artifact_path_for(self._config.backup_folder, self._clock())

        try:
            artifact = await self._archiver.archive(self._config.folder_to_backup, destination)
        except ArchiveError as e:
            logger.error("Error Creating Backup", [
                ("Source", str(self._config.folder_to_backup)),
                ("Error", truncate(str(e))),
            ])
            return CycleOutcome.ARCHIVE_FAILED

        logger.success("Backup Created Successfully", [
            ("File", artifact.path.name),
            ("Size", format_size(artifact.size)),
        ])

        if await self._router.route(artifact.path, artifact.size):
            return CycleOutcome.SUCCESS
        return CycleOutcome.TRANSFER_FAILED


__all__ = ["BackupCycle", "CycleOutcome", "SingleFlightGuard", "artifact_path_for"]
