"""
AutoBackup - Backup Scheduler
=============================

Runs backup cycles forever on a fixed cadence.

The sleep starts after each cycle finishes, so the real period is the
cadence plus however long the cycle took.

Author: حَـــــنَّـــــا
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from autobackup.core.logger import logger
from autobackup.services.backup.archiver import Archiver, SevenZipArchiver
from autobackup.services.backup.config import BackupConfiguration
from autobackup.services.backup.cycle import BackupCycle, CycleOutcome
from autobackup.services.backup.router import TransferRouter
from autobackup.services.backup.selector import EndpointSelector
from autobackup.services.backup.staging import StagingUploader
from autobackup.services.backup.transport import AiohttpTransferBackend, TransferBackend
from autobackup.utils.text import truncate


SECONDS_PER_MINUTE = 60

_OUTCOME_EMOJI = {
    CycleOutcome.SUCCESS: "✅",
    CycleOutcome.ALREADY_IN_PROGRESS: "⏳",
    CycleOutcome.ARCHIVE_FAILED: "❌",
    CycleOutcome.TRANSFER_FAILED: "❌",
}


class BackupScheduler:
    """Fixed-cadence loop around BackupCycle."""

    def __init__(
        self,
        cycle: BackupCycle,
        cadence_minutes: int,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if cadence_minutes <= 0:
            raise ValueError("cadence_minutes must be positive")
        self._cycle = cycle
        self._cadence_minutes = cadence_minutes
        self._sleep = sleep

    @property
    def cadence_minutes(self) -> int:
        return self._cadence_minutes

    async def tick(self) -> Optional[CycleOutcome]:
        """Run one cycle and log its outcome. Never raises."""
        try:
            outcome = await self._cycle.run_once()
        except Exception as e:
            logger.error("Backup Scheduler Error", [
                ("Error Type", type(e).__name__),
                ("Error", truncate(str(e))),
            ])
            return None

        logger.tree("Backup Cycle Finished", [
            ("Outcome", outcome.value),
            ("Next Run", f"In {self._cadence_minutes} minutes"),
        ], emoji=_OUTCOME_EMOJI[outcome])
        return outcome

    async def run(self) -> None:
        """Loop forever: cycle, then sleep for the cadence."""
        logger.tree("Backup System Started", [
            ("Schedule", f"Every {self._cadence_minutes} minutes"),
        ], emoji="🕒")

        while True:
            await self.tick()
            await self._sleep(self._cadence_minutes * SECONDS_PER_MINUTE)


# =============================================================================
# Wiring
# =============================================================================

@dataclass
class BackupSystem:
    """Fully wired pipeline for one configuration."""
    scheduler: BackupScheduler
    cycle: BackupCycle
    backend: TransferBackend

    async def close(self) -> None:
        await self.backend.close()


def create_backup_system(
    config: BackupConfiguration,
    backend: Optional[TransferBackend] = None,
    archiver: Optional[Archiver] = None,
    rng: Optional[random.Random] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> BackupSystem:
    """Build the scheduler and everything beneath it from a configuration."""
    backend = backend or AiohttpTransferBackend(timeout_seconds=config.http_timeout_seconds)
    archiver = archiver or SevenZipArchiver(timeout_seconds=config.archive_timeout_seconds)

    router = TransferRouter(
        webhooks=config.webhooks,
        backend=backend,
        staging=StagingUploader(backend),
        selector=EndpointSelector(rng),
        mention=config.mention,
    )
    cycle = BackupCycle(config, archiver, router)
    scheduler = BackupScheduler(cycle, config.cooldown_minutes, sleep=sleep)

    return BackupSystem(scheduler=scheduler, cycle=cycle, backend=backend)


__all__ = ["BackupScheduler", "BackupSystem", "create_backup_system"]
