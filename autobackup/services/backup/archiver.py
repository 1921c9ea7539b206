"""
AutoBackup - Archiver
=====================

Compresses the source folder into a single artifact.

The default implementation shells out to 7-Zip at maximum compression.
The subprocess runs in a worker thread with a hard timeout so a stuck
archiver cannot block the event loop or the scheduler forever.

Author: حَـــــنَّـــــا
"""

import asyncio
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from autobackup.core.errors import ArchiveError
from autobackup.core.logger import logger
from autobackup.services.backup.config import (
    ARCHIVER_BINARY,
    COMPRESSION_LEVEL,
    DEFAULT_ARCHIVE_TIMEOUT,
    Artifact,
)
from autobackup.utils.text import truncate


class Archiver(ABC):
    """Turns a source folder into an artifact file."""

    @abstractmethod
    async def archive(self, source: Path, destination: Path) -> Artifact:
        """
        Archive `source` into `destination`.

        Raises:
            ArchiveError: The artifact could not be produced.
        """


class SevenZipArchiver(Archiver):
    """Archiver backed by the `7z` command line tool."""

    def __init__(
        self,
        binary: str = ARCHIVER_BINARY,
        level: int = COMPRESSION_LEVEL,
        timeout_seconds: float = DEFAULT_ARCHIVE_TIMEOUT,
    ) -> None:
        self._binary = binary
        self._level = level
        self._timeout_seconds = timeout_seconds

    def _command(self, source: Path, destination: Path) -> list[str]:
        return [self._binary, "a", str(destination), str(source), f"-mx={self._level}"]

    def _run(self, source: Path, destination: Path) -> Artifact:
        try:
            result = subprocess.run(
                self._command(source, destination),
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self._timeout_seconds,
            )
        except subprocess.TimeoutExpired as e:
            raise ArchiveError(f"{self._binary} timed out after {self._timeout_seconds}s") from e
        except FileNotFoundError as e:
            raise ArchiveError(f"{self._binary} not found on PATH") from e
        except OSError as e:
            raise ArchiveError(f"cannot run {self._binary}: {e.strerror or e}") from e

        if result.returncode != 0:
            error_msg = (result.stderr or result.stdout or "").strip() or "no output"
            logger.error("Archiver Exited With Error", [
                ("Exit Code", str(result.returncode)),
                ("Output", truncate(error_msg)),
            ])
            raise ArchiveError(f"{self._binary} exited with code {result.returncode}")

        try:
            size = destination.stat().st_size
        except OSError as e:
            raise ArchiveError(f"archive was not created: {destination}") from e

        return Artifact(path=destination, size=size)

    async def archive(self, source: Path, destination: Path) -> Artifact:
        return await asyncio.to_thread(self._run, Path(source), Path(destination))


__all__ = ["Archiver", "SevenZipArchiver"]
