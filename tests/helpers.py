"""Test doubles shared across the suite."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from autobackup.core.errors import ArchiveError, TransportError
from autobackup.services.backup.archiver import Archiver
from autobackup.services.backup.config import STAGING_URL, Artifact
from autobackup.services.backup.transport import TransferBackend


WEBHOOK_A = "https://discord.example/api/webhooks/1/a"
WEBHOOK_B = "https://discord.example/api/webhooks/2/b"

MB = 1024 * 1024


class RecordingBackend(TransferBackend):
    """TransferBackend fake that records calls and replays canned results."""

    def __init__(
        self,
        file_responses: Optional[Dict[str, Union[bytes, Exception]]] = None,
        json_error: Optional[Exception] = None,
    ) -> None:
        self.file_responses = file_responses or {}
        self.json_error = json_error
        self.file_calls: List[Tuple[str, Path, Optional[Dict[str, str]]]] = []
        self.json_calls: List[Tuple[str, Dict[str, Any]]] = []
        self.closed = False

    async def post_file(self, url, file_path, params=None):
        self.file_calls.append((url, Path(file_path), params))
        response = self.file_responses.get(url, b"")
        if isinstance(response, Exception):
            raise response
        return response

    async def post_json(self, url, payload):
        self.json_calls.append((url, payload))
        if self.json_error is not None:
            raise self.json_error
        return b""

    async def close(self):
        self.closed = True

    @property
    def webhook_file_calls(self):
        return [call for call in self.file_calls if call[0] != STAGING_URL]

    @property
    def staging_calls(self):
        return [call for call in self.file_calls if call[0] == STAGING_URL]


class FakeArchiver(Archiver):
    """Writes a sparse file of the requested size instead of running 7z."""

    def __init__(self, size: int = 10 * MB, error: Optional[str] = None) -> None:
        self.size = size
        self.error = error
        self.calls: List[Tuple[Path, Path]] = []

    async def archive(self, source, destination):
        self.calls.append((Path(source), Path(destination)))
        if self.error is not None:
            raise ArchiveError(self.error)
        with open(destination, "wb") as f:
            f.truncate(self.size)
        return Artifact(path=Path(destination), size=Path(destination).stat().st_size)


def staging_ok(link: str = "https://stage.example/xyz") -> Dict[str, bytes]:
    return {STAGING_URL: ('{"success": true, "link": "%s"}' % link).encode()}


def staging_down() -> Dict[str, Exception]:
    return {STAGING_URL: TransportError("ClientConnectorError: connection refused")}
