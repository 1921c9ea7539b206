"""Pytest configuration and fixtures."""

import os
import tempfile

# Keep test logs out of the project tree; must happen before autobackup imports
os.environ.setdefault("AUTOBACKUP_LOGS_DIR", tempfile.mkdtemp(prefix="autobackup-logs-"))

import pytest

from autobackup.services.backup.config import BackupConfiguration
from helpers import WEBHOOK_A, WEBHOOK_B


@pytest.fixture
def source_dir(tmp_path):
    """Create a small folder to back up."""
    folder = tmp_path / "data"
    folder.mkdir()
    (folder / "notes.txt").write_text("hello")
    return folder


@pytest.fixture
def backup_config(tmp_path, source_dir):
    """Create test configuration with two webhooks."""
    backups = tmp_path / "backups"
    backups.mkdir()
    return BackupConfiguration(
        folder_to_backup=source_dir,
        backup_folder=backups,
        webhooks=[WEBHOOK_A, WEBHOOK_B],
        cooldown_minutes=15,
    )
