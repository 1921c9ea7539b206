"""
AutoBackup - Backup Package
===========================

Scheduled folder backups relayed to Discord webhooks.
Small artifacts are attached directly; large ones are staged on
file storage and only the link is posted.

Author: حَـــــنَّـــــا
"""

from .archiver import Archiver, SevenZipArchiver
from .config import (
    Artifact,
    BackupConfiguration,
    MAX_DIRECT_UPLOAD_SIZE,
    load_config,
    parse_cadence,
)
from .cycle import BackupCycle, CycleOutcome, SingleFlightGuard
from .router import TransferRouter
from .scheduler import BackupScheduler, BackupSystem, create_backup_system
from .selector import EndpointSelector
from .staging import StagingUploader
from .transport import AiohttpTransferBackend, TransferBackend

__all__ = [
    "Archiver",
    "SevenZipArchiver",
    "Artifact",
    "BackupConfiguration",
    "MAX_DIRECT_UPLOAD_SIZE",
    "load_config",
    "parse_cadence",
    "BackupCycle",
    "CycleOutcome",
    "SingleFlightGuard",
    "TransferRouter",
    "BackupScheduler",
    "BackupSystem",
    "create_backup_system",
    "EndpointSelector",
    "StagingUploader",
    "AiohttpTransferBackend",
    "TransferBackend",
]
