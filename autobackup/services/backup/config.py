"""
AutoBackup - Backup Configuration
=================================

Constants, data classes, and the config.json loader for the backup
pipeline.

Author: حَـــــنَّـــــا
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from autobackup.core.errors import ConfigError
from autobackup.core.logger import logger
from autobackup.utils.text import MB_DIVISOR


# =============================================================================
# Transfer Limits
# =============================================================================

# Artifacts at or above this size are staged instead of attached
MAX_DIRECT_UPLOAD_SIZE = 23 * MB_DIVISOR


# =============================================================================
# Staging Endpoint
# =============================================================================

STAGING_URL = "https://file.io/"
STAGING_EXPIRY = "1w"

# Multipart field name used for every file upload
UPLOAD_FIELD = "file"


# =============================================================================
# Archiver
# =============================================================================

ARCHIVER_BINARY = "7z"
COMPRESSION_LEVEL = 9
ARTIFACT_PREFIX = "backup"
ARTIFACT_EXTENSION = ".7z"


# =============================================================================
# Messages
# =============================================================================

DEFAULT_MENTION = "<@1025369998438453298>"
STAGED_MESSAGE_TEMPLATE = "autobackup by {mention}\n{artifact}\n({link})"


# =============================================================================
# Defaults
# =============================================================================

DEFAULT_BACKUP_FOLDER = "./backups"
DEFAULT_COOLDOWN_MINUTES = 60
DEFAULT_COOLDOWN = f"*/{DEFAULT_COOLDOWN_MINUTES} * * * *"
DEFAULT_ARCHIVE_TIMEOUT = 3600  # seconds
DEFAULT_HTTP_TIMEOUT = 300  # seconds

CADENCE_PREFIX = "*/"


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class Artifact:
    """A compressed file produced by one backup cycle."""
    path: Path
    size: int


def parse_cadence(expression: str) -> int:
    """
    Extract the minute step from a cron-like `*/N * * * *` string.

    Only the `*/N` prefix is recognized. Strings that do not start with
    `*/` fall back to DEFAULT_COOLDOWN_MINUTES. A `*/` prefix followed by
    anything other than a positive integer is rejected.

    Raises:
        ValueError: The step after `*/` is not a positive integer.
    """
    text = expression.strip()
    if not text.startswith(CADENCE_PREFIX):
        logger.warning("Unrecognized Cooldown, Using Default", [
            ("Value", repr(expression)),
            ("Default", f"{DEFAULT_COOLDOWN_MINUTES} minutes"),
        ])
        return DEFAULT_COOLDOWN_MINUTES

    fields = text[len(CADENCE_PREFIX):].split()
    step = fields[0] if fields else ""
    if not step.isdigit() or int(step) <= 0:
        raise ValueError(f"cooldown step must be a positive integer, got {step!r}")
    return int(step)


class BackupConfiguration(BaseModel):
    """Backup settings loaded once from config.json."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    folder_to_backup: Path = Field(alias="folderToBackup")
    backup_folder: Path = Field(default=Path(DEFAULT_BACKUP_FOLDER), alias="backupFolder")
    webhooks: Tuple[str, ...] = Field(alias="webhooks", min_length=1)
    cooldown_minutes: int = Field(default=DEFAULT_COOLDOWN_MINUTES, alias="cooldownDuration", gt=0)
    mention: str = Field(default=DEFAULT_MENTION)
    archive_timeout_seconds: int = Field(default=DEFAULT_ARCHIVE_TIMEOUT, alias="archiveTimeoutSeconds", gt=0)
    http_timeout_seconds: int = Field(default=DEFAULT_HTTP_TIMEOUT, alias="httpTimeoutSeconds", gt=0)

    @field_validator("webhooks")
    @classmethod
    def _check_webhooks(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        cleaned = tuple(url.strip() for url in value)
        for url in cleaned:
            if not url.startswith(("http://", "https://")):
                raise ValueError(f"webhook is not an http(s) URL: {url!r}")
        return cleaned

    @field_validator("cooldown_minutes", mode="before")
    @classmethod
    def _parse_cooldown(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_cadence(value)
        return value


def _describe_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic error into one line."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "config"
        parts.append(f"{location}: {item.get('msg', 'invalid')}")
    return "; ".join(parts)


def load_config(path: Union[str, Path]) -> BackupConfiguration:
    """
    Load config.json, validate it, and create the backup folder.

    Raises:
        ConfigError: The file is missing, not JSON, or fails validation,
            or the backup folder cannot be created.
    """
    config_path = Path(path)

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"config file not found: {config_path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"config file is not valid JSON: {e}") from e
    except OSError as e:
        raise ConfigError(f"cannot read config file: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("config root must be a JSON object")

    try:
        backup_config = BackupConfiguration.model_validate(data)
    except ValidationError as e:
        raise ConfigError(_describe_validation_error(e)) from e

    try:
        backup_config.backup_folder.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"cannot create backup folder {backup_config.backup_folder}: {e}") from e

    logger.tree("Config Loaded", [
        ("Source", str(backup_config.folder_to_backup)),
        ("Destination", str(backup_config.backup_folder)),
        ("Webhooks", str(len(backup_config.webhooks))),
        ("Cooldown", f"{backup_config.cooldown_minutes} minutes"),
    ], emoji="⚙️")

    return backup_config


__all__ = [
    "Artifact",
    "BackupConfiguration",
    "load_config",
    "parse_cadence",
    "MAX_DIRECT_UPLOAD_SIZE",
    "STAGING_URL",
    "STAGING_EXPIRY",
    "UPLOAD_FIELD",
    "STAGED_MESSAGE_TEMPLATE",
]
