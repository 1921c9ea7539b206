"""
AutoBackup - Process Settings
=============================

Process-level settings from environment variables.
The backup configuration itself lives in config.json and is loaded
by autobackup.services.backup.config.

Author: حَـــــنَّـــــا
"""

import os
from dataclasses import dataclass
from datetime import timezone, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo


ROOT_DIR = Path(__file__).parent.parent.parent
LOGS_DIR = Path(os.getenv("AUTOBACKUP_LOGS_DIR", str(ROOT_DIR / "logs")))

LOGS_DIR.mkdir(parents=True, exist_ok=True)

DEFAULT_TIMEZONE = "America/New_York"


@dataclass(frozen=True)
class Settings:
    """Settings from environment variables."""

    # Path of the JSON backup configuration
    CONFIG_PATH: str = os.getenv("AUTOBACKUP_CONFIG", "config.json")

    # Timezone used for log timestamps and artifact names
    TIMEZONE: str = os.getenv("AUTOBACKUP_TIMEZONE", DEFAULT_TIMEZONE)


config = Settings()


def get_timezone() -> tzinfo:
    """Get configured timezone, with fallback to UTC."""
    try:
        return ZoneInfo(config.TIMEZONE)
    except (KeyError, ValueError):
        return timezone.utc
