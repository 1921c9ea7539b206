"""
AutoBackup - Entry Point
========================

Main entry point for the backup daemon.

Author: حَـــــنَّـــــا
"""

import asyncio
import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dotenv import load_dotenv

load_dotenv()

from autobackup.core.config import config
from autobackup.core.errors import ConfigError
from autobackup.core.logger import log
from autobackup.services.backup import create_backup_system, load_config


async def main(config_path: str = config.CONFIG_PATH) -> int:
    """Load configuration and run the scheduler. Returns the exit code."""
    try:
        backup_config = load_config(config_path)
    except ConfigError as e:
        log.error("Failed To Load Configuration", [
            ("Path", config_path),
            ("Error", str(e)[:200]),
        ])
        return 1

    system = create_backup_system(backup_config)

    try:
        await system.scheduler.run()
    finally:
        await system.close()
    return 0


def run() -> None:
    """Console script entry."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        log.info("Received keyboard interrupt")


if __name__ == "__main__":
    run()
