"""
AutoBackup - Core Package
=========================

Framework essentials: settings, errors, and logging.

Author: حَـــــنَّـــــا
"""

from autobackup.core.config import config
from autobackup.core.logger import logger

__all__ = ["config", "logger"]
