"""
AutoBackup - Error Types
========================

Exception hierarchy shared by the backup pipeline.

ConfigError is fatal at startup. Every other error is caught inside
the cycle and reported as a failed outcome; the next scheduled tick
is the only retry.

Author: حَـــــنَّـــــا
"""


class BackupError(Exception):
    """Base class for all backup errors."""


class ConfigError(BackupError):
    """Configuration file is missing, unreadable, or invalid."""


class ArchiveError(BackupError):
    """Archiver exited non-zero, timed out, or produced no file."""


class TransportError(BackupError):
    """An HTTP exchange failed (connection, timeout, or error status)."""


class ResponseFormatError(TransportError):
    """A response body was not the JSON shape we expected."""


__all__ = [
    "BackupError",
    "ConfigError",
    "ArchiveError",
    "TransportError",
    "ResponseFormatError",
]
