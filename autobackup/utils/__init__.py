"""AutoBackup - Utils Package."""

from autobackup.utils.text import format_size, truncate

__all__ = ["format_size", "truncate"]
