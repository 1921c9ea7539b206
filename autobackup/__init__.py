"""AutoBackup - Scheduled directory backups relayed to Discord webhooks."""

__version__ = "1.0.0"
