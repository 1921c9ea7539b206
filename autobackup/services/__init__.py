"""AutoBackup - Services Package."""
