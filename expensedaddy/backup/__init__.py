"""Backup and restore package."""

from expensedaddy.backup.codec import (
    BACKUP_FIELDS,
    INVALID_BACKUP_MESSAGE,
    BackupCodec,
    InvalidBackupError,
)

__all__ = [
    "BACKUP_FIELDS",
    "INVALID_BACKUP_MESSAGE",
    "BackupCodec",
    "InvalidBackupError",
]
