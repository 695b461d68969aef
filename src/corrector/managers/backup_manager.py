# src/corrector/managers/backup_manager.py
import logging
import shutil
from pathlib import Path
from typing import Optional

from copydeck.core.utils.path_utils import PathUtils
from copydeck.errors import BackupError

logger = logging.getLogger(__name__)


class BackupManager:
    """
    Keeps an untouched copy of every file before it is patched.
    Backups are append-only: an existing backup is never overwritten.
    """

    def __init__(self, backup_dir: Optional[Path] = None):
        self.backup_dir = Path(backup_dir) if backup_dir else PathUtils.get_backup_dir()

    def _target_for(self, source: Path) -> Path:
        stamp = PathUtils.file_timestamp()
        target = self.backup_dir / f"{stamp}_{source.name}"
        counter = 1
        # Same-second collision: add a numeric suffix
        while target.exists():
            target = self.backup_dir / f"{stamp}-{counter}_{source.name}"
            counter += 1
        return target

    def create_backup(self, source: Path) -> Path:
        """Copies the source file byte-for-byte. Any failure raises BackupError."""
        source = Path(source)
        if not source.is_file():
            raise BackupError(f"Cannot back up missing file: {source}")
        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            target = self._target_for(source)
            shutil.copy2(source, target)
        except OSError as e:
            raise BackupError(f"Backup of {source} failed: {e}") from e

        logger.info("Backup created: %s", target)
        return target
