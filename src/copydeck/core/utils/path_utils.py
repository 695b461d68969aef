# src/copydeck/core/utils/path_utils.py
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important project and user paths.
    """

    # --- Project specific paths

    @staticmethod
    def get_project_root() -> Path:
        """
        Returns the absolute path of the project root.
        Searches upwards for a directory containing 'src' and 'pyproject.toml'.
        Falls back to the current working directory for installed copies.
        """
        current_path = Path(__file__).resolve().parent
        while current_path != current_path.parent:
            src_dir = current_path / "src"
            pyproject_toml = current_path / "pyproject.toml"
            if src_dir.is_dir() and pyproject_toml.is_file():
                return current_path
            current_path = current_path.parent
        logger.debug("Project root not found, using working directory %s", Path.cwd())
        return Path.cwd()

    @staticmethod
    def get_shell_package_root() -> Path:
        """Directory of the copydeck package (holds settings.json)."""
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_handlers_dir() -> Path:
        return Path(__file__).resolve().parents[1] / "handlers"

    # --- Output paths ---

    @staticmethod
    def get_output_dir(configured: Optional[str] = None) -> Path:
        """
        Returns the output directory for sheets and reports.
        Relative paths are resolved against the project root.
        Creates the directory if it doesn't exist.
        """
        path = Path(configured) if configured else Path("output")
        if not path.is_absolute():
            path = PathUtils.get_project_root() / path
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def get_backup_dir(configured: Optional[str] = None) -> Path:
        """Returns the backup directory (default: output/backups). Not created here."""
        path = Path(configured) if configured else Path("output") / "backups"
        if not path.is_absolute():
            path = PathUtils.get_project_root() / path
        return path

    # --- Helper methods ---

    @staticmethod
    def file_timestamp(moment: Optional[datetime] = None) -> str:
        """
        ISO-8601 UTC timestamp without fractions, with ':' replaced by '-'
        so it can be used inside file names (e.g. 2024-05-01T09-30-12).
        """
        moment = moment or datetime.now(timezone.utc)
        if moment.tzinfo is not None:
            moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
        return moment.isoformat(timespec="seconds").replace(":", "-")

    @staticmethod
    def timestamped_output_file(output_dir: Path, source_name: str, suffix: str) -> Path:
        """Builds '{output_dir}/{source}_{timestamp}_{suffix}'."""
        return output_dir / f"{source_name}_{PathUtils.file_timestamp()}_{suffix}"
