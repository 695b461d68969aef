# src/copydeck/core/context/shell_context.py
import logging
from pathlib import Path
from typing import Optional

from copydeck.core.managers.config_manager import config_manager
from copydeck.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


class ShellContext:
    """
    Holds the state shared by the command handlers of one invocation:
    resolved output locations and strict mode.
    """

    def __init__(self, output_dir: Optional[str] = None, backup_dir: Optional[str] = None):
        self._output_dir = output_dir or config_manager.get_nested("paths.output_dir", "output")
        self._backup_dir = backup_dir or config_manager.get_nested("paths.backup_dir")
        self.strict_mode = bool(config_manager.get_nested("patcher.strict", False))

    @property
    def output_dir(self) -> Path:
        return PathUtils.get_output_dir(self._output_dir)

    @property
    def backup_dir(self) -> Path:
        return PathUtils.get_backup_dir(self._backup_dir)

    def __repr__(self) -> str:
        return f"<ShellContext output_dir={self._output_dir} strict={self.strict_mode}>"
