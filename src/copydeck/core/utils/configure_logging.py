# src/copydeck/core/utils/configure_logging.py
import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from tqdm import tqdm

BRIEF_FORMAT = "%(levelname)s %(name)s: %(message)s"
DETAILED_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"


class LogWithTqdm(logging.Handler):
    """
    Routes log records through `tqdm.write()` so messages emitted while the
    classifier progress bar is running do not break the bar.
    """
    def emit(self, record):
        try:
            tqdm.write(self.format(record), file=sys.stderr)
        except Exception:
            self.handleError(record)


def to_level(level: Union[str, int, None], fallback: int) -> int:
    """Maps 'info', 'WARNING', 20 or None onto a logging level."""
    if isinstance(level, str):
        value = logging.getLevelName(level.strip().upper())
        return value if isinstance(value, int) else fallback
    return level if level is not None else fallback


def _drop_own_handlers(root: logging.Logger) -> None:
    for handler in list(root.handlers):
        if getattr(handler, "_copydeck", False):
            root.removeHandler(handler)
            handler.close()


def configure_logging(debug_config: Optional[Mapping[str, Any]] = None, verbose: bool = False) -> int:
    """
    Installs the console handler (and optionally a log file) from the 'debug'
    section of settings.json. Calling it again replaces what a previous call
    installed; handlers added by others stay in place.

    Returns the effective root level.
    """
    cfg = dict(debug_config or {})
    level = to_level(cfg.get("level"), logging.WARNING)
    if verbose:
        level = min(level, logging.INFO)

    root = logging.getLogger()
    _drop_own_handlers(root)
    root.setLevel(level)

    console = LogWithTqdm()
    console.setFormatter(logging.Formatter(DETAILED_FORMAT if level <= logging.DEBUG else BRIEF_FORMAT))
    console._copydeck = True
    root.addHandler(console)

    log_file = cfg.get("log_file")
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT))
        file_handler._copydeck = True
        root.addHandler(file_handler)

    for name, module_level in (cfg.get("module_levels") or {}).items():
        logging.getLogger(name).setLevel(to_level(module_level, logging.INFO))

    # urllib3, openai and httpx are chatty at INFO
    for name, muted_level in (cfg.get("silenced_loggers") or {}).items():
        logging.getLogger(name).setLevel(to_level(muted_level, logging.CRITICAL))

    return level
