# src/copydeck/core/commands.py
import importlib.util
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

from copydeck.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

HANDLER_PACKAGE = "copydeck.core.handlers"
HANDLER_PREFIX = "handle_"
HELP_SUFFIX = "_help_text"


@dataclass
class Command:
    """One CLI command: its handler plus the help fragment shipped next to it."""
    name: str
    handler: Callable[..., int]
    help_text: str = ""
    source: str = ""


class CommandTable:
    """
    The commands available to one process, loaded from the '*_handler.py'
    modules of the handlers directory.

    A module contributes a command per 'handle_<name>' function; a module
    level '<name>_help_text' string becomes that command's help fragment.
    """

    def __init__(self, commands: Optional[Dict[str, Command]] = None):
        self._commands: Dict[str, Command] = dict(commands or {})

    def __contains__(self, name: str) -> bool:
        return name in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    def get(self, name: str) -> Optional[Command]:
        return self._commands.get(name)

    def names(self) -> List[str]:
        return sorted(self._commands)

    def help_texts(self) -> List[str]:
        """Help fragments in command-name order; commands without one are left out."""
        return [self._commands[n].help_text for n in self.names() if self._commands[n].help_text]

    def add(self, command: Command) -> None:
        if command.name in self._commands:
            logger.warning(
                "Command '%s' from %s replaces the one from %s",
                command.name, command.source, self._commands[command.name].source,
            )
        self._commands[command.name] = command

    @staticmethod
    def _load_module(file_path: Path):
        spec = importlib.util.spec_from_file_location(f"{HANDLER_PACKAGE}.{file_path.stem}", file_path)
        if not spec or not spec.loader:
            raise ImportError(f"Could not create spec for {file_path}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    @classmethod
    def discover(cls, handlers_dir: Optional[Path] = None) -> "CommandTable":
        """Builds a table from every handler module found in the directory."""
        table = cls()
        handlers_dir = Path(handlers_dir) if handlers_dir else PathUtils.get_handlers_dir()
        logger.debug("Scanning for handlers in: '%s'", handlers_dir)

        if not handlers_dir.is_dir():
            logger.warning("Handlers directory not found: %s", handlers_dir)
            return table

        for file_path in sorted(handlers_dir.glob("*_handler.py")):
            try:
                module = cls._load_module(file_path)
            except (ImportError, SyntaxError) as e:
                logger.error("Failed to load handler module %s: %s", file_path.name, e, exc_info=True)
                continue

            for attr_name, value in vars(module).items():
                if not attr_name.startswith(HANDLER_PREFIX) or not callable(value):
                    continue
                name = attr_name[len(HANDLER_PREFIX):]
                help_text = getattr(module, f"{name}{HELP_SUFFIX}", "")
                table.add(Command(
                    name=name,
                    handler=value,
                    help_text=help_text if isinstance(help_text, str) else "",
                    source=file_path.name,
                ))
                logger.debug("Discovered command '%s' in %s", name, file_path.name)

        logger.debug("Loaded %d command handlers.", len(table))
        return table


_table: Optional[CommandTable] = None


def get_command_table() -> CommandTable:
    """Returns the process-wide command table, discovering it on first use."""
    global _table
    if _table is None:
        _table = CommandTable.discover()
    return _table
