from __future__ import annotations

import logging
import sys

from copydeck.core.commands import get_command_table
from copydeck.core.context.shell_context import ShellContext
from copydeck.core.managers.config_manager import config_manager
from copydeck.core.utils.configure_logging import configure_logging

logger = logging.getLogger(__name__)


class UsageError(ValueError):
    pass


def split_global_options(argv: list[str]) -> tuple[list[tuple[str, str]], bool, list[str]]:
    """
    Peels the global options off the front of the command line.

    Returns the '--set' overrides as (key, value) pairs, the verbose flag and
    the remaining '<command> [args...]'.
    """
    overrides: list[tuple[str, str]] = []
    verbose = False
    rest = list(argv)
    while rest and rest[0].startswith("-") and rest[0] not in ("-h", "--help"):
        option = rest.pop(0)
        if option in ("-v", "--verbose"):
            verbose = True
            continue
        if option == "--set" or option.startswith("--set="):
            assignment = option[len("--set="):] if option.startswith("--set=") else (rest.pop(0) if rest else "")
            key, sep, value = assignment.partition("=")
            if not sep or not key.strip():
                raise UsageError(f"--set expects <key>=<value>, got '{assignment}'")
            overrides.append((key.strip(), value))
            continue
        raise UsageError(f"Unknown option '{option}'")
    return overrides, verbose, rest


def run_command(argv: list[str]) -> int:
    """Dispatches one command line ('<command> [args...]') to its handler."""
    if not argv or argv[0] in ("-h", "--help"):
        argv = ["help"]

    name, args = argv[0], list(argv[1:])
    command = get_command_table().get(name)
    if command is None:
        print(f"❌ Unknown command: '{name}'. Type 'copydeck help' for a list of commands.")
        return 1

    logger.debug("Executing '%s' with args %s", name, args)
    return command.handler(args, ShellContext())


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the copydeck command line."""
    try:
        overrides, verbose, rest = split_global_options(sys.argv[1:] if argv is None else argv)
    except UsageError as e:
        print(f"❌ {e}")
        return 2

    for key, value in overrides:
        config_manager.set_nested(key, value)
    configure_logging(config_manager.get_nested("debug", {}), verbose=verbose)

    try:
        return run_command(rest)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
