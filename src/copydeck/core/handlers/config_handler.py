# src/copydeck/core/handlers/config_handler.py
import json
import logging
from typing import List, Optional

from copydeck.core.context.shell_context import ShellContext
from copydeck.core.managers.config_manager import config_manager

logger = logging.getLogger(__name__)

config_help_text = """
CONFIG:
  config list                Show the effective configuration as JSON.
  config get <key>           Show one value (e.g., scraper.max_depth).
  Values are read from settings.json; override them for one run with
  'copydeck --set <key>=<value> <command> ...'.
""".strip()


def handle_config(args: List[str], _ctx: Optional[ShellContext] = None) -> int:
    """Handles the 'config' command for inspecting the configuration."""
    if not args:
        print(config_help_text)
        return 1

    command = args[0]

    if command == "list":
        print(json.dumps(config_manager.get_all(), indent=2))
        return 0

    if command == "get":
        if len(args) < 2:
            print("Usage: config get <key>")
            return 1
        value = config_manager.get_nested(args[1])
        if value is None:
            print(f"❌ Unknown config key '{args[1]}'.")
            return 1
        print(json.dumps(value, indent=2) if isinstance(value, (dict, list)) else value)
        return 0

    print(f"Unknown command: 'config {command}'. Use 'copydeck --set <key>=<value>' to override a value.")
    return 1
