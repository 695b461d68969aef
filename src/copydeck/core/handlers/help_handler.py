# src/copydeck/core/handlers/help_handler.py
from typing import List, Optional

from copydeck.core.context.shell_context import ShellContext
from copydeck.core.utils.helptext import get_help_text


def handle_help(_args: List[str], _ctx: Optional[ShellContext] = None) -> int:
    """Prints the assembled help text of all commands."""
    print(get_help_text())
    return 0
