# src/copydeck/core/utils/helptext.py
from copydeck.core.commands import get_command_table

HEADER_HELP_TEXT = """
copydeck - UI copy extraction, audit and correction

Extracts user-facing text from HTML pages and Figma files, flags
writing-quality issues and re-injects edited copy into the HTML.

Typical round trip:
  copydeck scrape page.html            Export a corrections sheet and reports.
  (fill in 'Corrected Content')
  copydeck validate <sheet>            Check replacements before applying.
  copydeck apply <sheet> page.html     Back up, apply and write the page.

Global options (before the command):
  --set <key>=<value>   Override a settings.json value for this run
                        (e.g., --set scraper.max_depth=6). Repeatable.
  -v, --verbose         Log at INFO level regardless of debug.level.

---
COMMANDS
---
  help                Show this help text.
""".strip()


def get_help_text() -> str:
    """
    Assembles the full help text from the header and the help fragments of
    all discovered commands.
    """
    return "\n\n".join([HEADER_HELP_TEXT] + get_command_table().help_texts())
