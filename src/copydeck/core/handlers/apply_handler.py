# src/copydeck/core/handlers/apply_handler.py
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from auditor.rules.core import RuleSet
from copydeck.core.context.shell_context import ShellContext
from copydeck.core.managers.config_manager import config_manager
from copydeck.core.utils.path_utils import PathUtils
from copydeck.errors import CopydeckError, PatchConflictError
from corrector.controllers.patch_controller import DocumentPatcher
from corrector.managers.backup_manager import BackupManager
from corrector.managers.correction_store import CorrectionStore
from corrector.model import PatchState
from scraper.rules import ExtractionRules

logger = logging.getLogger(__name__)

apply_help_text = """
APPLY:
  apply <corrections> <html> [--strict] [--backup-dir DIR] [--output FILE]
                      Import the edited corrections sheet (CSV or XLSX),
                      validate it, back up the HTML file and write the
                      corrected copy back into it. --strict aborts when a
                      selector no longer matches its original text.
""".strip()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="apply", description="Apply corrections to an HTML file.")
    parser.add_argument("corrections", type=str, help="Edited corrections sheet (.csv or .xlsx).")
    parser.add_argument("html", type=str, help="HTML file to patch.")
    parser.add_argument("--strict", action="store_true", default=None, help="Abort on conflicts.")
    parser.add_argument("--backup-dir", type=str, default=None, help="Backup directory.")
    parser.add_argument("--output", type=str, default=None, help="Write to this file instead of in place.")
    return parser


def handle_apply(args: List[str], ctx: Optional[ShellContext] = None) -> int:
    """Handler for the 'apply' command."""
    try:
        parsed_args = _build_parser().parse_args(args)
    except SystemExit:
        return 1

    ctx = ctx or ShellContext()
    strict = ctx.strict_mode if parsed_args.strict is None else parsed_args.strict
    backup_dir = PathUtils.get_backup_dir(parsed_args.backup_dir) if parsed_args.backup_dir else ctx.backup_dir

    patcher = DocumentPatcher(
        rules=RuleSet.from_config(config_manager.get_nested("auditor")),
        backup_manager=BackupManager(backup_dir),
        extraction_rules=ExtractionRules.from_config(config_manager.get_nested("scraper")),
        strict=strict,
    )

    try:
        corrections = CorrectionStore().load(Path(parsed_args.corrections))
        if not corrections:
            print("ℹ️  No corrections found (no 'Corrected Content' filled in). Nothing to apply.")
            return 0

        output = Path(parsed_args.output) if parsed_args.output else None
        run = patcher.patch_file(Path(parsed_args.html), corrections, output_path=output)
    except PatchConflictError as e:
        logger.error("Strict apply aborted: %s", e)
        print(f"❌ {e}")
        for outcome in e.outcomes:
            print(f"   - {outcome.correction_id} [{outcome.status.value}] {outcome.message}")
        return 1
    except CopydeckError as e:
        logger.error("Apply failed: %s", e)
        print(f"❌ {e}")
        return 1

    if run.state == PatchState.REJECTED:
        print("❌ Validation failed; the HTML file was not modified.")
        for violation in run.validation.violations:
            print(f"   - {violation}")
        return 1

    result = run.result
    print(f"💾 Backup: {run.backup_path}")
    print(f"✅ Applied {result.applied} of {result.total} corrections ({result.skipped} skipped).")
    for outcome in result.outcomes:
        if outcome.status.value in ("conflict", "unresolved"):
            print(f"   ⚠️  {outcome.correction_id} [{outcome.status.value}] {outcome.message}")
    if result.applied:
        print(f"   Written to {run.output_path}")
    return 0
