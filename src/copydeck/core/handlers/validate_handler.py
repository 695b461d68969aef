# src/copydeck/core/handlers/validate_handler.py
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from auditor.rules.core import RuleSet
from copydeck.core.context.shell_context import ShellContext
from copydeck.core.managers.config_manager import config_manager
from copydeck.errors import CopydeckError
from corrector.controllers.patch_controller import DocumentPatcher
from corrector.managers.correction_store import CorrectionStore

logger = logging.getLogger(__name__)

validate_help_text = """
VALIDATE:
  validate <corrections>
                      Run the validation gate on an edited corrections sheet
                      without touching any HTML file.
""".strip()


def handle_validate(args: List[str], _ctx: Optional[ShellContext] = None) -> int:
    """Handler for the 'validate' command."""
    parser = argparse.ArgumentParser(prog="validate", description="Validate a corrections sheet.")
    parser.add_argument("corrections", type=str, help="Edited corrections sheet (.csv or .xlsx).")
    try:
        parsed_args = parser.parse_args(args)
    except SystemExit:
        return 1

    try:
        corrections = CorrectionStore().load(Path(parsed_args.corrections))
    except CopydeckError as e:
        logger.error("Validation aborted: %s", e)
        print(f"❌ {e}")
        return 1

    patcher = DocumentPatcher(rules=RuleSet.from_config(config_manager.get_nested("auditor")))
    report = patcher.validate_corrections(corrections)
    if not report.passed:
        print(f"❌ {len(report.violations)} violation(s) in {len(corrections)} corrections:")
        for violation in report.violations:
            print(f"   - {violation}")
        return 1

    print(f"✅ {len(corrections)} corrections passed validation.")
    return 0
