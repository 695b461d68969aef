# src/corrector/controllers/patch_controller.py
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, Tag

from auditor.rules.core import RuleSet
from copydeck.errors import DocumentIOError, PatchConflictError
from corrector.managers.backup_manager import BackupManager
from corrector.model import (
    Correction,
    OutcomeStatus,
    PatchOutcome,
    PatchResult,
    PatchRun,
    PatchState,
    ValidationReport,
)
from scraper.rules import ExtractionRules
from scraper.selector import SelectorGenerator
from scraper.services.html_scrape_service import load_document

logger = logging.getLogger(__name__)

LOREM_MARKER = "lorem ipsum"

# Outcomes that make a strict run abort before anything is written
STRICT_FAILURES = {OutcomeStatus.CONFLICT, OutcomeStatus.UNRESOLVED}


class DocumentPatcher:
    """
    Re-injects edited copy into the HTML document it was extracted from.

    Each correction is re-located through its stored selector in the current
    in-memory document. The file on disk is backed up first and written once,
    atomically, after the whole batch has been applied.
    """

    def __init__(
            self,
            rules: Optional[RuleSet] = None,
            backup_manager: Optional[BackupManager] = None,
            extraction_rules: Optional[ExtractionRules] = None,
            strict: bool = False,
    ):
        self.rules = rules or RuleSet()
        self.backup_manager = backup_manager or BackupManager()
        self.extraction_rules = extraction_rules or ExtractionRules()
        self.strict = strict

    # --- Validation gate ---

    def validate_corrections(self, corrections: Iterable[Correction]) -> ValidationReport:
        """Hard gate: any violation rejects the whole batch."""
        violations: List[str] = []
        for c in corrections:
            label = c.id or "<no id>"
            if not c.identity.strip():
                violations.append(f"{label}: missing selector")
            if not c.original_text.strip():
                violations.append(f"{label}: missing original content")
            if LOREM_MARKER in c.corrected_text.lower():
                violations.append(f"{label}: replacement contains lorem ipsum")
            honorific = self.rules.find_honorific(c.corrected_text)
            if honorific:
                violations.append(f"{label}: replacement contains honorific ({honorific})")

        for v in violations:
            logger.warning("Validation: %s", v)
        return ValidationReport(passed=not violations, violations=violations)

    # --- Backup ---

    def create_backup(self, path: Path) -> Path:
        return self.backup_manager.create_backup(path)

    # --- Apply ---

    def _current_text(self, el: Tag) -> str:
        return self.extraction_rules.extract_text(el)

    def _write_text(self, el: Tag, text: str):
        if self.extraction_rules.uses_placeholder(el):
            el["placeholder"] = text
        else:
            el.string = text

    def _apply_one(self, document: BeautifulSoup, c: Correction) -> PatchOutcome:
        def outcome(status: OutcomeStatus, message: str = "") -> PatchOutcome:
            return PatchOutcome(correction_id=c.id, identity=c.identity, status=status, message=message)

        if not c.is_actionable:
            return outcome(OutcomeStatus.NO_OP, "Replacement equals the original text")

        matches = SelectorGenerator.resolve(document, c.identity)
        if not matches:
            return outcome(OutcomeStatus.UNRESOLVED, "Selector matches no element")
        if len(matches) > 1:
            return outcome(OutcomeStatus.CONFLICT, f"Selector matches {len(matches)} elements")

        el = matches[0]
        replacement = c.corrected_text.strip()
        current = self._current_text(el)
        if current == replacement:
            return outcome(OutcomeStatus.ALREADY_APPLIED, "Element already carries the replacement")
        if current != c.original_text.strip():
            return outcome(
                OutcomeStatus.CONFLICT,
                f"Element text changed since export (found '{current[:60]}')",
            )

        self._write_text(el, replacement)
        return outcome(OutcomeStatus.APPLIED)

    def apply_corrections(self, document: BeautifulSoup, corrections: Iterable[Correction]) -> PatchResult:
        """
        Mutates the document in place. Item-local problems are recorded as
        skipped outcomes and never abort the batch.
        """
        result = PatchResult()
        for c in corrections:
            o = self._apply_one(document, c)
            result.outcomes.append(o)
            result.total += 1
            if o.status == OutcomeStatus.APPLIED:
                result.applied += 1
                logger.info("Applied %s: %s", c.id, c.identity)
            else:
                result.skipped += 1
                if o.status in STRICT_FAILURES:
                    logger.warning("Skipped %s (%s): %s [%s]", c.id, o.status.value, o.message, c.identity)
                else:
                    logger.debug("Skipped %s (%s)", c.id, o.status.value)
        return result

    # --- File cycle ---

    @staticmethod
    def _write_atomic(document: BeautifulSoup, target: Path):
        """Writes to a temp file next to the target and swaps it in."""
        target = Path(target)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(str(document))
            if target.exists():
                shutil.copymode(target, tmp_name)
            os.replace(tmp_name, target)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise DocumentIOError(f"Cannot write {target}: {e}") from e

    def patch_file(
            self,
            path: Path,
            corrections: List[Correction],
            output_path: Optional[Path] = None,
    ) -> PatchRun:
        """
        Full cycle for one file: read, back up, validate, apply, write once.
        Returns a PatchRun in state REJECTED (nothing written) when validation fails.
        """
        path = Path(path)
        run = PatchRun(source_path=path, output_path=Path(output_path) if output_path else path)

        document = load_document(path)

        run.backup_path = self.create_backup(path)
        run.state = PatchState.BACKED_UP

        run.validation = self.validate_corrections(corrections)
        if not run.validation.passed:
            run.state = PatchState.REJECTED
            logger.error("Validation failed with %d violation(s); nothing written.", len(run.validation.violations))
            return run
        run.state = PatchState.VALIDATED

        result = self.apply_corrections(document, corrections)
        run.result = result

        failures = [o for o in result.outcomes if o.status in STRICT_FAILURES]
        if self.strict and failures:
            raise PatchConflictError(
                f"{len(failures)} correction(s) no longer match {path.name}; nothing written.",
                outcomes=failures,
            )

        if result.applied or run.output_path != path:
            self._write_atomic(document, run.output_path)
            logger.info("Wrote %s (%d applied, %d skipped)", run.output_path, result.applied, result.skipped)
        else:
            logger.info("No changes applied to %s; file left untouched.", path)

        run.state = PatchState.APPLIED
        return run
