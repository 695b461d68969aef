import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from auditor.controllers.report_controller import ReportController
from auditor.model import AuditedItem, Severity
from auditor.qngine import QNGINE
from auditor.services.classifier_service import ContentClassifierService
from copydeck.core.utils.path_utils import PathUtils
from corrector.managers.correction_store import CorrectionStore
from scraper.model import ScrapeResult

logger = logging.getLogger(__name__)


class AuditController:
    """
    Orchestrates one audit run over a scrape result: optional classification,
    rule battery, and the three exports (corrections sheet, colour-coded
    workbook, JSON report).
    """

    def __init__(
            self,
            output_dir: Path,
            engine: Optional[QNGINE] = None,
            classifier: Optional[ContentClassifierService] = None,
            store: Optional[CorrectionStore] = None,
            reporter: Optional[ReportController] = None,
    ):
        self.output_dir = Path(output_dir)
        self.engine = engine or QNGINE()
        self.classifier = classifier
        self.store = store or CorrectionStore()
        self.reporter = reporter or ReportController()

        # Results of the last run
        self.audited: List[AuditedItem] = []
        self.patterns: Optional[Dict[str, Any]] = None

    def run_audit(self, result: ScrapeResult, show_progress: bool = True) -> List[AuditedItem]:
        """Classifies (when a classifier is set) and audits every item, in extraction order."""
        items = result.items
        self.patterns = None

        if self.classifier is not None and items:
            items = self.classifier.classify_all(items, show_progress=show_progress)
            self.patterns = self.classifier.find_patterns(items)

        self.audited = list(self.engine.run_audit(items))
        return self.audited

    def summary(self) -> Dict[str, int]:
        """Number of items per severity for the last run."""
        counts = {sev.value: 0 for sev in Severity}
        for a in self.audited:
            counts[a.severity.value] += 1
        return counts

    def export(self, result: ScrapeResult, sheet_format: str = "csv") -> Dict[str, Path]:
        """Writes all outputs of the last run; file names carry source name and timestamp."""
        base = Path(result.source_name).stem or "content"
        sheet_suffix = "xlsx" if sheet_format == "xlsx" else "csv"

        corrections_path = PathUtils.timestamped_output_file(self.output_dir, base, f"corrections.{sheet_suffix}")
        report_path = PathUtils.timestamped_output_file(self.output_dir, base, "report.xlsx")
        json_path = PathUtils.timestamped_output_file(self.output_dir, base, "analysis.json")

        self.store.export(self.audited, corrections_path)
        self.reporter.write_workbook(self.audited, report_path)
        self.reporter.write_json_report(
            self.audited, json_path, result.source_name, stats=result.stats, patterns=self.patterns,
        )
        return {"corrections": corrections_path, "report": report_path, "json": json_path}
