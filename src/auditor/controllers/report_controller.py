import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
from openpyxl.styles import Font, PatternFill

from auditor.model import AuditedItem, Severity
from copydeck.core.utils.sheet_utils import autosize_columns, keep_text_literal
from copydeck.errors import DocumentIOError
from scraper.model import ScrapeStats

logger = logging.getLogger(__name__)

HEADER_FILL = "FF4A90E2"

SUMMARY_COLUMNS = ["Severity", "Content", "Issues", "Category", "Location"]
FULL_COLUMNS = ["ID", "Name", "Type", "Location", "Content", "Category", "Tone", "Purpose", "Issues", "Severity"]

LEGEND_ROWS = [
    (Severity.CRITICAL, "Honorifics ('Mr.', 'Dr.') that must be removed"),
    (Severity.HIGH, "Lorem ipsum placeholders or spelling errors"),
    (Severity.MEDIUM, "Placeholder markers (TODO, TBD) or button labels that are too long"),
    (Severity.LOW, "Inconsistent numbering style or tone"),
    (Severity.NONE, "No issues found"),
]

INSTRUCTIONS = [
    "1. Start with the 'Issues Summary' sheet: it lists only items with issues, worst first.",
    "2. Use the 'Location' column to find the element in the design or page.",
    "3. Enter replacement text in the 'Corrected Content' column of the corrections sheet.",
    "4. Run 'copydeck validate <sheet>' and then 'copydeck apply <sheet> <html>'.",
]


class ReportController:
    """
    Writes the human-facing outputs of an audit run: the colour-coded
    workbook and the machine-readable JSON report.
    """

    # --- HELPERS ---

    @staticmethod
    def _location(audited: AuditedItem) -> str:
        item = audited.item
        return item.attributes.get("path") or item.identity

    @staticmethod
    def _analysis_value(audited: AuditedItem, field: str) -> str:
        analysis = audited.item.analysis
        if analysis is None:
            return ""
        return getattr(analysis, field) or ""

    def _summary_frame(self, audited: Sequence[AuditedItem]) -> pd.DataFrame:
        # Stable sort keeps extraction order inside one severity
        with_issues = sorted((a for a in audited if a.has_issues), key=lambda a: a.severity.rank)
        rows = [{
            "Severity": a.severity.value,
            "Content": a.item.original_text,
            "Issues": a.issue_summary,
            "Category": self._analysis_value(a, "category"),
            "Location": self._location(a),
        } for a in with_issues]
        return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)

    def _full_frame(self, audited: Sequence[AuditedItem]) -> pd.DataFrame:
        rows = [{
            "ID": a.item.id,
            "Name": a.item.attributes.get("name") or a.item.tag,
            "Type": a.item.tag,
            "Location": self._location(a),
            "Content": a.item.original_text,
            "Category": self._analysis_value(a, "category"),
            "Tone": self._analysis_value(a, "tone"),
            "Purpose": self._analysis_value(a, "purpose"),
            "Issues": a.issue_summary,
            "Severity": a.severity.value,
        } for a in audited]
        return pd.DataFrame(rows, columns=FULL_COLUMNS)

    @staticmethod
    def _legend_frame() -> pd.DataFrame:
        rows = [{"Severity": sev.value, "Meaning": meaning} for sev, meaning in LEGEND_ROWS]
        return pd.DataFrame(rows, columns=["Severity", "Meaning"])

    @staticmethod
    def _style_sheet(sheet, severities: Optional[List[Severity]] = None):
        """Header styling, severity row fills, literal text cells and column widths."""
        header_fill = PatternFill(start_color=HEADER_FILL, end_color=HEADER_FILL, fill_type="solid")
        for cell in sheet[1]:
            cell.font = Font(bold=True, color="FFFFFFFF")
            cell.fill = header_fill

        if severities:
            for row_idx, severity in enumerate(severities, start=2):
                if severity.color is None:
                    continue
                fill = PatternFill(start_color=severity.color, end_color=severity.color, fill_type="solid")
                for cell in sheet[row_idx]:
                    cell.fill = fill

        keep_text_literal(sheet)
        autosize_columns(sheet, max_width=100)

    # --- EXPORTS ---

    def write_workbook(self, audited: Sequence[AuditedItem], filename: Path) -> str:
        """
        Generates the colour-coded workbook with 'Issues Summary', 'Full Content'
        and 'Color Legend' sheets. Returns the written path.
        """
        audited = list(audited)
        df_summary = self._summary_frame(audited)
        df_full = self._full_frame(audited)
        df_legend = self._legend_frame()

        summary_severities = [Severity(v) for v in df_summary["Severity"]]
        full_severities = [a.severity for a in audited]

        try:
            with pd.ExcelWriter(filename, engine="openpyxl") as writer:
                df_summary.to_excel(writer, sheet_name="Issues Summary", index=False)
                df_full.to_excel(writer, sheet_name="Full Content", index=False)
                df_legend.to_excel(writer, sheet_name="Color Legend", index=False)

                self._style_sheet(writer.sheets["Issues Summary"], summary_severities)
                self._style_sheet(writer.sheets["Full Content"], full_severities)

                legend = writer.sheets["Color Legend"]
                self._style_sheet(legend, [sev for sev, _ in LEGEND_ROWS])
                start = len(LEGEND_ROWS) + 3
                legend.cell(row=start, column=1, value="Instructions").font = Font(bold=True)
                for offset, line in enumerate(INSTRUCTIONS, start=1):
                    legend.cell(row=start + offset, column=1, value=line)

        except PermissionError as e:
            raise DocumentIOError(f"{filename} is currently open. Please close it and try again.") from e
        except OSError as e:
            logger.error("Error writing Excel report: %s", e)
            raise DocumentIOError(f"Cannot write report {filename}: {e}") from e

        logger.info("Colour-coded report written to %s", filename)
        return str(filename)

    def build_json_report(
            self,
            audited: Sequence[AuditedItem],
            source_name: str,
            stats: Optional[ScrapeStats] = None,
            patterns: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Structured report: metadata, statistics, optional insights and every item."""
        audited = list(audited)
        severity_counts = {sev.value: 0 for sev in Severity}
        for a in audited:
            severity_counts[a.severity.value] += 1

        return {
            "metadata": {
                "source": source_name,
                "generated_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
                "total_items": len(audited),
                "analyzed_items": sum(1 for a in audited if a.item.is_analyzed),
            },
            "statistics": {
                **(stats.model_dump() if stats else {}),
                "by_severity": severity_counts,
                "items_with_issues": sum(1 for a in audited if a.has_issues),
            },
            "patterns": patterns,
            "content": [
                {
                    **a.item.model_dump(mode="json"),
                    "issues": [issue.model_dump(mode="json") for issue in a.issues],
                    "severity": a.severity.value,
                }
                for a in audited
            ],
        }

    def write_json_report(
            self,
            audited: Sequence[AuditedItem],
            filename: Path,
            source_name: str,
            stats: Optional[ScrapeStats] = None,
            patterns: Optional[Dict[str, Any]] = None,
    ) -> str:
        report = self.build_json_report(audited, source_name, stats, patterns)
        try:
            with open(filename, "w", encoding="utf-8") as f:
                json.dump(report, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise DocumentIOError(f"Cannot write report {filename}: {e}") from e
        logger.info("JSON report written to %s", filename)
        return str(filename)
