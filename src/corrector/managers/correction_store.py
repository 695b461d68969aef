# src/corrector/managers/correction_store.py
import logging
from pathlib import Path
from typing import Iterable, List

import pandas as pd

from auditor.model import AuditedItem
from copydeck.core.utils.sheet_utils import autosize_columns, keep_text_literal
from copydeck.errors import CorrectionFileError
from corrector.model import Correction

logger = logging.getLogger(__name__)

COLUMNS = [
    "ID", "Selector", "Tag", "Original Content", "Corrected Content", "Category", "Tone", "Issues",
]
REQUIRED_COLUMNS = ["ID", "Selector", "Original Content", "Corrected Content"]
EXCEL_SUFFIXES = (".xlsx", ".xlsm")


class CorrectionStore:
    """
    Manages the tabular correction sheet exchanged with human editors.
    Export writes one row per audited item with an empty 'Corrected Content'
    column; load turns the edited rows back into Correction records.
    """

    @staticmethod
    def is_excel(path: Path) -> bool:
        return Path(path).suffix.lower() in EXCEL_SUFFIXES

    def to_frame(self, audited: Iterable[AuditedItem]) -> pd.DataFrame:
        rows = []
        for a in audited:
            analysis = a.item.analysis
            rows.append({
                "ID": a.item.id,
                "Selector": a.item.identity,
                "Tag": a.item.tag,
                "Original Content": a.item.original_text,
                "Corrected Content": "",
                "Category": (analysis.category if analysis else None) or "",
                "Tone": (analysis.tone if analysis else None) or "",
                "Issues": a.issue_summary,
            })
        return pd.DataFrame(rows, columns=COLUMNS)

    def export(self, audited: Iterable[AuditedItem], path: Path) -> Path:
        """Writes the correction sheet. CSV by default, XLSX when the path asks for it."""
        path = Path(path)
        df = self.to_frame(audited)
        try:
            if self.is_excel(path):
                with pd.ExcelWriter(path, engine="openpyxl") as writer:
                    df.to_excel(writer, sheet_name="Corrections", index=False)
                    sheet = writer.sheets["Corrections"]
                    keep_text_literal(sheet)
                    autosize_columns(sheet, max_width=80)
            else:
                df.to_csv(path, index=False, encoding="utf-8")
        except OSError as e:
            raise CorrectionFileError(f"Cannot write corrections sheet {path}: {e}") from e

        logger.info("Exported %d rows to %s", len(df), path)
        return path

    def read_frame(self, path: Path) -> pd.DataFrame:
        """Reads the sheet with every cell as a string; blank cells become ''."""
        path = Path(path)
        if not path.is_file():
            raise CorrectionFileError(f"Corrections file not found: {path}")
        try:
            if self.is_excel(path):
                df = pd.read_excel(path, dtype=str, keep_default_na=False, engine="openpyxl")
            else:
                df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8")
        except (OSError, ValueError, pd.errors.ParserError) as e:
            raise CorrectionFileError(f"Cannot parse corrections file {path}: {e}") from e

        df = df.fillna("")
        df.columns = [str(c).strip() for c in df.columns]

        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise CorrectionFileError(
                f"Corrections file {path.name} is missing required column(s): {', '.join(missing)}"
            )
        return df

    def parse_frame(self, df: pd.DataFrame) -> List[Correction]:
        """Pure conversion: only rows with non-blank 'Corrected Content' yield a Correction."""
        corrections: List[Correction] = []
        has_tag = "Tag" in df.columns
        for row in df.to_dict("records"):
            corrected = str(row["Corrected Content"]).strip()
            if not corrected:
                continue
            corrections.append(Correction(
                id=str(row["ID"]).strip(),
                identity=str(row["Selector"]).strip(),
                tag=str(row["Tag"]).strip() if has_tag else "",
                original_text=str(row["Original Content"]),
                corrected_text=corrected,
            ))
        return corrections

    def load(self, path: Path) -> List[Correction]:
        df = self.read_frame(path)
        corrections = self.parse_frame(df)
        logger.info("Loaded %d corrections from %d rows in %s", len(corrections), len(df), Path(path).name)
        return corrections
