# src/corrector/model.py
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Correction(BaseModel):
    """An edited row of the corrections sheet, ready to be re-injected."""
    model_config = ConfigDict(frozen=True)

    id: str
    identity: str
    tag: str = ""
    original_text: str
    corrected_text: str

    @property
    def is_actionable(self) -> bool:
        """Empty or unchanged replacements are inert and simply skipped."""
        corrected = self.corrected_text.strip()
        return bool(corrected) and corrected != self.original_text.strip()


class ValidationReport(BaseModel):
    passed: bool = True
    violations: List[str] = Field(default_factory=list)


class OutcomeStatus(str, Enum):
    APPLIED = "applied"
    UNRESOLVED = "unresolved"
    NO_OP = "no-op"
    ALREADY_APPLIED = "already-applied"
    CONFLICT = "conflict"


class PatchOutcome(BaseModel):
    """What happened to one correction during an apply pass."""
    correction_id: str
    identity: str
    status: OutcomeStatus
    message: str = ""


class PatchResult(BaseModel):
    applied: int = 0
    skipped: int = 0
    total: int = 0
    outcomes: List[PatchOutcome] = Field(default_factory=list)

    def by_status(self, status: OutcomeStatus) -> List[PatchOutcome]:
        return [o for o in self.outcomes if o.status == status]


class PatchState(str, Enum):
    START = "START"
    BACKED_UP = "BACKED_UP"
    VALIDATED = "VALIDATED"
    APPLIED = "APPLIED"
    REJECTED = "REJECTED"


class PatchRun(BaseModel):
    """
    Record of one patch_file invocation.
    START -> BACKED_UP -> VALIDATED -> APPLIED, or REJECTED when validation fails.
    """
    source_path: Path
    output_path: Optional[Path] = None
    state: PatchState = PatchState.START
    backup_path: Optional[Path] = None
    validation: Optional[ValidationReport] = None
    result: Optional[PatchResult] = None
