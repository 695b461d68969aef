# src/auditor/model.py
from enum import Enum
from functools import total_ordering
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from scraper.model import ContentItem


class IssueKind(str, Enum):
    """Fixed tags of the writing-quality problems the rule battery can report."""
    HONORIFIC = "honorific"
    LOREM_IPSUM = "lorem-ipsum"
    PLACEHOLDER_TEXT = "placeholder-text"
    EXCESS_LENGTH = "excess-length"
    INCONSISTENT_CAPITALIZATION = "inconsistent-capitalization"
    LITERAL_MISSPELLING = "literal-misspelling"
    TONE_INCONSISTENCY = "tone-inconsistency"


@total_ordering
class Severity(Enum):
    """
    Ordinal summary of the worst issue class on an item.
    Sorts Critical < High < Medium < Low < None.
    """
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    NONE = "None"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)

    @property
    def color(self) -> Optional[str]:
        """ARGB fill used in the colour-coded report; None means no highlight."""
        return _SEVERITY_COLORS[self]

    def __lt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank


_SEVERITY_ORDER = [Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW, Severity.NONE]

_SEVERITY_COLORS = {
    Severity.CRITICAL: "FFFF6B6B",  # red
    Severity.HIGH: "FFFFD93D",      # yellow
    Severity.MEDIUM: "FF6BA3E8",    # blue
    Severity.LOW: "FFFF9F40",       # orange
    Severity.NONE: None,
}


class Issue(BaseModel):
    """A detected problem. Derived from a ContentItem on demand, never stored."""
    model_config = ConfigDict(frozen=True)

    kind: IssueKind
    message: str


class AuditedItem(BaseModel):
    """A content item with its derived issues and severity (one report/sheet row)."""
    model_config = ConfigDict(frozen=True)

    item: ContentItem
    issues: List[Issue] = Field(default_factory=list)
    severity: Severity = Severity.NONE

    @property
    def has_issues(self) -> bool:
        return bool(self.issues)

    @property
    def issue_summary(self) -> str:
        return "; ".join(issue.message for issue in self.issues)
