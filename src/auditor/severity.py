# src/auditor/severity.py
from typing import Iterable, List, Set, Tuple

from auditor.model import Issue, IssueKind, Severity

# First match wins: severity reflects the worst class present, not the count.
SEVERITY_POLICY: List[Tuple[Severity, Set[IssueKind]]] = [
    (Severity.CRITICAL, {IssueKind.HONORIFIC}),
    (Severity.HIGH, {IssueKind.LOREM_IPSUM, IssueKind.LITERAL_MISSPELLING}),
    (Severity.MEDIUM, {IssueKind.PLACEHOLDER_TEXT, IssueKind.EXCESS_LENGTH}),
    (Severity.LOW, {IssueKind.INCONSISTENT_CAPITALIZATION, IssueKind.TONE_INCONSISTENCY}),
]


class SeverityClassifier:
    """Maps a set of issues to exactly one Severity."""

    def __init__(self, policy: List[Tuple[Severity, Set[IssueKind]]] = None):
        self.policy = policy or SEVERITY_POLICY

    def classify(self, issues: Iterable[Issue]) -> Severity:
        kinds = {issue.kind for issue in issues}
        for severity, triggers in self.policy:
            if kinds & triggers:
                return severity
        return Severity.NONE
