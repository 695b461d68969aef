# src/auditor/qngine.py
import logging
from typing import Iterable, Iterator, List, Optional

from auditor.model import AuditedItem, Issue, IssueKind
from auditor.rules.copy_rules import DEFAULT_CHECKS
from auditor.rules.core import RuleCheck, RuleSet
from auditor.severity import SeverityClassifier
from scraper.model import ContentItem

logger = logging.getLogger(__name__)


class QNGINE:
    """
    Quality Engine (QNGINE) for auditing extracted copy.

    Runs the fixed, ordered battery of rule checks against every ContentItem.
    Checks never short-circuit: an item can carry several issues.
    """

    def __init__(
            self,
            rules: Optional[RuleSet] = None,
            checks: Optional[List[RuleCheck]] = None,
            severity: Optional[SeverityClassifier] = None,
    ):
        self.rules = rules or RuleSet()
        self.checks = list(checks) if checks is not None else list(DEFAULT_CHECKS)
        self.severity = severity or SeverityClassifier()

    @property
    def possible_kinds(self) -> List[IssueKind]:
        """All issue kinds the loaded checks can report (declared via @audit_spec)."""
        kinds = set()
        for check in self.checks:
            kinds.update(getattr(check, "defined_kinds", []))
        return sorted(kinds, key=lambda k: k.value)

    def detect(self, item: ContentItem) -> List[Issue]:
        """Pure function of the item: returns every issue the battery finds."""
        findings: List[Issue] = []
        for check in self.checks:
            findings.extend(check(item, self.rules))
        return findings

    def audit(self, item: ContentItem) -> AuditedItem:
        issues = self.detect(item)
        return AuditedItem(item=item, issues=issues, severity=self.severity.classify(issues))

    def run_audit(self, items: Iterable[ContentItem]) -> Iterator[AuditedItem]:
        """Audits items lazily, preserving extraction order."""
        for item in items:
            audited = self.audit(item)
            if audited.has_issues:
                logger.debug("%s: %s (%s)", item.id, audited.severity.value, audited.issue_summary)
            yield audited
