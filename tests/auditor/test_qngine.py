# tests/auditor/test_qngine.py
import pytest

from auditor.model import IssueKind, Severity
from auditor.qngine import QNGINE
from auditor.rules.core import RuleSet


@pytest.fixture
def engine():
    return QNGINE()


def kinds(audited):
    return [issue.kind for issue in audited.issues]


def test_honorific_is_critical(engine, make_item):
    audited = engine.audit(make_item("Welcome back, Mr. Smith"))
    assert kinds(audited) == [IssueKind.HONORIFIC]
    assert audited.severity == Severity.CRITICAL


def test_honorific_is_case_sensitive(engine, make_item):
    """'mr.' in kleine letters telt niet als aanspreektitel."""
    assert engine.audit(make_item("call mr. smith")).severity == Severity.NONE


def test_lorem_ipsum_is_high_regardless_of_low_issues(engine, make_item):
    """Lorem ipsum wint van een Low issue in hetzelfde item."""
    audited = engine.audit(make_item("Step 1 of two: Lorem Ipsum", tone="mixed"))
    assert IssueKind.LOREM_IPSUM in kinds(audited)
    assert IssueKind.INCONSISTENT_CAPITALIZATION in kinds(audited)
    assert IssueKind.TONE_INCONSISTENCY in kinds(audited)
    assert audited.severity == Severity.HIGH


def test_checks_do_not_short_circuit(engine, make_item):
    """Alle afgaande regels worden verzameld, in vaste volgorde."""
    audited = engine.audit(make_item("Dr. Who says lorem ipsum TODO"))
    assert kinds(audited) == [IssueKind.HONORIFIC, IssueKind.LOREM_IPSUM, IssueKind.PLACEHOLDER_TEXT]
    assert audited.severity == Severity.CRITICAL
    assert audited.issue_summary.count("; ") == 2


def test_placeholder_token_is_whole_word(engine, make_item):
    assert engine.audit(make_item("TBD")).severity == Severity.MEDIUM
    assert engine.audit(make_item("Open Todoist")).severity == Severity.NONE


def test_button_length_requires_button_category(engine, make_item):
    """Te lange knoptekst is alleen een issue als de classifier 'button' zei."""
    text = "Click here to continue now"
    as_button = engine.audit(make_item(text, category="button"))
    unclassified = engine.audit(make_item(text))
    as_heading = engine.audit(make_item(text, category="heading"))

    assert kinds(as_button) == [IssueKind.EXCESS_LENGTH]
    assert as_button.severity == Severity.MEDIUM
    assert unclassified.issues == []
    assert as_heading.issues == []


def test_short_button_is_fine(engine, make_item):
    assert engine.audit(make_item("Save changes now", category="button")).issues == []


def test_mixed_numbering_is_low(engine, make_item):
    audited = engine.audit(make_item("Step 2 of three"))
    assert kinds(audited) == [IssueKind.INCONSISTENT_CAPITALIZATION]
    assert audited.severity == Severity.LOW

    # 'someone' bevat 'one' maar is geen los getalwoord
    assert engine.audit(make_item("Invite someone in 2 steps")).issues == []


def test_misspelling_is_high(engine, make_item):
    audited = engine.audit(make_item("You will Recieve an email"))
    assert kinds(audited) == [IssueKind.LITERAL_MISSPELLING]
    assert audited.severity == Severity.HIGH


def test_mixed_tone_is_low(engine, make_item):
    audited = engine.audit(make_item("Hey there, kindly proceed", tone="mixed"))
    assert kinds(audited) == [IssueKind.TONE_INCONSISTENCY]
    assert audited.severity == Severity.LOW


def test_clean_text_has_no_severity(engine, make_item):
    audited = engine.audit(make_item("Your changes have been saved."))
    assert not audited.has_issues
    assert audited.severity == Severity.NONE


def test_run_audit_preserves_order(engine, make_item):
    items = [make_item("First"), make_item("Mr. Second"), make_item("Third")]
    audited = list(engine.run_audit(items))
    assert [a.item.id for a in audited] == [i.id for i in items]


def test_possible_kinds_cover_the_battery(engine):
    assert set(engine.possible_kinds) == set(IssueKind)


def test_custom_rule_set(make_item):
    """Een eigen RuleSet vervangt de standaardtabellen."""
    rules = RuleSet.from_config({"misspellings": ["teh"], "max_button_words": 1})
    engine = QNGINE(rules=rules)

    assert kinds(engine.audit(make_item("teh end"))) == [IssueKind.LITERAL_MISSPELLING]
    assert engine.audit(make_item("You will recieve mail")).issues == []
    assert kinds(engine.audit(make_item("Save it", category="button"))) == [IssueKind.EXCESS_LENGTH]


def test_severity_ordering():
    ordered = sorted([Severity.NONE, Severity.LOW, Severity.CRITICAL, Severity.MEDIUM, Severity.HIGH])
    assert ordered == [Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW, Severity.NONE]
    assert Severity.CRITICAL.color == "FFFF6B6B"
    assert Severity.NONE.color is None
