# src/auditor/rules/copy_rules.py
import re
from typing import List

from auditor.model import Issue, IssueKind
from auditor.rules.core import RuleCheck, RuleSet, audit_spec
from scraper.model import ContentItem

_DIGIT = re.compile(r"\d")


# --- AUDIT RULES ---
# Each rule is independent; the detector runs all of them in the order of DEFAULT_CHECKS.


@audit_spec(kinds=[IssueKind.HONORIFIC])
def check_honorific(item: ContentItem, rules: RuleSet) -> List[Issue]:
    """Rule: titles such as 'Mr.' or 'Dr.' exclude users and must not appear in UI copy."""
    found = rules.find_honorific(item.original_text)
    if found:
        return [Issue(kind=IssueKind.HONORIFIC, message=f"Contains honorific ({found})")]
    return []


@audit_spec(kinds=[IssueKind.LOREM_IPSUM])
def check_lorem_ipsum(item: ContentItem, rules: RuleSet) -> List[Issue]:
    found = rules.find_lorem(item.original_text)
    if found:
        return [Issue(kind=IssueKind.LOREM_IPSUM, message=f"Lorem ipsum placeholder ('{found}')")]
    return []


@audit_spec(kinds=[IssueKind.PLACEHOLDER_TEXT])
def check_placeholder_token(item: ContentItem, rules: RuleSet) -> List[Issue]:
    """Rule: whole-word TODO / TBD / FIXME / XXX markers left in the copy."""
    found = rules.find_placeholder_token(item.original_text)
    if found:
        return [Issue(kind=IssueKind.PLACEHOLDER_TEXT, message=f"Placeholder text ({found})")]
    return []


@audit_spec(kinds=[IssueKind.EXCESS_LENGTH])
def check_button_length(item: ContentItem, rules: RuleSet) -> List[Issue]:
    """
    Rule: button labels stay short.
    Only evaluated once the classifier has labelled the item as a button.
    """
    if item.analysis is None or item.analysis.category != rules.button_category:
        return []
    word_count = len(item.original_text.split())
    if word_count > rules.max_button_words:
        return [Issue(
            kind=IssueKind.EXCESS_LENGTH,
            message=f"Button text too long ({word_count} words > {rules.max_button_words})",
        )]
    return []


@audit_spec(kinds=[IssueKind.INCONSISTENT_CAPITALIZATION])
def check_mixed_numbering(item: ContentItem, rules: RuleSet) -> List[Issue]:
    """
    Rule: 'Step 1' next to 'Step two'. A digit and a spelled-out number in the
    same string hint at an inconsistent enumeration style.
    """
    text = item.original_text
    if _DIGIT.search(text) and rules.has_number_word(text):
        return [Issue(
            kind=IssueKind.INCONSISTENT_CAPITALIZATION,
            message="Inconsistent capitalization (mixes numerals and number words)",
        )]
    return []


@audit_spec(kinds=[IssueKind.LITERAL_MISSPELLING])
def check_misspelling(item: ContentItem, rules: RuleSet) -> List[Issue]:
    found = rules.find_misspelling(item.original_text)
    if found:
        return [Issue(kind=IssueKind.LITERAL_MISSPELLING, message=f"Possible spelling error ({found})")]
    return []


@audit_spec(kinds=[IssueKind.TONE_INCONSISTENCY])
def check_tone(item: ContentItem, rules: RuleSet) -> List[Issue]:
    if item.analysis is not None and item.analysis.tone == rules.mixed_tone:
        return [Issue(kind=IssueKind.TONE_INCONSISTENCY, message="Inconsistent tone")]
    return []


# --- RULE BATTERY ---

DEFAULT_CHECKS: List[RuleCheck] = [
    check_honorific,
    check_lorem_ipsum,
    check_placeholder_token,
    check_button_length,
    check_mixed_numbering,
    check_misspelling,
    check_tone,
]
