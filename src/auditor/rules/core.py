# src/auditor/rules/core.py
import re
from functools import lru_cache
from typing import Any, Callable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from auditor.model import Issue, IssueKind
from scraper.model import ContentItem

# A check receives the item and the active rule tables and returns its findings.
RuleCheck = Callable[[ContentItem, "RuleSet"], List[Issue]]


def audit_spec(kinds: List[IssueKind]):
    """
    Decorator to declare which issue kinds a rule function can return.
    Lets the detector list every kind it may report without running the rules.
    """
    def decorator(func):
        func.defined_kinds = list(kinds)
        return func
    return decorator


@lru_cache(maxsize=64)
def _word_pattern(words: Tuple[str, ...]) -> re.Pattern:
    return re.compile(r"\b(?:" + "|".join(re.escape(w) for w in words) + r")\b", re.IGNORECASE)


@lru_cache(maxsize=16)
def _honorific_pattern(titles: Tuple[str, ...]) -> re.Pattern:
    # Case-sensitive on purpose: 'Dr.' is a title, 'dr.' is not matched.
    return re.compile(r"\b(?:" + "|".join(re.escape(t) for t in titles) + r")\.")


class RuleSet(BaseModel):
    """
    Immutable rule tables consumed by the issue detector and the correction
    validator. Pass a different instance to swap rule sets (e.g. in tests).
    """
    model_config = ConfigDict(frozen=True)

    honorifics: Tuple[str, ...] = ("Mr", "Mrs", "Ms", "Dr", "Prof")
    lorem_phrases: Tuple[str, ...] = ("lorem ipsum", "dolor sit amet")
    placeholder_tokens: Tuple[str, ...] = ("todo", "tbd", "fixme", "xxx")
    misspellings: Tuple[str, ...] = ("seperate", "recieve", "occured", "untill", "sucessful", "progrgess")
    number_words: Tuple[str, ...] = (
        "one", "two", "three", "four", "five", "six", "seven", "eight", "nine", "ten",
    )
    max_button_words: int = Field(default=3, ge=1)
    button_category: str = "button"
    mixed_tone: str = "mixed"

    @classmethod
    def from_config(cls, cfg: Optional[Mapping[str, Any]]) -> "RuleSet":
        """Builds a rule set from the 'auditor' section of settings.json; missing keys keep defaults."""
        if not cfg:
            return cls()
        values = {}
        for key in ("honorifics", "lorem_phrases", "placeholder_tokens", "misspellings", "number_words"):
            if cfg.get(key):
                values[key] = tuple(str(v) for v in cfg[key])
        for key in ("max_button_words",):
            if cfg.get(key):
                values[key] = int(cfg[key])
        for key in ("button_category", "mixed_tone"):
            if cfg.get(key):
                values[key] = str(cfg[key]).lower()
        return cls(**values)

    # --- Matchers ---

    def find_honorific(self, text: str) -> Optional[str]:
        match = _honorific_pattern(self.honorifics).search(text)
        return match.group(0) if match else None

    def find_lorem(self, text: str) -> Optional[str]:
        lowered = text.lower()
        return next((p for p in self.lorem_phrases if p.lower() in lowered), None)

    def find_placeholder_token(self, text: str) -> Optional[str]:
        match = _word_pattern(self.placeholder_tokens).search(text)
        return match.group(0) if match else None

    def find_misspelling(self, text: str) -> Optional[str]:
        lowered = text.lower()
        return next((w for w in self.misspellings if w.lower() in lowered), None)

    def has_number_word(self, text: str) -> bool:
        return bool(_word_pattern(self.number_words).search(text))
