# src/scraper/rules.py
from typing import Any, Dict, FrozenSet, Mapping, Optional

from bs4 import Tag
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TEXT_TAGS = frozenset({
    "h1", "h2", "h3", "h4", "h5", "h6",
    "p", "span", "button", "a", "label",
    "li", "td", "th",
})
DEFAULT_PLACEHOLDER_TAGS = frozenset({"input", "textarea"})


class ExtractionRules(BaseModel):
    """
    Immutable description of which HTML nodes count as text-bearing, and how
    far the selector generator may climb when building a structural path.
    """
    model_config = ConfigDict(frozen=True)

    text_tags: FrozenSet[str] = DEFAULT_TEXT_TAGS
    # Only matched when the element carries a 'placeholder' attribute
    placeholder_tags: FrozenSet[str] = DEFAULT_PLACEHOLDER_TAGS
    # tag -> roles, e.g. div[role="button"]
    role_tags: Dict[str, FrozenSet[str]] = Field(
        default_factory=lambda: {"div": frozenset({"button"})}
    )
    root_tag: str = "body"
    max_depth: int = Field(default=4, ge=1)

    @classmethod
    def from_config(cls, cfg: Optional[Mapping[str, Any]]) -> "ExtractionRules":
        """Builds the rules from the 'scraper' section of settings.json; missing keys keep defaults."""
        if not cfg:
            return cls()
        values: Dict[str, Any] = {}
        if cfg.get("text_tags"):
            values["text_tags"] = frozenset(t.lower() for t in cfg["text_tags"])
        if cfg.get("placeholder_tags"):
            values["placeholder_tags"] = frozenset(t.lower() for t in cfg["placeholder_tags"])
        if cfg.get("role_tags") is not None:
            values["role_tags"] = {
                tag.lower(): frozenset(r.lower() for r in roles)
                for tag, roles in cfg["role_tags"].items()
            }
        if cfg.get("root_tag"):
            values["root_tag"] = cfg["root_tag"].lower()
        if cfg.get("max_depth"):
            values["max_depth"] = int(cfg["max_depth"])
        return cls(**values)

    def uses_placeholder(self, tag: Tag) -> bool:
        return tag.name in self.placeholder_tags and tag.has_attr("placeholder")

    def is_text_bearing(self, tag: Tag) -> bool:
        """The text-bearing predicate applied to every element of the document."""
        name = tag.name
        if name in self.text_tags:
            return True
        if self.uses_placeholder(tag):
            return True
        roles = self.role_tags.get(name)
        if roles:
            role = (tag.get("role") or "").strip().lower()
            return role in roles
        return False

    def extract_text(self, tag: Tag) -> str:
        """Trimmed text of a node; the placeholder attribute for placeholder-bearing inputs."""
        if self.uses_placeholder(tag):
            return (tag.get("placeholder") or "").strip()
        return tag.get_text().strip()
