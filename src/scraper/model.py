# src/scraper/model.py
from collections import Counter
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Analysis(BaseModel):
    """
    Result of the external content classifier for a single item.
    Every field is optional: the classifier may return partial JSON.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    category: Optional[str] = None
    tone: Optional[str] = None
    purpose: Optional[str] = None
    patterns: List[str] = Field(default_factory=list)

    @field_validator("category", "tone", "purpose", mode="before")
    @classmethod
    def normalize_label(cls, v):
        """Labels are compared literally by the rule battery, so trim and lowercase them."""
        if v is None:
            return None
        v = str(v).strip()
        return v.lower() if v else None

    @field_validator("patterns", mode="before")
    @classmethod
    def coerce_patterns(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return [str(p) for p in v]


class ContentItem(BaseModel):
    """
    One extracted text-bearing unit of a document.

    `identity` re-locates the originating node in the same document instance:
    a CSS selector for HTML, the native node id for Figma documents.
    The item is immutable; `with_analysis` returns an enriched copy.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    identity: str
    tag: str
    original_text: str
    source: str = ""
    attributes: Dict[str, str] = Field(default_factory=dict)
    analysis: Optional[Analysis] = None

    @field_validator("original_text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("original_text must contain non-whitespace text")
        return v

    @property
    def is_analyzed(self) -> bool:
        return self.analysis is not None

    def with_analysis(self, analysis: Optional[Analysis]) -> "ContentItem":
        """Attaches a classifier result. A missing result never removes an existing one."""
        if analysis is None:
            return self
        return self.model_copy(update={"analysis": analysis})


class ScrapeStats(BaseModel):
    """Aggregated numbers over one scrape run."""
    total_items: int = 0
    by_tag: Dict[str, int] = Field(default_factory=dict)
    unique_strings: int = 0
    duplicates: List[str] = Field(default_factory=list)

    @classmethod
    def from_items(cls, items: Iterable[ContentItem]) -> "ScrapeStats":
        by_tag: Counter = Counter()
        seen = set()
        duplicates: List[str] = []
        total = 0
        for item in items:
            total += 1
            by_tag[item.tag] += 1
            text = item.original_text.strip()
            if text in seen and text not in duplicates:
                duplicates.append(text)
            seen.add(text)
        return cls(
            total_items=total,
            by_tag=dict(by_tag),
            unique_strings=len(seen),
            duplicates=duplicates,
        )


class ScrapeResult(BaseModel):
    """
    Output of a scrape pass over one file, one directory or one Figma document.
    `items` is materialised in extraction order.
    """
    source_name: str
    source_path: Optional[str] = None
    last_modified: Optional[str] = None
    files_scraped: int = 1
    items: List[ContentItem] = Field(default_factory=list)

    @property
    def stats(self) -> ScrapeStats:
        return ScrapeStats.from_items(self.items)
