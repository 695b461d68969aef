# src/scraper/selector.py
import logging
from collections import Counter
from typing import List, Mapping, Optional

import soupsieve
from bs4 import BeautifulSoup, Tag

from scraper.rules import ExtractionRules

logger = logging.getLogger(__name__)


def count_ids(document: Tag) -> Counter:
    """Counts every id attribute value in the document (used for the uniqueness check)."""
    counts: Counter = Counter()
    for el in document.find_all(id=True):
        value = (el.get("id") or "").strip()
        if value:
            counts[value] += 1
    return counts


class SelectorGenerator:
    """
    Computes a CSS selector that resolves back to exactly one node of the
    document it was generated from.

    A unique id wins outright ('#main-cta'). Otherwise the path is built
    upwards from the node: tag name, class tokens and, when same-tag siblings
    exist, ':nth-of-type(n)'. Climbing stops after the root tag, or after
    `max_depth` levels once the path matches nothing but the node itself.
    """

    def __init__(self, rules: Optional[ExtractionRules] = None):
        self.rules = rules or ExtractionRules()

    def generate(self, node: Tag, id_counts: Optional[Mapping[str, int]] = None) -> str:
        """
        Args:
            node: The element to identify.
            id_counts: Pre-computed id occurrences of the whole document. Computed
                       on demand when omitted (costly inside a loop).
        """
        node_id = (node.get("id") or "").strip()
        if node_id:
            if id_counts is None:
                id_counts = count_ids(self._document_root(node))
            if id_counts.get(node_id, 0) == 1:
                return f"#{soupsieve.escape(node_id)}"
            logger.debug("Id '%s' is not unique, falling back to a structural path", node_id)

        parts: List[str] = []
        current = node
        root: Optional[Tag] = None
        unique = False
        while isinstance(current, Tag) and not isinstance(current, BeautifulSoup):
            parts.append(self._describe_level(current))
            if current.name == self.rules.root_tag:
                break
            if len(parts) >= self.rules.max_depth:
                # Past the depth limit, keep climbing only while the path is ambiguous
                if root is None:
                    root = self._document_root(node)
                unique = self._matches_only(root, parts, node)
                if unique:
                    break
            current = current.parent

        selector = " > ".join(reversed(parts))
        if root is not None and not unique and not self._matches_only(root, parts, node):
            logger.warning("Selector '%s' does not identify a single element", selector)
        return selector

    def _matches_only(self, root: Tag, parts: List[str], node: Tag) -> bool:
        matches = self.resolve(root, " > ".join(reversed(parts)))
        return len(matches) == 1 and matches[0] is node

    @staticmethod
    def _describe_level(tag: Tag) -> str:
        selector = tag.name

        classes = [c for c in (tag.get("class") or []) if c.strip()]
        for cls in classes:
            selector += f".{soupsieve.escape(cls)}"

        parent = tag.parent
        if parent is not None:
            siblings = parent.find_all(tag.name, recursive=False)
            if len(siblings) > 1:
                # Identity comparison: bs4 Tag equality is structural.
                index = next(i for i, sib in enumerate(siblings) if sib is tag) + 1
                selector += f":nth-of-type({index})"

        return selector

    @staticmethod
    def _document_root(node: Tag) -> Tag:
        root = node
        while root.parent is not None:
            root = root.parent
        return root

    @staticmethod
    def resolve(document: Tag, selector: str) -> List[Tag]:
        """
        Re-locates the nodes matching a stored selector in the current document.
        An unparsable selector resolves to nothing.
        """
        if not selector or not selector.strip():
            return []
        try:
            return document.select(selector)
        except soupsieve.SelectorSyntaxError as e:
            logger.warning("Invalid selector '%s': %s", selector, e)
            return []
