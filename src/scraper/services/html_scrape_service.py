# src/scraper/services/html_scrape_service.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, Tag

from copydeck.errors import DocumentIOError, InputFileError
from scraper.model import ContentItem, ScrapeResult
from scraper.rules import ExtractionRules
from scraper.selector import SelectorGenerator, count_ids

logger = logging.getLogger(__name__)


def load_document(html_path: Path) -> BeautifulSoup:
    """Reads and parses an HTML file. Any read failure is fatal for the caller."""
    try:
        html = html_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise InputFileError(f"HTML file not found: {html_path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentIOError(f"Cannot read {html_path}: {e}") from e
    return BeautifulSoup(html, "html.parser")


class HtmlScrapeService:
    """
    Extracts user-facing copy from HTML documents.

    A single depth-first pass in document order emits one ContentItem for each
    text-bearing element, identified by a structural CSS selector.
    Note: This is a stateless service; the document is never modified.
    """

    def __init__(self, rules: Optional[ExtractionRules] = None):
        self.rules = rules or ExtractionRules()
        self.selectors = SelectorGenerator(self.rules)

    def iter_items(self, document: BeautifulSoup, source_name: str) -> Iterator[ContentItem]:
        """
        Lazily yields the content items of a parsed document.
        Every call starts a fresh pass, so an unmodified document always yields
        the same sequence.
        """
        id_counts = count_ids(document)
        counter = 0

        # Explicit stack, children pushed in reverse so they pop in document order
        stack: List[Tag] = [document]
        while stack:
            node = stack.pop()
            if node is not document and self.rules.is_text_bearing(node):
                text = self.rules.extract_text(node)
                if text:
                    yield ContentItem(
                        id=f"{source_name}_{counter}",
                        identity=self.selectors.generate(node, id_counts),
                        tag=node.name,
                        original_text=text,
                        source=source_name,
                        attributes={
                            "class": " ".join(node.get("class") or []),
                            "id": node.get("id") or "",
                            "role": node.get("role") or "",
                        },
                    )
                    counter += 1
            children = [c for c in node.children if isinstance(c, Tag)]
            stack.extend(reversed(children))

    def scrape_file(self, html_path: Path) -> ScrapeResult:
        """Parses one HTML file and materialises its items."""
        logger.info("Scraping HTML file: %s", html_path)
        document = load_document(html_path)
        items = list(self.iter_items(document, html_path.name))
        logger.info("Found %d text elements in %s", len(items), html_path.name)
        return ScrapeResult(
            source_name=html_path.name,
            source_path=str(html_path),
            items=items,
        )

    def scrape_directory(self, dir_path: Path) -> ScrapeResult:
        """Scrapes every *.html file of a directory (not recursive), sorted by name."""
        if not dir_path.is_dir():
            raise InputFileError(f"Not a directory: {dir_path}")

        html_files = sorted(p for p in dir_path.iterdir() if p.suffix.lower() == ".html" and p.is_file())
        logger.info("Scraping %d HTML files in %s", len(html_files), dir_path)

        items: List[ContentItem] = []
        for html_file in html_files:
            items.extend(self.scrape_file(html_file).items)

        return ScrapeResult(
            source_name=dir_path.name or str(dir_path),
            source_path=str(dir_path),
            files_scraped=len(html_files),
            items=items,
        )

    def scrape(self, path: Path) -> ScrapeResult:
        """Dispatches to file or directory scraping."""
        if not path.exists():
            raise InputFileError(f"Path does not exist: {path}")
        if path.is_dir():
            return self.scrape_directory(path)
        return self.scrape_file(path)
