# src/scraper/services/figma_scrape_service.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

import requests

from copydeck.errors import FigmaFetchError
from scraper.model import ContentItem, ScrapeResult

logger = logging.getLogger(__name__)

FIGMA_API_URL = "https://api.figma.com/v1"


class FigmaFetchService:
    """
    Thin client for the Figma REST API. Only the file endpoint is used.
    Every failure (network, HTTP status, malformed JSON) surfaces as FigmaFetchError.
    """

    def __init__(self, access_token: Optional[str], base_url: str = FIGMA_API_URL, timeout: float = 30.0):
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def fetch_document(self, file_key: str) -> Dict[str, Any]:
        """Returns the raw file payload ({name, lastModified, document, ...})."""
        if not self.access_token:
            raise FigmaFetchError("FIGMA_ACCESS_TOKEN is not configured.")
        if not file_key:
            raise FigmaFetchError("No Figma file key given.")

        url = f"{self.base_url}/files/{file_key}"
        logger.info("Fetching Figma file %s", file_key)
        try:
            resp = requests.get(url, headers={"X-Figma-Token": self.access_token}, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as e:
            raise FigmaFetchError(f"Figma API Error: {e}") from e
        except ValueError as e:
            raise FigmaFetchError(f"Figma API returned invalid JSON: {e}") from e

        if not isinstance(payload, dict) or "document" not in payload:
            raise FigmaFetchError("Figma API response has no 'document' node.")
        return payload


class FigmaScrapeService:
    """
    Extracts every node exposing literal characters from a Figma node tree.
    Figma ids are stable natively, so the node id is the item identity.
    """

    PATH_SEPARATOR = " > "

    @staticmethod
    def _style_of(node: Dict[str, Any]) -> str:
        """Text style (font family, size, weight, ...) as compact JSON; informational only."""
        style = node.get("style")
        if not isinstance(style, dict) or not style:
            return ""
        return json.dumps(style, sort_keys=True, separators=(",", ":"))

    def iter_items(self, document: Dict[str, Any], source_name: str) -> Iterator[ContentItem]:
        """Lazy depth-first pass in child order; restartable by calling again."""
        counter = 0
        # (node, ancestor names)
        stack: List[Tuple[Dict[str, Any], Tuple[str, ...]]] = [(document, ())]
        while stack:
            node, path = stack.pop()
            characters = node.get("characters")
            if isinstance(characters, str) and characters.strip():
                yield ContentItem(
                    id=f"{source_name}_{counter}",
                    identity=str(node.get("id", "")),
                    tag=str(node.get("type", "TEXT")),
                    original_text=characters.strip(),
                    source=source_name,
                    attributes={
                        "name": str(node.get("name", "")),
                        "path": self.PATH_SEPARATOR.join(path),
                        "style": self._style_of(node),
                    },
                )
                counter += 1

            children = node.get("children") or []
            child_path = path + (str(node.get("name", "")),)
            for child in reversed(children):
                if isinstance(child, dict):
                    stack.append((child, child_path))

    def scrape_payload(self, payload: Dict[str, Any]) -> ScrapeResult:
        """Builds a ScrapeResult from a fetched file payload."""
        name = payload.get("name") or "figma"
        items = list(self.iter_items(payload["document"], name))
        logger.info("Found %d text nodes in Figma file '%s'", len(items), name)
        return ScrapeResult(
            source_name=name,
            last_modified=payload.get("lastModified"),
            items=items,
        )

    def scrape_file(self, fetcher: FigmaFetchService, file_key: str) -> ScrapeResult:
        return self.scrape_payload(fetcher.fetch_document(file_key))
