# tests/auditor/conftest.py
import pytest

from scraper.model import Analysis, ContentItem


@pytest.fixture
def make_item():
    """Factory voor ContentItems, optioneel met classificatie."""
    counter = {"n": 0}

    def _make(text, category=None, tone=None, identity=None):
        n = counter["n"]
        counter["n"] += 1
        analysis = Analysis(category=category, tone=tone) if (category or tone) else None
        return ContentItem(
            id=f"test.html_{n}",
            identity=identity or f"body > p:nth-of-type({n + 1})",
            tag="p",
            original_text=text,
            source="test.html",
            analysis=analysis,
        )

    return _make
