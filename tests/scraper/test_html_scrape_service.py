# tests/scraper/test_html_scrape_service.py
import pytest
from pydantic import ValidationError

from copydeck.errors import InputFileError
from scraper.model import Analysis, ContentItem, ScrapeStats
from scraper.rules import ExtractionRules
from scraper.services.html_scrape_service import HtmlScrapeService, load_document


@pytest.fixture
def service():
    return HtmlScrapeService()


def test_extraction_order_and_text(service, sample_doc):
    """De items volgen de documentvolgorde en bevatten getrimde tekst."""
    items = list(service.iter_items(sample_doc, "page.html"))
    texts = [i.original_text for i in items]

    assert texts == [
        "Welcome to the app", "Intro text", "Second paragraph", "Get started",
        "Home", "Home", "About", "About",
        "Your email", "Message", "Click me", "One", "Two",
    ]
    assert [i.id for i in items[:3]] == ["page.html_0", "page.html_1", "page.html_2"]


def test_extraction_is_deterministic(service, sample_doc):
    """Twee passes over een ongewijzigd document geven dezelfde reeks."""
    first = list(service.iter_items(sample_doc, "page.html"))
    second = list(service.iter_items(sample_doc, "page.html"))
    assert first == second


def test_no_empty_text_is_emitted(service, sample_doc):
    items = list(service.iter_items(sample_doc, "page.html"))
    assert all(i.original_text.strip() for i in items)


def test_placeholder_and_role_elements(service, sample_doc):
    """Inputs met placeholder en div[role=button] tellen mee; een input zonder placeholder niet."""
    items = list(service.iter_items(sample_doc, "page.html"))
    by_text = {i.original_text: i for i in items}

    assert by_text["Your email"].tag == "input"
    assert by_text["Message"].tag == "textarea"
    assert by_text["Click me"].attributes["role"] == "button"
    assert sum(1 for i in items if i.tag == "input") == 1


def test_attributes_are_informational(service, sample_doc):
    items = list(service.iter_items(sample_doc, "page.html"))
    cta = next(i for i in items if i.original_text == "Get started")
    assert cta.attributes["id"] == "cta"
    assert cta.identity == "#cta"


def test_custom_rules_limit_text_tags(sample_doc):
    """Een eigen regelset bepaalt welke tags tekst dragen."""
    service = HtmlScrapeService(ExtractionRules.from_config({"text_tags": ["h1"], "role_tags": {}}))
    items = list(service.iter_items(sample_doc, "page.html"))
    assert [i.tag for i in items] == ["h1", "input", "textarea"]


def test_scrape_file_and_stats(service, tmp_path, sample_html):
    html_file = tmp_path / "page.html"
    html_file.write_text(sample_html, encoding="utf-8")

    result = service.scrape(html_file)
    stats = result.stats

    assert result.source_name == "page.html"
    assert stats.total_items == 13
    assert stats.by_tag["li"] == 2
    assert sorted(stats.duplicates) == ["About", "Home"]
    assert stats.unique_strings == 11


def test_stats_list_each_duplicate_once():
    """Een tekst die drie keer voorkomt staat maar één keer in de duplicaten."""
    texts = ["Buy", "Home", "Buy", "Help", "Buy", "Home"]
    items = [ContentItem(id=f"p-{i}", identity=f"p:nth-of-type({i + 1})", tag="p", original_text=t)
             for i, t in enumerate(texts)]

    stats = ScrapeStats.from_items(items)

    assert stats.duplicates == ["Buy", "Home"]
    assert stats.unique_strings == 3
    assert stats.total_items == 6


def test_scrape_directory_prefixes_ids(service, tmp_path):
    """Bij een map blijven ids uniek doordat ze de bestandsnaam dragen."""
    (tmp_path / "b.html").write_text("<body><h1>Beta</h1></body>", encoding="utf-8")
    (tmp_path / "a.html").write_text("<body><h1>Alpha</h1></body>", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("<h1>Ignored</h1>", encoding="utf-8")

    result = service.scrape(tmp_path)

    assert result.files_scraped == 2
    assert [i.id for i in result.items] == ["a.html_0", "b.html_0"]
    assert [i.original_text for i in result.items] == ["Alpha", "Beta"]


def test_missing_input_is_fatal(service, tmp_path):
    with pytest.raises(InputFileError):
        service.scrape(tmp_path / "nope.html")
    with pytest.raises(InputFileError):
        load_document(tmp_path / "nope.html")


# --- Model ---

def test_content_item_rejects_blank_text():
    with pytest.raises(ValidationError):
        ContentItem(id="x_0", identity="p", tag="p", original_text="   ")


def test_with_analysis_never_removes_an_analysis():
    item = ContentItem(id="x_0", identity="p", tag="p", original_text="Hello")
    assert item.with_analysis(None) is item

    analyzed = item.with_analysis(Analysis(category=" Button ", tone="Friendly"))
    assert analyzed.analysis.category == "button"
    assert analyzed.analysis.tone == "friendly"
    assert analyzed.with_analysis(None).analysis is not None
    assert item.analysis is None
