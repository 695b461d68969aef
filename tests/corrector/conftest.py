# tests/corrector/conftest.py
import pytest
from bs4 import BeautifulSoup

from auditor.qngine import QNGINE
from scraper.services.html_scrape_service import HtmlScrapeService

PAGE_HTML = """<html>
<body>
  <h1>Welcome, Mr. Smith</h1>
  <p>Lorem ipsum dolor</p>
  <p>Your order has shiped</p>
  <form><input type="email" placeholder="Emial address"></form>
  <button class="cta">Click here to continue now</button>
</body>
</html>
"""


@pytest.fixture
def page_html():
    return PAGE_HTML


@pytest.fixture
def page_file(tmp_path):
    path = tmp_path / "page.html"
    path.write_text(PAGE_HTML, encoding="utf-8")
    return path


@pytest.fixture
def page_doc():
    return BeautifulSoup(PAGE_HTML, "html.parser")


@pytest.fixture
def page_items(page_doc):
    """De items van de testpagina, op tekst geïndexeerd."""
    items = HtmlScrapeService().iter_items(page_doc, "page.html")
    return {item.original_text: item for item in items}


@pytest.fixture
def page_audited(page_doc):
    items = HtmlScrapeService().iter_items(page_doc, "page.html")
    return list(QNGINE().run_audit(items))
