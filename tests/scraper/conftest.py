# tests/scraper/conftest.py
import pytest
from bs4 import BeautifulSoup

SAMPLE_HTML = """
<html>
<head><title>Sample</title></head>
<body>
  <div class="hero main">
    <h1>Welcome to the app</h1>
    <p>Intro text</p>
    <p>Second paragraph</p>
    <p>   </p>
    <button id="cta">Get started</button>
  </div>
  <ul class="nav">
    <li><a href="/">Home</a></li>
    <li><a href="/about">About</a></li>
  </ul>
  <form>
    <input type="text" placeholder="Your email">
    <input type="text">
    <textarea placeholder="Message"></textarea>
  </form>
  <div role="button">Click me</div>
  <span id="dup">One</span>
  <span id="dup">Two</span>
</body>
</html>
"""


@pytest.fixture
def sample_html():
    return SAMPLE_HTML


@pytest.fixture
def sample_doc():
    """Een vers geparsed document voor elke test."""
    return BeautifulSoup(SAMPLE_HTML, "html.parser")
