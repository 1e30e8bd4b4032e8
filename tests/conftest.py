# ABOUTME: Shared fixtures for the fuel price test suite
# ABOUTME: Fake Playwright objects so rendering can be exercised without a real browser

from unittest.mock import AsyncMock, MagicMock

import pytest

from fuel_price_ingest.config import reload_config

PRICE_PAGE = """
<html>
  <body>
    <div id="accordion">
      <h3 id="ui-id-5" data-cost="3.29">Bloomington</h3>
      <h3 id="ui-id-7" data-cost="3.47">Indianapolis</h3>
    </div>
  </body>
</html>
"""


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep developer .env files and FUEL_PRICE_* variables out of the tests."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "FUEL_PRICE_LLM_API_KEY",
        "FUEL_PRICE_STRATEGY",
        "FUEL_PRICE_FALLBACK_ENABLED",
        "FUEL_PRICE_LOG_MODE",
    ):
        monkeypatch.delenv(name, raising=False)
    reload_config()
    yield
    monkeypatch.undo()
    reload_config()


class FakePlaywright:
    """Wires a fake page into a fake browser behind an async_playwright-style factory."""

    def __init__(self, html: str = PRICE_PAGE, status: int = 200):
        self.handlers: dict[str, list] = {}

        self.response = MagicMock()
        self.response.status = status

        self.page = MagicMock()
        self.page.on.side_effect = lambda event, handler: self.handlers.setdefault(event, []).append(handler)
        self.page.goto = AsyncMock(return_value=self.response)
        self.page.content = AsyncMock(return_value=html)

        self.browser = MagicMock()
        self.browser.new_page = AsyncMock(return_value=self.page)
        self.browser.close = AsyncMock()

        self.playwright = MagicMock()
        self.playwright.chromium.launch = AsyncMock(return_value=self.browser)

        self.factory = MagicMock()
        self.factory.return_value.__aenter__.return_value = self.playwright
        self.factory.return_value.__aexit__.return_value = False

    def emit(self, event: str, request) -> None:
        for handler in self.handlers.get(event, []):
            handler(request)


@pytest.fixture
def fake_playwright():
    return FakePlaywright()


@pytest.fixture
def make_fake_playwright():
    return FakePlaywright
