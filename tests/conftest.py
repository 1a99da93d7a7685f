"""
Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the HN Digest test suite.
"""

from datetime import datetime
from unittest.mock import AsyncMock, Mock

import pytest

from hn_digest.components.provider_registry import DEFAULT_PROVIDER_SETTINGS
from hn_digest.models.config import (
    Configuration,
    ProviderConfig,
    SmsConfig,
)
from hn_digest.models.delivery import DeliveryResult
from hn_digest.models.listing import ListingRecord

NO_UPDATES = "no ai or dev updates right now!"

RELEVANT_MESSAGE = (
    "hey, check this out... new llm released (120 points), relevant because "
    "it's a major AI model launch. https://news.ycombinator.com/item?id=1"
)

FRONT_PAGE_HTML = """
<html><body><table id="hnmain"><tr><td><table>
  <tr class="athing submission" id="1">
    <td class="title"><span class="titleline">
      <a href="https://example.com/llm">New LLM released</a>
      <span class="sitebit comhead">(<a href="from?site=example.com">example.com</a>)</span>
    </span></td>
  </tr>
  <tr><td class="subtext"><span class="subline">
    <span class="score" id="score_1">120 points</span> by <a class="hnuser">alice</a>
  </span></td></tr>
  <tr class="spacer"></tr>
  <tr class="athing submission" id="2">
    <td class="title"><span class="titleline">
      <a href="item?id=2">Ask HN: Favorite debugger?</a>
    </span></td>
  </tr>
  <tr><td class="subtext"><span class="subline">
    <span class="score" id="score_2">45 points</span>
  </span></td></tr>
  <tr class="spacer"></tr>
  <tr class="athing submission" id="3">
    <td class="title"><span class="titleline">
      <a href="https://jobs.example.com">Acme (YC W24) is hiring</a>
    </span></td>
  </tr>
  <tr><td class="subtext">2 hours ago</td></tr>
</table></td></tr></table></body></html>
"""


class FakeRenderer:
    """In-memory renderer recording navigation and teardown."""

    def __init__(self, html: str = "", goto_error: Exception = None):
        self.html = html
        self.goto_error = goto_error
        self.visited = []
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def goto(self, url: str, timeout_ms: int) -> None:
        self.visited.append((url, timeout_ms))
        if self.goto_error is not None:
            raise self.goto_error

    async def content(self) -> str:
        return self.html

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def front_page_html():
    return FRONT_PAGE_HTML


@pytest.fixture
def sample_records():
    """Create sample ListingRecords for testing."""
    return [
        ListingRecord(
            title="New LLM released", link="/item?id=1", score="120 points"
        ),
        ListingRecord(
            title="Show HN: A tiny Rust web server",
            link="https://example.com/rust",
            score="88 points",
        ),
    ]


@pytest.fixture
def sample_providers():
    """Registry contents mirroring the built-in defaults."""
    return {
        name: ProviderConfig(
            api_key=settings.get("api_key", f"test-{name.value}-key"),
            base_url=settings["base_url"],
            model=settings["model"],
        )
        for name, settings in DEFAULT_PROVIDER_SETTINGS.items()
    }


@pytest.fixture
def sample_sms_config():
    return SmsConfig(
        account_sid="ACtest123",
        auth_token="test_auth_token",
        from_number="+15550001111",
    )


@pytest.fixture
def sample_configuration(sample_providers, sample_sms_config, tmp_path):
    """Create a sample Configuration for testing."""
    return Configuration(
        providers=sample_providers,
        active_provider="groq",
        sms=sample_sms_config,
        recipient_number="+15552223333",
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
def mock_extractor(sample_records):
    extractor = Mock()
    extractor.fetch_listing = AsyncMock(return_value=list(sample_records))
    return extractor


@pytest.fixture
def mock_classifier():
    classifier = Mock()
    classifier.classify = AsyncMock(return_value=RELEVANT_MESSAGE)
    return classifier


@pytest.fixture
def mock_dispatcher():
    """Create a mock SMS dispatcher for testing."""
    dispatcher = Mock()
    dispatcher.deliver = AsyncMock(
        return_value=DeliveryResult(
            success=True, delivery_time=datetime.now(), message_id="SM123"
        )
    )
    dispatcher.test_connection.return_value = True
    return dispatcher


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")


def pytest_collection_modifyitems(config, items):
    """Add the unit marker to every test not marked otherwise."""
    for item in items:
        if not any(
            marker.name in ["integration", "slow"] for marker in item.iter_markers()
        ):
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def relevant_message():
    return RELEVANT_MESSAGE


@pytest.fixture
def no_updates_message():
    return NO_UPDATES


@pytest.fixture
def make_renderer():
    """Factory producing FakeRenderer instances; keeps every one created."""
    created = []

    def factory(html: str = "", goto_error: Exception = None) -> FakeRenderer:
        renderer = FakeRenderer(html, goto_error)
        created.append(renderer)
        return renderer

    factory.created = created
    return factory
