"""
Protocol interfaces for the HN Digest pipeline.

These protocols mark the seams between pipeline stages and the external
services behind them, so that the scheduler and its tests can swap in any
implementation.
"""

from typing import TYPE_CHECKING, List, Protocol, Sequence

from .models.delivery import DeliveryResult
from .models.listing import ListingRecord

if TYPE_CHECKING:
    from .components.llm_client import LLMResponse


class IPageRenderer(Protocol):
    """Protocol for a headless browser session."""

    async def goto(self, url: str, timeout_ms: int) -> None:
        """Navigate and wait until the network is idle."""
        ...

    async def content(self) -> str:
        """Return the serialized DOM of the current page."""
        ...

    async def close(self) -> None:
        """Release the browser."""
        ...


class IListingExtractor(Protocol):
    """Protocol for fetching the current listing."""

    async def fetch_listing(self) -> List[ListingRecord]:
        """Return listing records in page order; empty on failure."""
        ...


class ICompletionClient(Protocol):
    """Protocol for a chat-completion provider."""

    model: str

    async def complete(self, prompt: str) -> "LLMResponse":
        """Complete a single-message prompt."""
        ...


class IClassifier(Protocol):
    """Protocol for classifying listing records."""

    async def classify(self, records: Sequence[ListingRecord]) -> str:
        """Return the model's trimmed message for these records."""
        ...


class IMessageDispatcher(Protocol):
    """Protocol for delivering the digest."""

    async def deliver(self, to_number: str, body: str) -> DeliveryResult:
        """Send ``body`` to ``to_number``; never raises."""
        ...

    def test_connection(self) -> bool:
        """Check that the messaging account is reachable."""
        ...
