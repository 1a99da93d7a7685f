"""
Pipeline components for the HN Digest system.

This module contains the stages of a run: listing extraction,
classification, the notification gate and SMS dispatching, plus the model
provider registry they share.
"""

from .classifier import Classifier
from .listing_extractor import ListingExtractor, PlaywrightRenderer, parse_listing
from .llm_client import LLMResponse, OpenAICompatibleClient
from .message_dispatcher import TwilioSmsDispatcher
from .notification_gate import NO_UPDATES_SENTINEL, should_notify
from .provider_registry import ProviderRegistry

__all__ = [
    "Classifier",
    "ListingExtractor",
    "PlaywrightRenderer",
    "parse_listing",
    "LLMResponse",
    "OpenAICompatibleClient",
    "TwilioSmsDispatcher",
    "NO_UPDATES_SENTINEL",
    "should_notify",
    "ProviderRegistry",
]
