"""
Data models for the HN Digest pipeline.

This module contains the data classes used throughout the application
for configuration, scraped listing records, delivery results and run
outcomes.
"""

from .config import (
    Configuration,
    ProviderConfig,
    ProviderName,
    SmsConfig,
)
from .delivery import DeliveryResult
from .listing import ListingRecord
from .run import RunOutcome

__all__ = [
    "Configuration",
    "ProviderConfig",
    "ProviderName",
    "SmsConfig",
    "DeliveryResult",
    "ListingRecord",
    "RunOutcome",
]
