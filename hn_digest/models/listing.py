"""
Listing data models for the HN Digest pipeline.
"""

from dataclasses import asdict, dataclass
from typing import Dict


@dataclass(frozen=True)
class ListingRecord:
    """
    One story scraped from the listing page.

    Every field is raw page text and may be empty when the page omitted
    the corresponding element; ``link`` may be relative (``item?id=1``).
    """

    title: str = ""
    link: str = ""
    score: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)
