"""
Prompt construction for story classification.
"""

import json
from typing import Sequence

from ..models.listing import ListingRecord
from .notification_gate import NO_UPDATES_SENTINEL

GREETING = "hey, check this out..."
MAX_ITEMS = 3

PROMPT_TEMPLATE = """
Analyze the following Hacker News data:

{listing}

Scan for stories specifically related to AI, machine learning, or software engineering. Include up to {max_items} relevant items.
If found, create a brief, friendly message starting with "{greeting}" and include a link to news.ycombinator.com.
For each item:
1. Include the title (keep it lowercase)
2. Provide a clickable link to the story
3. Mention the score
4. Add a brief (1-2 sentence) summary of why it's relevant to AI or software engineering

Keep the tone casual, as if texting a friend.

If there are no relevant AI or software engineering items, respond with exactly "{sentinel}"
"""


def serialize_records(records: Sequence[ListingRecord]) -> str:
    """Render records as indented JSON, preserving order and duplicates."""
    return json.dumps(
        [record.to_dict() for record in records], indent=2, ensure_ascii=False
    )


def build_prompt(records: Sequence[ListingRecord]) -> str:
    """
    Build the classification prompt for one run.

    The same records always produce the same prompt.
    """
    return PROMPT_TEMPLATE.format(
        listing=serialize_records(records),
        max_items=MAX_ITEMS,
        greeting=GREETING,
        sentinel=NO_UPDATES_SENTINEL,
    ).strip()
