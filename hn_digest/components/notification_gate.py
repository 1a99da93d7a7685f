"""
Notification gate: decides whether a classification is worth a text.
"""

NO_UPDATES_SENTINEL = "no ai or dev updates right now!"

# Shorter completions are treated as degenerate model output.
MIN_MESSAGE_LENGTH = 50


def should_notify(text: str) -> bool:
    """True iff ``text`` is longer than the floor and is not the sentinel."""
    return len(text) > MIN_MESSAGE_LENGTH and text != NO_UPDATES_SENTINEL
