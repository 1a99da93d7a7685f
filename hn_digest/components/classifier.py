"""
Story classification for the HN Digest pipeline.

This module turns the scraped listing into a prompt, submits it to the
active model provider and returns the model's message as trimmed text.
Provider failures propagate as ClassificationError so that the scheduler
can abort the run.
"""

from typing import Sequence

from ..interfaces import ICompletionClient
from ..models.listing import ListingRecord
from ..utils.error_handling import (
    ClassificationError,
    ErrorCategory,
    ErrorSeverity,
    with_error_handling,
)
from ..utils.logging import get_logger
from .prompt_builder import build_prompt


class Classifier:
    """Asks the model which stories are worth a text."""

    def __init__(self, client: ICompletionClient):
        self.client = client
        self.logger = get_logger("pipeline.classifier")

    @with_error_handling(
        component="pipeline.classifier",
        category=ErrorCategory.CLASSIFICATION,
        severity=ErrorSeverity.HIGH,
        wrap_with=ClassificationError,
    )
    async def classify(self, records: Sequence[ListingRecord]) -> str:
        """
        Classify and summarise the given records.

        Args:
            records: Listing records in page order; may be empty

        Returns:
            The model's message with surrounding whitespace removed, never
            None

        Raises:
            ClassificationError: If the provider call fails
        """
        prompt = build_prompt(records)

        self.logger.info(
            "Sending prompt to model provider",
            extra={
                "model": self.client.model,
                "records_count": len(records),
                "prompt_length": len(prompt),
            },
        )

        response = await self.client.complete(prompt)
        message = (response.content or "").strip()

        self.logger.info(
            "Received classification",
            extra={
                "message": message,
                "response_time": round(response.response_time, 2),
                "tokens_used": response.tokens_used,
            },
        )
        return message
