"""
Run outcome model, kept for logging only.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from .delivery import DeliveryResult


@dataclass
class RunOutcome:
    """What happened during one pipeline run."""

    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None
    records_count: int = 0
    classification: Optional[str] = None
    should_notify: bool = False
    delivery: Optional[DeliveryResult] = None
    error: Optional[str] = None
    skipped: bool = False

    @property
    def completed(self) -> bool:
        """True when the run went through every stage it needed to."""
        return not self.skipped and self.error is None

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()

    def summary(self) -> Dict[str, Any]:
        return {
            "records_count": self.records_count,
            "classification_length": (
                len(self.classification) if self.classification is not None else None
            ),
            "should_notify": self.should_notify,
            "delivered": self.delivery.success if self.delivery else None,
            "message_id": self.delivery.message_id if self.delivery else None,
            "error": self.error,
            "skipped": self.skipped,
            "duration_seconds": self.duration_seconds,
        }
