"""
Message delivery result models.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class DeliveryResult:
    """Result of one SMS send attempt."""

    success: bool
    delivery_time: datetime
    message_id: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def sent(cls, message_id: str) -> "DeliveryResult":
        return cls(success=True, delivery_time=datetime.now(), message_id=message_id)

    @classmethod
    def failed(cls, error_message: str) -> "DeliveryResult":
        return cls(
            success=False,
            delivery_time=datetime.now(),
            error_message=error_message[:500],
        )

    def validate(self) -> bool:
        """Validate delivery result data."""
        if not isinstance(self.success, bool):
            raise ValueError("success must be a boolean")

        if not isinstance(self.delivery_time, datetime):
            raise ValueError("delivery_time must be a datetime object")

        if self.error_message is not None and len(self.error_message) > 500:
            raise ValueError("error_message too long (max 500 characters)")

        if self.success:
            if not self.message_id:
                raise ValueError("message_id should be provided when success is True")
            if self.error_message is not None:
                raise ValueError("error_message must be None when success is True")
        elif not self.error_message:
            raise ValueError("error_message should be provided when success is False")

        return True

    def describe(self) -> str:
        if self.success:
            return f"SMS sent successfully. SID: {self.message_id}"
        return f"Failed to send SMS: {self.error_message}"
