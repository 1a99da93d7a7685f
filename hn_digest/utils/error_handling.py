"""
Error handling utilities for the HN Digest pipeline.

This module defines the pipeline's exception taxonomy, an in-memory error
tracker used for observability, and a decorator that records (and
optionally contains) failures at a component boundary.
"""

import functools
import inspect
import traceback
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .logging import get_logger


class HNDigestError(Exception):
    """Base class for pipeline errors."""


class ConfigurationError(HNDigestError):
    """Startup configuration is unusable. Fatal, never retried."""


class ExtractionError(HNDigestError):
    """Rendering or navigating the listing page failed."""


class ClassificationError(HNDigestError):
    """The completion provider call failed."""


class DeliveryError(HNDigestError):
    """The SMS provider rejected or failed the send."""


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories, one per pipeline stage plus system-level failures."""

    CONFIGURATION = "configuration"
    EXTRACTION = "extraction"
    CLASSIFICATION = "classification"
    MESSAGE_DELIVERY = "message_delivery"
    SCHEDULING = "scheduling"
    SYSTEM = "system"


@dataclass
class ErrorInfo:
    """Information about an error occurrence."""

    timestamp: datetime
    component: str
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    exception_type: str
    traceback: str
    context: Dict[str, Any]


class ErrorTracker:
    """
    Keeps a bounded history of handled errors for monitoring.
    """

    def __init__(self, max_errors: int = 500):
        self.max_errors = max_errors
        self.errors: List[ErrorInfo] = []
        self.error_counts: Dict[str, int] = {}
        self.logger = get_logger("error_tracker")

    def record_error(
        self,
        component: str,
        category: ErrorCategory,
        severity: ErrorSeverity,
        message: str,
        exception: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> ErrorInfo:
        """
        Record an error occurrence.

        Args:
            component: Component where error occurred
            category: Error category
            severity: Error severity
            message: Error message
            exception: Exception object if available
            context: Additional context information

        Returns:
            ErrorInfo object
        """
        error_info = ErrorInfo(
            timestamp=datetime.now(),
            component=component,
            category=category,
            severity=severity,
            message=message,
            exception_type=type(exception).__name__ if exception else "Unknown",
            traceback=(
                "".join(
                    traceback.format_exception(
                        type(exception), exception, exception.__traceback__
                    )
                )
                if exception
                else ""
            ),
            context=context or {},
        )

        self.errors.append(error_info)
        if len(self.errors) > self.max_errors:
            self.errors.pop(0)

        error_key = f"{component}.{category.value}.{severity.value}"
        self.error_counts[error_key] = self.error_counts.get(error_key, 0) + 1

        self.logger.error(
            f"Error recorded: {message}",
            extra={
                "error_component": component,
                "category": category.value,
                "severity": severity.value,
                "exception_type": error_info.exception_type,
                "context": context,
            },
        )

        return error_info

    def get_error_stats(self) -> Dict[str, Any]:
        """Get error statistics."""
        last_day = datetime.now() - timedelta(days=1)

        return {
            "total_errors": len(self.errors),
            "errors_last_day": len([e for e in self.errors if e.timestamp >= last_day]),
            "error_counts": self.error_counts.copy(),
            "category_breakdown": {
                category.value: len([e for e in self.errors if e.category == category])
                for category in ErrorCategory
            },
        }

    def get_component_errors(self, component: str, limit: int = 10) -> List[ErrorInfo]:
        """Get recent errors for a specific component."""
        return [e for e in self.errors if e.component == component][-limit:]


# Global error tracker instance
_error_tracker: Optional[ErrorTracker] = None


def get_error_tracker() -> ErrorTracker:
    """Get global error tracker instance."""
    global _error_tracker
    if _error_tracker is None:
        _error_tracker = ErrorTracker()
    return _error_tracker


def with_error_handling(
    component: str,
    category: ErrorCategory,
    severity: ErrorSeverity = ErrorSeverity.MEDIUM,
    fallback_value: Any = None,
    suppress_exceptions: bool = False,
    wrap_with: Optional[type] = None,
):
    """
    Decorator that records failures in the error tracker.

    Single attempt only: the wrapped call is never retried.

    Args:
        component: Component name
        category: Error category
        severity: Error severity
        fallback_value: Value returned when the exception is suppressed
        suppress_exceptions: Return ``fallback_value`` instead of raising
        wrap_with: Exception type the original error is re-raised as
    """

    def _handle(func: Callable, e: Exception) -> Any:
        get_error_tracker().record_error(
            component=component,
            category=category,
            severity=severity,
            message=f"Error in {func.__name__}: {e}",
            exception=e,
            context={"function": func.__name__},
        )

        if suppress_exceptions:
            get_logger(component).warning(
                f"Suppressing exception in {func.__name__}: {e}"
            )
            return fallback_value

        if wrap_with is not None and not isinstance(e, wrap_with):
            raise wrap_with(str(e) or type(e).__name__) from e
        raise e

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                return _handle(func, e)

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                return _handle(func, e)

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
