"""
Run scheduler for the HN Digest pipeline.

One run is fetch -> classify -> gate -> deliver, strictly in that order.
Runs are started once immediately and then on a fixed period; a trigger
that fires while a run is still in progress is skipped, so at most one run
executes at a time no matter how long a run takes.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Set

from .components.notification_gate import should_notify
from .interfaces import IClassifier, IListingExtractor, IMessageDispatcher
from .models.config import DEFAULT_RUN_INTERVAL_SECONDS, DEFAULT_STAGE_TIMEOUT_SECONDS
from .models.delivery import DeliveryResult
from .models.listing import ListingRecord
from .models.run import RunOutcome
from .utils.error_handling import (
    ClassificationError,
    ErrorCategory,
    ErrorSeverity,
    get_error_tracker,
)
from .utils.logging import get_logger


@dataclass
class SchedulerState:
    """Cross-run state. Only RunScheduler mutates it."""

    running: bool = False
    runs_started: int = 0
    runs_skipped: int = 0
    last_outcome: Optional[RunOutcome] = None


class RunScheduler:
    """
    Drives pipeline runs and keeps them from overlapping.

    Failures inside a run are logged and recorded; they never reach the
    periodic trigger, which keeps firing until stop() is called.
    """

    def __init__(
        self,
        extractor: IListingExtractor,
        classifier: IClassifier,
        dispatcher: IMessageDispatcher,
        recipient_number: str,
        interval_seconds: float = DEFAULT_RUN_INTERVAL_SECONDS,
        stage_timeout_seconds: Optional[float] = DEFAULT_STAGE_TIMEOUT_SECONDS,
        state: Optional[SchedulerState] = None,
        gate: Callable[[str], bool] = should_notify,
    ):
        """
        Initialize run scheduler.

        Args:
            extractor: Listing source
            classifier: Model-backed classifier
            dispatcher: SMS dispatcher
            recipient_number: Number the digest is sent to
            interval_seconds: Period between scheduled runs
            stage_timeout_seconds: Upper bound for each awaited stage;
                None disables the bound
            state: Scheduler state, injectable for tests
            gate: Notification decision function
        """
        self.extractor = extractor
        self.classifier = classifier
        self.dispatcher = dispatcher
        self.recipient_number = recipient_number
        self.interval_seconds = interval_seconds
        self.stage_timeout_seconds = stage_timeout_seconds
        self.state = state or SchedulerState()
        self.gate = gate

        self.logger = get_logger("scheduler")
        self._stop_requested = False
        self._stop_event: Optional[asyncio.Event] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def is_running(self) -> bool:
        return self.state.running

    async def run_once(self) -> RunOutcome:
        """
        Execute one complete run unless another run is in progress.

        Returns:
            RunOutcome describing the run; ``skipped`` is set when the
            trigger was ignored because a run was already active.
        """
        if self.state.running:
            self.state.runs_skipped += 1
            self.logger.warning(
                "Previous run still in progress, skipping this trigger",
                extra={"runs_skipped": self.state.runs_skipped},
            )
            return RunOutcome(skipped=True, finished_at=datetime.now())

        self.state.running = True
        self.state.runs_started += 1
        outcome = RunOutcome()
        self.logger.info(
            "Starting news app run", extra={"run_number": self.state.runs_started}
        )

        try:
            await self._execute(outcome)
        except Exception as e:
            outcome.error = str(e) or type(e).__name__
            # Classification failures are already recorded by the classifier
            if not isinstance(e, ClassificationError):
                get_error_tracker().record_error(
                    component="scheduler",
                    category=ErrorCategory.SCHEDULING,
                    severity=ErrorSeverity.HIGH,
                    message=f"Run aborted: {outcome.error}",
                    exception=e,
                    context={"run_number": self.state.runs_started},
                )
            self.logger.error(
                "Error in run, waiting for next trigger",
                extra={"error": outcome.error, "error_type": type(e).__name__},
                exc_info=True,
            )
        finally:
            outcome.finished_at = datetime.now()
            self.state.last_outcome = outcome
            self.state.running = False

        self.logger.info("Run finished", extra=outcome.summary())
        return outcome

    async def _execute(self, outcome: RunOutcome) -> None:
        records = await self._fetch()
        outcome.records_count = len(records)
        self.logger.info(
            "Fetched listing", extra={"records_count": outcome.records_count}
        )

        message = await self._classify(records)
        outcome.classification = message
        self.logger.info("Model message", extra={"content": message})

        outcome.should_notify = self.gate(message)
        if not outcome.should_notify:
            self.logger.info("No relevant news found or short message, SMS not sent")
            return

        self.logger.info("Relevant news found, sending SMS")
        outcome.delivery = await self._deliver(message)
        self.logger.info(
            "Delivery outcome",
            extra={
                "success": outcome.delivery.success,
                "detail": outcome.delivery.describe(),
            },
        )

    async def _with_timeout(self, awaitable):
        if self.stage_timeout_seconds is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout=self.stage_timeout_seconds)

    async def _fetch(self) -> List[ListingRecord]:
        try:
            return await self._with_timeout(self.extractor.fetch_listing())
        except asyncio.TimeoutError:
            self.logger.error(
                "Listing extraction timed out, continuing with no data",
                extra={"timeout": self.stage_timeout_seconds},
            )
            return []

    async def _classify(self, records: List[ListingRecord]) -> str:
        try:
            return await self._with_timeout(self.classifier.classify(records))
        except asyncio.TimeoutError as e:
            error = ClassificationError(
                f"Classification timed out after {self.stage_timeout_seconds}s"
            )
            get_error_tracker().record_error(
                component="pipeline.classifier",
                category=ErrorCategory.CLASSIFICATION,
                severity=ErrorSeverity.HIGH,
                message=str(error),
                exception=error,
                context={"timeout": self.stage_timeout_seconds},
            )
            raise error from e

    async def _deliver(self, message: str) -> DeliveryResult:
        try:
            return await self._with_timeout(
                self.dispatcher.deliver(self.recipient_number, message)
            )
        except asyncio.TimeoutError:
            self.logger.error(
                "SMS delivery timed out", extra={"timeout": self.stage_timeout_seconds}
            )
            return DeliveryResult.failed(
                f"SMS delivery timed out after {self.stage_timeout_seconds}s"
            )

    def trigger(self) -> asyncio.Task:
        """Start a run in the background and return its task."""
        task = asyncio.create_task(self.run_once())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def run_forever(self) -> None:
        """
        Run immediately, then every ``interval_seconds`` until stop().

        Each tick starts its run as a separate task, so a run outliving
        the period makes the next tick hit the in-progress guard instead
        of queueing behind it. Returns without running if stop() was
        already called.
        """
        # Created here so the event belongs to the running loop
        stop_event = asyncio.Event()
        if self._stop_requested:
            stop_event.set()
        self._stop_event = stop_event

        if stop_event.is_set():
            self.logger.info("Stop requested before first run, not starting")
            return

        self.logger.info(
            "Initiating first run of the app",
            extra={"interval_seconds": self.interval_seconds},
        )

        try:
            while not stop_event.is_set():
                self.trigger()
                try:
                    await asyncio.wait_for(
                        stop_event.wait(), timeout=self.interval_seconds
                    )
                except asyncio.TimeoutError:
                    continue
        finally:
            await self._cancel_pending()

        self.logger.info(
            "Scheduler stopped",
            extra={
                "runs_started": self.state.runs_started,
                "runs_skipped": self.state.runs_skipped,
            },
        )

    def stop(self) -> None:
        """
        Ask run_forever() to return; an in-flight run is cancelled.

        A stop issued before run_forever() starts is kept, and the loop
        then exits without running.
        """
        self._stop_requested = True
        if self._stop_event is not None:
            self._stop_event.set()

    async def _cancel_pending(self) -> None:
        pending = list(self._tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
