"""
Application orchestrator for the HN Digest pipeline.

Builds every pipeline component from the resolved configuration, hands
them to the RunScheduler, and owns process lifecycle (startup checks,
signal handling, shutdown).
"""

import asyncio
import signal
import sys
from datetime import datetime
from typing import Any, Dict, Optional

from .components.classifier import Classifier
from .components.listing_extractor import ListingExtractor
from .components.llm_client import OpenAICompatibleClient
from .components.message_dispatcher import TwilioSmsDispatcher
from .components.provider_registry import ProviderRegistry, parse_provider_name
from .models.config import Configuration, ProviderName
from .models.run import RunOutcome
from .scheduler import RunScheduler
from .services.config_manager import ConfigurationManager
from .utils.error_handling import get_error_tracker
from .utils.logging import get_logger, setup_logging


class ApplicationOrchestrator:
    """
    Wires the pipeline together and runs it.

    Configuration problems surface from initialize() as
    ConfigurationError before any run starts.
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        config_manager: Optional[ConfigurationManager] = None,
        log_level: Optional[str] = None,
    ):
        """
        Initialize the application orchestrator.

        Args:
            config_path: Optional YAML configuration file
            config_manager: Pre-built manager (tests inject one)
            log_level: Overrides the configured log level
        """
        self.config_path = config_path
        self.log_level = log_level
        self.logger = get_logger("orchestrator")

        self._config_manager = config_manager or ConfigurationManager(config_path)
        self._config: Optional[Configuration] = None
        self._scheduler: Optional[RunScheduler] = None
        self._dispatcher: Optional[TwilioSmsDispatcher] = None
        self._startup_time: Optional[datetime] = None

    @property
    def scheduler(self) -> Optional[RunScheduler]:
        return self._scheduler

    def initialize(self) -> None:
        """
        Load configuration and build components.

        Raises:
            ConfigurationError: If the configuration or the active
                provider cannot be resolved.
        """
        self._config = self._config_manager.load_configuration()
        setup_logging(
            log_dir=self._config.log_dir,
            log_level=self.log_level or self._config.log_level,
        )
        self.logger = get_logger("orchestrator")
        self.logger.info("Initializing HN Digest...")

        registry = ProviderRegistry(self._config.providers)
        provider = registry.resolve_active(self._config.active_provider)
        provider_name = parse_provider_name(self._config.active_provider)
        if not provider.api_key and provider_name is not ProviderName.OLLAMA:
            self.logger.warning(
                "Active provider has no API key configured",
                extra={"provider": provider_name.value},
            )

        extractor = ListingExtractor(
            source_url=self._config.source_url,
            navigation_timeout=self._config.stage_timeout_seconds,
        )
        classifier = Classifier(
            OpenAICompatibleClient(
                provider, timeout=self._config.stage_timeout_seconds
            )
        )
        self._dispatcher = TwilioSmsDispatcher(self._config.sms)

        self._scheduler = RunScheduler(
            extractor=extractor,
            classifier=classifier,
            dispatcher=self._dispatcher,
            recipient_number=self._config.recipient_number,
            interval_seconds=self._config.run_interval_seconds,
            stage_timeout_seconds=self._config.stage_timeout_seconds,
        )

        self._startup_time = datetime.now()
        self.logger.info(
            "Initialization complete",
            extra={
                "provider": provider_name.value,
                "model": provider.model,
                "source_url": self._config.source_url,
                "run_interval_seconds": self._config.run_interval_seconds,
            },
        )

    async def _check_dispatcher(self) -> None:
        healthy = await asyncio.to_thread(self._dispatcher.test_connection)
        if not healthy:
            # Runs still proceed; delivery failures are contained per run
            self.logger.warning("SMS provider connection test failed")

    def _setup_signal_handlers(self) -> None:
        if sys.platform == "win32":
            return
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self._signal_handler, sig)

    def _signal_handler(self, signum: int) -> None:
        self.logger.info(
            "Received shutdown signal, initiating graceful shutdown",
            extra={"signal": signum},
        )
        self.shutdown()

    async def run_once(self) -> RunOutcome:
        """Initialize and perform a single run."""
        if self._scheduler is None:
            self.initialize()
        return await self._scheduler.run_once()

    async def run(self) -> None:
        """Initialize, then run on schedule until shutdown."""
        if self._scheduler is None:
            self.initialize()

        self._setup_signal_handlers()
        await self._check_dispatcher()
        await self._scheduler.run_forever()

        uptime = datetime.now() - self._startup_time if self._startup_time else None
        self.logger.info(f"Shutdown complete. Uptime: {uptime}")

    def shutdown(self) -> None:
        """Stop the scheduler; run() returns once in-flight work is cancelled."""
        if self._scheduler is not None:
            self._scheduler.stop()

    def get_system_status(self) -> Dict[str, Any]:
        """Current status for diagnostics."""
        state = self._scheduler.state if self._scheduler else None
        return {
            "startup_time": (
                self._startup_time.isoformat() if self._startup_time else None
            ),
            "run_in_progress": state.running if state else False,
            "runs_started": state.runs_started if state else 0,
            "runs_skipped": state.runs_skipped if state else 0,
            "last_run": (
                state.last_outcome.summary()
                if state and state.last_outcome
                else None
            ),
            "errors": get_error_tracker().get_error_stats(),
        }
