"""
Tests for the application orchestrator.
"""

import asyncio
from dataclasses import replace
from unittest.mock import AsyncMock, Mock, patch

import pytest

from hn_digest.components.classifier import Classifier
from hn_digest.components.listing_extractor import ListingExtractor
from hn_digest.components.message_dispatcher import TwilioSmsDispatcher
from hn_digest.models.run import RunOutcome
from hn_digest.orchestrator import ApplicationOrchestrator
from hn_digest.scheduler import RunScheduler
from hn_digest.utils.error_handling import ConfigurationError


@pytest.fixture
def config_manager(sample_configuration):
    manager = Mock()
    manager.load_configuration.return_value = sample_configuration
    return manager


@pytest.fixture
def orchestrator(config_manager):
    return ApplicationOrchestrator(config_manager=config_manager)


class TestApplicationOrchestrator:
    """Test cases for ApplicationOrchestrator."""

    def test_initialize_builds_pipeline(self, orchestrator, sample_configuration):
        orchestrator.initialize()

        scheduler = orchestrator.scheduler
        assert isinstance(scheduler, RunScheduler)
        assert isinstance(scheduler.extractor, ListingExtractor)
        assert isinstance(scheduler.classifier, Classifier)
        assert isinstance(scheduler.dispatcher, TwilioSmsDispatcher)
        assert scheduler.recipient_number == "+15552223333"
        assert scheduler.interval_seconds == 10800
        assert scheduler.extractor.source_url == "https://news.ycombinator.com/"

    def test_initialize_uses_active_provider(self, config_manager, sample_configuration):
        config_manager.load_configuration.return_value = replace(
            sample_configuration, active_provider="ollama"
        )
        orchestrator = ApplicationOrchestrator(config_manager=config_manager)

        orchestrator.initialize()

        client = orchestrator.scheduler.classifier.client
        assert client.model == "llama2"
        assert client.provider.base_url == "http://localhost:11434/v1"

    def test_unknown_provider_is_fatal(self, config_manager, sample_configuration):
        config_manager.load_configuration.return_value = replace(
            sample_configuration, active_provider="nonexistent"
        )
        orchestrator = ApplicationOrchestrator(config_manager=config_manager)

        with pytest.raises(ConfigurationError) as exc_info:
            orchestrator.initialize()

        assert "nonexistent" in str(exc_info.value)
        assert orchestrator.scheduler is None

    def test_configuration_error_propagates(self, config_manager):
        config_manager.load_configuration.side_effect = ConfigurationError(
            "Twilio account SID is required (TWILIO_ACCOUNT_SID)"
        )
        orchestrator = ApplicationOrchestrator(config_manager=config_manager)

        with pytest.raises(ConfigurationError):
            orchestrator.initialize()

        assert orchestrator.scheduler is None

    @pytest.mark.asyncio
    async def test_run_once_initializes_and_runs(self, orchestrator):
        outcome = RunOutcome()
        with patch.object(
            RunScheduler, "run_once", new=AsyncMock(return_value=outcome)
        ) as run_once:
            result = await orchestrator.run_once()

        assert result is outcome
        run_once.assert_awaited_once()
        assert orchestrator.scheduler is not None

    @pytest.mark.asyncio
    async def test_run_until_shutdown(self, orchestrator):
        orchestrator.initialize()
        scheduler = orchestrator.scheduler
        scheduler.run_once = AsyncMock(return_value=RunOutcome())

        with patch.object(
            TwilioSmsDispatcher, "test_connection", return_value=False
        ), patch.object(orchestrator, "_setup_signal_handlers"):
            run_task = asyncio.create_task(orchestrator.run())
            await asyncio.sleep(0.05)
            orchestrator.shutdown()
            await asyncio.wait_for(run_task, timeout=1)

        scheduler.run_once.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_signal_during_startup_check_stops_run(self, orchestrator):
        orchestrator.initialize()
        scheduler = orchestrator.scheduler
        scheduler.run_once = AsyncMock(return_value=RunOutcome())

        async def check_then_signal():
            orchestrator._signal_handler(15)

        with patch.object(
            orchestrator, "_check_dispatcher", side_effect=check_then_signal
        ), patch.object(orchestrator, "_setup_signal_handlers"):
            await asyncio.wait_for(orchestrator.run(), timeout=1)

        scheduler.run_once.assert_not_awaited()
        assert scheduler.state.runs_started == 0

    def test_shutdown_before_initialize_is_noop(self, orchestrator):
        orchestrator.shutdown()

        assert orchestrator.scheduler is None

    def test_get_system_status(self, orchestrator):
        status = orchestrator.get_system_status()
        assert status["startup_time"] is None
        assert status["runs_started"] == 0

        orchestrator.initialize()
        status = orchestrator.get_system_status()

        assert status["startup_time"] is not None
        assert status["run_in_progress"] is False
        assert status["last_run"] is None
        assert "total_errors" in status["errors"]
