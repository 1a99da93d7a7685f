"""
Main entry point for the HN Digest pipeline.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from .orchestrator import ApplicationOrchestrator
from .utils.error_handling import ConfigurationError
from .utils.logging import get_logger, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hn-digest",
        description="Text yourself the AI and dev stories on the Hacker News front page.",
    )
    parser.add_argument(
        "-c",
        "--config",
        help="YAML configuration file (default: environment variables / .env)",
    )
    parser.add_argument(
        "--once", action="store_true", help="Perform a single run and exit"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level",
    )
    return parser


async def async_main(
    config_path: Optional[str] = None,
    once: bool = False,
    log_level: Optional[str] = None,
) -> int:
    """Async main application entry point. Returns the exit status."""
    setup_logging(log_dir=None, log_level=log_level or "INFO")
    logger = get_logger("main")

    logger.info("Starting HN Digest", extra={"config_path": config_path, "once": once})

    orchestrator = ApplicationOrchestrator(config_path, log_level=log_level)
    try:
        orchestrator.initialize()
    except ConfigurationError as e:
        logger.critical("Startup configuration failed", extra={"error": str(e)})
        return 1

    if once:
        outcome = await orchestrator.run_once()
        return 0 if outcome.completed else 1

    await orchestrator.run()
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main application entry point."""
    args = build_parser().parse_args(argv)

    try:
        exit_code = asyncio.run(
            async_main(args.config, once=args.once, log_level=args.log_level)
        )
    except KeyboardInterrupt:
        print("\nShutdown requested by user")
        exit_code = 0

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
