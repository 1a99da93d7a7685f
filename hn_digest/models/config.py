"""
Configuration models for the HN Digest pipeline.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict
from urllib.parse import urlparse

DEFAULT_SOURCE_URL = "https://news.ycombinator.com/"
DEFAULT_RUN_INTERVAL_SECONDS = 3 * 60 * 60
DEFAULT_STAGE_TIMEOUT_SECONDS = 300


class ProviderName(Enum):
    """Model providers the pipeline knows how to talk to."""

    OPENAI = "openai"
    GROQ = "groq"
    OLLAMA = "ollama"


DEFAULT_PROVIDER = ProviderName.GROQ


@dataclass(frozen=True)
class ProviderConfig:
    """Connection settings for one OpenAI-compatible completion endpoint."""

    api_key: str
    base_url: str
    model: str

    def validate(self) -> bool:
        """Validate provider settings."""
        parsed_url = urlparse(self.base_url)
        if not parsed_url.scheme or not parsed_url.netloc:
            raise ValueError(f"Invalid provider base URL: {self.base_url}")

        if not self.model or not self.model.strip():
            raise ValueError("Provider model identifier cannot be empty")

        return True

    def __repr__(self) -> str:
        # api_key stays out of logs
        return (
            f"ProviderConfig(base_url={self.base_url!r}, model={self.model!r}, "
            f"api_key={'***' if self.api_key else ''!r})"
        )


@dataclass(frozen=True)
class SmsConfig:
    """Twilio account used to send the digest."""

    account_sid: str
    auth_token: str
    from_number: str

    def validate(self) -> bool:
        """Validate SMS account settings."""
        if not self.account_sid or not self.account_sid.strip():
            raise ValueError("Twilio account SID is required (TWILIO_ACCOUNT_SID)")

        if not self.auth_token or not self.auth_token.strip():
            raise ValueError("Twilio auth token is required (TWILIO_AUTH_TOKEN)")

        if not self.from_number or not self.from_number.strip():
            raise ValueError("Twilio sender number is required (TWILIO_PHONE_NUMBER)")

        return True

    def __repr__(self) -> str:
        return (
            f"SmsConfig(account_sid={self.account_sid!r}, auth_token='***', "
            f"from_number={self.from_number!r})"
        )


@dataclass
class Configuration:
    """Resolved process configuration."""

    providers: Dict[ProviderName, ProviderConfig]
    active_provider: str
    sms: SmsConfig
    recipient_number: str
    source_url: str = DEFAULT_SOURCE_URL
    run_interval_seconds: int = DEFAULT_RUN_INTERVAL_SECONDS
    stage_timeout_seconds: int = DEFAULT_STAGE_TIMEOUT_SECONDS
    log_level: str = "INFO"
    log_dir: str = "logs"

    def validate(self) -> bool:
        """Validate system configuration."""
        if not isinstance(self.providers, dict) or not self.providers:
            raise ValueError("At least one model provider must be configured")

        for provider in self.providers.values():
            provider.validate()

        self.sms.validate()

        if not self.recipient_number or not self.recipient_number.strip():
            raise ValueError("Recipient phone number is required (YOUR_PHONE_NUMBER)")

        if not isinstance(self.source_url, str):
            raise ValueError(f"Source URL must be a string: {self.source_url!r}")

        parsed_url = urlparse(self.source_url)
        if parsed_url.scheme not in ["http", "https"] or not parsed_url.netloc:
            raise ValueError(f"Source URL must be an HTTP(S) URL: {self.source_url}")

        if not isinstance(self.run_interval_seconds, int) or self.run_interval_seconds <= 0:
            raise ValueError("Run interval must be a positive integer")

        if self.run_interval_seconds < 60:
            raise ValueError("Run interval must be at least 60 seconds")

        if (
            not isinstance(self.stage_timeout_seconds, int)
            or self.stage_timeout_seconds <= 0
        ):
            raise ValueError("Stage timeout must be a positive integer")

        if not isinstance(self.log_level, str):
            raise ValueError(f"Unknown log level: {self.log_level!r}")

        if self.log_level.upper() not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError(f"Unknown log level: {self.log_level}")

        return True
