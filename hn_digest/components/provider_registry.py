"""
Model provider registry.

Holds the configured completion endpoints keyed by ProviderName and
resolves the one selected for this process.
"""

import logging
from typing import Dict, List, Mapping, Optional

from ..models.config import DEFAULT_PROVIDER, ProviderConfig, ProviderName
from ..utils.error_handling import ConfigurationError

logger = logging.getLogger(__name__)


DEFAULT_PROVIDER_SETTINGS: Dict[ProviderName, Dict[str, str]] = {
    ProviderName.OPENAI: {
        "base_url": "https://api.openai.com/v1",
        "model": "gpt-4-turbo-preview",
    },
    ProviderName.GROQ: {
        "base_url": "https://api.groq.com/openai/v1",
        "model": "mixtral-8x7b-32768",
    },
    ProviderName.OLLAMA: {
        "base_url": "http://localhost:11434/v1",
        "model": "llama2",
        # Ollama ignores the key but the OpenAI client insists on one
        "api_key": "ollama",
    },
}


def parse_provider_name(name: Optional[str]) -> ProviderName:
    """
    Map a configured provider name onto ProviderName.

    Blank or missing names fall back to the default provider.

    Raises:
        ConfigurationError: If the name is not a known provider.
    """
    if name is None or not name.strip():
        return DEFAULT_PROVIDER

    try:
        return ProviderName(name.strip().lower())
    except ValueError:
        known = ", ".join(p.value for p in ProviderName)
        raise ConfigurationError(
            f"Provider {name} not found in configuration (known providers: {known})"
        ) from None


class ProviderRegistry:
    """Registry of configured model providers."""

    def __init__(self, providers: Mapping[ProviderName, ProviderConfig]):
        self._providers: Dict[ProviderName, ProviderConfig] = dict(providers)

    def available(self) -> List[str]:
        """Names of the providers that have a configuration."""
        return [name.value for name in self._providers]

    def get(self, name: ProviderName) -> ProviderConfig:
        try:
            return self._providers[name]
        except KeyError:
            raise ConfigurationError(
                f"Provider {name.value} not found in configuration"
            ) from None

    def resolve_active(self, configured_name: Optional[str]) -> ProviderConfig:
        """
        Resolve the provider every run of this process will use.

        Args:
            configured_name: Provider selector from configuration; blank
                selects the default provider.

        Returns:
            ProviderConfig of the active provider.

        Raises:
            ConfigurationError: If the name is unknown or not registered.
        """
        provider_name = parse_provider_name(configured_name)
        provider = self.get(provider_name)

        logger.info(
            f"Active model provider: {provider_name.value} "
            f"(model {provider.model}, endpoint {provider.base_url})"
        )
        return provider
