"""
Tests for the model provider registry.
"""

import pytest

from hn_digest.components.provider_registry import (
    DEFAULT_PROVIDER_SETTINGS,
    ProviderRegistry,
    parse_provider_name,
)
from hn_digest.models.config import ProviderName
from hn_digest.utils.error_handling import ConfigurationError


class TestParseProviderName:
    """Test cases for parse_provider_name."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("openai", ProviderName.OPENAI),
            ("groq", ProviderName.GROQ),
            ("ollama", ProviderName.OLLAMA),
            ("  Groq ", ProviderName.GROQ),
            ("OPENAI", ProviderName.OPENAI),
        ],
    )
    def test_known_names(self, name, expected):
        assert parse_provider_name(name) is expected

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_blank_falls_back_to_groq(self, name):
        assert parse_provider_name(name) is ProviderName.GROQ

    def test_unknown_name_raises(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_provider_name("nonexistent")

        assert "nonexistent" in str(exc_info.value)
        assert "openai" in str(exc_info.value)


class TestProviderRegistry:
    """Test cases for ProviderRegistry."""

    def test_resolve_active(self, sample_providers):
        registry = ProviderRegistry(sample_providers)

        provider = registry.resolve_active("openai")

        assert provider is sample_providers[ProviderName.OPENAI]
        assert provider.model == "gpt-4-turbo-preview"
        assert provider.base_url == "https://api.openai.com/v1"

    def test_resolve_default(self, sample_providers):
        registry = ProviderRegistry(sample_providers)

        provider = registry.resolve_active(None)

        assert provider.base_url == "https://api.groq.com/openai/v1"
        assert provider.model == "mixtral-8x7b-32768"

    def test_resolve_unknown_provider_raises(self, sample_providers):
        registry = ProviderRegistry(sample_providers)

        with pytest.raises(ConfigurationError):
            registry.resolve_active("nonexistent")

    def test_resolve_known_but_unregistered_raises(self, sample_providers):
        registry = ProviderRegistry(
            {ProviderName.OPENAI: sample_providers[ProviderName.OPENAI]}
        )

        with pytest.raises(ConfigurationError) as exc_info:
            registry.resolve_active("groq")

        assert "groq" in str(exc_info.value)

    def test_available(self, sample_providers):
        registry = ProviderRegistry(sample_providers)

        assert sorted(registry.available()) == ["groq", "ollama", "openai"]

    def test_registry_is_a_copy(self, sample_providers):
        registry = ProviderRegistry(sample_providers)
        sample_providers.clear()

        assert registry.resolve_active("ollama").model == "llama2"

    def test_ollama_defaults_carry_placeholder_key(self):
        assert DEFAULT_PROVIDER_SETTINGS[ProviderName.OLLAMA]["api_key"] == "ollama"
        assert (
            DEFAULT_PROVIDER_SETTINGS[ProviderName.OLLAMA]["base_url"]
            == "http://localhost:11434/v1"
        )
