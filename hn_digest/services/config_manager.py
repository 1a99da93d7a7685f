"""
Configuration management for the HN Digest pipeline.
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from ..components.provider_registry import (
    DEFAULT_PROVIDER_SETTINGS,
    parse_provider_name,
)
from ..models.config import (
    DEFAULT_PROVIDER,
    DEFAULT_RUN_INTERVAL_SECONDS,
    DEFAULT_SOURCE_URL,
    DEFAULT_STAGE_TIMEOUT_SECONDS,
    Configuration,
    ProviderConfig,
    ProviderName,
    SmsConfig,
)
from ..utils.error_handling import ConfigurationError

CONFIG_PATH_ENV_VAR = "HN_DIGEST_CONFIG"

# Environment variables holding each provider's key and optional overrides
PROVIDER_ENV_VARS: Dict[ProviderName, Dict[str, str]] = {
    ProviderName.OPENAI: {
        "api_key": "OPENAI_API_KEY",
        "model": "OPENAI_MODEL",
        "base_url": "OPENAI_BASE_URL",
    },
    ProviderName.GROQ: {
        "api_key": "GROQ_API_KEY",
        "model": "GROQ_MODEL",
        "base_url": "GROQ_BASE_URL",
    },
    ProviderName.OLLAMA: {
        "model": "OLLAMA_MODEL",
        "base_url": "OLLAMA_BASE_URL",
    },
}


class ConfigurationManager:
    """Resolves the process configuration from .env, environment and YAML."""

    def __init__(
        self,
        config_path: Optional[str] = None,
        env_file: Optional[str] = ".env",
        environ: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize the configuration manager.

        Args:
            config_path: Optional YAML file; falls back to $HN_DIGEST_CONFIG,
                then to environment variables only
            env_file: dotenv file loaded before reading the environment;
                None skips it
            environ: Environment mapping (defaults to os.environ)
        """
        self.env_file = env_file
        self._environ = environ
        self.config_path = config_path
        self._config: Optional[Configuration] = None

    @property
    def environ(self) -> Mapping[str, str]:
        return self._environ if self._environ is not None else os.environ

    def load_configuration(self) -> Configuration:
        """
        Load and validate configuration.

        Returns:
            Validated Configuration.

        Raises:
            ConfigurationError: If the file or a value is unusable.
        """
        if self.env_file and self._environ is None:
            # Values already in the environment win over .env
            load_dotenv(self.env_file, override=False)

        config_path = self.config_path or self.environ.get(CONFIG_PATH_ENV_VAR)

        try:
            if config_path:
                raw_config = self._read_file(config_path)
                config = self._parse_config(self._expand_env_vars(raw_config))
            else:
                config = self._config_from_env()

            config.validate()
        except ConfigurationError:
            raise
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        self._config = config
        return config

    def get_config(self) -> Configuration:
        """Get current configuration, loading it on first use."""
        if self._config is None:
            return self.load_configuration()
        return self._config

    def _read_file(self, config_path: str) -> Dict[str, Any]:
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e

        if not isinstance(raw_config, dict):
            raise ConfigurationError("Configuration file must contain a mapping")

        return raw_config

    def _expand_env_vars(self, obj: Any) -> Any:
        """Recursively expand ``${VAR_NAME}`` values."""
        if isinstance(obj, dict):
            return {key: self._expand_env_vars(value) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [self._expand_env_vars(item) for item in obj]
        elif isinstance(obj, str):
            if obj.startswith("${") and obj.endswith("}"):
                var_name = obj[2:-1]
                env_value = self.environ.get(var_name)
                if env_value is None:
                    raise ConfigurationError(
                        f"Environment variable '{var_name}' not found"
                    )
                return env_value
            return obj
        else:
            return obj

    def _build_provider(
        self, name: ProviderName, overrides: Mapping[str, Any]
    ) -> ProviderConfig:
        settings = dict(DEFAULT_PROVIDER_SETTINGS[name])
        settings.update({k: v for k, v in overrides.items() if v not in (None, "")})
        return ProviderConfig(
            api_key=str(settings.get("api_key", "")),
            base_url=str(settings["base_url"]),
            model=str(settings["model"]),
        )

    @staticmethod
    def _setting(data: Mapping[str, Any], key: str, default: Any) -> Any:
        """Value for ``key``; an empty YAML value (null) means the default."""
        value = data.get(key)
        return default if value is None else value

    def _parse_config(self, raw_config: Dict[str, Any]) -> Configuration:
        """Parse a configuration mapping (already env-expanded)."""
        providers_data = raw_config.get("providers") or {}
        if not isinstance(providers_data, dict):
            raise ValueError("'providers' must be a mapping")

        providers = {name: self._build_provider(name, {}) for name in ProviderName}
        for key, overrides in providers_data.items():
            name = parse_provider_name(str(key))
            if overrides is not None and not isinstance(overrides, dict):
                raise ValueError(f"Settings for provider '{key}' must be a mapping")
            providers[name] = self._build_provider(name, overrides or {})

        sms_data = raw_config.get("sms") or {}
        system_data = raw_config.get("system") or {}

        return Configuration(
            providers=providers,
            active_provider=str(
                raw_config.get("active_provider") or DEFAULT_PROVIDER.value
            ),
            sms=SmsConfig(
                account_sid=str(self._setting(sms_data, "account_sid", "")),
                auth_token=str(self._setting(sms_data, "auth_token", "")),
                from_number=str(self._setting(sms_data, "from_number", "")),
            ),
            recipient_number=str(self._setting(raw_config, "recipient_number", "")),
            source_url=self._setting(system_data, "source_url", DEFAULT_SOURCE_URL),
            run_interval_seconds=self._setting(
                system_data, "run_interval_seconds", DEFAULT_RUN_INTERVAL_SECONDS
            ),
            stage_timeout_seconds=self._setting(
                system_data, "stage_timeout_seconds", DEFAULT_STAGE_TIMEOUT_SECONDS
            ),
            log_level=self._setting(system_data, "log_level", "INFO"),
            log_dir=self._setting(system_data, "log_dir", "logs"),
        )

    def _int_env(self, name: str, default: int) -> int:
        value = self.environ.get(name)
        if value is None or not value.strip():
            return default
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"{name} must be an integer, got {value!r}") from None

    def _config_from_env(self) -> Configuration:
        env = self.environ

        providers = {}
        for name in ProviderName:
            overrides = {
                field: env.get(var_name)
                for field, var_name in PROVIDER_ENV_VARS[name].items()
            }
            providers[name] = self._build_provider(name, overrides)

        return Configuration(
            providers=providers,
            active_provider=env.get("ACTIVE_PROVIDER") or DEFAULT_PROVIDER.value,
            sms=SmsConfig(
                account_sid=env.get("TWILIO_ACCOUNT_SID", ""),
                auth_token=env.get("TWILIO_AUTH_TOKEN", ""),
                from_number=env.get("TWILIO_PHONE_NUMBER", ""),
            ),
            recipient_number=env.get("YOUR_PHONE_NUMBER", ""),
            source_url=env.get("HN_SOURCE_URL") or DEFAULT_SOURCE_URL,
            run_interval_seconds=self._int_env(
                "RUN_INTERVAL_SECONDS", DEFAULT_RUN_INTERVAL_SECONDS
            ),
            stage_timeout_seconds=self._int_env(
                "STAGE_TIMEOUT_SECONDS", DEFAULT_STAGE_TIMEOUT_SECONDS
            ),
            log_level=env.get("LOG_LEVEL") or "INFO",
            log_dir=env.get("LOG_DIR") or "logs",
        )

