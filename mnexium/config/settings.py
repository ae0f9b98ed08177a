"""Root settings model for Mnexium configuration."""

import os
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from mnexium.config.models.api import APIConfig
from mnexium.config.models.demo import DemoConfig
from mnexium.config.models.observability import ObservabilityConfig
from mnexium.config.models.providers import ProvidersConfig

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Module-level variable to store TOML config for settings source
_toml_config: dict[str, Any] = {}

# Unprefixed variable names also accepted, first match wins
LEGACY_ENV_VARS: dict[tuple[str, str], tuple[str, ...]] = {
    ("api", "key"): ("MNX_KEY",),
    ("api", "base_url"): ("MNX_BASE_URL",),
    ("providers", "openai_key"): ("OPENAI_KEY", "OPENAI_API_KEY"),
    ("providers", "anthropic_key"): ("CLAUDE_API_KEY", "ANTHROPIC_KEY", "ANTHROPIC_API_KEY"),
    ("providers", "google_key"): ("GEMINI_KEY", "GOOGLE_KEY", "GEMINI_API_KEY"),
}


def set_toml_config(config: dict[str, Any]) -> None:
    """Set the TOML configuration to be used by Settings."""
    global _toml_config
    _toml_config = config


class TomlConfigSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that reads from TOML configuration."""

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        """Get field value from TOML config."""
        value = _toml_config.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        """Return the TOML config values."""
        return _toml_config.copy()


class LegacyEnvSettingsSource(PydanticBaseSettingsSource):
    """Settings source for the unprefixed variables (MNX_KEY, OPENAI_KEY, ...)."""

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        """Legacy variables only map onto nested sections."""
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Build a nested dict from whichever legacy variables are set."""
        values: dict[str, Any] = {}
        for (section, key), names in LEGACY_ENV_VARS.items():
            for name in names:
                value = os.environ.get(name)
                if value:
                    values.setdefault(section, {})[key] = value
                    break
        return values


class Settings(BaseSettings):
    """Root configuration object containing all nested configuration sections.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml (base configuration)
    3. config/{MNEXIUM_ENV}.toml (environment overrides)
    4. MNX_KEY, OPENAI_KEY and the other script-era variables
    5. MNEXIUM_* environment variables (runtime overrides)
    """

    model_config = SettingsConfigDict(
        env_prefix="MNEXIUM_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = Field(default="mnexium", description="Application name for logging")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: LogLevel = Field(default="INFO", description="Logging level")

    # Nested configuration sections
    api: APIConfig = Field(default_factory=APIConfig, description="Memory Service connection")
    providers: ProvidersConfig = Field(
        default_factory=ProvidersConfig,
        description="LLM provider keys",
    )
    demo: DemoConfig = Field(default_factory=DemoConfig, description="Demo chat server")
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include legacy env vars and TOML config.

        Priority order (highest to lowest):
        1. init_settings (constructor arguments)
        2. env_settings (MNEXIUM_* environment variables)
        3. legacy_env_settings (MNX_KEY, OPENAI_KEY, ...)
        4. toml_settings (config/*.toml files)
        5. (defaults from model)
        """
        return (
            init_settings,
            env_settings,
            LegacyEnvSettingsSource(settings_cls),
            TomlConfigSettingsSource(settings_cls),
        )
