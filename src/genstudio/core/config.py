"""Configuration management for GenStudio.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the GENSTUDIO_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (GENSTUDIO_* prefix)
2. .env file in the project root
3. Default values defined in GenStudioConfig

The provider credential is the one exception to the prefix rule: it is read
from ``REPLICATE_API_TOKEN`` (the name the Replicate SDK itself uses), with
``GENSTUDIO_REPLICATE_API_TOKEN`` accepted as an alternative.

Example .env file:
    REPLICATE_API_TOKEN=r8_xxxxxxxxxxxxxxxxxxxx
    GENSTUDIO_SERVER_PORT=8000
    GENSTUDIO_RELAY_URL=http://127.0.0.1:8000
    GENSTUDIO_GRADIO_SERVER_PORT=7860

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
Entry points read it once and thread the values they need into the objects
they build (the relay receives its token at construction), so tests can
build their own instances without touching the environment.

Usage Example
-------------
    from genstudio.core.config import config
    from genstudio.api.relay import InferenceRelay

    relay = InferenceRelay.from_config(config)

Missing Credential
------------------
A missing token does not fail at startup. The relay answers every call that
needs the provider with a 500 and ``"Missing REPLICATE_API_TOKEN in
environment."`` instead, and ``GET /generate?action=health`` reports it.
"""

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class GenStudioConfig(BaseSettings):
    """Main configuration for GenStudio.

    Attributes
    ----------
    Provider Settings:
        replicate_api_token : SecretStr | None
            Access token for the Replicate API (None = not configured)
        replicate_api_base : str
            Base URL of the Replicate HTTP API (model metadata lookups)
        lookup_timeout : float
            Timeout in seconds for model metadata lookups

    Relay Server Settings:
        server_host : str
            Bind address for the uvicorn relay server
        server_port : int
            Port for the uvicorn relay server

    UI Settings:
        relay_url : str
            Base URL the Gradio UI uses to reach the relay
        relay_timeout : float | None
            Timeout in seconds for UI → relay calls (None = wait forever)
        gradio_server_name : str
            Gradio bind address (0.0.0.0 for local network)
        gradio_server_port : int
            Gradio port (1024-65535)
        gradio_share : bool
            Create public gradio.live link (keep False for local-only)

    Logging:
        log_level : str
            Root log level for the entry points

    Examples
    --------
    Create a custom configuration (typical in tests):

        >>> custom_config = GenStudioConfig(replicate_api_token="test-token")
        >>> custom_config.has_token
        True
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GENSTUDIO_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Provider settings
    replicate_api_token: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "replicate_api_token",
            "REPLICATE_API_TOKEN",
            "GENSTUDIO_REPLICATE_API_TOKEN",
        ),
        description="Replicate API token",
    )
    replicate_api_base: str = Field(
        default="https://api.replicate.com/v1",
        description="Base URL of the Replicate HTTP API",
    )
    lookup_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for model metadata lookups",
        gt=0,
    )

    # Relay server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Relay server bind address",
    )
    server_port: int = Field(
        default=8000,
        description="Relay server port",
        ge=1024,
        le=65535,
    )

    # UI settings
    relay_url: str = Field(
        default="http://127.0.0.1:8000",
        description="Base URL the UI uses to reach the relay",
    )
    relay_timeout: float | None = Field(
        default=None,
        description="Timeout for UI to relay calls (None waits for the provider)",
    )
    gradio_server_name: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    gradio_server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    gradio_share: bool = Field(
        default=False,
        description="Create public gradio.live link (keep False for local-only)",
    )

    log_level: str = Field(default="INFO", description="Root log level")

    @property
    def api_token(self) -> str | None:
        """Plain-text token, or None when unset or blank."""
        if self.replicate_api_token is None:
            return None
        token = self.replicate_api_token.get_secret_value().strip()
        return token or None

    @property
    def has_token(self) -> bool:
        return self.api_token is not None


# Global configuration instance
# Loads values from environment variables (GENSTUDIO_* prefix, plus
# REPLICATE_API_TOKEN) and the .env file.
config = GenStudioConfig()
