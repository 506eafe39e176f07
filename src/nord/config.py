"""Configuration using pydantic-settings with environment variable loading."""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class NordSettings(BaseSettings):
    """Connection and key settings for the Nord action endpoint.

    Keys are hex strings. An empty session key means a fresh session key is
    generated at startup.
    """

    model_config = SettingsConfigDict(env_prefix="NORD_")

    web_server_url: str = "http://localhost:3000"
    request_timeout_seconds: float = 10.0
    wallet_private_key: SecretStr = SecretStr("")
    session_private_key: SecretStr = SecretStr("")


class AppSettings(BaseSettings):
    """Root settings, composing the Nord sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    nord: NordSettings = NordSettings()
