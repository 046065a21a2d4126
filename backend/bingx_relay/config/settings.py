"""
PURPOSE: Configuration settings for BingX Relay.

This module uses Pydantic Settings to manage configuration from environment
variables and .env files. All settings are validated and typed.

Only the application factory reads these values. The exchange client receives
an immutable ClientConfig built from them, so credentials are never looked up
from inside the order or signing code.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from bingx_relay.exchange.models import ClientConfig


class Settings(BaseSettings):
    """
    PURPOSE: Central configuration class for BingX Relay.

    Manages the BingX API credentials and endpoint, the HTTP listener and
    logging options. Settings are loaded from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # BingX API Configuration
    BINGX_API_KEY: str = ""
    BINGX_API_SECRET: str = ""
    BINGX_BASE_URL: str = "https://open-api.bingx.com"
    BINGX_TIMEOUT_SECONDS: float = 5.0

    # Tolerance the exchange applies to the request timestamp, in milliseconds
    RECV_WINDOW_MS: int = 5000

    # HTTP Listener
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # System Settings
    LOG_LEVEL: str = "INFO"
    STARTUP_HEALTH_CHECK: bool = True

    def has_credentials(self) -> bool:
        """
        PURPOSE: Report whether both halves of the API key pair are configured.

        Returns:
            bool: True when BINGX_API_KEY and BINGX_API_SECRET are both non-empty.
        """
        return bool(self.BINGX_API_KEY and self.BINGX_API_SECRET)

    def client_config(self) -> ClientConfig:
        """
        PURPOSE: Build the immutable exchange client configuration.

        CALLED BY: create_app() in bingx_relay.main

        Returns:
            ClientConfig: Key, secret, base URL and timeout for BingXClient.
        """
        return ClientConfig(
            api_key=self.BINGX_API_KEY,
            api_secret=self.BINGX_API_SECRET,
            base_url=self.BINGX_BASE_URL,
            timeout=self.BINGX_TIMEOUT_SECONDS,
        )


settings: Settings = Settings()
