"""Configuration management using pydantic-settings."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

API_PACKAGE = "tinkoff.public.invest.api.contract.v1"


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Credentials
    invest_token: Optional[str] = Field(
        default=None, description="API token used when none is passed explicitly"
    )
    invest_app_name: str = Field(
        default="invest-stream-client", description="Value of the x-app-name header"
    )

    # Endpoints
    invest_api_host: str = Field(
        default="invest-public-api.tinkoff.ru", description="Production API host"
    )
    invest_sandbox_host: str = Field(
        default="sandbox-invest-public-api.tinkoff.ru", description="Sandbox API host"
    )

    # Timeouts (seconds)
    invest_connect_timeout: float = Field(
        default=30.0, description="Stream connection (handshake) timeout"
    )
    invest_request_timeout: float = Field(
        default=60.0, description="Unary request timeout"
    )
    invest_ws_ping_interval: Optional[float] = Field(
        default=20.0, description="Keepalive ping interval for stream connections"
    )

    invest_log_level: str = Field(
        default="INFO", description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )

    def host(self, sandbox: bool = False) -> str:
        """Return the API host for the requested environment."""
        return self.invest_sandbox_host if sandbox else self.invest_api_host

    def rest_base_url(self, sandbox: bool = False) -> str:
        """
        Base URL of the HTTP/JSON gateway for unary calls.

        Calls are made as POST {base}/{package}.{Service}/{Method}.
        """
        return f"https://{self.host(sandbox)}/rest"

    def ws_base_url(self, sandbox: bool = False) -> str:
        """Base URL of the WebSocket gateway for streaming calls."""
        return f"wss://{self.host(sandbox)}/ws"


# Global settings instance
settings = Settings()
