"""Configuration for the Mastodon API client."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MastoConfig(BaseSettings):
    """Configuration for the Mastodon API client.

    All settings can be configured via environment variables with MASTO_ prefix.

    Connection:
        - MASTO_HOSTNAME: Instance hostname, e.g. "mastodon.social"
        - MASTO_ACCESS_TOKEN: OAuth 2.0 bearer token (empty for public endpoints)

    Transport:
        - MASTO_PROXY: Proxy URI, e.g. "socks5://127.0.0.1:9050"
        - MASTO_CAINFO: Path to a CA bundle used to verify the server
        - MASTO_USERAGENT: User-Agent header (defaults to masto-tools/<version>)
    """

    model_config = SettingsConfigDict(
        env_prefix="MASTO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    hostname: str = Field(default="")
    access_token: str = Field(default="")

    proxy: str = Field(default="", description="Proxy URI, empty for none")
    cainfo: str = Field(default="", description="Path to CA bundle, empty for the default")
    useragent: str = Field(default="", description="User-Agent, empty for the default")

    log_level: str = Field(default="WARNING")

    @field_validator("hostname")
    @classmethod
    def validate_hostname(cls, v: str) -> str:
        """Strip scheme and trailing slash, the base URI is always https://."""
        v = v.strip()
        for scheme in ("https://", "http://"):
            if v.startswith(scheme):
                v = v[len(scheme):]
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    def validate_config(self) -> None:
        """Validate that required config is present.

        Raises:
            ValueError: If no hostname is configured.
        """
        if not self.hostname:
            raise ValueError(
                "An instance hostname is required. "
                "Example: MASTO_HOSTNAME=mastodon.social"
            )
