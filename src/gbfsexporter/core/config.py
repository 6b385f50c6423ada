"""gbfs-exporter configuration.

Application settings loaded from environment variables with the
GBFS_EXPORTER_ prefix.

Example:
    >>> from gbfsexporter.core.config import get_settings
    >>> settings = get_settings(log_level="DEBUG")
    >>> settings.log_level
    'DEBUG'
    >>> settings.sample_interval
    60.0
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gbfsexporter import __version__
from gbfsexporter.core.exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://gbfs.baywheels.com/gbfs/en"
DEFAULT_LISTEN = ":9100"
DEFAULT_SAMPLE_INTERVAL = 60.0


class Settings(BaseSettings):
    """Application settings.

    Example:
        >>> from gbfsexporter.core.config import Settings
        >>> s = Settings(listen="127.0.0.1:9200")
        >>> s.listen_host, s.listen_port
        ('127.0.0.1', 9200)
    """

    model_config = SettingsConfigDict(
        env_prefix="GBFS_EXPORTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Upstream
    base_url: str = Field(default=DEFAULT_BASE_URL, description="GBFS feed base URL")
    request_timeout: float = Field(default=30.0, ge=1.0)
    user_agent: str = Field(default=f"gbfs-exporter/{__version__}")

    # Sampling
    sample_interval: float = Field(
        default=DEFAULT_SAMPLE_INTERVAL, ge=1.0, description="Seconds between passes"
    )

    # Serving
    listen: str = Field(default=DEFAULT_LISTEN, description="Listen address")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["console", "json"] = Field(default="console")

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("listen")
    @classmethod
    def _check_listen(cls, value: str) -> str:
        parse_listen_address(value)
        return value

    @property
    def listen_host(self) -> str:
        return parse_listen_address(self.listen)[0]

    @property
    def listen_port(self) -> int:
        return parse_listen_address(self.listen)[1]


def parse_listen_address(address: str) -> tuple[str, int]:
    """Split a listen address into host and port.

    ``:9100`` binds all interfaces, ``[::1]:9100`` is an IPv6 literal.

    Example:
        >>> parse_listen_address(":9100")
        ('0.0.0.0', 9100)
        >>> parse_listen_address("[::1]:8080")
        ('::1', 8080)

    Raises:
        ConfigurationError: If the address has no valid port or an
            unbracketed IPv6 host.
    """
    host, sep, port_text = address.rpartition(":")
    if not sep:
        raise ConfigurationError(f"Listen address {address!r} is missing a port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host or "[" in host or "]" in host:
        raise ConfigurationError(
            f"Listen address {address!r} has too many colons; bracket IPv6 hosts"
        )
    try:
        port = int(port_text)
    except ValueError:
        raise ConfigurationError(f"Invalid port in listen address {address!r}") from None
    if not 0 <= port <= 65535:
        raise ConfigurationError(f"Port out of range in listen address {address!r}")
    return host or "0.0.0.0", port


def get_settings(**overrides: Any) -> Settings:
    """Get settings with optional overrides.

    ``None`` overrides are dropped so unset CLI options fall back to the
    environment.

    Example:
        >>> from gbfsexporter.core.config import get_settings
        >>> get_settings(listen=None).listen
        ':9100'
    """
    return Settings(**{k: v for k, v in overrides.items() if v is not None})
