"""Environment-driven settings and logging setup.

Entry points call ``load_dotenv()`` first; this module only reads ``os.environ``.
"""

import logging
import os
import sys
from dataclasses import dataclass

from weathernow.errors import ConfigError

DEFAULT_OPENWEATHER_BASE = "https://api.openweathermap.org"
ICON_BASE = "https://openweathermap.org/img/wn"

WEATHER_PATH = "/data/2.5/weather"
REVERSE_GEOCODE_PATH = "/geo/1.0/reverse"


@dataclass(frozen=True)
class Settings:
    """Resolved runtime configuration."""

    api_key: str
    base_url: str = DEFAULT_OPENWEATHER_BASE
    http_timeout: float | None = None  # seconds; None = wait indefinitely
    log_level: str = "INFO"

    @property
    def weather_url(self) -> str:
        return self.base_url.rstrip("/") + WEATHER_PATH

    @property
    def reverse_geocode_url(self) -> str:
        return self.base_url.rstrip("/") + REVERSE_GEOCODE_PATH


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Returns:
        Settings instance.

    Raises:
        ConfigError: If OPENWEATHER_API_KEY is unset/blank or the timeout is not a number.
    """
    env = os.environ if environ is None else environ

    api_key = env.get("OPENWEATHER_API_KEY", "").strip()
    if not api_key:
        raise ConfigError("OPENWEATHER_API_KEY missing")

    raw_timeout = env.get("WEATHERNOW_HTTP_TIMEOUT", "").strip()
    try:
        http_timeout = float(raw_timeout) if raw_timeout else None
    except ValueError as e:
        raise ConfigError(f"WEATHERNOW_HTTP_TIMEOUT is not a number: {raw_timeout!r}") from e

    return Settings(
        api_key=api_key,
        base_url=env.get("OPENWEATHER_BASE") or DEFAULT_OPENWEATHER_BASE,
        http_timeout=http_timeout,
        log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
    )


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once; quiet the HTTP client libraries."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # httpx logs full request URLs at INFO, which would include the appid
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
