"""Render target, error banner, and the snapshot → display-field projection."""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol

from pytz import UnknownTimeZoneError, timezone, utc

from weathernow.config import ICON_BASE
from weathernow.models import WeatherSnapshot

logger = logging.getLogger(__name__)

# Status texts shown in the place-name slot while no snapshot is displayed
STATUS_PLACEHOLDER = "Enter City"
STATUS_LOADING = "Loading..."
STATUS_GETTING_LOCATION = "Getting location..."
STATUS_DETECTING_LOCATION = "Detecting location..."
STATUS_LOADING_WEATHER = "Loading weather..."

_EMPTY = "--"
_MS_TO_KMH = 3.6


class RenderTarget(Protocol):
    """Named display fields the renderer and the flows write into."""

    def set_place_name(self, text: str) -> None: ...
    def set_temperature(self, text: str) -> None: ...
    def set_description(self, text: str) -> None: ...
    def set_icon(self, url: str, alt: str) -> None: ...
    def set_feels_like(self, text: str) -> None: ...
    def set_humidity(self, text: str) -> None: ...
    def set_wind_speed(self, text: str) -> None: ...
    def set_pressure(self, text: str) -> None: ...


class ErrorPresenter(Protocol):
    def show(self, message: str) -> None: ...
    def hide(self) -> None: ...


@dataclass
class WeatherCard:
    """In-memory render target. Kept in st.session_state between reruns."""

    place_name: str = STATUS_PLACEHOLDER
    temperature: str = _EMPTY
    description: str = ""
    icon_url: str = ""
    icon_alt: str = ""
    feels_like: str = _EMPTY
    humidity: str = _EMPTY
    wind_speed: str = _EMPTY
    pressure: str = _EMPTY
    date_text: str = ""

    def set_place_name(self, text: str) -> None:
        self.place_name = text

    def set_temperature(self, text: str) -> None:
        self.temperature = text

    def set_description(self, text: str) -> None:
        self.description = text

    def set_icon(self, url: str, alt: str) -> None:
        self.icon_url = url
        self.icon_alt = alt

    def set_feels_like(self, text: str) -> None:
        self.feels_like = text

    def set_humidity(self, text: str) -> None:
        self.humidity = text

    def set_wind_speed(self, text: str) -> None:
        self.wind_speed = text

    def set_pressure(self, text: str) -> None:
        self.pressure = text

    @property
    def has_weather(self) -> bool:
        return bool(self.icon_url)


@dataclass
class ErrorBanner:
    """Single error region. Each show() replaces the previous message."""

    message: str = ""
    visible: bool = False

    def show(self, message: str) -> None:
        self.message = message
        self.visible = True

    def hide(self) -> None:
        self.visible = False


def round_half_up(value: float) -> int:
    """Round like browser Math.round: halves go toward +infinity (2.5 → 3, -2.5 → -2)."""
    return math.floor(value + 0.5)


def _format_number(value: float) -> str:
    # 65.0 → "65", 1012.5 → "1012.5"
    return str(int(value)) if float(value).is_integer() else str(value)


def icon_url(icon_code: str) -> str:
    return f"{ICON_BASE}/{icon_code}@2x.png"


def render_snapshot(
    snapshot: WeatherSnapshot, target: RenderTarget, errors: ErrorPresenter
) -> None:
    """Write every snapshot field into the render target and clear the error banner.

    Writes are absolute, so rendering the same snapshot twice leaves the
    target unchanged.

    Args:
        snapshot: Weather data to display.
        target: Display fields to overwrite.
        errors: Banner hidden after a successful render.
    """
    target.set_place_name(snapshot.place_name)
    target.set_temperature(str(round_half_up(snapshot.temperature)))
    target.set_description(snapshot.description)
    target.set_icon(icon_url(snapshot.icon), snapshot.description)
    target.set_feels_like(f"{round_half_up(snapshot.feels_like)}°C")
    target.set_humidity(f"{_format_number(snapshot.humidity)}%")
    target.set_wind_speed(f"{round_half_up(snapshot.wind_speed * _MS_TO_KMH)} km/h")
    target.set_pressure(f"{_format_number(snapshot.pressure)} hPa")
    errors.hide()


def format_date(day: date) -> str:
    """Format as en-US long date, e.g. "Monday, October 19, 2026"."""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def today_in(tz_name: str | None, now: datetime | None = None) -> date:
    """Return today's date in the given IANA time zone.

    Args:
        tz_name: Zone name reported by the browser ("Asia/Seoul"). None or unknown → UTC.
        now: Aware reference instant. Defaults to the current time.

    Returns:
        Local calendar date.
    """
    tz = utc
    if tz_name:
        try:
            tz = timezone(tz_name)
        except UnknownTimeZoneError:
            logger.warning("Unknown time zone %r, using UTC", tz_name)
    reference = now if now is not None else datetime.now(utc)
    return reference.astimezone(tz).date()
