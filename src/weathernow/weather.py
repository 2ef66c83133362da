"""OpenWeatherMap access layer: current weather by city or coordinates, plus reverse geocoding."""

import logging
import math
from typing import Any

import httpx

from weathernow.config import Settings
from weathernow.display import ErrorPresenter
from weathernow.errors import (
    CityNotFound,
    GenericFailure,
    HttpError,
    RateLimited,
    ServiceUnavailable,
    Unauthorized,
    WeatherLookupError,
)
from weathernow.models import WeatherSnapshot

logger = logging.getLogger(__name__)

_UNITS = "metric"
_LANG = "en"
_REVERSE_LIMIT = 5


def open_http_client(settings: Settings) -> httpx.AsyncClient:
    """AsyncClient for one user action. ``http_timeout=None`` disables httpx timeouts."""
    return httpx.AsyncClient(timeout=settings.http_timeout)


def _finite(value: Any) -> float:
    # JSON bodies may carry NaN or Infinity, which float() accepts
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite value: {value!r}")
    return number


def parse_snapshot(payload: Any) -> WeatherSnapshot:
    """Convert a /data/2.5/weather JSON body into a WeatherSnapshot.

    Raises:
        GenericFailure: If a required field is missing, has the wrong type, or is not finite.
    """
    try:
        main = payload["main"]
        condition = payload["weather"][0]
        return WeatherSnapshot(
            place_name=str(payload["name"]),
            temperature=_finite(main["temp"]),
            feels_like=_finite(main["feels_like"]),
            humidity=_finite(main["humidity"]),
            pressure=_finite(main["pressure"]),
            wind_speed=_finite(payload["wind"]["speed"]),
            condition=str(condition.get("main", "")),
            description=str(condition["description"]),
            icon=str(condition["icon"]),
        )
    except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
        raise GenericFailure() from e


def _error_detail(response: httpx.Response) -> str | None:
    """Server-supplied ``message`` from an error body, if the body is JSON."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None


def _raise_for_weather_status(response: httpx.Response, *, city_lookup: bool) -> None:
    """Classify a non-2xx weather response. 404 only means "no such city" for name lookups."""
    if response.is_success:
        return
    status = response.status_code
    if status == 404 and city_lookup:
        raise CityNotFound()
    if status == 401:
        raise Unauthorized(_error_detail(response))
    if status == 429:
        raise RateLimited()
    raise HttpError(status)


class OpenWeatherClient:
    """Thin async wrapper over the OpenWeatherMap endpoints.

    Methods raise WeatherLookupError subclasses; the module-level fetchers
    below turn those into banner messages.
    """

    def __init__(self, settings: Settings, http: httpx.AsyncClient) -> None:
        self.settings = settings
        self.http = http

    async def _get(self, url: str, params: dict[str, Any]) -> httpx.Response:
        params = {**params, "appid": self.settings.api_key}
        try:
            return await self.http.get(url, params=params)
        except httpx.RequestError as e:
            logger.warning("Request to %s failed: %s", url, e.__class__.__name__)
            raise ServiceUnavailable() from e

    async def _get_weather(self, params: dict[str, Any], *, city_lookup: bool) -> WeatherSnapshot:
        response = await self._get(
            self.settings.weather_url, {**params, "units": _UNITS, "lang": _LANG}
        )
        _raise_for_weather_status(response, city_lookup=city_lookup)
        try:
            payload = response.json()
        except ValueError as e:
            raise GenericFailure() from e
        return parse_snapshot(payload)

    async def weather_by_city(self, city: str) -> WeatherSnapshot:
        logger.debug("Weather by city: %s", city)
        return await self._get_weather({"q": city}, city_lookup=True)

    async def weather_by_coordinates(self, lat: float, lon: float) -> WeatherSnapshot:
        logger.debug("Weather by coordinates: %.4f, %.4f", lat, lon)
        return await self._get_weather({"lat": lat, "lon": lon}, city_lookup=False)

    async def reverse_geocode(self, lat: float, lon: float) -> list[dict[str, Any]]:
        """Raw reverse-geocoding candidates, nearest first.

        Raises:
            WeatherLookupError: On transport failure or non-2xx status.
            ValueError: If the body is not JSON.
        """
        response = await self._get(
            self.settings.reverse_geocode_url,
            {"lat": lat, "lon": lon, "limit": _REVERSE_LIMIT},
        )
        if not response.is_success:
            raise HttpError(response.status_code)
        data = response.json()
        return data if isinstance(data, list) else []


async def fetch_city_weather(
    api: OpenWeatherClient, city: str, errors: ErrorPresenter
) -> WeatherSnapshot | None:
    """Current weather for a city name.

    Failures are shown on `errors` and reported as None.

    Args:
        api: OpenWeatherMap client.
        city: Non-empty, trimmed city name.
        errors: Banner that receives the failure message.

    Returns:
        WeatherSnapshot, or None on any classified failure.
    """
    try:
        return await api.weather_by_city(city)
    except WeatherLookupError as e:
        logger.warning("City weather lookup failed for %r: %s", city, e.__class__.__name__)
        errors.show(str(e))
        return None


async def fetch_coordinate_weather(
    api: OpenWeatherClient, lat: float, lon: float, errors: ErrorPresenter
) -> WeatherSnapshot | None:
    """Current weather for a coordinate pair. Same contract as fetch_city_weather."""
    try:
        return await api.weather_by_coordinates(lat, lon)
    except WeatherLookupError as e:
        logger.warning("Coordinate weather lookup failed: %s", e.__class__.__name__)
        errors.show(str(e))
        return None


def choose_place_name(candidates: list[dict[str, Any]]) -> str | None:
    """Pick the display name from reverse-geocoding candidates.

    Order: first English localized name, then first plain name, then nothing.
    """
    for candidate in candidates:
        english = (candidate.get("local_names") or {}).get("en")
        if english:
            return str(english)
    for candidate in candidates:
        if candidate.get("name"):
            return str(candidate["name"])
    return None


async def resolve_place_name(api: OpenWeatherClient, lat: float, lon: float) -> str | None:
    """Best-effort place name for coordinates. Never raises, never shows an error."""
    try:
        candidates = await api.reverse_geocode(lat, lon)
    except (WeatherLookupError, ValueError) as e:
        logger.warning("Reverse geocoding failed: %s", e)
        return None
    try:
        return choose_place_name([c for c in candidates if isinstance(c, dict)])
    except AttributeError as e:
        logger.warning("Unexpected reverse geocoding payload: %s", e)
        return None
