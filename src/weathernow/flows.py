"""User-action flows: city search and geolocation lookup."""

import dataclasses
import logging

from weathernow.display import (
    STATUS_DETECTING_LOCATION,
    STATUS_GETTING_LOCATION,
    STATUS_LOADING,
    STATUS_LOADING_WEATHER,
    STATUS_PLACEHOLDER,
    ErrorPresenter,
    RenderTarget,
    render_snapshot,
)
from weathernow.errors import GeolocationError, GeolocationUnsupported
from weathernow.location import Locator
from weathernow.models import DEFAULT_GEOLOCATION_OPTIONS, GeolocationOptions, WeatherSnapshot
from weathernow.weather import (
    OpenWeatherClient,
    fetch_city_weather,
    fetch_coordinate_weather,
    resolve_place_name,
)

logger = logging.getLogger(__name__)

EMPTY_CITY_MESSAGE = "Please enter a city name."


class RequestSequencer:
    """Hands out increasing tickets; only the latest ticket may touch the display."""

    def __init__(self) -> None:
        self._latest = 0

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, ticket: int) -> bool:
        return ticket == self._latest


def reconcile_place_name(snapshot: WeatherSnapshot, geocoded: str | None) -> WeatherSnapshot:
    """Prefer the reverse-geocoded name when it differs (case-insensitively) from the API's."""
    if geocoded and geocoded.lower() != snapshot.place_name.lower():
        return dataclasses.replace(snapshot, place_name=geocoded)
    return snapshot


async def search_city(
    api: OpenWeatherClient,
    query: str,
    target: RenderTarget,
    errors: ErrorPresenter,
    sequencer: RequestSequencer | None = None,
) -> WeatherSnapshot | None:
    """Look up and display the weather for a typed city name.

    Args:
        api: OpenWeatherMap client.
        query: Raw text from the city input.
        target: Display fields.
        errors: Error banner.
        sequencer: Optional; results of superseded searches are dropped.

    Returns:
        The rendered snapshot, or None if nothing was rendered.
    """
    city = query.strip()
    if not city:
        errors.show(EMPTY_CITY_MESSAGE)
        return None

    sequencer = sequencer or RequestSequencer()
    ticket = sequencer.issue()
    target.set_place_name(STATUS_LOADING)

    snapshot = await fetch_city_weather(api, city, errors)
    if not sequencer.is_current(ticket):
        logger.debug("Dropping stale result for %r", city)
        return None
    if snapshot is None:
        target.set_place_name(STATUS_PLACEHOLDER)
        return None
    render_snapshot(snapshot, target, errors)
    return snapshot


async def locate_weather(
    api: OpenWeatherClient,
    locator: Locator,
    target: RenderTarget,
    errors: ErrorPresenter,
    sequencer: RequestSequencer | None = None,
    options: GeolocationOptions = DEFAULT_GEOLOCATION_OPTIONS,
    ticket: int | None = None,
) -> WeatherSnapshot | None:
    """Look up and display the weather at the device's current position.

    Reverse geocoding runs before the weather request; its name wins over the
    weather API's own name when they differ.

    Args:
        api: OpenWeatherMap client.
        locator: Device geolocation source.
        target: Display fields.
        errors: Error banner.
        sequencer: Optional; results of superseded actions are dropped.
        options: Geolocation request options.
        ticket: Ticket reserved when the position request was issued. When
            None a new ticket is taken from `sequencer`.

    Returns:
        The rendered snapshot, or None if nothing was rendered.
    """
    if not locator.supported:
        errors.show(str(GeolocationUnsupported()))
        return None

    sequencer = sequencer or RequestSequencer()
    if ticket is None:
        ticket = sequencer.issue()
    if sequencer.is_current(ticket):
        target.set_place_name(STATUS_GETTING_LOCATION)
        errors.hide()

    try:
        position = await locator.current_position(options)
    except GeolocationError as e:
        logger.warning("Geolocation failed: %s", e.__class__.__name__)
        if sequencer.is_current(ticket):
            errors.show(str(e))
            target.set_place_name(STATUS_PLACEHOLDER)
        return None

    if sequencer.is_current(ticket):
        target.set_place_name(STATUS_DETECTING_LOCATION)
    geocoded = await resolve_place_name(api, position.lat, position.lon)

    if sequencer.is_current(ticket):
        target.set_place_name(STATUS_LOADING_WEATHER)
    snapshot = await fetch_coordinate_weather(api, position.lat, position.lon, errors)

    if not sequencer.is_current(ticket):
        logger.debug("Dropping stale location result")
        return None
    if snapshot is None:
        target.set_place_name(STATUS_PLACEHOLDER)
        return None

    snapshot = reconcile_place_name(snapshot, geocoded)
    render_snapshot(snapshot, target, errors)
    return snapshot
