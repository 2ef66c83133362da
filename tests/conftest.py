"""Pytest configuration and fixtures."""

from typing import Any, AsyncGenerator, Callable

import httpx
import pytest
import pytest_asyncio

from weathernow.config import Settings
from weathernow.display import ErrorBanner, WeatherCard
from weathernow.errors import GeolocationError
from weathernow.models import Coordinates, GeolocationOptions
from weathernow.weather import OpenWeatherClient

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="test-key", base_url="https://weather.test")


@pytest.fixture
def weather_payload() -> dict[str, Any]:
    """Representative /data/2.5/weather body."""
    return {
        "name": "Seoul",
        "main": {"temp": 21.6, "feels_like": 20.4, "humidity": 65, "pressure": 1012},
        "weather": [{"main": "Clouds", "description": "broken clouds", "icon": "04d"}],
        "wind": {"speed": 3.6},
    }


@pytest_asyncio.fixture
async def make_api(
    settings: Settings,
) -> AsyncGenerator[Callable[[Handler], OpenWeatherClient], None]:
    """Factory: OpenWeatherClient whose HTTP traffic goes to `handler`. Clients close at teardown."""
    clients: list[httpx.AsyncClient] = []

    def _make(handler: Handler) -> OpenWeatherClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(http)
        return OpenWeatherClient(settings, http)

    yield _make
    for http in clients:
        await http.aclose()


class RecordingCard(WeatherCard):
    """WeatherCard that also keeps every status / place-name write."""

    def __init__(self) -> None:
        super().__init__()
        self.place_history: list[str] = []

    def set_place_name(self, text: str) -> None:
        self.place_history.append(text)
        super().set_place_name(text)


@pytest.fixture
def card() -> RecordingCard:
    return RecordingCard()


@pytest.fixture
def banner() -> ErrorBanner:
    return ErrorBanner()


class FakeLocator:
    """Locator returning a fixed position or raising a fixed geolocation error."""

    def __init__(
        self,
        position: Coordinates | None = None,
        error: GeolocationError | None = None,
        supported: bool = True,
    ) -> None:
        self.position = position
        self.error = error
        self.supported = supported
        self.requested_options: list[GeolocationOptions] = []

    async def current_position(self, options: GeolocationOptions) -> Coordinates:
        self.requested_options.append(options)
        if self.error is not None:
            raise self.error
        assert self.position is not None
        return self.position


@pytest.fixture
def make_locator() -> Callable[..., FakeLocator]:
    return FakeLocator
