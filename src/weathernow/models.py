"""Data model definitions. Boundaries between the fetch and render layers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class WeatherSnapshot:
    """Current conditions for one place. Input to the renderer."""

    place_name: str  # Name returned by the weather API (or reverse-geocoded override)
    temperature: float  # °C
    feels_like: float  # °C
    humidity: float  # Relative humidity (%)
    pressure: float  # Sea-level pressure (hPa)
    wind_speed: float  # m/s as delivered by the API
    condition: str  # Short summary ("Clouds", "Rain", ...)
    description: str  # Human-readable description ("broken clouds")
    icon: str  # Icon code ("04d")


@dataclass(frozen=True)
class Coordinates:
    """Device position reported by the geolocation API."""

    lat: float  # Latitude (decimal degrees)
    lon: float  # Longitude (decimal degrees)
    accuracy_m: float | None = None  # Reported accuracy radius, if any


@dataclass(frozen=True)
class GeolocationOptions:
    """Options passed to navigator.geolocation.getCurrentPosition."""

    high_accuracy: bool = True
    timeout_ms: int = 15_000
    maximum_age_ms: int = 0  # 0 = never reuse a cached position


DEFAULT_GEOLOCATION_OPTIONS = GeolocationOptions()
