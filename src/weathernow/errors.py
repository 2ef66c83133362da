"""Failure taxonomy. ``str(exc)`` is the message shown on the error banner."""


class WeatherLookupError(Exception):
    """Base class for every failure surfaced to the user."""


class ConfigError(WeatherLookupError):
    """Required configuration is missing or invalid."""


# --- Weather API failures ---


class CityNotFound(WeatherLookupError):
    def __init__(self) -> None:
        super().__init__("City not found. Please enter a valid city name.")


class Unauthorized(WeatherLookupError):
    """HTTP 401. `detail` is the server's ``message`` field when it sent one."""

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or "API Key is invalid"
        super().__init__(
            f"API Key Error (401): {self.detail}. Please ensure that: "
            "1) API Key is correct, 2) API Key is activated (wait 10-15 min), "
            "3) API Key has no extra spaces."
        )


class RateLimited(WeatherLookupError):
    def __init__(self) -> None:
        super().__init__("Rate limit exceeded. Please try again after a few minutes.")


class HttpError(WeatherLookupError):
    def __init__(self, status: int) -> None:
        self.status = status
        super().__init__(f"Error fetching weather data (Status: {status}).")


class ServiceUnavailable(WeatherLookupError):
    """The request failed before a usable response arrived."""

    def __init__(self) -> None:
        super().__init__("Unable to reach the weather service.")


class GenericFailure(WeatherLookupError):
    def __init__(self, message: str = "An unknown error occurred.") -> None:
        super().__init__(message)


# --- Geolocation failures ---

_LOCATION_PREFIX = "Unable to get your location. "


class GeolocationError(WeatherLookupError):
    reason = "An unknown error occurred."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or _LOCATION_PREFIX + self.reason)


class GeolocationUnsupported(GeolocationError):
    def __init__(self) -> None:
        super().__init__("Geolocation is not supported by your browser.")


class GeolocationDenied(GeolocationError):
    reason = "Location access denied by user."


class GeolocationUnavailable(GeolocationError):
    reason = "Location information unavailable."


class GeolocationTimeout(GeolocationError):
    reason = "Location request timed out."


class GeolocationUnknown(GeolocationError):
    pass


# GeolocationPositionError.code → exception type
GEOLOCATION_ERROR_CODES: dict[int, type[GeolocationError]] = {
    1: GeolocationDenied,
    2: GeolocationUnavailable,
    3: GeolocationTimeout,
}


def geolocation_error_for(code: int | None) -> GeolocationError:
    """Map a browser GeolocationPositionError code to its exception."""
    return GEOLOCATION_ERROR_CODES.get(code or 0, GeolocationUnknown)()
