"""Device geolocation: browser script, payload decoding and the locator interface."""

import json
from typing import Any, Protocol

from weathernow.errors import GeolocationUnsupported, geolocation_error_for
from weathernow.models import DEFAULT_GEOLOCATION_OPTIONS, Coordinates, GeolocationOptions

TIMEZONE_SCRIPT = "Intl.DateTimeFormat().resolvedOptions().timeZone"


class Locator(Protocol):
    supported: bool

    async def current_position(self, options: GeolocationOptions) -> Coordinates: ...


def geolocation_script(options: GeolocationOptions = DEFAULT_GEOLOCATION_OPTIONS) -> str:
    """JS expression resolving to a plain-object position or error.

    The promise never rejects; outcomes are encoded as one of
    ``{"unsupported": true}``, ``{"error": {"code", "message"}}`` or
    ``{"coords": {"latitude", "longitude", "accuracy"}}``.
    """
    js_options = json.dumps(
        {
            "enableHighAccuracy": options.high_accuracy,
            "timeout": options.timeout_ms,
            "maximumAge": options.maximum_age_ms,
        }
    )
    return (
        "new Promise((resolve) => {"
        " if (!navigator.geolocation) { resolve({unsupported: true}); return; }"
        " navigator.geolocation.getCurrentPosition("
        "  (p) => resolve({coords: {latitude: p.coords.latitude,"
        " longitude: p.coords.longitude, accuracy: p.coords.accuracy}}),"
        "  (e) => resolve({error: {code: e.code, message: e.message}}),"
        f"  {js_options});"
        " })"
    )


def position_from_payload(payload: dict[str, Any]) -> Coordinates:
    """Decode the object produced by geolocation_script().

    Raises:
        GeolocationUnsupported: Browser has no geolocation API.
        GeolocationError: Subclass matching the browser error code.
    """
    if not isinstance(payload, dict):
        raise geolocation_error_for(None)
    if payload.get("unsupported"):
        raise GeolocationUnsupported()
    error = payload.get("error")
    if error is not None:
        code = error.get("code") if isinstance(error, dict) else None
        raise geolocation_error_for(code if isinstance(code, int) else None)
    try:
        coords = payload["coords"]
        accuracy = coords.get("accuracy")
        return Coordinates(
            lat=float(coords["latitude"]),
            lon=float(coords["longitude"]),
            accuracy_m=float(accuracy) if accuracy is not None else None,
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise geolocation_error_for(None) from e


class BrowserLocator:
    """Locator over a payload already returned by the browser.

    Streamlit delivers the JS result on a later rerun, so the script runs
    first and the orchestrator consumes its outcome here.
    """

    def __init__(self, payload: dict[str, Any]) -> None:
        self.payload = payload

    @property
    def supported(self) -> bool:
        return not (isinstance(self.payload, dict) and self.payload.get("unsupported"))

    async def current_position(self, options: GeolocationOptions) -> Coordinates:
        # options were baked into geolocation_script()
        return position_from_payload(self.payload)
