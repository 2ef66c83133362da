"""Unit tests for the OpenWeatherMap access layer."""

import httpx
import pytest

from weathernow.errors import GenericFailure
from weathernow.weather import (
    choose_place_name,
    fetch_city_weather,
    fetch_coordinate_weather,
    parse_snapshot,
    resolve_place_name,
)


class TestParseSnapshot:
    def test_maps_every_field(self, weather_payload):
        snapshot = parse_snapshot(weather_payload)

        assert snapshot.place_name == "Seoul"
        assert snapshot.temperature == 21.6
        assert snapshot.feels_like == 20.4
        assert snapshot.humidity == 65
        assert snapshot.pressure == 1012
        assert snapshot.wind_speed == 3.6
        assert snapshot.condition == "Clouds"
        assert snapshot.description == "broken clouds"
        assert snapshot.icon == "04d"

    def test_missing_weather_entry_is_generic_failure(self, weather_payload):
        weather_payload["weather"] = []
        with pytest.raises(GenericFailure):
            parse_snapshot(weather_payload)

    def test_non_object_body_is_generic_failure(self):
        with pytest.raises(GenericFailure):
            parse_snapshot(["not", "a", "dict"])


class TestFetchCityWeather:
    @pytest.mark.asyncio
    async def test_success_sends_fixed_query(self, make_api, banner, weather_payload):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=weather_payload)

        snapshot = await fetch_city_weather(make_api(handler), "New York", banner)

        assert snapshot is not None
        assert snapshot.place_name == "Seoul"
        assert not banner.visible
        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == "/data/2.5/weather"
        assert request.url.params["q"] == "New York"
        assert request.url.params["appid"] == "test-key"
        assert request.url.params["units"] == "metric"
        assert request.url.params["lang"] == "en"

    @pytest.mark.asyncio
    async def test_404_shows_not_found(self, make_api, banner):
        api = make_api(lambda request: httpx.Response(404, json={"cod": "404"}))

        assert await fetch_city_weather(api, "Atlantis", banner) is None
        assert banner.visible
        assert banner.message == "City not found. Please enter a valid city name."

    @pytest.mark.asyncio
    async def test_401_includes_server_detail(self, make_api, banner):
        api = make_api(
            lambda request: httpx.Response(
                401, json={"cod": 401, "message": "Invalid API key"}
            )
        )

        assert await fetch_city_weather(api, "Seoul", banner) is None
        assert banner.message.startswith("API Key Error (401): Invalid API key.")
        assert "API Key is activated" in banner.message

    @pytest.mark.asyncio
    async def test_401_without_json_body_uses_generic_detail(self, make_api, banner):
        api = make_api(lambda request: httpx.Response(401, text="<html>nope</html>"))

        assert await fetch_city_weather(api, "Seoul", banner) is None
        assert banner.message.startswith("API Key Error (401): API Key is invalid.")

    @pytest.mark.asyncio
    async def test_429_asks_to_retry_later(self, make_api, banner):
        api = make_api(lambda request: httpx.Response(429))

        assert await fetch_city_weather(api, "Seoul", banner) is None
        assert banner.message == "Rate limit exceeded. Please try again after a few minutes."

    @pytest.mark.asyncio
    async def test_other_status_reports_code(self, make_api, banner):
        api = make_api(lambda request: httpx.Response(503))

        assert await fetch_city_weather(api, "Seoul", banner) is None
        assert banner.message == "Error fetching weather data (Status: 503)."

    @pytest.mark.asyncio
    async def test_transport_error_is_shown_not_raised(self, make_api, banner):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        assert await fetch_city_weather(make_api(handler), "Seoul", banner) is None
        assert banner.message == "Unable to reach the weather service."

    @pytest.mark.asyncio
    async def test_malformed_body_is_shown_not_raised(self, make_api, banner):
        api = make_api(lambda request: httpx.Response(200, text="not json"))

        assert await fetch_city_weather(api, "Seoul", banner) is None
        assert banner.message == "An unknown error occurred."


class TestFetchCoordinateWeather:
    @pytest.mark.asyncio
    async def test_sends_lat_lon(self, make_api, banner, weather_payload):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=weather_payload)

        snapshot = await fetch_coordinate_weather(make_api(handler), 37.5665, 126.978, banner)

        assert snapshot is not None
        params = seen[0].url.params
        assert float(params["lat"]) == 37.5665
        assert float(params["lon"]) == 126.978
        assert "q" not in params
        assert params["units"] == "metric"

    @pytest.mark.asyncio
    async def test_404_is_not_city_not_found(self, make_api, banner):
        api = make_api(lambda request: httpx.Response(404))

        assert await fetch_coordinate_weather(api, 0.0, 0.0, banner) is None
        assert banner.message == "Error fetching weather data (Status: 404)."


class TestChoosePlaceName:
    def test_prefers_first_english_name(self):
        candidates = [
            {"name": "Jung-gu"},
            {"name": "서울", "local_names": {"en": "Seoul", "ko": "서울"}},
        ]
        assert choose_place_name(candidates) == "Seoul"

    def test_falls_back_to_first_plain_name(self):
        candidates = [{"local_names": {"ko": "부산"}}, {"name": "Busan"}]
        assert choose_place_name(candidates) == "Busan"

    def test_nothing_usable(self):
        assert choose_place_name([]) is None
        assert choose_place_name([{"local_names": {}}, {"country": "KR"}]) is None


class TestResolvePlaceName:
    @pytest.mark.asyncio
    async def test_requests_five_candidates(self, make_api):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"name": "Mapo-gu", "local_names": {"en": "Mapo"}}])

        assert await resolve_place_name(make_api(handler), 37.55, 126.9) == "Mapo"
        request = seen[0]
        assert request.url.path == "/geo/1.0/reverse"
        assert request.url.params["limit"] == "5"
        assert request.url.params["appid"] == "test-key"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(500),
            httpx.Response(401, json={"message": "Invalid API key"}),
            httpx.Response(200, text="garbage"),
            httpx.Response(200, json={"unexpected": "object"}),
            httpx.Response(200, json=[]),
        ],
    )
    async def test_failures_yield_none(self, make_api, response):
        assert await resolve_place_name(make_api(lambda request: response), 1.0, 2.0) is None

    @pytest.mark.asyncio
    async def test_transport_error_yields_none(self, make_api):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        assert await resolve_place_name(make_api(handler), 1.0, 2.0) is None


def _bad_gzip(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip")


def _redirect_loop(request: httpx.Request) -> httpx.Response:
    raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=request)


UNREADABLE_RESPONSES = pytest.mark.parametrize(
    "handler", [_bad_gzip, _redirect_loop], ids=["bad-content-encoding", "too-many-redirects"]
)


class TestUnreadableResponses:
    @pytest.mark.asyncio
    @UNREADABLE_RESPONSES
    async def test_city_fetch_shows_error(self, make_api, banner, handler):
        assert await fetch_city_weather(make_api(handler), "Seoul", banner) is None
        assert banner.message == "Unable to reach the weather service."

    @pytest.mark.asyncio
    @UNREADABLE_RESPONSES
    async def test_coordinate_fetch_shows_error(self, make_api, banner, handler):
        assert await fetch_coordinate_weather(make_api(handler), 1.0, 2.0, banner) is None
        assert banner.message == "Unable to reach the weather service."

    @pytest.mark.asyncio
    @UNREADABLE_RESPONSES
    async def test_reverse_geocoding_yields_none(self, make_api, banner, handler):
        assert await resolve_place_name(make_api(handler), 1.0, 2.0) is None
        assert not banner.visible


@pytest.mark.parametrize(
    "section, field, value",
    [
        ("main", "temp", float("nan")),
        ("main", "feels_like", float("-inf")),
        ("main", "humidity", float("inf")),
        ("main", "pressure", float("nan")),
        ("wind", "speed", float("inf")),
    ],
)
def test_non_finite_numbers_are_generic_failure(weather_payload, section, field, value):
    weather_payload[section][field] = value
    with pytest.raises(GenericFailure):
        parse_snapshot(weather_payload)
