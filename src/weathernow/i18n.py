"""Simple two-language (ko/en) translation helper for page chrome."""

_STRINGS: dict[str, dict[str, str]] = {
    "page_title": {
        "ko": "오늘의 날씨",
        "en": "WeatherNow",
    },
    "label_city": {
        "ko": "도시",
        "en": "City",
    },
    "placeholder_city": {
        "ko": "도시 이름을 입력하세요",
        "en": "Enter city name...",
    },
    "btn_search": {
        "ko": "검색",
        "en": "Search",
    },
    "btn_locate": {
        "ko": "📍 내 위치",
        "en": "📍 Use my location",
    },
    "label_feels_like": {
        "ko": "체감 온도",
        "en": "Feels like",
    },
    "label_humidity": {
        "ko": "습도",
        "en": "Humidity",
    },
    "label_wind": {
        "ko": "풍속",
        "en": "Wind speed",
    },
    "label_pressure": {
        "ko": "기압",
        "en": "Pressure",
    },
    "config_error": {
        "ko": "설정 오류: {error}",
        "en": "Configuration error: {error}",
    },
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key
