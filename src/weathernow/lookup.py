"""CLI entry point for a one-off city lookup.

    uv run python -m weathernow.lookup "Seoul"
"""

import asyncio
import sys
from datetime import date

from dotenv import load_dotenv

load_dotenv()

from weathernow.config import Settings, load_settings, setup_logging  # noqa: E402
from weathernow.display import ErrorBanner, WeatherCard, format_date  # noqa: E402
from weathernow.errors import ConfigError  # noqa: E402
from weathernow.flows import search_city  # noqa: E402
from weathernow.renderers.text import render_card_text  # noqa: E402
from weathernow.weather import OpenWeatherClient, open_http_client  # noqa: E402


async def lookup(settings: Settings, city: str, card: WeatherCard, banner: ErrorBanner) -> bool:
    """Run one city search against the configured API. Returns True if a snapshot was rendered."""
    async with open_http_client(settings) as http:
        snapshot = await search_city(OpenWeatherClient(settings, http), city, card, banner)
    return snapshot is not None


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    city = " ".join(args)

    card = WeatherCard(date_text=format_date(date.today()))
    banner = ErrorBanner()
    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(settings.log_level)
    ok = asyncio.run(lookup(settings, city, card, banner))
    if not ok:
        print(banner.message, file=sys.stderr)
        return 1
    print(render_card_text(card))
    return 0


if __name__ == "__main__":
    sys.exit(main())
