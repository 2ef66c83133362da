"""Plain-text card renderer for terminal output."""

from weathernow.display import WeatherCard


def render_card_text(card: WeatherCard) -> str:
    """Return the card as aligned ``label: value`` lines."""
    lines = [card.place_name]
    if card.date_text:
        lines.append(card.date_text)
    if card.has_weather:
        lines += [
            f"{card.temperature}°C, {card.description}",
            f"  Feels like: {card.feels_like}",
            f"  Humidity:   {card.humidity}",
            f"  Wind speed: {card.wind_speed}",
            f"  Pressure:   {card.pressure}",
        ]
    return "\n".join(lines)
