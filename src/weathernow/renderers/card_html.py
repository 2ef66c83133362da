"""HTML weather card renderer.

Produces a self-contained HTML fragment for st.markdown(unsafe_allow_html=True).
All field text is escaped; the card never executes script.
"""

from __future__ import annotations

import html

from weathernow.display import ErrorBanner, WeatherCard
from weathernow.i18n import t

_BG = "#1e3c72"
_ACCENT = "#7ec8e3"
_ERROR_BG = "#ff6b6b"

CARD_CSS = f"""
<style>
.wn-card {{
    background: linear-gradient(135deg, {_BG} 0%, #2a5298 100%);
    border-radius: 16px;
    padding: 1.6rem 2rem;
    color: #ffffff;
    max-width: 520px;
    margin: 0 auto;
}}
.wn-card h2 {{ margin: 0; font-size: 1.8rem; }}
.wn-date {{ color: #c8d6ef; margin: 0.2rem 0 1rem; font-size: 0.9rem; }}
.wn-main {{ display: flex; align-items: center; gap: 1rem; }}
.wn-temp {{ font-size: 3.4rem; font-weight: 700; }}
.wn-desc {{ text-transform: capitalize; color: {_ACCENT}; margin: 0; }}
.wn-grid {{ display: grid; grid-template-columns: 1fr 1fr; gap: 0.6rem; margin-top: 1.2rem; }}
.wn-grid div {{ background: rgba(255,255,255,0.1); border-radius: 10px; padding: 0.6rem 0.8rem; }}
.wn-grid small {{ display: block; color: #c8d6ef; }}
.wn-error {{
    background: {_ERROR_BG};
    color: #ffffff;
    border-radius: 10px;
    padding: 0.7rem 1rem;
    max-width: 520px;
    margin: 0 auto 0.8rem;
}}
</style>
"""


def render_error_html(banner: ErrorBanner) -> str:
    """Banner fragment, or an empty string while the banner is hidden."""
    if not banner.visible or not banner.message:
        return ""
    return f"<div class='wn-error' role='alert'>{html.escape(banner.message)}</div>"


def render_card_html(card: WeatherCard, lang: str = "en") -> str:
    """Return the weather card as an HTML fragment.

    Before the first successful render only the status line and date are
    shown; afterwards every field is filled.

    Args:
        card: Current display fields.
        lang: Language code ('ko' or 'en') for field labels.

    Returns:
        HTML string (without the stylesheet; emit CARD_CSS once per page).
    """
    e = html.escape
    header = (
        f"<h2>{e(card.place_name)}</h2>"
        f"<p class='wn-date'>{e(card.date_text)}</p>"
    )
    if not card.has_weather:
        return f"<div class='wn-card'>{header}</div>"

    details = [
        ("label_feels_like", card.feels_like),
        ("label_humidity", card.humidity),
        ("label_wind", card.wind_speed),
        ("label_pressure", card.pressure),
    ]
    grid = "".join(
        f"<div><small>{e(t(key, lang))}</small>{e(value)}</div>" for key, value in details
    )
    return (
        f"<div class='wn-card'>{header}"
        "<div class='wn-main'>"
        f"<img src='{e(card.icon_url, quote=True)}' alt='{e(card.icon_alt, quote=True)}' width='96' height='96'/>"
        f"<div><span class='wn-temp'>{e(card.temperature)}°C</span>"
        f"<p class='wn-desc'>{e(card.description)}</p></div>"
        "</div>"
        f"<div class='wn-grid'>{grid}</div>"
        "</div>"
    )
