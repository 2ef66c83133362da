"""WeatherNow: Streamlit app showing current conditions for a city or the user's location."""

import asyncio

import streamlit as st
from dotenv import load_dotenv
from streamlit_js_eval import streamlit_js_eval

load_dotenv()

from weathernow.config import Settings, load_settings, setup_logging  # noqa: E402
from weathernow.display import (  # noqa: E402
    STATUS_GETTING_LOCATION,
    STATUS_PLACEHOLDER,
    ErrorBanner,
    WeatherCard,
    format_date,
    today_in,
)
from weathernow.errors import ConfigError  # noqa: E402
from weathernow.flows import RequestSequencer, locate_weather, search_city  # noqa: E402
from weathernow.i18n import t  # noqa: E402
from weathernow.location import TIMEZONE_SCRIPT, BrowserLocator, geolocation_script  # noqa: E402
from weathernow.renderers.card_html import (  # noqa: E402
    CARD_CSS,
    render_card_html,
    render_error_html,
)
from weathernow.weather import OpenWeatherClient, open_http_client  # noqa: E402

# --- Language detection (browser-first via streamlit-js-eval) ---
# First run returns None; the rerun triggered by streamlit_js_eval fills it in.
if "lang" not in st.session_state:
    _browser_lang: str | None = streamlit_js_eval(
        js_expressions="navigator.language", key="_lang_detect", height=0
    )
    if _browser_lang is not None:
        st.session_state.lang = "ko" if _browser_lang.lower().startswith("ko") else "en"

_lang: str = st.session_state.get("lang", "en")

st.set_page_config(
    page_title=t("page_title", _lang),
    page_icon="⛅",
    layout="centered",
)

# --- Session state initialization ---
if "card" not in st.session_state:
    st.session_state.card = WeatherCard()
if "banner" not in st.session_state:
    st.session_state.banner = ErrorBanner()
if "sequencer" not in st.session_state:
    st.session_state.sequencer = RequestSequencer()
if "geo_request" not in st.session_state:
    st.session_state.geo_request = 0  # bumped to re-run the browser geolocation call
if "geo_ticket" not in st.session_state:
    st.session_state.geo_ticket = None
if "geo_done" not in st.session_state:
    st.session_state.geo_done = False

card: WeatherCard = st.session_state.card
banner: ErrorBanner = st.session_state.banner
sequencer: RequestSequencer = st.session_state.sequencer

try:
    settings: Settings = load_settings()
except ConfigError as e:
    st.error(t("config_error", _lang).format(error=e))
    st.stop()

setup_logging(settings.log_level)

st.markdown(
    CARD_CSS
    + """
    <style>
    /* Hide streamlit_js_eval invisible iframes */
    iframe[src*="streamlit_js_eval"] { display: none !important; }
    </style>
    """,
    unsafe_allow_html=True,
)

# --- Date line in the browser's time zone ---
if "tz" not in st.session_state:
    _tz: str | None = streamlit_js_eval(
        js_expressions=TIMEZONE_SCRIPT, key="_tz_detect", height=0
    )
    if _tz is not None:
        st.session_state.tz = _tz


async def _search(query: str) -> None:
    async with open_http_client(settings) as http:
        await search_city(OpenWeatherClient(settings, http), query, card, banner, sequencer)


async def _locate(payload: dict, ticket: int) -> None:
    locator = BrowserLocator(payload)
    if not locator.supported and sequencer.is_current(ticket):
        card.set_place_name(STATUS_PLACEHOLDER)
    async with open_http_client(settings) as http:
        await locate_weather(
            OpenWeatherClient(settings, http),
            locator,
            card,
            banner,
            sequencer,
            ticket=ticket,
        )


# --- Search form (Enter inside the text input submits too) ---
with st.form("search", clear_on_submit=False, border=False):
    col1, col2 = st.columns([4, 1])
    with col1:
        query = st.text_input(
            t("label_city", _lang),
            placeholder=t("placeholder_city", _lang),
            label_visibility="collapsed",
        )
    with col2:
        submitted = st.form_submit_button(t("btn_search", _lang), use_container_width=True)

if st.button(t("btn_locate", _lang), key="locate_btn"):
    st.session_state.geo_request += 1
    st.session_state.geo_ticket = None
    st.session_state.geo_done = False

if submitted:
    asyncio.run(_search(query))

# --- Geolocation: automatic on first load, again on "Use my location" ---
# The browser result arrives on a later rerun; the ticket is reserved when
# the request is issued so a search made meanwhile supersedes it.
if not st.session_state.geo_done:
    if st.session_state.geo_ticket is None:
        st.session_state.geo_ticket = sequencer.issue()
        card.set_place_name(STATUS_GETTING_LOCATION)
        banner.hide()
    _payload: dict | None = streamlit_js_eval(
        js_expressions=geolocation_script(),
        key=f"_geolocate_{st.session_state.geo_request}",
        height=0,
    )
    if _payload is not None:
        st.session_state.geo_done = True
        asyncio.run(_locate(_payload, st.session_state.geo_ticket))

# --- Card (date line refreshed every minute without a full rerun) ---
@st.fragment(run_every=60)
def _card_view() -> None:
    card.date_text = format_date(today_in(st.session_state.get("tz")))
    st.markdown(
        render_error_html(banner) + render_card_html(card, _lang),
        unsafe_allow_html=True,
    )


_card_view()
