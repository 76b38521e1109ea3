"""
frontend/app.py: Streamlit UI for WeatherNow.

Pure view glue over ``WeatherSession`` from weather-assistant/: search,
location lookup, unit and theme toggles, recent cities, the weather card,
the 5-day forecast and the AI panel (auto insight + chat).
"""

import asyncio
import logging
import sys
from pathlib import Path

import streamlit as st

# weather-assistant/ holds the session, weather client and conversation logic
sys.path.insert(0, str(Path(__file__).parent.parent / "weather-assistant"))

from config import OPENWEATHER_ICON_URL, PREFERENCES_PATH  # noqa: E402
from errors import AssistantUnavailableError, InputValidationError, WeatherAppError  # noqa: E402
from preferences import PreferenceStore  # noqa: E402
from prompts import INSIGHT_FAILURE_MESSAGE  # noqa: E402
from session import WeatherSession  # noqa: E402
from weather_context import (  # noqa: E402
    day_abbrev,
    format_local_datetime,
    format_temp,
    format_visibility,
    format_wind,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

QUICK_PROMPTS = [
    "👕 What should I wear today?",
    "☂️ Do I need an umbrella?",
    "🏃 Good day for outdoor exercise?",
    "🚗 Any travel concerns?",
]

BACKGROUNDS = {
    "weather-clear": "linear-gradient(160deg, #f6d365 0%, #fda085 100%)",
    "weather-clouds": "linear-gradient(160deg, #bdc3c7 0%, #2c3e50 100%)",
    "weather-rain": "linear-gradient(160deg, #4b6cb7 0%, #182848 100%)",
    "weather-drizzle": "linear-gradient(160deg, #89f7fe 0%, #66a6ff 100%)",
    "weather-thunder": "linear-gradient(160deg, #232526 0%, #414345 100%)",
    "weather-snow": "linear-gradient(160deg, #e6dada 0%, #274046 100%)",
    "weather-mist": "linear-gradient(160deg, #757f9a 0%, #d7dde8 100%)",
}

st.set_page_config(page_title="WeatherNow", page_icon="⛅", layout="centered")


def icon_url(icon_code: str) -> str:
    return f"{OPENWEATHER_ICON_URL}/{icon_code}@2x.png"


# ── Session state ──────────────────────────────────────────────────────────────

if "session" not in st.session_state:
    st.session_state.session = WeatherSession(PreferenceStore(PREFERENCES_PATH))
    st.session_state.error = None
    st.session_state.insight = None
    st.session_state.chat_log = []  # displayed bubbles, including error bubbles
    st.session_state.located = False

session: WeatherSession = st.session_state.session


def _after_load() -> None:
    st.session_state.error = None
    st.session_state.chat_log = []
    try:
        st.session_state.insight = asyncio.run(session.conversation.generate_auto_insight())
    except AssistantUnavailableError:
        st.session_state.insight = None


def load_weather(coro) -> None:
    """Run a lookup; on failure the error replaces the weather card."""
    try:
        with st.spinner("Fetching weather..."):
            asyncio.run(coro)
    except WeatherAppError as exc:
        st.session_state.error = str(exc)
        return
    _after_load()


def send_chat(text: str) -> None:
    """Failures become a single bot bubble; nothing is retried."""
    if text.strip():
        st.session_state.chat_log.append({"role": "user", "content": text})
    try:
        with st.spinner("Thinking…"):
            reply = asyncio.run(session.conversation.send_message(text))
    except (InputValidationError, AssistantUnavailableError) as exc:
        reply = str(exc)
    st.session_state.chat_log.append({"role": "assistant", "content": reply})


# Silent location lookup on first visit; failures just leave the empty state.
if not st.session_state.located:
    st.session_state.located = True
    try:
        asyncio.run(session.search_current_location())
        _after_load()
    except WeatherAppError as exc:
        logger.info("Initial location lookup skipped: %s", exc)


# ── Theme and background ───────────────────────────────────────────────────────

background = BACKGROUNDS.get(session.condition_style() or "", "none")
text_color = "#f5f5f5" if session.theme == "dark" else "#1b1b1b"
base_color = "#0e1117" if session.theme == "dark" else "#fafafa"
st.markdown(
    f"""
    <style>
    .stApp {{ background: {background}, {base_color}; background-color: {base_color}; color: {text_color}; }}
    .muted {{ color: #9aa0a6; font-size: 0.82rem; font-style: italic; }}
    </style>
    """,
    unsafe_allow_html=True,
)

# ── Header and controls ────────────────────────────────────────────────────────

st.title("⛅ WeatherNow")

with st.sidebar:
    st.subheader("Settings")
    unit_label = "Switch to °F" if session.units.value == "metric" else "Switch to °C"
    if st.button(unit_label, use_container_width=True):
        try:
            with st.spinner("Refreshing..."):
                asyncio.run(session.toggle_units())
            if session.snapshot is not None:
                _after_load()
        except WeatherAppError as exc:
            st.session_state.error = str(exc)
        st.rerun()

    theme_label = "☀️ Light theme" if session.theme == "dark" else "🌙 Dark theme"
    if st.button(theme_label, use_container_width=True):
        session.toggle_theme()
        st.rerun()

    if session.recent_cities:
        st.subheader("Recent")
        for city in session.recent_cities:
            if st.button(city, key=f"recent-{city}", use_container_width=True):
                load_weather(session.search_city(city))
                st.rerun()

with st.form("search", clear_on_submit=False):
    col_input, col_search, col_geo = st.columns([6, 2, 2])
    query = col_input.text_input("City", placeholder="Search for a city...", label_visibility="collapsed")
    searched = col_search.form_submit_button("Search", use_container_width=True)
    located = col_geo.form_submit_button("📍 Locate", use_container_width=True)

if searched and query.strip():
    load_weather(session.search_city(query))
    st.rerun()
if located:
    load_weather(session.search_current_location())
    st.rerun()

# ── Weather card ───────────────────────────────────────────────────────────────

if st.session_state.error:
    st.error(st.session_state.error)
    st.stop()

snapshot = session.snapshot
if snapshot is None:
    st.info("Search for a city or use your location to see the weather.")
    st.stop()

units = session.units
header_left, header_right = st.columns([3, 1])
with header_left:
    st.header(f"{snapshot.city}, {snapshot.country}")
    st.caption(format_local_datetime(snapshot.timestamp, snapshot.utc_offset))
    st.subheader(format_temp(snapshot.temperature, units))
    st.write(snapshot.description.capitalize())
    st.caption(f"Feels like {format_temp(snapshot.feels_like, units)}")
with header_right:
    st.image(icon_url(snapshot.icon), caption=snapshot.description)

metric_cols = st.columns(4)
metric_cols[0].metric("Humidity", f"{snapshot.humidity}%")
metric_cols[1].metric("Wind", format_wind(snapshot.wind_speed, units))
metric_cols[2].metric("Visibility", format_visibility(snapshot.visibility))
metric_cols[3].metric("Pressure", f"{snapshot.pressure} hPa")

if session.digests:
    st.subheader("5-Day Forecast")
    for col, entry in zip(st.columns(len(session.digests)), session.digests):
        with col:
            st.markdown(f"**{day_abbrev(entry.timestamp)}**")
            st.image(icon_url(entry.icon), caption=entry.description)
            st.write(format_temp(entry.temp_max, units))
            st.caption(format_temp(entry.temp_min, units))

# ── AI panel ───────────────────────────────────────────────────────────────────

with st.expander("✦ AI Weather Assistant", expanded=True):
    if st.session_state.insight:
        st.info(st.session_state.insight)
    else:
        st.markdown(f'<span class="muted">{INSIGHT_FAILURE_MESSAGE}</span>', unsafe_allow_html=True)

    for msg in st.session_state.chat_log:
        with st.chat_message(msg["role"]):
            st.markdown(msg["content"])

    quick_cols = st.columns(len(QUICK_PROMPTS))
    for col, prompt_text in zip(quick_cols, QUICK_PROMPTS):
        if col.button(prompt_text, use_container_width=True):
            # drop the leading emoji
            send_chat(prompt_text.split(" ", 1)[1])
            st.rerun()

# Streamlit runs one script at a time, so the input stays blocked while a send is in flight.
if prompt := st.chat_input("Ask about the weather..."):
    send_chat(prompt)
    st.rerun()
