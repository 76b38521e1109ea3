"""Text formatting for weather data, shared by prompts and the UI."""

import math
from datetime import datetime, timezone

from models import ForecastEntry, Units, WeatherSnapshot

_DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; 2.5 must display as 3.
    return math.floor(value + 0.5)


def format_temp(value: float, units: Units) -> str:
    return f"{round_half_up(value)}{units.temp_symbol}"


def format_wind(speed: float, units: Units) -> str:
    return f"{round_half_up(speed)} {units.wind_label}"


def format_visibility(visibility: int | None) -> str:
    if not visibility:
        return "N/A"
    return f"{visibility / 1000:.1f} km"


def day_abbrev(timestamp: int) -> str:
    return _DAY_NAMES[datetime.fromtimestamp(timestamp, tz=timezone.utc).weekday()][:3]


def format_local_datetime(timestamp: int, utc_offset: int) -> str:
    """Render a timestamp in the city's own local time."""
    local = datetime.fromtimestamp(timestamp + utc_offset, tz=timezone.utc)
    return (
        f"{_DAY_NAMES[local.weekday()]}, {local.day} {_MONTH_NAMES[local.month - 1]} {local.year}"
        f"  ·  {local.hour:02d}:{local.minute:02d}"
    )


def format_digest(entry: ForecastEntry, units: Units) -> str:
    return (
        f"{day_abbrev(entry.timestamp)}: "
        f"{round_half_up(entry.temp_min)}–{round_half_up(entry.temp_max)}{units.temp_symbol}, "
        f"{entry.description}"
    )


def build_context(
    snapshot: WeatherSnapshot,
    digests: list[ForecastEntry],
    units: Units,
) -> str:
    """Serialise current conditions and daily digests into a prompt block.

    The output depends only on the arguments, so the same input always
    produces the same text.
    """
    forecast_line = "; ".join(format_digest(entry, units) for entry in digests)
    return (
        f"Location: {snapshot.city}, {snapshot.country}\n"
        f"Current: {format_temp(snapshot.temperature, units)}, "
        f"feels like {format_temp(snapshot.feels_like, units)}, {snapshot.description}\n"
        f"Humidity: {snapshot.humidity}% | Wind: {format_wind(snapshot.wind_speed, units)} | "
        f"Pressure: {snapshot.pressure} hPa | Visibility: {format_visibility(snapshot.visibility)}\n"
        f"5-Day Forecast: {forecast_line}"
    )
