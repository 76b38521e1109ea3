import asyncio
import logging

import httpx

from config import OPENWEATHER_API_KEY, OPENWEATHER_BASE_URL
from errors import LocationNotFoundError, NetworkError, UnauthorizedError, UpstreamError
from models import ForecastEntry, Units, WeatherSnapshot

REQUEST_TIMEOUT = 10.0

logger = logging.getLogger(__name__)


async def fetch_by_city(
    name: str,
    units: Units = Units.metric,
    api_key: str = OPENWEATHER_API_KEY,
) -> tuple[WeatherSnapshot, list[ForecastEntry]]:
    return await _fetch_weather({"q": name}, units, api_key)


async def fetch_by_coordinates(
    lat: float,
    lon: float,
    units: Units = Units.metric,
    api_key: str = OPENWEATHER_API_KEY,
) -> tuple[WeatherSnapshot, list[ForecastEntry]]:
    return await _fetch_weather({"lat": lat, "lon": lon}, units, api_key)


async def _fetch_weather(
    location: dict,
    units: Units,
    api_key: str,
) -> tuple[WeatherSnapshot, list[ForecastEntry]]:
    """Fetch current conditions and the forecast concurrently.

    Both requests must succeed. The first failure cancels the sibling
    request and is raised as-is, so the caller never sees a partial result.
    """
    params = {"appid": api_key, "units": units.value, **location}
    logger.info("Weather lookup: location=%r units=%s", location, units.value)

    async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as client:
        tasks = [
            asyncio.create_task(_get_json(client, "weather", params)),
            asyncio.create_task(_get_json(client, "forecast", params)),
        ]
        _, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    failures = [task.exception() for task in tasks if not task.cancelled() and task.exception()]
    if failures:
        raise failures[0]

    current, forecast = (task.result() for task in tasks)
    snapshot = WeatherSnapshot.from_api(current)
    entries = [ForecastEntry.from_api(item) for item in forecast.get("list", [])]
    logger.info(
        "Weather loaded: city=%r, forecast_entries=%d",
        snapshot.city,
        len(entries),
    )
    return snapshot, entries


async def _get_json(client: httpx.AsyncClient, endpoint: str, params: dict) -> dict:
    url = f"{OPENWEATHER_BASE_URL}/{endpoint}"
    try:
        response = await client.get(url, params=params)
    except httpx.TimeoutException as exc:
        logger.error("OpenWeather %s timed out: %s", endpoint, exc)
        raise NetworkError("Weather service timed out. Please check your connection.") from exc
    except httpx.RequestError as exc:
        logger.error("OpenWeather %s unreachable: %s", endpoint, exc)
        raise NetworkError("Weather service is unreachable. Please check your connection.") from exc

    if response.is_success:
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict):
            return data
        logger.error("OpenWeather %s returned a malformed body: %r", endpoint, response.text[:200])
        raise UpstreamError(
            "Weather service returned an invalid response.",
            status_code=response.status_code,
        )

    if response.status_code == 404:
        logger.warning("OpenWeather 404 for %s: params=%r", endpoint, _redacted(params))
        raise LocationNotFoundError("City not found. Please check the spelling and try again.")
    if response.status_code == 401:
        logger.error("OpenWeather rejected the API key (401)")
        raise UnauthorizedError("Invalid API key. Please check OPENWEATHER_API_KEY.")

    logger.error("OpenWeather %s error %d: %s", endpoint, response.status_code, response.text[:200])
    raise UpstreamError(
        f"Weather service error ({response.status_code}). Please try again.",
        status_code=response.status_code,
    )


def _redacted(params: dict) -> dict:
    return {key: value for key, value in params.items() if key != "appid"}
