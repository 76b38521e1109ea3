import logging

from config import AI_PROXY_URL, OPENWEATHER_API_KEY
from conversation import ConversationManager
from errors import InputValidationError, WeatherAppError
from forecast import reduce_to_daily_digests
from geolocation import locate
from models import ForecastEntry, Units, WeatherSnapshot
from preferences import PreferenceStore
from weather_client import fetch_by_city, fetch_by_coordinates

CONDITION_STYLES = {
    "Clear": "weather-clear",
    "Clouds": "weather-clouds",
    "Rain": "weather-rain",
    "Drizzle": "weather-drizzle",
    "Thunderstorm": "weather-thunder",
    "Snow": "weather-snow",
    "Mist": "weather-mist",
    "Smoke": "weather-mist",
    "Haze": "weather-mist",
    "Dust": "weather-mist",
    "Fog": "weather-mist",
    "Sand": "weather-mist",
    "Ash": "weather-mist",
    "Squall": "weather-thunder",
    "Tornado": "weather-thunder",
}

logger = logging.getLogger(__name__)


class WeatherSession:
    """Everything one user session knows: units, theme, weather and chat.

    Weather is replaced only after a lookup fully succeeds, and every
    successful lookup resets the conversation.
    """

    def __init__(
        self,
        store: PreferenceStore,
        proxy_url: str = AI_PROXY_URL,
        api_key: str = OPENWEATHER_API_KEY,
    ):
        self.store = store
        self.api_key = api_key
        self.units = Units.metric
        self.theme = store.load_theme()
        self.recent_cities = store.load_recent_cities()
        self.snapshot: WeatherSnapshot | None = None
        self.forecast: list[ForecastEntry] = []
        self.digests: list[ForecastEntry] = []
        self.conversation = ConversationManager(proxy_url)

    async def search_city(self, name: str) -> WeatherSnapshot:
        city = name.strip()
        if not city:
            raise InputValidationError("Please enter a city name.")
        snapshot, forecast = await fetch_by_city(city, self.units, self.api_key)
        self._on_loaded(snapshot, forecast, recent_name=city)
        return snapshot

    async def search_coordinates(self, lat: float, lon: float) -> WeatherSnapshot:
        snapshot, forecast = await fetch_by_coordinates(lat, lon, self.units, self.api_key)
        self._on_loaded(snapshot, forecast, recent_name=snapshot.city)
        return snapshot

    async def search_current_location(self) -> WeatherSnapshot:
        lat, lon = await locate()
        return await self.search_coordinates(lat, lon)

    def _on_loaded(self, snapshot: WeatherSnapshot, forecast: list[ForecastEntry], recent_name: str) -> None:
        self.snapshot = snapshot
        self.forecast = forecast
        self.digests = reduce_to_daily_digests(forecast)
        self.conversation.load(snapshot, self.digests, self.units)
        self.recent_cities = self.store.add_recent_city(recent_name)
        logger.info("Session loaded %s, %s (%d forecast days)", snapshot.city, snapshot.country, len(self.digests))

    async def toggle_units(self) -> Units:
        previous = self.units
        self.units = Units.imperial if previous is Units.metric else Units.metric
        if self.snapshot is not None:
            try:
                await self.search_city(self.snapshot.city)
            except WeatherAppError:
                # keep units consistent with the snapshot still on screen
                self.units = previous
                raise
        return self.units

    def toggle_theme(self) -> str:
        self.theme = "light" if self.theme == "dark" else "dark"
        self.store.save_theme(self.theme)
        return self.theme

    def condition_style(self) -> str | None:
        if self.snapshot is None:
            return None
        return CONDITION_STYLES.get(self.snapshot.condition)
