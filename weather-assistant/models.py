from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict


class Units(str, Enum):
    metric = "metric"
    imperial = "imperial"

    @property
    def temp_symbol(self) -> str:
        return "°C" if self is Units.metric else "°F"

    @property
    def wind_label(self) -> str:
        return "m/s" if self is Units.metric else "mph"


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class WeatherSnapshot(BaseModel):
    """Current conditions for one location, as returned by ``/weather``."""

    model_config = ConfigDict(frozen=True)

    city: str
    country: str
    timestamp: int  # Unix seconds, UTC
    utc_offset: int  # seconds east of UTC
    temperature: float
    feels_like: float
    humidity: int
    wind_speed: float
    pressure: int
    visibility: int | None = None  # metres
    condition: str  # e.g. "Rain", "Clouds"
    description: str
    icon: str

    @classmethod
    def from_api(cls, data: dict) -> "WeatherSnapshot":
        weather = (data.get("weather") or [{}])[0]
        main = data.get("main", {})
        return cls(
            city=data.get("name", ""),
            country=data.get("sys", {}).get("country", ""),
            timestamp=data.get("dt", 0),
            utc_offset=data.get("timezone", 0),
            temperature=main.get("temp", 0.0),
            feels_like=main.get("feels_like", 0.0),
            humidity=main.get("humidity", 0),
            wind_speed=data.get("wind", {}).get("speed", 0.0),
            pressure=main.get("pressure", 0),
            visibility=data.get("visibility"),
            condition=weather.get("main", ""),
            description=weather.get("description", ""),
            icon=weather.get("icon", ""),
        )


class ForecastEntry(BaseModel):
    """One ~3-hour slot of the 5-day forecast."""

    model_config = ConfigDict(frozen=True)

    timestamp: int
    temp_min: float
    temp_max: float
    description: str
    icon: str

    @classmethod
    def from_api(cls, item: dict) -> "ForecastEntry":
        weather = (item.get("weather") or [{}])[0]
        main = item.get("main", {})
        return cls(
            timestamp=item.get("dt", 0),
            temp_min=main.get("temp_min", 0.0),
            temp_max=main.get("temp_max", 0.0),
            description=weather.get("description", ""),
            icon=weather.get("icon", ""),
        )
