import os
import sys

# Ensure weather-assistant/ is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import httpx
import pytest
import respx

import weather_client
from errors import LocationNotFoundError, NetworkError, UnauthorizedError, UpstreamError
from models import Units

WEATHER_URL = f"{weather_client.OPENWEATHER_BASE_URL}/weather"
FORECAST_URL = f"{weather_client.OPENWEATHER_BASE_URL}/forecast"

MOCK_CURRENT = {
    "coord": {"lon": -0.1257, "lat": 51.5085},
    "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
    "main": {
        "temp": 11.3,
        "feels_like": 10.4,
        "temp_min": 10.1,
        "temp_max": 12.2,
        "pressure": 1009,
        "humidity": 81,
    },
    "visibility": 10000,
    "wind": {"speed": 5.66, "deg": 230},
    "dt": 1772366400,
    "sys": {"country": "GB", "sunrise": 1772346000, "sunset": 1772386000},
    "timezone": 0,
    "name": "London",
    "cod": 200,
}

MOCK_FORECAST = {
    "cod": "200",
    "cnt": 2,
    "list": [
        {
            "dt": 1772377200,
            "main": {"temp": 11.0, "temp_min": 9.8, "temp_max": 11.0, "humidity": 80},
            "weather": [{"id": 803, "main": "Clouds", "description": "broken clouds", "icon": "04d"}],
            "dt_txt": "2026-03-01 15:00:00",
        },
        {
            "dt": 1772388000,
            "main": {"temp": 9.1, "temp_min": 8.7, "temp_max": 9.1, "humidity": 84},
            "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10n"}],
            "dt_txt": "2026-03-01 18:00:00",
        },
    ],
    "city": {"name": "London", "country": "GB"},
}


@respx.mock
async def test_fetch_by_city_parses_both_responses():
    respx.get(WEATHER_URL).mock(return_value=httpx.Response(200, json=MOCK_CURRENT))
    respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=MOCK_FORECAST))

    snapshot, forecast = await weather_client.fetch_by_city("London", Units.metric, api_key="test_key")

    assert snapshot.city == "London"
    assert snapshot.country == "GB"
    assert snapshot.temperature == 11.3
    assert snapshot.feels_like == 10.4
    assert snapshot.humidity == 81
    assert snapshot.wind_speed == 5.66
    assert snapshot.pressure == 1009
    assert snapshot.visibility == 10000
    assert snapshot.condition == "Rain"
    assert snapshot.description == "light rain"
    assert snapshot.icon == "10d"
    assert [entry.description for entry in forecast] == ["broken clouds", "light rain"]
    assert forecast[0].temp_min == 9.8
    assert forecast[0].temp_max == 11.0


@respx.mock
async def test_city_request_parameters():
    current_route = respx.get(WEATHER_URL).mock(return_value=httpx.Response(200, json=MOCK_CURRENT))
    forecast_route = respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=MOCK_FORECAST))

    await weather_client.fetch_by_city("London", Units.imperial, api_key="test_key")

    for route in (current_route, forecast_route):
        params = route.calls.last.request.url.params
        assert params["q"] == "London"
        assert params["appid"] == "test_key"
        assert params["units"] == "imperial"


@respx.mock
async def test_fetch_by_coordinates_sends_lat_lon():
    current_route = respx.get(WEATHER_URL).mock(return_value=httpx.Response(200, json=MOCK_CURRENT))
    respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=MOCK_FORECAST))

    snapshot, _ = await weather_client.fetch_by_coordinates(51.5, -0.12, api_key="test_key")

    params = current_route.calls.last.request.url.params
    assert params["lat"] == "51.5"
    assert params["lon"] == "-0.12"
    assert "q" not in params
    assert snapshot.city == "London"


@respx.mock
async def test_missing_visibility_parses_as_none():
    current = {k: v for k, v in MOCK_CURRENT.items() if k != "visibility"}
    respx.get(WEATHER_URL).mock(return_value=httpx.Response(200, json=current))
    respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=MOCK_FORECAST))

    snapshot, _ = await weather_client.fetch_by_city("London", api_key="test_key")

    assert snapshot.visibility is None


async def test_404_maps_to_location_not_found():
    with respx.mock(assert_all_called=False) as router:
        router.get(WEATHER_URL).mock(
            return_value=httpx.Response(404, json={"cod": "404", "message": "city not found"})
        )
        router.get(FORECAST_URL).mock(
            return_value=httpx.Response(404, json={"cod": "404", "message": "city not found"})
        )

        with pytest.raises(LocationNotFoundError) as excinfo:
            await weather_client.fetch_by_city("Atlantis", api_key="test_key")

    assert "City not found" in str(excinfo.value)


async def test_401_maps_to_unauthorized():
    with respx.mock(assert_all_called=False) as router:
        router.get(WEATHER_URL).mock(return_value=httpx.Response(401, json={"cod": 401}))
        router.get(FORECAST_URL).mock(return_value=httpx.Response(401, json={"cod": 401}))

        with pytest.raises(UnauthorizedError):
            await weather_client.fetch_by_city("London", api_key="bad_key")


async def test_other_status_maps_to_upstream_error_with_code():
    with respx.mock(assert_all_called=False) as router:
        router.get(WEATHER_URL).mock(return_value=httpx.Response(503, text="unavailable"))
        router.get(FORECAST_URL).mock(return_value=httpx.Response(503, text="unavailable"))

        with pytest.raises(UpstreamError) as excinfo:
            await weather_client.fetch_by_city("London", api_key="test_key")

    assert excinfo.value.status_code == 503
    assert "503" in str(excinfo.value)


async def test_non_json_success_maps_to_upstream_error():
    with respx.mock(assert_all_called=False) as router:
        router.get(WEATHER_URL).mock(return_value=httpx.Response(200, text="<html>portal</html>"))
        router.get(FORECAST_URL).mock(return_value=httpx.Response(200, text="<html>portal</html>"))

        with pytest.raises(UpstreamError) as excinfo:
            await weather_client.fetch_by_city("London", api_key="test_key")

    assert excinfo.value.status_code == 200
    assert "invalid response" in str(excinfo.value)


async def test_forecast_failure_fails_whole_lookup():
    with respx.mock(assert_all_called=False) as router:
        router.get(WEATHER_URL).mock(return_value=httpx.Response(200, json=MOCK_CURRENT))
        router.get(FORECAST_URL).mock(return_value=httpx.Response(500, text="boom"))

        with pytest.raises(UpstreamError) as excinfo:
            await weather_client.fetch_by_city("London", api_key="test_key")

    assert excinfo.value.status_code == 500


async def test_current_failure_fails_whole_lookup():
    with respx.mock(assert_all_called=False) as router:
        router.get(WEATHER_URL).mock(return_value=httpx.Response(404, json={"cod": "404"}))
        router.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=MOCK_FORECAST))

        with pytest.raises(LocationNotFoundError):
            await weather_client.fetch_by_city("Nowhere", api_key="test_key")


async def test_connection_error_maps_to_network_error():
    with respx.mock(assert_all_called=False) as router:
        router.get(WEATHER_URL).mock(side_effect=httpx.ConnectError("connection refused"))
        router.get(FORECAST_URL).mock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(NetworkError):
            await weather_client.fetch_by_city("London", api_key="test_key")


async def test_timeout_maps_to_network_error():
    with respx.mock(assert_all_called=False) as router:
        router.get(WEATHER_URL).mock(return_value=httpx.Response(200, json=MOCK_CURRENT))
        router.get(FORECAST_URL).mock(side_effect=httpx.ReadTimeout("timed out"))

        with pytest.raises(NetworkError) as excinfo:
            await weather_client.fetch_by_city("London", api_key="test_key")

    assert "timed out" in str(excinfo.value)
