import logging

import httpx

from errors import GeolocationError

IP_LOCATION_URL = "http://ip-api.com/json"
GEOLOCATION_TIMEOUT = 10.0

_LOCATION_FAILED = "Unable to retrieve your location. Please try again."

logger = logging.getLogger(__name__)


async def locate(timeout: float = GEOLOCATION_TIMEOUT) -> tuple[float, float]:
    """Resolve the caller's approximate (lat, lon) from their IP address."""
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(IP_LOCATION_URL, params={"fields": "status,message,lat,lon"})
            response.raise_for_status()
            data = response.json()
    except httpx.TimeoutException as exc:
        logger.error("Location lookup timed out after %.0f s", timeout)
        raise GeolocationError(_LOCATION_FAILED) from exc
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("Location lookup failed: %s", exc)
        raise GeolocationError(_LOCATION_FAILED) from exc

    if data.get("status") != "success":
        logger.warning("Location lookup refused: %s", data.get("message", "unknown reason"))
        raise GeolocationError(_LOCATION_FAILED)

    return float(data["lat"]), float(data["lon"])
