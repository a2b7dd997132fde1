"""
Open-Meteo weather provider.

Reads current conditions from the Open-Meteo forecast API. Farms without
stored coordinates are located by geocoding their region name; geocoding
results are kept in a small least-recently-used cache.
"""

from collections import OrderedDict
from datetime import UTC, datetime
from typing import Any

import httpx

from src.config import get_logger, get_settings
from src.core.entities.signals import WeatherSnapshot
from src.core.exceptions import (
    MalformedPayloadError,
    ProviderTimeoutError,
    ProviderUnavailableError,
)
from src.core.interfaces.providers import IWeatherProvider

logger = get_logger(__name__)

PROVIDER_NAME = "open_meteo"

CURRENT_FIELDS = (
    "temperature_2m",
    "relative_humidity_2m",
    "wind_speed_10m",
    "precipitation",
)


class OpenMeteoWeatherProvider(IWeatherProvider):
    """Current weather from Open-Meteo (wind speed in km/h)."""

    def __init__(
        self,
        base_url: str | None = None,
        geocoding_url: str | None = None,
        timeout: float | None = None,
        geocode_cache_size: int | None = None,
    ) -> None:
        settings = get_settings().weather
        self.base_url = base_url or settings.base_url
        self.geocoding_url = geocoding_url or settings.geocoding_url
        self.timeout = timeout or settings.timeout
        self.geocode_cache_size = geocode_cache_size or settings.geocode_cache_size
        self._locations: OrderedDict[str, tuple[float, float]] = OrderedDict()

    async def get_current_weather(
        self,
        region: str | None,
        latitude: float | None = None,
        longitude: float | None = None,
    ) -> WeatherSnapshot:
        """
        Current conditions at the farm.

        Raises:
            ProviderUnavailableError: No usable location or API unreachable
            ProviderTimeoutError: API did not answer in time
            MalformedPayloadError: Response missing current conditions
        """
        if latitude is None or longitude is None:
            if not region:
                raise ProviderUnavailableError(PROVIDER_NAME, "farm has no location")
            latitude, longitude = await self._geocode(region)

        data = await self._get_json(
            self.base_url,
            {
                "latitude": latitude,
                "longitude": longitude,
                "current": ",".join(CURRENT_FIELDS),
                "wind_speed_unit": "kmh",
                "timezone": "UTC",
            },
        )

        current = data.get("current")
        if not isinstance(current, dict):
            raise MalformedPayloadError(PROVIDER_NAME, "missing 'current' block", str(data))

        try:
            snapshot = WeatherSnapshot(
                temperature=current["temperature_2m"],
                humidity=current["relative_humidity_2m"],
                wind_speed=current.get("wind_speed_10m") or 0.0,
                precipitation=current.get("precipitation") or 0.0,
                observed_at=self._parse_time(current.get("time")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedPayloadError(PROVIDER_NAME, f"bad current conditions: {e}", str(current)) from e

        logger.debug(
            "weather_fetched",
            latitude=latitude,
            longitude=longitude,
            temperature=snapshot.temperature,
            humidity=snapshot.humidity,
        )
        return snapshot

    async def _geocode(self, region: str) -> tuple[float, float]:
        key = " ".join(region.lower().split())
        if key in self._locations:
            self._locations.move_to_end(key)
            return self._locations[key]

        # Region names are often "Nashik, Maharashtra"; the first part geocodes best
        name = region.split(",")[0].strip()
        data = await self._get_json(
            self.geocoding_url,
            {"name": name, "count": 1, "language": "en", "format": "json"},
        )

        results = data.get("results") or []
        if not results:
            raise ProviderUnavailableError(PROVIDER_NAME, f"unknown region '{region}'")

        try:
            location = (float(results[0]["latitude"]), float(results[0]["longitude"]))
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedPayloadError(PROVIDER_NAME, "bad geocoding result", str(results[0])) from e

        self._remember(key, location)
        logger.info("region_geocoded", region=region, latitude=location[0], longitude=location[1])
        return location

    def _remember(self, key: str, location: tuple[float, float]) -> None:
        if len(self._locations) >= self.geocode_cache_size:
            # Evict the least recently used region
            self._locations.popitem(last=False)
        self._locations[key] = location

    async def _get_json(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params)
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(PROVIDER_NAME, self.timeout) from e
        except httpx.HTTPError as e:
            raise ProviderUnavailableError(PROVIDER_NAME, str(e)) from e

        if response.status_code != 200:
            raise ProviderUnavailableError(
                PROVIDER_NAME, f"HTTP {response.status_code}: {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedPayloadError(PROVIDER_NAME, "response is not JSON", response.text) from e

        if not isinstance(data, dict):
            raise MalformedPayloadError(PROVIDER_NAME, "expected a JSON object", response.text)
        return data

    @staticmethod
    def _parse_time(value: Any) -> datetime | None:
        if not isinstance(value, str):
            return None
        try:
            return datetime.fromisoformat(value).replace(tzinfo=UTC)
        except ValueError:
            return None


# Singleton
_weather_provider: OpenMeteoWeatherProvider | None = None


def get_weather_provider() -> OpenMeteoWeatherProvider:
    """Get or create the weather provider singleton."""
    global _weather_provider
    if _weather_provider is None:
        _weather_provider = OpenMeteoWeatherProvider()
    return _weather_provider
