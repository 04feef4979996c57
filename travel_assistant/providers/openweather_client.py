"""OpenWeatherMap current-weather client."""

import logging
from typing import Any, Dict, Optional

import httpx

from travel_assistant.config import Settings

logger = logging.getLogger(__name__)


class OpenWeatherClient:
    """Client for the OpenWeatherMap 2.5 current weather endpoint."""

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.api_key = settings.openweather_api_key
        self.base_url = "https://api.openweathermap.org/data/2.5"

        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=settings.http_timeout_seconds)

    async def current_weather(self, city: str) -> Optional[Dict[str, Any]]:
        """Fetch current weather for a city name.
        Args:
            city (str): City name, Korean or English.
        Returns:
            Optional[Dict[str, Any]]: Raw weather JSON, or None if the city is unknown.
        Raises:
            httpx.HTTPError: On transport failure.
        """
        response = await self.client.get(
            f"{self.base_url}/weather",
            params={"q": city, "appid": self.api_key, "units": "metric", "lang": "kr"},
        )
        if response.status_code != 200:
            logger.info(f"OpenWeatherMap returned {response.status_code} for '{city}'")
            return None

        data = response.json()
        # `cod` is an int on success and sometimes a string on errors
        if str(data.get("cod")) != "200":
            logger.info(f"OpenWeatherMap cod={data.get('cod')} for '{city}'")
            return None
        return data

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()
