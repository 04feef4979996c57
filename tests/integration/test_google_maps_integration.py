"""Optional integration tests against the real Google Maps and OpenWeatherMap APIs.

Skipped unless GOOGLE_MAPS_API_KEY / OPENWEATHER_API_KEY are set.
Run with:
    pytest -q tests/integration
"""

import os

import pytest

from travel_assistant.config import Settings
from travel_assistant.providers.google_maps_client import GoogleMapsClient
from travel_assistant.providers.openweather_client import OpenWeatherClient


has_google_key = bool(os.getenv("GOOGLE_MAPS_API_KEY"))
has_weather_key = bool(os.getenv("OPENWEATHER_API_KEY"))


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.skipif(not has_google_key, reason="GOOGLE_MAPS_API_KEY not set; skipping live API test")
async def test_live_text_search_and_directions():
    settings = Settings(_env_file=None, google_maps_api_key=os.environ["GOOGLE_MAPS_API_KEY"])
    client = GoogleMapsClient(settings)
    try:
        places = await client.text_search("tourist attractions in 서울")
        assert places
        assert all("name" in place for place in places)

        route = await client.directions("서울역", "강남역", "transit")
        assert route is not None
        assert route["distance_m"] > 0
    finally:
        await client.close()


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.skipif(not has_weather_key, reason="OPENWEATHER_API_KEY not set; skipping live API test")
async def test_live_current_weather():
    settings = Settings(_env_file=None, openweather_api_key=os.environ["OPENWEATHER_API_KEY"])
    client = OpenWeatherClient(settings)
    try:
        data = await client.current_weather("Seoul")
        assert data is not None
        assert "temp" in data["main"]
    finally:
        await client.close()
