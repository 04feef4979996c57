"""Google Maps Platform client (Places text search, Directions, Distance Matrix)."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from travel_assistant.config import Settings

logger = logging.getLogger(__name__)

EMPTY_STATUSES = {"ZERO_RESULTS", "NOT_FOUND"}


class GoogleMapsStatusError(Exception):
    """Raised when Google answers 200 but with a failure status in the body."""

    def __init__(self, status: str, message: Optional[str] = None):
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}" if message else status)


class GoogleMapsClient:
    """Client for the Google Maps web service APIs used by the travel tools."""

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.api_key = settings.google_maps_api_key
        self.base_url = "https://maps.googleapis.com/maps/api"
        self.language = "ko"
        self.region = "kr"

        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=settings.http_timeout_seconds)

    async def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """GET a Maps endpoint and return JSON, raising on failure statuses."""
        query = {
            **params,
            "key": self.api_key,
            "language": self.language,
            "region": self.region,
        }
        response = await self.client.get(f"{self.base_url}/{path}", params=query)
        response.raise_for_status()

        data = response.json()
        status = data.get("status", "OK")
        if status != "OK" and status not in EMPTY_STATUSES:
            raise GoogleMapsStatusError(status, data.get("error_message"))
        return data

    async def text_search(self, query: str) -> List[Dict[str, Any]]:
        """Search places by free text.
        Args:
            query (str): e.g. "restaurants in 부산".
        Returns:
            List[Dict[str, Any]]: Normalized places (name, formatted_address, rating, price_level).
        """
        data = await self._get("place/textsearch/json", {"query": query})
        results = data.get("results") or []
        logger.info(f"Google text search '{query}': {data.get('status')} {len(results)}")
        return [self._normalize_place(place) for place in results]

    async def directions(self, origin: str, destination: str, mode: str) -> Optional[Dict[str, Any]]:
        """Get the first route for one travel mode.
        Args:
            origin (str): Origin text.
            destination (str): Destination text.
            mode (str): transit, driving, walking or bicycling.
        Returns:
            Optional[Dict[str, Any]]: Normalized route option or None when no route exists.
        """
        data = await self._get(
            "directions/json",
            {"origin": origin, "destination": destination, "mode": mode},
        )
        routes = data.get("routes") or []
        if not routes or not routes[0].get("legs"):
            logger.info(f"No {mode} route {origin} -> {destination}: {data.get('status')}")
            return None

        leg = routes[0]["legs"][0]
        return {
            "mode": mode,
            "distance_text": leg.get("distance", {}).get("text", ""),
            "distance_m": leg.get("distance", {}).get("value", 0),
            "duration_text": leg.get("duration", {}).get("text", ""),
            "duration_s": leg.get("duration", {}).get("value", 0),
            "steps": leg.get("steps") or [],
        }

    async def distance_matrix(self, origin: str, destination: str, mode: str = "driving") -> Optional[Dict[str, Any]]:
        """Get distance and duration for a single origin/destination pair.
        Args:
            origin (str): Origin text.
            destination (str): Destination text.
            mode (str): Travel mode.
        Returns:
            Optional[Dict[str, Any]]: Distance/duration summary or None if not routable.
        """
        data = await self._get(
            "distancematrix/json",
            {"origins": origin, "destinations": destination, "mode": mode},
        )
        rows = data.get("rows") or []
        if not rows or not rows[0].get("elements"):
            return None

        element = rows[0]["elements"][0]
        if element.get("status") != "OK":
            logger.info(f"Distance matrix element status {element.get('status')} for {origin} -> {destination}")
            return None

        return {
            "mode": mode,
            "origin_address": (data.get("origin_addresses") or [origin])[0],
            "destination_address": (data.get("destination_addresses") or [destination])[0],
            "distance_text": element.get("distance", {}).get("text", ""),
            "distance_m": element.get("distance", {}).get("value", 0),
            "duration_text": element.get("duration", {}).get("text", ""),
            "duration_s": element.get("duration", {}).get("value", 0),
        }

    def _normalize_place(self, place: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "name": place.get("name", ""),
            "formatted_address": place.get("formatted_address", ""),
            "rating": place.get("rating"),
            "price_level": place.get("price_level"),
        }

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()
