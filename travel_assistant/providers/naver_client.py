"""Naver Search and Naver Cloud Maps API client."""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel

from travel_assistant.config import Settings

logger = logging.getLogger(__name__)

# Naver local search returns WGS84 degrees scaled by 10^7
NAVER_COORD_SCALE = 10_000_000

SEARCH_KINDS = ("local", "blog", "news", "shop", "cafearticle")


class ResolvedPlace(BaseModel):
    """A place name resolved to map coordinates."""
    lng: float
    lat: float
    road_address: str = ""
    address: str = ""
    query: str = ""

    @property
    def coordinates(self) -> str:
        """Coordinates in the `lng,lat` form Naver Directions expects."""
        return f"{self.lng},{self.lat}"


class NaverClient:
    """Client for Naver Search (local/blog/news/shop/cafe) and Naver Cloud Maps."""

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.client_id = settings.naver_client_id
        self.client_secret = settings.naver_client_secret
        self.cloud_key_id, self.cloud_key = settings.naver_cloud_credentials
        self.search_base_url = "https://openapi.naver.com/v1/search"
        self.maps_base_url = "https://naveropenapi.apigw.ntruss.com"

        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=settings.http_timeout_seconds)

    @property
    def enabled(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def _search_headers(self) -> Dict[str, str]:
        return {
            "X-Naver-Client-Id": self.client_id or "",
            "X-Naver-Client-Secret": self.client_secret or "",
        }

    def _maps_headers(self) -> Dict[str, str]:
        return {
            "X-NCP-APIGW-API-KEY-ID": self.cloud_key_id or "",
            "X-NCP-APIGW-API-KEY": self.cloud_key or "",
        }

    async def search(self,
                    kind: str,
                    query: str,
                    display: int = 5,
                    sort: str = "sim",
                ) -> Dict[str, Any]:
        """Run one Naver search.
        Args:
            kind (str): One of local, blog, news, shop, cafearticle.
            query (str): Search text.
            display (int): Number of items to return.
            sort (str): Provider sort key (sim, date, random).
        Returns:
            Dict[str, Any]: Response JSON with `total` and `items`.
        Raises:
            httpx.HTTPError: On transport failure or non-2xx status.
        """
        if kind not in SEARCH_KINDS:
            raise ValueError(f"Unsupported Naver search kind: {kind}")

        response = await self.client.get(
            f"{self.search_base_url}/{kind}.json",
            params={"query": query, "display": display, "sort": sort},
            headers=self._search_headers(),
        )
        response.raise_for_status()
        data = response.json()
        logger.info(f"Naver {kind} search for '{query}': total={data.get('total', 0)}")
        return data

    async def find_place(self, query: str) -> Optional[ResolvedPlace]:
        """Look up the first local-search hit that carries coordinates.
        Args:
            query (str): Place name.
        Returns:
            Optional[ResolvedPlace]: Resolved place or None on no match or error.
        """
        try:
            data = await self.search("local", query, display=1, sort="random")
        except httpx.HTTPError as e:
            logger.error(f"Naver local search failed for '{query}': {e}")
            return None
        except Exception as e:
            logger.error(f"Unexpected error in Naver local search for '{query}': {e}")
            return None

        items = data.get("items") or []
        if not items:
            logger.info(f"No local search result for '{query}'")
            return None

        item = items[0]
        if not item.get("mapx") or not item.get("mapy"):
            logger.info(f"Local search result for '{query}' has no coordinates")
            return None

        try:
            lng = float(item["mapx"]) / NAVER_COORD_SCALE
            lat = float(item["mapy"]) / NAVER_COORD_SCALE
        except (TypeError, ValueError) as e:
            logger.warning(f"Bad coordinates in local search result for '{query}': {e}")
            return None

        return ResolvedPlace(
            lng=lng,
            lat=lat,
            road_address=item.get("roadAddress") or item.get("address") or "",
            address=item.get("address") or "",
            query=query,
        )

    async def geocode(self, address: str) -> List[Dict[str, Any]]:
        """Geocode an address with Naver Cloud Maps.
        Args:
            address (str): Address or place text.
        Returns:
            List[Dict[str, Any]]: Address records (roadAddress, jibunAddress, x, y, ...).
        Raises:
            httpx.HTTPError: On transport failure or non-2xx status.
        """
        response = await self.client.get(
            f"{self.maps_base_url}/map-geocode/v2/geocode",
            params={"query": address},
            headers=self._maps_headers(),
        )
        response.raise_for_status()
        return response.json().get("addresses") or []

    async def try_geocode(self, address: str) -> Optional[ResolvedPlace]:
        """Geocode without raising; None when nothing usable comes back."""
        try:
            addresses = await self.geocode(address)
        except httpx.HTTPError as e:
            logger.error(f"Naver geocoding failed for '{address}': {e}")
            return None
        except Exception as e:
            logger.error(f"Unexpected error geocoding '{address}': {e}")
            return None

        if not addresses:
            logger.info(f"Naver geocoding returned no addresses for '{address}'")
            return None

        first = addresses[0]
        try:
            return ResolvedPlace(
                lng=float(first["x"]),
                lat=float(first["y"]),
                road_address=first.get("roadAddress") or "",
                address=first.get("jibunAddress") or "",
                query=address,
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Unusable geocoding record for '{address}': {e}")
            return None

    async def driving_route(self, start: str, goal: str, option: str) -> Dict[str, Any]:
        """Request a driving route from Naver Cloud Directions 15.
        Args:
            start (str): Start coordinates as `lng,lat`.
            goal (str): Goal coordinates as `lng,lat`.
            option (str): Route option, e.g. `traoptimal`.
        Returns:
            Dict[str, Any]: Response JSON (`code`, `message`, `route`).
        Raises:
            httpx.HTTPError: On transport failure or non-2xx status.
        """
        response = await self.client.get(
            f"{self.maps_base_url}/map-direction-15/v1/driving",
            params={"start": start, "goal": goal, "option": option},
            headers=self._maps_headers(),
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()

