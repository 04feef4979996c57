"""Tool registry in fixed dispatch priority order."""

import logging
from typing import Dict, Iterable, List, Optional

import httpx

from travel_assistant.config import Settings
from travel_assistant.geo.resolver import CoordinateResolver
from travel_assistant.providers.google_maps_client import GoogleMapsClient
from travel_assistant.providers.naver_client import NaverClient
from travel_assistant.providers.openweather_client import OpenWeatherClient
from travel_assistant.repositories.budget import BudgetRepository
from travel_assistant.repositories.itineraries import ItineraryRepository
from travel_assistant.repositories.memory import KeyValueStore
from travel_assistant.tools.base import TravelTool
from travel_assistant.tools.google_tools import DistanceCalculatorTool, PlaceSearchTool, TravelWeatherTool
from travel_assistant.tools.memory_tools import BudgetCalculatorTool, ItineraryManagerTool
from travel_assistant.tools.naver_tools import (
    NaverBlogSearchTool,
    NaverCafeSearchTool,
    NaverCloudDirectionTool,
    NaverDirectionTool,
    NaverGeocodingTool,
    NaverNewsSearchTool,
    NaverPlaceSearchTool,
    NaverShopSearchTool,
)

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Ordered collection of tools.

    Order matters: legacy `tool:params` replies are matched by prefix in
    registration order, so a name that prefixes another must come later.
    """

    def __init__(self, tools: Iterable[TravelTool]):
        self._tools: Dict[str, TravelTool] = {}
        for tool in tools:
            if tool.name in self._tools:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            self._tools[tool.name] = tool

    @property
    def names(self) -> List[str]:
        return list(self._tools)

    @property
    def tools(self) -> List[TravelTool]:
        return list(self._tools.values())

    def get(self, name: str) -> Optional[TravelTool]:
        return self._tools.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def catalog(self) -> str:
        """One `- name: description` line per tool, for the classifier prompt."""
        return "\n".join(f"- {tool.name}: {tool.description}" for tool in self._tools.values())

    @classmethod
    def build(cls,
            settings: Settings,
            http_client: httpx.AsyncClient,
            store: KeyValueStore,
            aliases: Optional[Dict[str, List[str]]] = None,
        ) -> "ToolRegistry":
        """Wire the standard tool set over a shared HTTP client and store.
        Args:
            settings (Settings): Application settings with provider keys.
            http_client (httpx.AsyncClient): Shared client for every provider.
            store (KeyValueStore): Backing store for itinerary and budget data.
            aliases (Optional[Dict[str, List[str]]]): Landmark alias data for the resolver.
        Returns:
            ToolRegistry: Registry with Google, memory and (when configured) Naver tools.
        """
        google = GoogleMapsClient(settings, client=http_client)
        weather = OpenWeatherClient(settings, client=http_client)

        tools: List[TravelTool] = [
            PlaceSearchTool(google),
            DistanceCalculatorTool(google),
            TravelWeatherTool(weather),
            ItineraryManagerTool(ItineraryRepository(store)),
            BudgetCalculatorTool(BudgetRepository(store)),
        ]

        if settings.naver_search_enabled:
            naver = NaverClient(settings, client=http_client)
            resolver = CoordinateResolver.for_naver(naver, settings, aliases)
            tools.extend([
                NaverPlaceSearchTool(naver),
                NaverGeocodingTool(naver),
                NaverCloudDirectionTool(naver, resolver),
                NaverDirectionTool(naver, resolver),
                NaverBlogSearchTool(naver),
                NaverNewsSearchTool(naver),
                NaverShopSearchTool(naver),
                NaverCafeSearchTool(naver),
            ])
        else:
            logger.info("Naver credentials not configured; Naver tools disabled")

        return cls(tools)
