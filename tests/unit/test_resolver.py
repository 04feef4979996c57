"""Unit tests for the coordinate resolver chain.

Covers:
- Stage order and early exit
- Fallthrough to query variants and the geocoding endpoint
- Shared deadline across stages
- Concurrent origin/destination resolution
"""

import asyncio
from typing import Dict, List, Optional

import pytest

from travel_assistant.config import Settings
from travel_assistant.geo.resolver import (
    CoordinateResolver,
    Deadline,
    DirectSearchStrategy,
    GeocodeStrategy,
    QueryVariantStrategy,
)
from travel_assistant.providers.naver_client import ResolvedPlace


class FakeNaver:
    """Stands in for NaverClient; records every lookup."""

    def __init__(self,
                places: Optional[Dict[str, ResolvedPlace]] = None,
                geocoded: Optional[Dict[str, ResolvedPlace]] = None,
                delay: float = 0.0,
            ):
        self.places = places or {}
        self.geocoded = geocoded or {}
        self.delay = delay
        self.searches: List[str] = []
        self.geocodes: List[str] = []

    async def find_place(self, query: str) -> Optional[ResolvedPlace]:
        self.searches.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.places.get(query)

    async def try_geocode(self, address: str) -> Optional[ResolvedPlace]:
        self.geocodes.append(address)
        return self.geocoded.get(address)


def place(query: str, lng: float = 127.0, lat: float = 37.5) -> ResolvedPlace:
    return ResolvedPlace(lng=lng, lat=lat, road_address=f"{query} 도로명", query=query)


def resolver_for(naver: FakeNaver, deadline_seconds: float = 5.0, max_variants: int = 20) -> CoordinateResolver:
    return CoordinateResolver(
        strategies=[
            DirectSearchStrategy(naver),
            QueryVariantStrategy(naver, {}, max_variants),
            GeocodeStrategy(naver),
        ],
        deadline_seconds=deadline_seconds,
    )


@pytest.mark.asyncio
async def test_direct_hit_skips_later_stages():
    naver = FakeNaver(places={"강남역": place("강남역")})

    found = await resolver_for(naver).resolve("강남역")

    assert found.query == "강남역"
    assert naver.searches == ["강남역"]
    assert naver.geocodes == []


@pytest.mark.asyncio
async def test_query_variant_stage_stops_at_first_hit():
    naver = FakeNaver(places={"강남역 지하철역": place("강남역 지하철역")})

    found = await resolver_for(naver).resolve("강남역")

    assert found.query == "강남역 지하철역"
    assert naver.searches == ["강남역", "강남역 기차역", "강남역 지하철역"]
    assert naver.geocodes == []


@pytest.mark.asyncio
async def test_geocoding_is_the_last_resort():
    naver = FakeNaver(geocoded={"테헤란로 146": place("테헤란로 146")})

    found = await resolver_for(naver, max_variants=3).resolve("테헤란로 146")

    assert found.coordinates == "127.0,37.5"
    assert len(naver.searches) == 1 + 3
    assert naver.geocodes == ["테헤란로 146"]


@pytest.mark.asyncio
async def test_exhausted_chain_returns_none():
    naver = FakeNaver()
    assert await resolver_for(naver, max_variants=2).resolve("없는곳") is None


@pytest.mark.asyncio
async def test_failing_stage_falls_through_to_next():
    class BrokenStrategy(DirectSearchStrategy):
        async def resolve(self, place_name, deadline):
            raise RuntimeError("boom")

    naver = FakeNaver(geocoded={"서울역": place("서울역")})
    resolver = CoordinateResolver([BrokenStrategy(naver), GeocodeStrategy(naver)], deadline_seconds=5)

    found = await resolver.resolve("서울역")

    assert found.query == "서울역"


@pytest.mark.asyncio
async def test_deadline_stops_the_chain():
    naver = FakeNaver(delay=0.2, geocoded={"느린곳": place("느린곳")})

    found = await resolver_for(naver, deadline_seconds=0.05).resolve("느린곳")

    assert found is None
    assert naver.geocodes == []


@pytest.mark.asyncio
async def test_expired_deadline_raises_timeout():
    deadline = Deadline(0)

    async def never_called():
        return 1

    with pytest.raises(asyncio.TimeoutError):
        await deadline.run(never_called())


@pytest.mark.asyncio
async def test_resolve_pair_resolves_both_ends():
    naver = FakeNaver(places={"명동": place("명동", 126.98, 37.56), "강남": place("강남", 127.03, 37.50)})

    start, goal = await resolver_for(naver).resolve_pair("명동", "강남")

    assert start.query == "명동"
    assert goal.query == "강남"


def test_for_naver_uses_settings():
    settings = Settings(_env_file=None, resolver_deadline_seconds=7, resolver_max_variants=4)

    resolver = CoordinateResolver.for_naver(FakeNaver(), settings, {})

    assert resolver.deadline_seconds == 7
    assert [s.name for s in resolver.strategies] == ["direct local search", "query variants", "geocoding endpoint"]
    assert resolver.strategies[1].max_variants == 4
