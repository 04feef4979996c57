"""Unit tests for the Naver-backed tools."""

from typing import Any, Dict, List, Optional

import pytest

from travel_assistant.providers.naver_client import ResolvedPlace
from travel_assistant.tools.naver_tools import (
    NaverBlogSearchTool,
    NaverCafeSearchTool,
    NaverCloudDirectionTool,
    NaverDirectionTool,
    NaverGeocodingTool,
    NaverNewsSearchTool,
    NaverPlaceSearchTool,
    NaverShopSearchTool,
    major_road_sections,
    price_range,
)
from travel_assistant.utils.text import format_ko_date


class FakeNaver:
    """Stands in for NaverClient."""

    def __init__(self,
                enabled: bool = True,
                search_results: Optional[Dict[str, Any]] = None,
                addresses: Optional[List[Dict[str, Any]]] = None,
                route_response: Optional[Dict[str, Any]] = None,
            ):
        self.enabled = enabled
        self.cloud_key_id = "cloud-id" if enabled else None
        self.cloud_key = "cloud-key" if enabled else None
        self.search_results = search_results or {"total": 0, "items": []}
        self.addresses = addresses or []
        self.route_response = route_response or {}
        self.search_calls: List[tuple] = []
        self.route_calls: List[tuple] = []

    async def search(self, kind: str, query: str, display: int = 5, sort: str = "sim") -> Dict[str, Any]:
        self.search_calls.append((kind, query, display, sort))
        return self.search_results

    async def geocode(self, address: str) -> List[Dict[str, Any]]:
        return self.addresses

    async def driving_route(self, start: str, goal: str, option: str) -> Dict[str, Any]:
        self.route_calls.append((start, goal, option))
        return self.route_response


class FakeResolver:
    def __init__(self, places: Dict[str, ResolvedPlace]):
        self.places = places

    async def resolve_pair(self, origin: str, destination: str):
        return self.places.get(origin), self.places.get(destination)


GANGNAM = ResolvedPlace(lng=127.0276, lat=37.4979, road_address="서울 강남구 강남대로 396", query="강남역")
HONGDAE = ResolvedPlace(lng=126.9237, lat=37.5572, road_address="서울 마포구 양화로 160", query="홍대입구역")


@pytest.mark.asyncio
async def test_tools_report_missing_naver_keys():
    naver = FakeNaver(enabled=False)
    resolver = FakeResolver({})

    for tool in [
        NaverPlaceSearchTool(naver),
        NaverGeocodingTool(naver),
        NaverDirectionTool(naver, resolver),
        NaverBlogSearchTool(naver),
    ]:
        reply = await tool.invoke("강남,맛집")
        assert "NAVER_CLIENT_ID" in reply

    reply = await NaverCloudDirectionTool(naver, resolver).invoke("강남역,홍대입구역")
    assert "NAVER_CLOUD_CLIENT_ID" in reply
    assert naver.search_calls == []


@pytest.mark.asyncio
async def test_place_search_formats_local_results():
    naver = FakeNaver(search_results={"total": 1, "items": [{
        "title": "<b>강남</b> 떡볶이",
        "roadAddress": "서울 강남구 테헤란로 1",
        "telephone": "",
        "category": "분식",
        "description": "",
    }]})

    reply = await NaverPlaceSearchTool(naver).invoke("강남,맛집")

    assert naver.search_calls == [("local", "강남 맛집", 5, "random")]
    assert "1. 강남 떡볶이" in reply
    assert "📞 전화: N/A" in reply


@pytest.mark.asyncio
async def test_place_search_usage_hint():
    naver = FakeNaver()
    assert "지역명,카테고리" in await NaverPlaceSearchTool(naver).invoke("강남")
    assert naver.search_calls == []


@pytest.mark.asyncio
async def test_geocoding_formats_first_address():
    naver = FakeNaver(addresses=[{
        "roadAddress": "서울특별시 강남구 테헤란로 146",
        "jibunAddress": "서울특별시 강남구 역삼동 737",
        "englishAddress": "146, Teheran-ro",
        "x": "127.0364",
        "y": "37.5003",
    }])

    reply = await NaverGeocodingTool(naver).invoke("테헤란로 146")

    assert "📍 좌표: 127.0364, 37.5003" in reply
    assert "🌍 영문주소: 146, Teheran-ro" in reply


@pytest.mark.asyncio
async def test_direction_estimates_from_straight_line():
    tool = NaverDirectionTool(FakeNaver(), FakeResolver({"강남역": GANGNAM, "홍대입구역": HONGDAE}))

    reply = await tool.invoke("강남역,홍대입구역")

    assert "📏 직선거리: 11." in reply
    assert "📍 출발지: 서울 강남구 강남대로 396" in reply
    assert "직선거리 기반 예상값" in reply


@pytest.mark.asyncio
async def test_direction_reports_unresolved_place():
    tool = NaverDirectionTool(FakeNaver(), FakeResolver({"강남역": GANGNAM}))

    reply = await tool.invoke("강남역,없는곳")

    assert '"없는곳"의 좌표를 찾을 수 없어요' in reply


@pytest.mark.asyncio
async def test_cloud_direction_formats_summary_and_major_roads():
    naver = FakeNaver(route_response={
        "code": 0,
        "message": "길찾기를 성공하였습니다.",
        "route": {"trafast": [{
            "summary": {"distance": 12340, "duration": 1_980_000, "tollFare": 0, "taxiFare": 15200, "fuelPrice": 1650},
            "section": [
                {"name": "강남대로", "distance": 6200},
                {"name": "골목", "distance": 300},
                {"name": "올림픽대로", "distance": 5100},
            ],
        }]},
    })
    tool = NaverCloudDirectionTool(naver, FakeResolver({"강남역": GANGNAM, "홍대입구역": HONGDAE}))

    reply = await tool.invoke("강남역,홍대입구역,fast")

    assert naver.route_calls == [(GANGNAM.coordinates, HONGDAE.coordinates, "trafast")]
    assert "⚡ 빠른길" in reply
    assert "📏 거리: 12.3km" in reply
    assert "⏱️ 소요시간: 약 33분" in reply
    assert "🚕 택시요금: 약 15,200원" in reply
    assert "• 강남대로 (6.2km)" in reply
    assert "• 올림픽대로 (5.1km)" in reply
    assert "골목" not in reply


@pytest.mark.asyncio
async def test_cloud_direction_unknown_option_uses_optimal():
    naver = FakeNaver(route_response={"code": 1, "message": "same"})
    tool = NaverCloudDirectionTool(naver, FakeResolver({"강남역": GANGNAM, "홍대입구역": HONGDAE}))

    reply = await tool.invoke("강남역,홍대입구역,teleport")

    assert naver.route_calls[0][2] == "traoptimal"
    assert reply == "🚫 길찾기 실패: 출발지와 도착지가 동일해요"


@pytest.mark.asyncio
async def test_cloud_direction_unknown_code_uses_provider_message():
    naver = FakeNaver(route_response={"code": 99, "message": "internal"})
    tool = NaverCloudDirectionTool(naver, FakeResolver({"강남역": GANGNAM, "홍대입구역": HONGDAE}))

    assert await tool.invoke("강남역,홍대입구역") == "🚫 길찾기 실패: internal"


def test_major_road_sections_limited_to_three():
    sections = [{"name": f"도로{i}", "distance": 6000 + i} for i in range(5)]
    assert len(major_road_sections(sections)) == 3


def test_price_range():
    assert price_range("15000", "32000") == "15,000원 ~ 32,000원"
    assert price_range("15000", "") == "15,000원"
    assert price_range("15000", "15000") == "15,000원"
    assert price_range("0", "0") == "가격 문의"


def test_format_ko_date():
    assert format_ko_date("20240115") == "2024. 1. 15."
    assert format_ko_date("Mon, 15 Jan 2024 10:00:00 +0900") == "2024. 1. 15."
    assert format_ko_date("언젠가") == "언젠가"
    assert format_ko_date(None) == "N/A"


@pytest.mark.asyncio
async def test_content_searches_use_kind_and_sort():
    cases = [
        (NaverBlogSearchTool, "blog", "sim", {"title": "<b>제주</b> 맛집", "bloggername": "여행러", "postdate": "20240115", "description": "", "link": "https://blog"}, "📅 작성일: 2024. 1. 15."),
        (NaverNewsSearchTool, "news", "date", {"title": "축제", "pubDate": "Mon, 15 Jan 2024 10:00:00 +0900", "description": "", "link": "https://news"}, "📅 발행일: 2024. 1. 15."),
        (NaverShopSearchTool, "shop", "sim", {"title": "캐리어", "lprice": "89000", "hprice": "", "mallName": "여행몰", "link": "https://shop"}, "💰 가격: 89,000원"),
        (NaverCafeSearchTool, "cafearticle", "sim", {"title": "후기", "cafename": "제주사랑", "description": "", "link": "https://cafe"}, "☕ 카페: 제주사랑"),
    ]

    for tool_cls, kind, sort, item, expected in cases:
        naver = FakeNaver(search_results={"total": 1, "items": [item]})

        reply = await tool_cls(naver).invoke("제주도")

        assert naver.search_calls == [(kind, "제주도", 5, sort)]
        assert expected in reply


@pytest.mark.asyncio
async def test_content_search_empty_and_blank_query():
    naver = FakeNaver()
    tool = NaverBlogSearchTool(naver)

    assert "검색어를 입력해주세요" in await tool.invoke("   ")
    assert "찾을 수 없었어요" in await tool.invoke("없는검색어")


def test_content_search_subclass_must_format_items():
    from travel_assistant.tools.naver_tools import NaverContentSearchTool

    class UnformattedSearchTool(NaverContentSearchTool):
        name = "naver_unformatted_search"
        description = "no formatter"
        kind = "blog"

    with pytest.raises(TypeError):
        UnformattedSearchTool(FakeNaver())
