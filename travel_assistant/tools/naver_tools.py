"""Tools backed by Naver Search and Naver Cloud Maps."""

import logging
from abc import abstractmethod
from typing import Any, Dict, List, Optional

from travel_assistant.geo.distance import estimate_trip, haversine_km
from travel_assistant.geo.resolver import CoordinateResolver
from travel_assistant.providers.naver_client import NaverClient, ResolvedPlace
from travel_assistant.tools.base import TravelTool, missing_key_message, split_params
from travel_assistant.utils.text import format_ko_date, format_minutes, format_won, parse_int, strip_html

logger = logging.getLogger(__name__)

NAVER_KEYS = ("NAVER_CLIENT_ID", "NAVER_CLIENT_SECRET")

ROUTE_OPTIONS = {
    "fast": "trafast",
    "comfort": "tracomfort",
    "optimal": "traoptimal",
    "avoidtoll": "traavoidtoll",
    "avoidcaronly": "traavoidcaronly",
}

ROUTE_OPTION_LABELS = {
    "fast": "⚡ 빠른길",
    "comfort": "😌 편한길",
    "optimal": "🎯 최적경로",
    "avoidtoll": "💰 무료우선",
    "avoidcaronly": "🛣️ 일반도로",
}

DIRECTION_ERRORS = {
    1: "출발지와 도착지가 동일해요",
    2: "출발지 또는 도착지가 도로 주변이 아니에요",
    3: "자동차 길찾기 결과를 제공할 수 없어요",
    4: "경유지가 도로 주변이 아니에요",
    5: "직선거리 합이 1500km 이상이에요",
}

MAJOR_ROAD_MIN_METRES = 5000
MAJOR_ROAD_LIMIT = 3


def unresolved_place_message(place: str) -> str:
    """Hint shown when the resolver chain found no coordinates."""
    return (
        f'📍 "{place}"의 좌표를 찾을 수 없어요! 🔍\n\n'
        "💡 이렇게 시도해보세요:\n"
        f'• 더 구체적인 주소: "{place} 역", "{place} 시청"\n'
        f'• 정확한 지명: "서울 {place}", "부산 {place}"\n'
        '• 완전한 주소: "서울특별시 강남구 강남대로 xxx"\n\n'
        "✅ 추천 장소명:\n"
        "- 강남역, 홍대입구역, 명동, 서울역\n"
        "- 김포공항, 인천공항, 부산역\n"
        "- 서울 종로구, 부산 해운대구"
    )


class NaverTool(TravelTool):
    """Common key check for Naver-backed tools."""

    def __init__(self, naver: NaverClient):
        self.naver = naver

    def missing_keys(self) -> Optional[str]:
        if not self.naver.enabled:
            return missing_key_message(*NAVER_KEYS)
        return None


class NaverPlaceSearchTool(NaverTool):
    name = "naver_place_search"
    description = '네이버 지도 기반으로 장소를 검색합니다. 형식: "지역명,카테고리" (예: "강남,맛집" 또는 "홍대,카페")'

    async def run(self, params: str) -> str:
        parts = split_params(params, ",")
        location = parts[0]
        category = parts[1] if len(parts) > 1 else ""
        if not location or not category:
            return '🤔 형식이 좀 이상해요! "지역명,카테고리" 이렇게 써주세요. (예: "강남,맛집")'

        missing = self.missing_keys()
        if missing:
            return missing

        data = await self.naver.search("local", f"{location} {category}", display=5, sort="random")
        items = data.get("items") or []
        if not items:
            return f'📍 "{location}"에서 "{category}" 관련 장소를 찾을 수 없었어요. 다른 검색어를 시도해보세요!'

        lines = []
        for index, place in enumerate(items[:5], start=1):
            lines.append(
                f"{index}. {strip_html(place.get('title'))}\n"
                f"   📍 주소: {place.get('roadAddress') or place.get('address') or 'N/A'}\n"
                f"   📞 전화: {place.get('telephone') or 'N/A'}\n"
                f"   🏷️ 카테고리: {place.get('category') or 'N/A'}\n"
                f"   📝 설명: {strip_html(place.get('description')) or 'N/A'}"
            )
        return f"📍 네이버 지도 기반 {location} {category} 검색 결과! 🔥\n\n" + "\n\n".join(lines)

    def error_message(self, error: Exception) -> str:
        return (
            f"❌ 네이버 지역 검색 중 오류가 발생했어요: {error}\n\n"
            "🔧 문제 해결:\n1. 네이버 API 키 확인\n2. 인터넷 연결 확인\n3. 검색어 다시 입력"
        )


class NaverGeocodingTool(NaverTool):
    name = "naver_geocoding"
    description = '주소를 좌표로 변환하거나 장소명을 검색합니다. 형식: "주소" (예: "서울특별시 강남구 테헤란로 146")'

    async def run(self, params: str) -> str:
        query = params.strip()
        if not query:
            return '주소나 장소명을 입력해주세요! (예: "서울특별시 강남구 테헤란로 146")'

        missing = self.missing_keys()
        if missing:
            return missing

        addresses = await self.naver.geocode(query)
        if not addresses:
            return f'📍 "{query}" 주소를 찾을 수 없어요. 정확한 주소를 입력해주세요!'

        result = addresses[0]
        return (
            "📍 주소 검색 결과! 🔍\n\n"
            f"🏠 도로명주소: {result.get('roadAddress') or 'N/A'}\n"
            f"🏠 지번주소: {result.get('jibunAddress') or 'N/A'}\n"
            f"🌍 영문주소: {result.get('englishAddress') or 'N/A'}\n"
            f"📍 좌표: {result.get('x')}, {result.get('y')}\n\n"
            "💡 이 좌표로 다른 검색도 가능해요!"
        )

    def error_message(self, error: Exception) -> str:
        return (
            f"❌ 주소 검색 중 오류가 발생했어요: {error}\n\n"
            "🔧 문제 해결:\n1. 네이버 API 키 확인\n2. 주소 정확히 입력\n3. 인터넷 연결 확인"
        )


class NaverDirectionTool(NaverTool):
    """Straight-line route estimate between two resolved places."""

    name = "naver_direction"
    description = '네이버 지도 기반 길찾기를 제공합니다. 형식: "출발지,목적지" (예: "강남역,홍대입구역")'

    def __init__(self, naver: NaverClient, resolver: CoordinateResolver):
        super().__init__(naver)
        self.resolver = resolver

    async def run(self, params: str) -> str:
        parts = split_params(params, ",")
        origin = parts[0]
        destination = parts[1] if len(parts) > 1 else ""
        if not origin or not destination:
            return '🤔 형식이 맞지 않아요! "출발지,목적지" 이렇게 써주세요. (예: "강남역,홍대입구역")'

        missing = self.missing_keys()
        if missing:
            return missing

        start, goal = await self.resolver.resolve_pair(origin, destination)
        if start is None or goal is None:
            return unresolved_place_message(origin if start is None else destination)

        distance = haversine_km(start.lat, start.lng, goal.lat, goal.lng)
        estimate = estimate_trip(distance)

        return (
            f"🚗 네이버 지도 기반 {origin} → {destination} 경로 정보! 🔥\n\n"
            f"📏 직선거리: {distance:.1f}km\n"
            f"⏱️ 예상 소요시간: 약 {estimate['duration_min']}분\n"
            f"💰 예상 통행료: {format_won(estimate['toll_won'])}\n"
            f"🚕 예상 택시요금: 약 {format_won(estimate['taxi_won'])}\n\n"
            f"📍 출발지: {start.road_address or origin}\n"
            f"📍 목적지: {goal.road_address or destination}\n\n"
            "💡 정확한 경로는 네이버 지도 앱에서 확인하세요!\n"
            "⚡ 직선거리 기반 예상값입니다."
        )

    def error_message(self, error: Exception) -> str:
        return (
            f"❌ 길찾기 중 오류가 발생했어요: {error}\n\n"
            "🔧 문제 해결:\n1. 네이버 API 키 확인\n2. 장소명 정확히 입력\n3. 인터넷 연결 확인"
        )


class NaverCloudDirectionTool(NaverTool):
    """Driving route from Naver Cloud Directions 15."""

    name = "naver_cloud_direction"
    description = (
        "네이버 클라우드 플랫폼 기반 자동차 길찾기를 제공합니다. 실시간 교통과 상세 요금 포함. "
        '형식: "출발지,목적지" 또는 "출발지,목적지,옵션" '
        "(옵션: fast=빠른길, comfort=편한길, optimal=최적, avoidtoll=무료우선, avoidcaronly=일반도로)"
    )

    def __init__(self, naver: NaverClient, resolver: CoordinateResolver):
        super().__init__(naver)
        self.resolver = resolver

    async def run(self, params: str) -> str:
        parts = split_params(params, ",")
        origin = parts[0]
        destination = parts[1] if len(parts) > 1 else ""
        option = parts[2].lower() if len(parts) > 2 and parts[2] else "optimal"
        if not origin or not destination:
            return '🤔 형식이 맞지 않아요! "출발지,목적지" 이렇게 써주세요. (예: "강남역,홍대입구역,fast")'

        if not (self.naver.cloud_key_id and self.naver.cloud_key):
            return missing_key_message("NAVER_CLOUD_CLIENT_ID", "NAVER_CLOUD_CLIENT_SECRET")

        if option not in ROUTE_OPTIONS:
            logger.info(f"Unknown route option '{option}', using optimal")
            option = "optimal"
        route_option = ROUTE_OPTIONS[option]

        start, goal = await self.resolver.resolve_pair(origin, destination)
        if start is None or goal is None:
            return unresolved_place_message(origin if start is None else destination)

        data = await self.naver.driving_route(start.coordinates, goal.coordinates, route_option)

        code = data.get("code")
        if code != 0:
            reason = DIRECTION_ERRORS.get(code) or data.get("message") or "알 수 없는 오류"
            return f"🚫 길찾기 실패: {reason}"

        routes = (data.get("route") or {}).get(route_option) or []
        if not routes:
            return f'🚫 "{origin}"에서 "{destination}"까지 {option} 경로를 찾을 수 없어요.'

        return self._format_route(routes[0], option, start, goal)

    def _format_route(self,
                    route: Dict[str, Any],
                    option: str,
                    start: ResolvedPlace,
                    goal: ResolvedPlace,
                ) -> str:
        summary = route.get("summary", {})
        distance_km = summary.get("distance", 0) / 1000
        duration_min = round(summary.get("duration", 0) / 60000)

        text = (
            f"🚗 네이버 클라우드 {ROUTE_OPTION_LABELS[option]} 경로 정보! 🔥\n\n"
            f"📍 출발지: {start.road_address or start.query}\n"
            f"📍 목적지: {goal.road_address or goal.query}\n\n"
            f"📏 거리: {distance_km:.1f}km\n"
            f"⏱️ 소요시간: 약 {format_minutes(duration_min)}\n"
            f"💰 통행료: {format_won(summary.get('tollFare', 0))}\n"
            f"🚕 택시요금: 약 {format_won(summary.get('taxiFare', 0))}\n"
            f"⛽ 예상 유류비: {format_won(summary.get('fuelPrice', 0))}"
        )

        major_roads = major_road_sections(route.get("section") or [])
        if major_roads:
            text += "\n\n🛣️ 주요 경로:\n" + "\n".join(major_roads)

        return text + "\n\n💡 다른 옵션도 시도해보세요: fast(빠른길), comfort(편한길), avoidtoll(무료우선)"

    def error_message(self, error: Exception) -> str:
        return (
            f"❌ 네이버 클라우드 길찾기 중 오류가 발생했어요: {error}\n\n"
            "🔧 문제 해결:\n1. 네이버 클라우드 플랫폼 API 키 확인\n2. 장소명 정확히 입력\n"
            "3. 인터넷 연결 확인\n4. API 사용량 한도 확인"
        )


def major_road_sections(sections: List[Dict[str, Any]]) -> List[str]:
    """Route sections longer than 5 km, at most three, as bullet lines."""
    major = [section for section in sections if section.get("distance", 0) > MAJOR_ROAD_MIN_METRES]
    return [
        f"• {section.get('name') or '이름 없는 도로'} ({section['distance'] / 1000:.1f}km)"
        for section in major[:MAJOR_ROAD_LIMIT]
    ]


class NaverContentSearchTool(NaverTool):
    """Shared flow for the blog/news/shop/cafe searches.

    Subclasses set the search kind, sort order and headings and format a
    single result item.
    """

    kind: str = ""
    sort: str = "sim"
    icon: str = ""
    source_label: str = ""
    result_noun: str = ""
    heading_suffix: str = ""
    example: str = ""

    async def run(self, params: str) -> str:
        query = params.strip()
        if not query:
            return f"검색어를 입력해주세요! (예: {self.example})"

        missing = self.missing_keys()
        if missing:
            return missing

        data = await self.naver.search(self.kind, query, display=5, sort=self.sort)
        items = data.get("items") or []
        if not data.get("total") or not items:
            return (
                f'{self.icon} "{query}" 관련 {self.result_noun}을(를) 찾을 수 없었어요. '
                "다른 검색어를 시도해보세요!"
            )

        entries = [self.format_item(index, item) for index, item in enumerate(items[:5], start=1)]
        return (
            f'{self.icon} 네이버 {self.source_label} "{query}" 검색 결과! {self.heading_suffix}\n\n'
            + "\n\n".join(entries)
        )

    @abstractmethod
    def format_item(self, index: int, item: Dict[str, Any]) -> str:
        """Render one search item as a numbered entry."""

    def error_message(self, error: Exception) -> str:
        return f"❌ 네이버 {self.source_label} 검색 중 오류가 발생했어요: {error}"


class NaverBlogSearchTool(NaverContentSearchTool):
    name = "naver_blog_search"
    description = '네이버 블로그에서 여행, 맛집, 관광지 정보를 검색합니다. 형식: "검색어" (예: "제주도 맛집" 또는 "부산 카페")'
    kind = "blog"
    icon = "📝"
    source_label = "블로그"
    result_noun = "블로그 포스트"
    heading_suffix = "✨"
    example = '"제주도 맛집", "부산 여행"'

    def format_item(self, index: int, item: Dict[str, Any]) -> str:
        return (
            f"{index}. {strip_html(item.get('title'))}\n"
            f"   ✍️ 블로거: {item.get('bloggername') or 'N/A'}\n"
            f"   📅 작성일: {format_ko_date(item.get('postdate'))}\n"
            f"   📝 내용: {strip_html(item.get('description'))}\n"
            f"   🔗 링크: {item.get('link', '')}"
        )


class NaverNewsSearchTool(NaverContentSearchTool):
    name = "naver_news_search"
    description = '네이버 뉴스에서 최신 여행, 관광, 행사 정보를 검색합니다. 형식: "검색어" (예: "제주도 축제" 또는 "부산 이벤트")'
    kind = "news"
    sort = "date"
    icon = "📰"
    source_label = "뉴스"
    result_noun = "뉴스"
    heading_suffix = "🔥"
    example = '"제주도 축제", "부산 이벤트"'

    def format_item(self, index: int, item: Dict[str, Any]) -> str:
        return (
            f"{index}. {strip_html(item.get('title'))}\n"
            f"   📅 발행일: {format_ko_date(item.get('pubDate'))}\n"
            f"   📝 내용: {strip_html(item.get('description'))}\n"
            f"   🔗 링크: {item.get('link', '')}"
        )


class NaverShopSearchTool(NaverContentSearchTool):
    name = "naver_shop_search"
    description = '네이버 쇼핑에서 여행용품, 기념품 등을 검색합니다. 형식: "검색어" (예: "여행가방" 또는 "제주도 기념품")'
    kind = "shop"
    icon = "🛒"
    source_label = "쇼핑"
    result_noun = "상품"
    heading_suffix = "💰"
    example = '"여행가방", "제주도 기념품"'

    def format_item(self, index: int, item: Dict[str, Any]) -> str:
        return (
            f"{index}. {strip_html(item.get('title'))}\n"
            f"   💰 가격: {price_range(item.get('lprice'), item.get('hprice'))}\n"
            f"   🏪 쇼핑몰: {item.get('mallName') or 'N/A'}\n"
            f"   🏷️ 브랜드: {item.get('brand') or 'N/A'}\n"
            f"   🔗 링크: {item.get('link', '')}"
        )


def price_range(low: Optional[str], high: Optional[str]) -> str:
    """Format Naver shop `lprice`/`hprice` strings."""
    low_price = parse_int(low) or 0
    high_price = parse_int(high) or 0
    if low_price <= 0:
        return "가격 문의"
    if high_price > 0 and high_price != low_price:
        return f"{format_won(low_price)} ~ {format_won(high_price)}"
    return format_won(low_price)


class NaverCafeSearchTool(NaverContentSearchTool):
    name = "naver_cafe_search"
    description = '네이버 카페에서 여행 정보, 후기, 팁을 검색합니다. 형식: "검색어" (예: "제주도 여행후기" 또는 "부산 맛집 추천")'
    kind = "cafearticle"
    icon = "☕"
    source_label = "카페"
    result_noun = "카페 게시글"
    heading_suffix = "💬"
    example = '"제주도 여행후기", "부산 맛집 추천"'

    def format_item(self, index: int, item: Dict[str, Any]) -> str:
        return (
            f"{index}. {strip_html(item.get('title'))}\n"
            f"   ☕ 카페: {item.get('cafename') or 'N/A'}\n"
            f"   📝 내용: {strip_html(item.get('description'))}\n"
            f"   🔗 링크: {item.get('link', '')}"
        )
