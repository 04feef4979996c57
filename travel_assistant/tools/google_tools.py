"""Tools backed by Google Maps and OpenWeatherMap."""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from travel_assistant.geo.distance import estimate_driving_costs
from travel_assistant.geo.query_variants import category_keywords, location_variations
from travel_assistant.providers.google_maps_client import GoogleMapsClient, GoogleMapsStatusError
from travel_assistant.providers.openweather_client import OpenWeatherClient
from travel_assistant.tools.base import TravelTool, missing_key_message, split_params
from travel_assistant.utils.text import format_won, strip_html

logger = logging.getLogger(__name__)

TRANSPORT_MODES = ["transit", "driving", "walking", "bicycling"]

TRANSPORT_INFO = {
    "driving": ("🚗", "자동차"),
    "transit": ("🚇", "대중교통"),
    "walking": ("🚶", "도보"),
    "bicycling": ("🚴", "자전거"),
}

VEHICLE_ICONS = {"SUBWAY": "🚇", "BUS": "🚌", "TRAIN": "🚄"}

# Korean aliases the classifier may pass as the third distance parameter
MODE_ALIASES = {
    "대중교통": "transit",
    "지하철": "transit",
    "버스": "transit",
    "자동차": "driving",
    "차": "driving",
    "운전": "driving",
    "도보": "walking",
    "걷기": "walking",
    "자전거": "bicycling",
}


def transport_label(mode: str) -> str:
    icon, name = TRANSPORT_INFO.get(mode, ("🚗", "이동"))
    return f"{icon} {name}"


def weather_emoji(main: str) -> str:
    """Emoji for an OpenWeatherMap `weather[0].main` value."""
    if "Clear" in main:
        return "☀️"
    if "Rain" in main or "Drizzle" in main:
        return "🌧️"
    if "Snow" in main:
        return "🌨️"
    if "Thunder" in main:
        return "⛈️"
    if "Cloud" in main:
        return "☁️"
    if "Mist" in main or "Fog" in main or "Haze" in main:
        return "🌫️"
    return "🌤️"


def weather_advice(condition: str, temperature: int) -> str:
    """Packing advice from a weather description and temperature."""
    if "맑" in condition or "Clear" in condition:
        if temperature > 25:
            return "🌞 햇살이 강해요! 자외선 차단제와 모자를 꼭 준비하세요!"
        return "☀️ 야외 활동하기 좋은 날씨네요! 가벼운 옷차림으로 나들이 즐기세요!"
    if "비" in condition or "Rain" in condition:
        return "🌧️ 우산과 방수용품을 꼭 챙기세요! 실내 관광지도 고려해보세요!"
    if "눈" in condition or "Snow" in condition:
        return "❄️ 따뜻한 옷과 미끄럼 방지용품을 준비하세요!"
    if "흐림" in condition or "구름" in condition or "Cloud" in condition:
        return "☁️ 우산을 준비하고, 온도 변화에 대비해 겉옷을 챙기세요!"
    return "🌤️ 날씨 변화에 대비해서 여러 겹의 옷을 준비하시면 좋아요!"


def normalize_mode(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    lowered = value.strip().lower()
    if lowered in TRANSPORT_MODES:
        return lowered
    return MODE_ALIASES.get(value.strip())


class PlaceSearchTool(TravelTool):
    name = "place_search"
    description = (
        '특정 지역에서 관광지, 맛집, 숙박시설 등을 검색합니다. 형식: "지역명,카테고리" '
        '(예: "서울,관광지" 또는 "부산,맛집")'
    )

    def __init__(self, google: GoogleMapsClient):
        self.google = google

    async def run(self, params: str) -> str:
        parts = split_params(params, ",")
        location = parts[0]
        category = parts[1] if len(parts) > 1 else ""

        if not location or not category:
            return '🤔 형식이 좀 이상해요! "지역명,카테고리" 이렇게 써주세요. (예: "서울,관광지")'

        if not self.google.api_key:
            return missing_key_message("GOOGLE_MAPS_API_KEY")

        results: List[Dict[str, Any]] = []
        used_query = ""
        for location_variant in location_variations(location):
            for keyword in category_keywords(category):
                query = f"{keyword} in {location_variant}"
                try:
                    results = await self.google.text_search(query)
                except (httpx.HTTPError, GoogleMapsStatusError) as e:
                    logger.warning(f"Place search failed for '{query}': {e}")
                    continue
                if results:
                    used_query = query
                    break
            if results:
                break

        if not results:
            return (
                f'📍 "{location}"에서 "{category}" 검색 결과를 찾지 못했어요 😅\n\n'
                "💡 이렇게 해보세요:\n"
                "1. 더 구체적인 지역명으로 다시 시도\n"
                "2. 현지 관광안내소나 온라인 리뷰 확인\n"
                "3. 네이버 지도나 구글 맵에서 직접 검색"
            )

        lines = [self._format_place(index, place) for index, place in enumerate(results[:5], start=1)]
        return (
            f"📍 {location} {category} 검색 결과!\n🔍 검색어: {used_query}\n\n"
            + "\n\n".join(lines)
        )

    def _format_place(self, index: int, place: Dict[str, Any]) -> str:
        rating = place.get("rating")
        rating_text = f"{rating}⭐" if rating is not None else "N/A"

        price_level = place.get("price_level")
        if price_level is None:
            price_text = "N/A"
        elif price_level == 0:
            price_text = "무료/저렴"
        else:
            price_text = "💰" * int(price_level)

        return (
            f"{index}. **{place.get('name', '')}**\n"
            f"   📍 주소: {place.get('formatted_address', '')}\n"
            f"   ⭐ 평점: {rating_text}\n"
            f"   💰 가격대: {price_text}"
        )


class DistanceCalculatorTool(TravelTool):
    name = "distance_calculator"
    description = (
        '두 지점 간의 거리, 시간, 경로를 교통수단별로 알려줍니다. 형식: "출발지,목적지[,교통수단]" '
        '(예: "명동,강남" 또는 "명동,강남,driving")'
    )

    def __init__(self, google: GoogleMapsClient):
        self.google = google

    async def run(self, params: str) -> str:
        parts = split_params(params, ",")
        origin = parts[0]
        destination = parts[1] if len(parts) > 1 else ""
        requested_mode = normalize_mode(parts[2]) if len(parts) > 2 else None

        if not origin or not destination:
            return '출발지와 목적지를 입력해주세요! 형식: "출발지,목적지" (예: "명동,강남")'

        if not self.google.api_key:
            return missing_key_message("GOOGLE_MAPS_API_KEY")

        probe_mode = requested_mode or "transit"
        best_origin, best_destination, probe = await self._find_routable_pair(origin, destination, probe_mode)

        if probe is None:
            return await self._matrix_fallback(origin, destination, requested_mode or "driving")

        modes = [requested_mode] if requested_mode else TRANSPORT_MODES
        other_modes = [mode for mode in modes if mode != probe_mode]
        routes = [probe] + await self._query_modes(best_origin, best_destination, other_modes)
        routes.sort(key=lambda route: modes.index(route["mode"]))

        return self._format_routes(origin, destination, best_origin, best_destination, routes, len(modes))

    async def _find_routable_pair(self,
                                origin: str,
                                destination: str,
                                mode: str,
                            ) -> Tuple[str, str, Optional[Dict[str, Any]]]:
        """Try spelling variants until one origin/destination pair has a route."""
        for origin_variant in location_variations(origin):
            for destination_variant in location_variations(destination):
                logger.info(f"Testing {mode} route {origin_variant} -> {destination_variant}")
                try:
                    route = await self.google.directions(origin_variant, destination_variant, mode)
                except (httpx.HTTPError, GoogleMapsStatusError) as e:
                    logger.warning(f"Route probe failed {origin_variant} -> {destination_variant}: {e}")
                    continue
                if route:
                    return origin_variant, destination_variant, route
        return origin, destination, None

    async def _query_modes(self, origin: str, destination: str, modes: List[str]) -> List[Dict[str, Any]]:
        """Query several travel modes concurrently, skipping failed ones."""
        outcomes = await asyncio.gather(
            *(self.google.directions(origin, destination, mode) for mode in modes),
            return_exceptions=True,
        )
        routes = []
        for mode, outcome in zip(modes, outcomes):
            if isinstance(outcome, Exception):
                logger.warning(f"{mode} route failed {origin} -> {destination}: {outcome}")
            elif outcome:
                routes.append(outcome)
        return routes

    async def _matrix_fallback(self, origin: str, destination: str, mode: str) -> str:
        try:
            summary = await self.google.distance_matrix(origin, destination, mode)
        except (httpx.HTTPError, GoogleMapsStatusError) as e:
            logger.warning(f"Distance matrix failed {origin} -> {destination}: {e}")
            summary = None

        if not summary:
            return (
                f"❌ 어떤 교통수단으로도 경로를 찾을 수 없어요 😭\n📍 {origin} → {destination}\n\n"
                "💡 이렇게 해보세요:\n"
                '1. 지명을 더 구체적으로 (예: "서울역", "부산 해운대")\n'
                '2. 영어로 시도 (예: "Seoul Station", "Busan")\n'
                '3. 근처 랜드마크 이용 (예: "롯데타워", "부산역")'
            )

        return (
            f"📍 {summary['origin_address']} → {summary['destination_address']}\n\n"
            f"{transport_label(mode)}\n"
            f"📏 거리: {summary['distance_text']}\n"
            f"⏰ 시간: {summary['duration_text']}\n\n"
            "💡 상세 경로는 찾지 못해서 거리/시간 요약만 알려드려요."
        )

    def _format_routes(self,
                        origin: str,
                        destination: str,
                        best_origin: str,
                        best_destination: str,
                        routes: List[Dict[str, Any]],
                        attempted: int,
                    ) -> str:
        text = (
            f"🗺️ 경로 분석 결과\n📍 {origin} → {destination}\n"
            f"🔍 검색에 사용한 지명: {best_origin} → {best_destination}\n\n"
            f"🚀 교통수단 옵션 ({len(routes)}/{attempted}가지 성공)\n\n"
        )

        for route in routes:
            text += f"{transport_label(route['mode'])}\n"
            text += f"📏 거리: {route['distance_text']}\n"
            text += f"⏰ 시간: {route['duration_text']}\n"

            if route["mode"] == "transit":
                text += self._format_transit_steps(route["steps"])

            if route["mode"] == "driving":
                costs = estimate_driving_costs(round(route["distance_m"] / 1000))
                text += "💰 예상 비용:\n"
                text += f"  ⛽ 유류비: {format_won(costs['fuel_won'])}\n"
                if costs.get("toll_won"):
                    text += f"  🛣️ 통행료: {format_won(costs['toll_won'])}\n"
                text += f"  🚕 택시비: {format_won(costs['taxi_won'])}\n"

            text += "\n"

        if len(routes) > 1:
            fastest = min(routes, key=lambda route: route["duration_s"])
            text += f"🎯 {transport_label(fastest['mode'])}이 가장 빨라요! ({fastest['duration_text']})"
        else:
            text += f"✨ {transport_label(routes[0]['mode'])} 경로를 찾았어요!"
        return text

    def _format_transit_steps(self, steps: List[Dict[str, Any]]) -> str:
        lines = []
        number = 1
        for step in steps:
            travel_mode = step.get("travel_mode")
            duration = step.get("duration", {})

            if travel_mode == "TRANSIT" and step.get("transit_details"):
                transit = step["transit_details"]
                line = transit.get("line", {})
                vehicle_type = line.get("vehicle", {}).get("type", "")
                icon = VEHICLE_ICONS.get(vehicle_type, "🚊")
                line_name = line.get("short_name") or line.get("name", "")

                lines.append(
                    f"{number}. {icon} {line_name} "
                    f"({duration.get('text', '')}, {transit.get('num_stops', 0)}개 정거장)"
                )
                lines.append(f"   🚪 승차: {transit.get('departure_stop', {}).get('name', '')}")
                lines.append(f"   🏁 하차: {transit.get('arrival_stop', {}).get('name', '')}")
                if line.get("color"):
                    lines.append(f"   🎨 노선색: {line['color']}")
                number += 1

            elif travel_mode == "WALKING" and duration.get("value", 0) > 60:
                lines.append(
                    f"{number}. 🚶 도보 {duration.get('text', '')} "
                    f"({step.get('distance', {}).get('text', '')})"
                )
                if step.get("html_instructions"):
                    lines.append(f"   🗺️ 경로: {strip_html(step['html_instructions'])}")
                number += 1

        if not lines:
            return ""
        return "\n🚉 환승 정보:\n" + "\n".join(lines) + "\n"


class TravelWeatherTool(TravelTool):
    name = "travel_weather"
    description = '여행지의 현재 날씨와 준비물 조언을 알려줍니다. 형식: "도시명" (예: "서울", "Busan")'

    def __init__(self, weather: OpenWeatherClient):
        self.weather = weather

    async def run(self, params: str) -> str:
        city = params.strip()
        if not city:
            return '날씨를 확인할 도시 이름을 입력해주세요! (예: "서울", "부산", "제주")'

        if not self.weather.api_key:
            return missing_key_message("OPENWEATHER_API_KEY")

        data: Optional[Dict[str, Any]] = None
        used_city = city
        for variant in location_variations(city):
            try:
                data = await self.weather.current_weather(variant)
            except httpx.HTTPError as e:
                logger.warning(f"Weather lookup failed for '{variant}': {e}")
                continue
            if data:
                used_city = variant
                break

        if not data:
            return (
                f'🌦️ "{city}"의 날씨 정보를 찾을 수 없어요 😅\n\n'
                "💡 이렇게 해보세요:\n"
                '- "서울", "부산", "제주" 같은 도시명\n'
                '- "Seoul", "Busan" 같은 영어명'
            )

        return self._format_weather(data, used_city)

    def _format_weather(self, data: Dict[str, Any], used_city: str) -> str:
        main = data.get("main", {})
        weather = (data.get("weather") or [{}])[0]

        temperature = round(main.get("temp", 0))
        feels_like = round(main.get("feels_like", 0))
        condition = weather.get("description", "")
        wind_kmh = round((data.get("wind") or {}).get("speed", 0) * 3.6)
        visibility = data.get("visibility")
        visibility_text = f"{round(visibility / 1000)}km" if visibility else "N/A"

        return (
            f"{weather_emoji(weather.get('main', ''))} 날씨 정보\n"
            f"📍 {data.get('name', used_city)} (검색: {used_city})\n\n"
            f"🌡️ 현재 온도: {temperature}°C (체감 {feels_like}°C)\n"
            f"☁️ 날씨 상태: {condition}\n"
            f"💧 습도: {main.get('humidity', 'N/A')}%\n"
            f"💨 바람: {wind_kmh}km/h\n"
            f"🌊 기압: {main.get('pressure', 'N/A')}hPa\n"
            f"👁️ 가시거리: {visibility_text}\n\n"
            f"🧳 여행 조언:\n{weather_advice(condition, temperature)}"
        )
