"""Search-query variants for place names the map providers fail to match.

Free-text lookups on Korean map APIs are brittle: "동성로" finds nothing
while "대구 동성로" does. The generators here turn one place name into an
ordered list of alternative queries. Landmark aliases are data, loaded from
JSON, so the list can grow without touching the algorithm.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

BUNDLED_ALIASES_PATH = Path(__file__).parent / "data" / "landmark_aliases.json"

MAX_QUERY_LENGTH = 50
DEFAULT_MAX_VARIANTS = 20

STATION_SUFFIXES = ["기차역", "지하철역", "터미널", "교통", "출구", "광장"]
AIRPORT_SUFFIXES = ["국제선", "국내선", "터미널"]
PLACE_TYPES = [
    "상가", "거리", "쇼핑", "중심가", "번화가", "시장", "상권",
    "관광지", "명소", "랜드마크", "광장", "공원", "역", "터미널",
]
CITIES = ["서울", "부산", "대구", "인천", "광주", "대전", "울산", "세종"]
DISTRICTS = ["중구", "동구", "서구", "남구", "북구", "강남구", "강서구"]
BUILDING_SUFFIXES = ["점", "센터", "빌딩", "타워", "플라자", "몰", "마트"]
ACCESS_KEYWORDS = ["근처", "주변", "앞", "입구", "출구"]

CITY_ENGLISH_NAMES = {
    "서울": "Seoul",
    "부산": "Busan",
    "대구": "Daegu",
    "인천": "Incheon",
    "광주": "Gwangju",
    "대전": "Daejeon",
    "울산": "Ulsan",
}

CATEGORY_KEYWORDS = {
    "관광지": ["tourist attractions", "sightseeing", "landmarks"],
    "맛집": ["restaurants", "food", "dining"],
    "카페": ["cafe", "coffee shop"],
    "숙박": ["hotels", "accommodation"],
    "쇼핑": ["shopping", "mall"],
    "병원": ["hospital", "medical"],
    "약국": ["pharmacy"],
}


def load_landmark_aliases(path: Optional[str] = None) -> Dict[str, List[str]]:
    """Load the landmark alias table.

    Args:
        path (Optional[str]): JSON file mapping a landmark to alternative
            queries. Defaults to the bundled table.
    Returns:
        Dict[str, List[str]]: Alias table; empty if the file cannot be read.
    """
    source = Path(path) if path else BUNDLED_ALIASES_PATH
    try:
        with source.open(encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load landmark aliases from {source}: {e}")
        return {}

    return {str(key): [str(q) for q in queries] for key, queries in data.items()}


def _unique(items: Iterable[str]) -> List[str]:
    seen = set()
    ordered = []
    for item in items:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return ordered


def generate_query_variants(address: str,
                            aliases: Optional[Dict[str, List[str]]] = None,
                            max_variants: int = DEFAULT_MAX_VARIANTS,
                        ) -> List[str]:
    """Build alternative local-search queries for a place name.

    Order matters: callers try the variants one by one and stop at the first
    hit, so more specific rewrites come first.
    Args:
        address (str): Place name as the user typed it.
        aliases (Optional[Dict[str, List[str]]]): Landmark alias table.
        max_variants (int): Upper bound on returned queries.
    Returns:
        List[str]: Deduplicated variants, never containing `address` itself.
    """
    queries: List[str] = []

    if "역" in address:
        base = address.replace("역", "", 1)
        queries.extend(f"{base}역 {suffix}" for suffix in STATION_SUFFIXES[:4])
        queries.append(f"{base} 역")
        queries.extend(f"{base}역 {suffix}" for suffix in STATION_SUFFIXES[4:])

    if "공항" in address:
        base = address.replace("공항", "", 1)
        queries.append(f"{base}공항 {AIRPORT_SUFFIXES[0]}")
        queries.append(f"{base}공항 {AIRPORT_SUFFIXES[1]}")
        queries.append(f"{base} 공항")
        queries.append(f"{base}공항 {AIRPORT_SUFFIXES[2]}")

    queries.extend(f"{address} {place_type}" for place_type in PLACE_TYPES)

    lowered = address.lower()
    for landmark, alias_queries in (aliases or {}).items():
        if landmark.lower() in lowered:
            logger.info(f"Landmark alias matched: {landmark} -> {len(alias_queries)} queries")
            queries.extend(alias_queries)

    if not any(city in address for city in CITIES):
        queries.extend(f"{city} {address}" for city in CITIES)
        queries.extend(
            f"{city} {district} {address}" for city in CITIES for district in DISTRICTS
        )

    if " " in address:
        queries.append(address.replace(" ", ""))
        queries.append(address.replace(" ", "_"))
    elif len(address) >= 4:
        for split_at in (2, 3):
            queries.append(f"{address[:split_at]} {address[split_at:]}")

    for suffix in BUILDING_SUFFIXES:
        if suffix not in address:
            queries.append(f"{address} {suffix}")
            queries.append(f"{address}{suffix}")

    queries.extend(f"{address} {keyword}" for keyword in ACCESS_KEYWORDS)

    filtered = [
        q for q in _unique(queries)
        if q != address and q.strip() and len(q) <= MAX_QUERY_LENGTH
    ]
    return filtered[:max_variants]


def location_variations(location: str) -> List[str]:
    """Short list of spellings for a city or area, original first."""
    variations = [location]

    if "역" not in location and "Station" not in location:
        variations.extend([f"{location}역", f"{location} Station"])

    if "," not in location and len(location) <= 6:
        variations.append(f"{location}, South Korea")
        english = CITY_ENGLISH_NAMES.get(location)
        if english:
            variations.append(english)

    return _unique(variations)


def category_keywords(category: str) -> List[str]:
    """Search keywords for a place category, the category itself first."""
    mapped = CATEGORY_KEYWORDS.get(category)
    if mapped:
        return [category, *mapped]
    return [category, f"{category} places", f"{category} locations"]
