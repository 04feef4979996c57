"""Unit tests for classifier reply parsing."""

import pytest

from travel_assistant.orchestration.intents import NoToolIntent, ToolIntent, parse_intent
from travel_assistant.tools.base import TravelTool
from travel_assistant.tools.registry import ToolRegistry


class EchoTool(TravelTool):
    def __init__(self, name: str):
        self.name = name
        self.description = f"{name} tool"

    async def run(self, params: str) -> str:
        return f"{self.name}({params})"


@pytest.fixture()
def registry() -> ToolRegistry:
    return ToolRegistry(EchoTool(name) for name in [
        "place_search",
        "distance_calculator",
        "travel_weather",
        "itinerary_manager",
        "budget_calculator",
    ])


def test_json_object(registry):
    intent = parse_intent('{"tool": "place_search", "params": "서울,관광지"}', registry)
    assert intent == ToolIntent(tool="place_search", params="서울,관광지")


def test_json_inside_code_fence_with_prose(registry):
    text = '```json\n{"tool": "Travel_Weather", "params": "Seoul"}\n```'
    assert parse_intent(text, registry) == ToolIntent(tool="travel_weather", params="Seoul")


def test_json_after_prose_braces(registry):
    text = '참고 {메모} 이렇게 할게요 {"tool": "travel_weather", "params": "부산"}'
    assert parse_intent(text, registry) == ToolIntent(tool="travel_weather", params="부산")


def test_json_after_unclosed_prose_brace(registry):
    text = '{ 생각중... {"tool": "budget_calculator", "params": "합계"}'
    assert parse_intent(text, registry) == ToolIntent(tool="budget_calculator", params="합계")


def test_json_none_and_unknown_tool(registry):
    assert parse_intent('{"tool": "none", "params": ""}', registry) == NoToolIntent()
    assert parse_intent('{"tool": "hotel_booking", "params": "x"}', registry) == NoToolIntent()


def test_json_discriminated_form(registry):
    text = '{"kind": "tool", "tool": "budget_calculator", "params": "합계"}'
    assert parse_intent(text, registry) == ToolIntent(tool="budget_calculator", params="합계")
    assert parse_intent('{"kind": "none"}', registry) == NoToolIntent()


def test_json_list_params_are_joined(registry):
    intent = parse_intent('{"tool": "distance_calculator", "params": ["명동", "강남"]}', registry)
    assert intent.params == "명동,강남"


def test_legacy_prefix_keeps_param_case(registry):
    intent = parse_intent("TRAVEL_WEATHER:Busan", registry)
    assert intent == ToolIntent(tool="travel_weather", params="Busan")


def test_legacy_itinerary_keeps_inner_colons(registry):
    intent = parse_intent("itinerary_manager:저장:2024-01-15:경복궁:09:00", registry)
    assert intent.params == "저장:2024-01-15:경복궁:09:00"


@pytest.mark.parametrize("text", [None, "", "   ", "none", "잘 모르겠어요", "{not json", '["place_search"]'])
def test_unrecognized_replies_become_no_tool(registry, text):
    assert parse_intent(text, registry) == NoToolIntent()


def test_registry_catalog_and_duplicates(registry):
    assert registry.catalog().splitlines()[0] == "- place_search: place_search tool"
    assert registry.names[-1] == "budget_calculator"

    with pytest.raises(ValueError):
        ToolRegistry([EchoTool("place_search"), EchoTool("place_search")])
