"""Unit tests for ChatOrchestrator dispatch and consulting fallback."""

from typing import Any, List

import pytest

from travel_assistant.config import Settings
from travel_assistant.orchestration.chat_orchestrator import EMPTY_REPLY, ChatOrchestrator
from travel_assistant.tools.base import TravelTool
from travel_assistant.tools.google_tools import PlaceSearchTool
from travel_assistant.tools.registry import ToolRegistry
from travel_assistant.web.schemas import ChatMessage


class FakeLLM:
    """Returns queued replies and records every prompt."""

    def __init__(self, replies: List[str]):
        self.replies = list(replies)
        self.calls: List[dict] = []

    async def complete(self, prompt: Any, **kwargs) -> str:
        self.calls.append({"prompt": prompt, **kwargs})
        return self.replies.pop(0)


class EchoTool(TravelTool):
    name = "travel_weather"
    description = "weather"

    def __init__(self):
        self.received: List[str] = []

    async def run(self, params: str) -> str:
        self.received.append(params)
        return f"날씨: {params}"


class ExplodingTool(TravelTool):
    name = "budget_calculator"
    description = "budget"

    async def run(self, params: str) -> str:
        raise RuntimeError("store offline")


class UntouchedGoogle:
    api_key = "gmaps-test"

    async def text_search(self, query: str):
        raise AssertionError("upstream must not be called")


@pytest.fixture()
def settings() -> Settings:
    return Settings(_env_file=None, openai_api_key="test", google_maps_api_key="test", history_window=2)


def user(content: str) -> ChatMessage:
    return ChatMessage(role="user", content=content)


def assistant(content: str) -> ChatMessage:
    return ChatMessage(role="assistant", content=content)


@pytest.mark.asyncio
async def test_tool_intent_dispatches_to_tool(settings):
    tool = EchoTool()
    llm = FakeLLM(['{"tool": "travel_weather", "params": "Busan"}'])
    orchestrator = ChatOrchestrator(settings, llm, ToolRegistry([tool]))

    reply = await orchestrator.respond([user("부산 날씨 어때?")])

    assert reply == "날씨: Busan"
    assert tool.received == ["Busan"]
    assert len(llm.calls) == 1
    assert llm.calls[0]["json_mode"] is True
    assert "부산 날씨 어때?" in llm.calls[0]["prompt"]
    assert "- travel_weather: weather" in llm.calls[0]["prompt"]


@pytest.mark.asyncio
async def test_unrecognized_classification_falls_back_to_consulting(settings):
    llm = FakeLLM(["흠... 잘 모르겠어", "제주도는 3박 4일이 딱 좋아! (V)"])
    orchestrator = ChatOrchestrator(settings, llm, ToolRegistry([EchoTool()]))

    reply = await orchestrator.respond([
        user("안녕"),
        assistant("안녕 여행러!"),
        user("추천 좀"),
        assistant("어디로 갈래?"),
        user("제주도 며칠이 좋아?"),
    ])

    assert reply == "제주도는 3박 4일이 딱 좋아! (V)"
    consulting_messages = llm.calls[1]["prompt"]
    assert consulting_messages[0]["role"] == "system"
    # history_window=2 keeps the last two earlier turns
    assert consulting_messages[1:3] == [
        {"role": "user", "content": "추천 좀"},
        {"role": "assistant", "content": "어디로 갈래?"},
    ]
    assert consulting_messages[-1] == {"role": "user", "content": '여행 질문: "제주도 며칠이 좋아?"'}


@pytest.mark.asyncio
async def test_malformed_tool_params_return_usage_without_upstream_call(settings):
    llm = FakeLLM(["place_search:서울"])
    orchestrator = ChatOrchestrator(settings, llm, ToolRegistry([PlaceSearchTool(UntouchedGoogle())]))

    reply = await orchestrator.respond([user("서울")])

    assert '"지역명,카테고리"' in reply


@pytest.mark.asyncio
async def test_tool_failure_becomes_message(settings):
    llm = FakeLLM(['{"tool": "budget_calculator", "params": "합계"}'])
    orchestrator = ChatOrchestrator(settings, llm, ToolRegistry([ExplodingTool()]))

    reply = await orchestrator.respond([user("예산 합계")])

    assert "store offline" in reply


@pytest.mark.asyncio
async def test_empty_consulting_reply_uses_canned_sentence(settings):
    llm = FakeLLM(['{"tool": "none"}', "   "])
    orchestrator = ChatOrchestrator(settings, llm, ToolRegistry([EchoTool()]))

    assert await orchestrator.respond([user("음")]) == EMPTY_REPLY


@pytest.mark.asyncio
async def test_latest_user_message_is_classified(settings):
    tool = EchoTool()
    llm = FakeLLM(['{"tool": "travel_weather", "params": "서울"}'])
    orchestrator = ChatOrchestrator(settings, llm, ToolRegistry([tool]))

    await orchestrator.respond([user("서울 날씨"), assistant("잠깐만")])

    assert '"서울 날씨"' in llm.calls[0]["prompt"]


@pytest.mark.asyncio
async def test_empty_conversation_is_rejected(settings):
    orchestrator = ChatOrchestrator(settings, FakeLLM([]), ToolRegistry([]))

    with pytest.raises(ValueError):
        await orchestrator.respond([])
