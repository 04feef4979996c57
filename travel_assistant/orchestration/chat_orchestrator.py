"""Chat orchestrator: classify the latest message, run a tool or consult."""

import logging
from typing import Dict, List, Sequence

from travel_assistant.config import Settings
from travel_assistant.orchestration.intents import ToolIntent, parse_intent
from travel_assistant.orchestration.prompts import build_classifier_prompt, build_consulting_messages
from travel_assistant.providers.llm_client import LLMClient
from travel_assistant.tools.registry import ToolRegistry
from travel_assistant.web.schemas import ChatMessage

logger = logging.getLogger(__name__)

EMPTY_REPLY = "어? 여행 정보를 찾을 수 없었어 (035) 다시 물어봐줄래?"

# Classification must be stable; consulting uses the configured temperature
CLASSIFIER_TEMPERATURE = 0.0
CLASSIFIER_MAX_TOKENS = 200


class ChatOrchestrator:
    """Produces one assistant reply for a conversation.

    The conversation is owned by the client and sent whole on every
    request; nothing here is stored between calls except what the
    itinerary and budget tools write to the shared store.
    """

    def __init__(self, settings: Settings, llm: LLMClient, registry: ToolRegistry):
        self.settings = settings
        self.llm = llm
        self.registry = registry

    async def respond(self, messages: Sequence[ChatMessage]) -> str:
        """Reply to the latest user message.
        Args:
            messages (Sequence[ChatMessage]): Full conversation, oldest first.
        Returns:
            str: Reply text; tool output or a consulting answer.
        Raises:
            ValueError: If `messages` is empty.
            httpx.HTTPError: If an LLM call fails.
        """
        if not messages:
            raise ValueError("messages must not be empty")

        latest_index = self._latest_user_index(messages)
        question = messages[latest_index].content.strip()

        classifier_prompt = build_classifier_prompt(
            question,
            self.registry.catalog(),
            naver_enabled=self.settings.naver_search_enabled,
        )
        decision = await self.llm.complete(
            classifier_prompt,
            temperature=CLASSIFIER_TEMPERATURE,
            max_tokens=CLASSIFIER_MAX_TOKENS,
            json_mode=True,
        )
        intent = parse_intent(decision, self.registry)
        logger.info(f"Classified '{question[:60]}' as {intent!r}")

        if isinstance(intent, ToolIntent):
            tool = self.registry.get(intent.tool)
            answer = await tool.invoke(intent.params)
        else:
            history = self._history(messages[:latest_index])
            answer = await self.llm.complete(build_consulting_messages(history, question))

        return answer.strip() or EMPTY_REPLY

    @staticmethod
    def _latest_user_index(messages: Sequence[ChatMessage]) -> int:
        for index in range(len(messages) - 1, -1, -1):
            if messages[index].role == "user":
                return index
        return len(messages) - 1

    def _history(self, messages: Sequence[ChatMessage]) -> List[Dict[str, str]]:
        """Recent user/assistant turns for the consulting prompt."""
        turns = [
            {"role": message.role, "content": message.content}
            for message in messages
            if message.role in ("user", "assistant") and message.content.strip()
        ]
        if self.settings.history_window <= 0:
            return []
        return turns[-self.settings.history_window:]
