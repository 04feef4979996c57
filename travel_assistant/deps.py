"""Dependency injection setup for FastAPI."""

from typing import Dict, List

import httpx
from fastapi import Depends, Request

from travel_assistant.config import Settings, get_settings
from travel_assistant.orchestration.chat_orchestrator import ChatOrchestrator
from travel_assistant.providers.llm_client import LLMClient
from travel_assistant.repositories.memory import KeyValueStore
from travel_assistant.tools.registry import ToolRegistry


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared HTTP client created in the app lifespan."""
    return request.app.state.http_client


def get_memory_store(request: Request) -> KeyValueStore:
    """Process-wide itinerary/budget store created in the app lifespan."""
    return request.app.state.memory_store


def get_landmark_aliases(request: Request) -> Dict[str, List[str]]:
    return request.app.state.landmark_aliases


def get_tool_registry(
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
    store: KeyValueStore = Depends(get_memory_store),
    aliases: Dict[str, List[str]] = Depends(get_landmark_aliases),
) -> ToolRegistry:
    """Tool registry over the shared client and store."""
    return ToolRegistry.build(settings, http_client, store, aliases)


def get_orchestrator(
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
    registry: ToolRegistry = Depends(get_tool_registry),
) -> ChatOrchestrator:
    """Per-request orchestrator; cheap because the client and store are shared."""
    return ChatOrchestrator(settings, LLMClient(settings, client=http_client), registry)
