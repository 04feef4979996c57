"""Chat-completions client for the hosted LLM."""

import logging
from typing import Dict, List, Optional, Union

import httpx

from travel_assistant.config import Settings

logger = logging.getLogger(__name__)

Messages = List[Dict[str, str]]


class LLMClient:
    """Thin client over an OpenAI-compatible `/chat/completions` endpoint."""

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.api_key = settings.openai_api_key
        self.model = settings.openai_model
        self.base_url = settings.openai_base_url.rstrip("/")
        self.temperature = settings.llm_temperature
        self.max_tokens = settings.llm_max_tokens

        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=60.0)

    async def complete(self,
                        prompt: Union[str, Messages],
                        *,
                        temperature: Optional[float] = None,
                        max_tokens: Optional[int] = None,
                        json_mode: bool = False,
                    ) -> str:
        """Run one completion and return the assistant text.
        Args:
            prompt (Union[str, Messages]): A single user prompt or a full message list.
            temperature (Optional[float]): Overrides the configured temperature.
            max_tokens (Optional[int]): Overrides the configured completion limit.
            json_mode (bool): Ask the model for a JSON object response.
        Returns:
            str: Assistant message content (empty string if the model sent none).
        Raises:
            httpx.HTTPError: On transport failure or non-2xx status.
        """
        messages = [{"role": "user", "content": prompt}] if isinstance(prompt, str) else prompt

        request_data = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": max_tokens or self.max_tokens,
        }
        if json_mode:
            request_data["response_format"] = {"type": "json_object"}

        response = await self.client.post(
            f"{self.base_url}/chat/completions",
            json=request_data,
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        response.raise_for_status()

        data = response.json()
        usage = data.get("usage", {})
        logger.info(
            f"LLM call ok: model={self.model} "
            f"prompt_tokens={usage.get('prompt_tokens', 0)} "
            f"completion_tokens={usage.get('completion_tokens', 0)}"
        )

        choice = data["choices"][0]
        return choice["message"].get("content") or ""

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()
