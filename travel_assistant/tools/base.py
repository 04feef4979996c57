"""Base travel tool interface."""

import logging
from abc import ABC, abstractmethod
from typing import List

logger = logging.getLogger(__name__)


class TravelTool(ABC):
    """Abstract base class for tools the intent classifier can select.

    A tool takes one delimited parameter string and returns user-facing
    text. `invoke` never raises: any failure becomes a friendly message.
    """

    name: str = ""
    description: str = ""

    async def invoke(self, params: str) -> str:
        """Run the tool.
        Args:
            params (str): Raw parameter string, e.g. "서울,관광지".
        Returns:
            str: Formatted reply text.
        """
        try:
            return await self.run(params.strip())
        except Exception as e:
            logger.error(f"Tool {self.name} failed for params '{params}': {e}")
            return self.error_message(e)

    @abstractmethod
    async def run(self, params: str) -> str:
        """Tool body; may raise, `invoke` converts errors to text."""
        pass

    def error_message(self, error: Exception) -> str:
        """Message shown when `run` raised."""
        return f"❌ {self.name} 실행 중 오류가 발생했어요: {error or '알 수 없는 오류'}"


def split_params(params: str, sep: str = ",") -> List[str]:
    """Split a positional parameter string and trim each part."""
    return [part.strip() for part in params.split(sep)]


def missing_key_message(*env_names: str) -> str:
    """Message for a tool whose provider key is not configured."""
    keys = "와 ".join(env_names)
    return f"🔑 {keys} 설정이 필요해요! .env 파일에 API 키를 설정해주세요."
