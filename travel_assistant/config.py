"""Configuration management for the travel chat assistant."""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # LLM (OpenAI-compatible chat completions)
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = "https://api.openai.com/v1"
    llm_temperature: float = 0.3
    llm_max_tokens: int = 1500

    # Google Maps Platform (Places, Directions, Distance Matrix)
    google_maps_api_key: Optional[str] = None

    # OpenWeatherMap
    openweather_api_key: Optional[str] = None

    # Naver Search API (developers.naver.com)
    naver_client_id: Optional[str] = None
    naver_client_secret: Optional[str] = None

    # Naver Cloud Platform Maps; falls back to the search credentials
    naver_cloud_client_id: Optional[str] = None
    naver_cloud_client_secret: Optional[str] = None

    # HTTP behaviour
    http_timeout_seconds: float = 30.0

    # Coordinate resolver
    resolver_deadline_seconds: float = 20.0
    resolver_max_variants: int = 20
    landmark_aliases_path: Optional[str] = None

    # Number of prior chat messages passed to the consulting prompt
    history_window: int = 10

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    @property
    def naver_search_enabled(self) -> bool:
        return bool(self.naver_client_id and self.naver_client_secret)

    @property
    def naver_cloud_credentials(self) -> tuple:
        """Return the (key id, key) pair used for Naver Cloud Maps endpoints."""
        return (
            self.naver_cloud_client_id or self.naver_client_id,
            self.naver_cloud_client_secret or self.naver_client_secret,
        )

    def missing_required_keys(self) -> List[str]:
        """List the keys the chat endpoint cannot run without."""
        missing = []
        if not self.openai_api_key:
            missing.append("OPENAI_API_KEY (LLM 응답 생성용)")
        if not self.google_maps_api_key:
            missing.append("GOOGLE_MAPS_API_KEY (구글 지도 검색 API용)")
        return missing


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
