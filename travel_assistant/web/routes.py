"""FastAPI routes for the travel chat assistant."""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from travel_assistant.config import Settings, get_settings
from travel_assistant.deps import get_orchestrator
from travel_assistant.orchestration.chat_orchestrator import ChatOrchestrator
from travel_assistant.web.schemas import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

router = APIRouter()
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

EXAMPLE_PROMPTS = [
    ("🏛️ 장소 검색", "서울 관광지 추천해줘"),
    ("🗺️ 길찾기", "명동에서 강남까지 빠른길로 가고 싶어"),
    ("🌤️ 날씨", "부산 날씨 어때?"),
    ("📝 블로그 후기", "제주도 맛집 블로그 포스트 찾아줘"),
    ("📰 뉴스", "부산 축제 뉴스 검색해줘"),
    ("🛒 쇼핑", "여행가방 쇼핑 정보 찾아줘"),
    ("📅 일정 저장", "2024-01-15 경복궁 09:00 일정 저장해줘"),
    ("💰 예산 추가", "숙박비 15만원 추가해줘"),
    ("✈️ 여행 상담", "부산 3박 4일 여행 계획 도와줘"),
]

GENERIC_ERROR = "❌ 알 수 없는 오류가 발생했어~ (035)"


def missing_keys_message(missing: List[str]) -> str:
    keys = "\n".join(f"- {key}" for key in missing)
    return (
        "🔑 필수 API 키가 설정 안 되어있어~ (035)\n\n"
        f"누락된 키들:\n{keys}\n\n"
        ".env 파일에 API 키를 설정해줘! 📝"
    )


def classify_error(error: Exception) -> str:
    """Map an unexpected failure to a friendly message by its text."""
    text = str(error)
    lowered = text.lower()

    if "api key" in lowered or "authentication" in lowered or "401" in text:
        return "🔑 API 키를 확인해줘! .env 파일에 올바른 키가 설정되어 있는지 체크해봐~ (V)"
    if "quota" in lowered or "limit" in lowered or "429" in text:
        return "⏰ API 사용량이 다 찼어 0l) 잠시만 기다렸다가 다시 시도해줄래?"
    if "403" in text or "REQUEST_DENIED" in text:
        return "🚫 API 권한이 없어~ 콘솔에서 API가 활성화되어 있는지 확인해줘! (035)"
    if "404" in text or "NOT_FOUND" in text:
        return "📍 요청한 정보를 찾을 수 없어~ 검색어를 다시 확인해봐줘! (05o0)"
    if isinstance(error, httpx.TransportError) or "network" in lowered or "fetch" in lowered:
        return "🌐 인터넷 연결이 이상해~ 네트워크 확인해봐줄래?"
    if "model" in lowered or "not found" in lowered:
        return "🤖 AI 모델이랑 연결이 안 돼~ 잠시 후에 다시 시도해줄래? (035)"
    return GENERIC_ERROR


def error_response(message: str, status_code: int, details: Optional[str] = None) -> JSONResponse:
    body = ChatResponse(message=message, success=False, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.get("/", response_class=HTMLResponse)
async def home(request: Request):
    """Home page with chat interface."""
    return templates.TemplateResponse(
        request,
        "chat.html",
        {
            "title": "여행 플래너 AI",
            "example_prompts": EXAMPLE_PROMPTS,
        },
    )


@router.post("/api/chat", response_model=ChatResponse, response_model_exclude_none=True)
async def chat(
    payload: ChatRequest,
    settings: Settings = Depends(get_settings),
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
):
    """Answer the latest message of a client-held conversation."""
    missing = settings.missing_required_keys()
    if missing:
        logger.error(f"Chat request rejected; missing keys: {missing}")
        return error_response(missing_keys_message(missing), status.HTTP_500_INTERNAL_SERVER_ERROR)

    if not payload.messages:
        return error_response(
            "🤔 보낼 메시지가 없어~ 여행 질문을 입력해줘!",
            status.HTTP_400_BAD_REQUEST,
        )

    try:
        answer = await orchestrator.respond(payload.messages)
        return ChatResponse(message=answer, success=True)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in chat endpoint: {type(e).__name__}: {e}")
        message = classify_error(e)
        details = str(e) if settings.debug else None
        if details:
            message += f"\n\n🔍 디버그 정보: {details}"
        return error_response(message, status.HTTP_500_INTERNAL_SERVER_ERROR, details)


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}
