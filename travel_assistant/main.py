"""Main FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from travel_assistant.config import get_settings
from travel_assistant.geo.query_variants import load_landmark_aliases
from travel_assistant.repositories.memory import InMemoryKeyValueStore
from travel_assistant.web.routes import router


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "web" / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()

    app.state.http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    app.state.memory_store = InMemoryKeyValueStore()
    app.state.landmark_aliases = load_landmark_aliases(settings.landmark_aliases_path)
    logger.info(
        f"Shared HTTP client ready; {len(app.state.landmark_aliases)} landmark alias groups loaded"
    )

    missing = settings.missing_required_keys()
    if missing:
        logger.warning(f"Required API keys missing: {', '.join(missing)}")

    yield

    await app.state.http_client.aclose()
    logger.info("Application shutting down")


def create_app() -> FastAPI:
    """Create FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Travel Chat Assistant",
        description="Korean travel-planning chat assistant with place, route, weather and budget tools",
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Include routes
    app.include_router(router)

    # Mount static files
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "travel_assistant.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
