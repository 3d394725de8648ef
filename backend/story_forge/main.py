"""FastAPI application entry point."""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from story_forge.core.config import get_settings
from story_forge.core.logging import setup_logging

# Setup logging
logger = setup_logging("main")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize services at startup."""
    settings = get_settings()
    if getattr(app.state, "forge_service", None) is not None:
        # Already provided (e.g. injected by tests).
        yield
        return
    try:
        from story_forge.services.favorites import FavoriteSettingsService
        from story_forge.services.forge import StoryForgeService
        from story_forge.services.gateway import GenerationGateway
        from story_forge.services.store import EntityStore, build_backend

        backend = build_backend(settings)
        app.state.forge_service = StoryForgeService(
            store=EntityStore(backend),
            gateway=GenerationGateway(settings),
            favorites=FavoriteSettingsService(backend),
        )
        logger.info("Services initialized (storage=%s)", settings.storage_backend)
    except Exception as exc:
        logger.error(
            "Service initialization failed; running in degraded mode",
            exc_info=True,
            extra={"service": "main", "error_type": type(exc).__name__},
        )
        # Continue without services; endpoints return 503 until fixed

    yield


# Create FastAPI app
app = FastAPI(
    title="Story Forge",
    description="Characters, outfits, locations and scenes for visual-prompt generation",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=[f"http://localhost:{settings.frontend_port}"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
from story_forge.api.generation import router as generation_router  # noqa: E402
from story_forge.api.library import router as library_router  # noqa: E402
from story_forge.api.settings import router as settings_router  # noqa: E402

app.include_router(generation_router)
app.include_router(library_router)
app.include_router(settings_router)


@app.get("/health")
async def health_check(request: Request) -> dict:
    """Health check endpoint.

    Always returns HTTP 200; check `services.forge` for actual status.
    """
    svc = getattr(request.app.state, "forge_service", None)

    logger.info("Health check requested")
    return {
        "status": "ok",
        "version": app.version,
        "services": {
            "forge": "ok" if svc is not None else "unavailable",
            "storage": get_settings().storage_backend,
        },
    }


def run() -> None:
    """Launch the uvicorn server on BACKEND_HOST:BACKEND_PORT."""
    import uvicorn

    current = get_settings()
    uvicorn.run("story_forge.main:app", host=current.backend_host, port=current.backend_port, reload=False)


if __name__ == "__main__":
    run()
