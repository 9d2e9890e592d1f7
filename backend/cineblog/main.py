import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from cineblog.core.config import Settings, get_settings
from cineblog.core.container import AppContainer, build_container
from cineblog.routers import blog, health, movies

STATIC_DIR = Path(__file__).resolve().parent / "static"

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Backends live for the whole process; tests hand in a prebuilt container
    if app.state.container is None:
        app.state.container = build_container(app.state.settings)
    logger.info("Cineblog started")
    try:
        yield
    finally:
        app.state.container.close()


def create_app(settings: Optional[Settings] = None, container: Optional[AppContainer] = None) -> FastAPI:
    if settings is None:
        settings = container.settings if container else get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Cineblog",
        description="Movie blog with TMDB-linked posts",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.container = container

    origins_env = settings.CORS_ALLOW_ORIGINS or ""
    origins = [o.strip() for o in origins_env.split(",") if o.strip()] or [
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    ]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    if not settings.AZURE_STORAGE_CONNECTION_STRING:
        # Banners written by LocalObjectStore
        app.mount(settings.MEDIA_URL, StaticFiles(directory=settings.MEDIA_ROOT, check_dir=False), name="media")

    app.include_router(health.router)
    app.include_router(movies.router)
    app.include_router(blog.router)
    return app


app = create_app()
