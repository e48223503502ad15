import logging

logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
)
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from questboard.config import get_settings
from questboard.controllers.events import router as events_router
from questboard.controllers.health import router as health_router
from questboard.errors import register_exception_handlers
from questboard.lifespan import cleanup_resources, setup_resources
from questboard.middleware import HTTPLogMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    resources = await setup_resources(get_settings())
    app.state.store = resources.store
    app.state.cache = resources.cache
    try:
        yield
    finally:
        app.state.store = None
        app.state.cache = None
        await cleanup_resources(resources)


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Quest Board API", version="1.0.0", lifespan=lifespan)

    cors_regex = settings.cors.origins_regex or None
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins,
        allow_origin_regex=cors_regex,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.debug.request:
        logging.getLogger("questboard.http").setLevel(logging.DEBUG)
        app.add_middleware(HTTPLogMiddleware)

    register_exception_handlers(app)
    app.include_router(health_router)
    app.include_router(events_router, prefix="/api")
    return app


app = create_app()
