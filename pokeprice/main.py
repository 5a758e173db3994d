import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pokeprice.api import cards_router, health_router, pricing_router, sets_router
from pokeprice.cache.database import DatabaseCacheStore
from pokeprice.config import settings
from pokeprice.db.database import async_session_factory, dispose_db, init_db
from pokeprice.models.failure import KnownError
from pokeprice.services.data_service import create_data_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    await init_db()
    app.state.data_service = await create_data_service(DatabaseCacheStore(async_session_factory))
    yield
    await app.state.data_service.wait_for_background_tasks()
    await dispose_db()


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("pokeprice"),
    lifespan=lifespan,
)

app.include_router(cards_router)
app.include_router(health_router)
app.include_router(pricing_router)
app.include_router(sets_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Render KnownError subclasses as ErrorResponse bodies."""
    if exc.status_code >= 500:
        logger.warning("%s: %s", exc.kind.value, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(mode="json"),
    )
