"""FastAPI application bootstrap and router wiring."""

from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalog.api.routers import health, products
from catalog.core.config import get_settings
from catalog.core.errors import CatalogError
from catalog.db.session import init_db

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if settings.create_tables_on_startup:
        init_db()
    logger.info(f"{settings.app_name} ready")
    yield
    logger.info(f"Shutting down {settings.app_name}")


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    logger.warning(
        f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}"
    )
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


def create_app() -> FastAPI:
    """Instantiate the FastAPI app and include top-level routers."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name, version="1.0.0", lifespan=lifespan)

    logger.info(f"[CORS] Allowed origins: {settings.cors_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Location"],
    )

    app.add_exception_handler(CatalogError, catalog_error_handler)

    app.include_router(health.router)
    app.include_router(
        products.router,
        prefix=f"{settings.api_prefix}/products",
        tags=["products"],
    )

    return app


app = create_app()
