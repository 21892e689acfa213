import time
from contextlib import asynccontextmanager
from http import HTTPStatus

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request

from api.di.container import ApplicationContainer as DependencyContainer
from core.logging import configure_logging
from core.settings import SETTINGS, OpenAISettings

configure_logging(SETTINGS.APP)

logger = structlog.get_logger("chat")


class CustomFastAPI(FastAPI):
    container: DependencyContainer


def check_completion_credentials(openai_settings: OpenAISettings) -> bool:
    """Warn at startup when no OpenAI API key is configured."""
    if openai_settings.OPENAI_API_KEY.get_secret_value():
        return True
    logger.warning(
        "openai_api_key_missing",
        detail="OPENAI_API_KEY is not set; every message send will fail with 500",
    )
    return False


@asynccontextmanager
async def lifespan(_app: CustomFastAPI):
    logger.info("Starting application initialization...")
    start_time = time.time()
    check_completion_credentials(SETTINGS.OPENAI)

    try:
        logger.info("Initializing database connection...")
        db_start = time.time()
        db_resource = _app.container.infrastructure.database()
        await db_resource.init()
        async with db_resource.engine.begin() as _conn:
            # Verify database connection
            await _conn.execute(text("SELECT 1"))
        logger.info(
            "database_connected", elapsed_s=round(time.time() - db_start, 2)
        )

        if SETTINGS.DATABASE.AUTO_CREATE_TABLES:
            from api.shared.entities.registry import BaseEntity

            await db_resource.create_tables(BaseEntity)
            logger.info("database_tables_ensured")

        logger.info(
            "startup_complete", elapsed_s=round(time.time() - start_time, 2)
        )
    except Exception as e:
        logger.exception("startup_failed", error=str(e))
        raise

    yield

    try:
        db_resource = _app.container.infrastructure.database()
        if db_resource:
            await db_resource.shutdown()
        logger.info("Application shutdown complete")
    except Exception as e:
        logger.exception("shutdown_failed", error=str(e))


def create_fastapi_app() -> CustomFastAPI:
    origins = {
        "*",
        "http://localhost",
        "http://localhost:*",
        "http://localhost:3000",
        "http://localhost:8000",
    }

    _app = CustomFastAPI(
        title="Chat API",
        description="Persists chat conversations and relays messages to OpenAI",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Initialize dependency container
    _app.container = DependencyContainer()
    _app.container.init_resources()

    # Add CORS middleware
    _app.add_middleware(
        CORSMiddleware,
        allow_origins=list(origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include feature routers
    from api.features.chat.router import router as chat_router

    _app.include_router(chat_router, prefix="/chat", tags=["Chat"])

    return _app


app = create_fastapi_app()


# Health check endpoints
@app.get("/")
async def root():
    return {"message": "Chat API is running", "status": "ok"}


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/ready")
async def ready():
    return {"status": "ok"}


# Exception handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": HTTPStatus(exc.status_code).phrase,
            "detail": exc.detail,
            "status_code": exc.status_code,
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("request_validation_failed", path=request.url.path, errors=str(exc.errors()))
    return JSONResponse(
        status_code=400,
        content={"error": "Validation Error", "detail": str(exc), "status_code": 400},
    )


@app.exception_handler(PydanticValidationError)
async def pydantic_validation_handler(
    request: Request, exc: PydanticValidationError
):
    logger.warning("model_validation_failed", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=400,
        content={"error": "Validation Error", "detail": str(exc), "status_code": 400},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_exception", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred",
            "status_code": 500,
        },
    )
