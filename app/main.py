"""
FastAPI application - entry point of the ticket scanning service
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from app.config import get_settings
from app.core.exceptions import ConfigurationError
from app.core.logging import setup_logging, get_logger
from app.api.dependencies import get_ocr_engine
from app.api.v1.router import api_router

settings = get_settings()
setup_logging(log_level=settings.LOG_LEVEL, log_format=settings.LOG_FORMAT, is_debug=settings.DEBUG)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifecycle events
    Runs on application startup and shutdown
    """
    logger.info(
        "Starting Ticket Scanner Service",
        app_name=settings.APP_NAME,
        version=settings.APP_VERSION,
        ai_provider=settings.AI_PROVIDER.value,
        ocr_enabled=settings.OCR_ENABLED,
        debug=settings.DEBUG
    )

    yield

    logger.info("Shutting down Ticket Scanner Service")
    if get_ocr_engine.cache_info().currsize:
        engine = get_ocr_engine()
        if engine is not None:
            engine.cleanup()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Lottery ticket scanner: OCR + vision model with reconciliation",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Origin", "Content-Type"],
)

app.include_router(api_router)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    """Misconfigured recognizers surface as 503 instead of a crash"""
    logger.error("Service misconfigured", error=exc.message, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": {"error": "Service misconfigured", "message": exc.message}},
    )


@app.get("/", include_in_schema=False)
async def root():
    """Redirect to the docs"""
    return RedirectResponse(url="/docs")


@app.get("/ping", include_in_schema=False)
async def ping():
    """Simple ping endpoint"""
    return {"status": "pong"}


if __name__ == "__main__":
    import uvicorn

    logger.info(
        "Starting server",
        host=settings.HOST,
        port=settings.PORT
    )

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
