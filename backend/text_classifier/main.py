# backend/text_classifier/main.py
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from text_classifier.api.classify_router import router as classify_router
from text_classifier.config import Settings, get_settings
from text_classifier.llm_client import build_completion_client
from text_classifier.nlp import ClassificationError, InputError

logger = logging.getLogger(__name__)

_UNSET = object()


def create_app(client: Any = _UNSET, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    When client is given it is used as the completion client as-is (tests pass a
    fake here). Otherwise an AsyncOpenAI client is built from settings on startup.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = None
        if client is _UNSET:
            owned = build_completion_client(settings)
            app.state.completion_client = owned
        logger.info("Server running on port %s", settings.port)
        logger.info("Swagger: http://localhost:%s/docs", settings.port)
        try:
            yield
        finally:
            if owned is not None:
                await owned.close()

    app = FastAPI(
        title="Text Classifier API",
        version="1.0.0",
        description="API for converting text into structured JSON (zip, brand, category, time_pref)",
        servers=[{"url": f"http://localhost:{settings.port}"}],
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.completion_client = None if client is _UNSET else client

    # Allow CORS for browser clients of the docs / API (adjust in production)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(InputError)
    async def input_error_handler(request: Request, exc: InputError):
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # malformed body or non-string text: same answer as a missing field
        logger.warning("Rejected malformed request body on %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": "Missing text"})

    @app.exception_handler(ClassificationError)
    async def classification_error_handler(request: Request, exc: ClassificationError):
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s: %s", request.url.path, exc, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": str(exc) or type(exc).__name__})

    app.include_router(classify_router)
    return app

