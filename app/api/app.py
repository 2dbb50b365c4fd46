from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.routes import router
from app.config.settings import Settings
from app.extraction.pipeline import ExtractionPipeline, build_pipeline
from app.logging.logger import Log


def create_app(
    settings: Settings | None = None,
    *,
    http_client: httpx.Client | None = None,
    pipeline: ExtractionPipeline | None = None,
) -> FastAPI:
    """Create the API application.

    The HTTP client and pipeline are built once per process in the lifespan
    and shared by all requests. Passing `http_client` or `pipeline` injects
    them instead; an injected client is not closed on shutdown.
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        client = http_client or httpx.Client(follow_redirects=True)
        app.state.settings = settings
        app.state.http_client = client
        app.state.pipeline = pipeline or build_pipeline(settings, client)
        Log.info(
            "Extraction service started",
            env=settings.app_env,
            pdf_engine=settings.pdf_engine,
            external_ocr=bool(settings.ocr_space_api_key.strip()),
        )
        try:
            yield
        finally:
            if http_client is None:
                client.close()
            Log.info("Extraction service stopped")

    app = FastAPI(title="Resume extraction service", lifespan=lifespan)
    app.include_router(router)

    @app.exception_handler(RequestValidationError)
    async def invalid_body(_: Request, exc: RequestValidationError) -> JSONResponse:
        Log.warning("Rejected invalid request body", errors=len(exc.errors()))
        return JSONResponse({"error": "file_url is required"}, status_code=400)

    @app.exception_handler(Exception)
    async def unexpected_error(_: Request, exc: Exception) -> JSONResponse:
        Log.error("Unhandled error in request", error_type=type(exc).__name__, error=exc)
        return JSONResponse({"error": str(exc) or type(exc).__name__}, status_code=500)

    return app
