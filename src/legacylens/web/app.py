r"""FastAPI application exposing the analysis service over HTTP.

Routes:
    - ``GET /health``: liveness and the model in use.
    - ``POST /analyze``: analyze the submitted files.

Errors are answered with ``{"error": CODE, "message": ..., "detail": ...}``
bodies: ``BAD_REQUEST`` (400) for malformed payloads, the code and status
of any ``AnalysisError``, and ``INTERNAL`` (500) for everything else,
including a backend call that failed after all retries.
"""

from __future__ import annotations

__all__ = ["build_analyzer", "create_app"]

import logging
import uuid
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from legacylens.analysis.client import AsyncAnalysisClient
from legacylens.analysis.mock import MockAnalyzer
from legacylens.analysis.models import AnalyzeRequest
from legacylens.analysis.service import AnalysisService
from legacylens.exceptions import AnalysisError
from legacylens.settings import Settings
from legacylens.utils.structured_logging import clear_correlation_id, set_correlation_id

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from fastapi import Response

    from legacylens.analysis.service import Analyzer

logger: logging.Logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def build_analyzer(settings: Settings) -> Analyzer:
    """Create the analyzer selected by the settings."""
    if settings.use_mock_analyzer:
        logger.info("Using the mock analyzer")
        return MockAnalyzer()
    if settings.openai_api_key is None:
        logger.warning("OPENAI_API_KEY is not set, requests to the LLM backend will be rejected")
    api_key = settings.openai_api_key.get_secret_value() if settings.openai_api_key else None
    return AsyncAnalysisClient(
        api_key=api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        retry_config=settings.retry_config(),
    )


def create_app(settings: Settings | None = None, analyzer: Analyzer | None = None) -> FastAPI:
    """Create the FastAPI app.

    Args:
        settings: Optional settings. Defaults to ``Settings()``, which
            reads the environment.
        analyzer: Optional analyzer. Defaults to the one selected by
            ``build_analyzer``. Its async context is entered for the
            lifetime of the app.

    Returns:
        The configured application.
    """
    settings = settings if settings is not None else Settings()
    analyzer = analyzer if analyzer is not None else build_analyzer(settings)
    service = AnalysisService(
        analyzer,
        max_payload_bytes=settings.max_payload_bytes,
        default_max_chars=settings.max_chars,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with analyzer:
            yield

    app = FastAPI(title="legacylens", lifespan=lifespan)
    app.state.service = service
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def correlation_id_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        correlation_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        token = set_correlation_id(correlation_id)
        try:
            response = await call_next(request)
        finally:
            clear_correlation_id(token)
        response.headers[REQUEST_ID_HEADER] = correlation_id
        return response

    @app.exception_handler(RequestValidationError)
    async def bad_request_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "BAD_REQUEST", "detail": jsonable_encoder(exc.errors())},
        )

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"ok": True, "model": service.model}

    @app.post("/analyze")
    async def analyze(payload: AnalyzeRequest) -> Any:
        try:
            result = await service.analyze(payload)
        except AnalysisError as exc:
            logger.warning(f"Analysis rejected ({exc.code}): {exc.message}")
            return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))
        except Exception as exc:
            logger.exception("Analysis failed")
            return JSONResponse(
                status_code=500,
                content={"error": "INTERNAL", "message": str(exc) or type(exc).__name__},
            )
        return result.model_dump(mode="json", exclude_none=True)

    return app
