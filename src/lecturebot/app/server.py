"""
Server Module - Kakao skill webhook.
====================================

FastAPI application exposing the pipeline as a Kakao i Open Builder skill.

Run locally:
  lecturebot serve
  # or
  uvicorn lecturebot.app.server:create_app --factory --port 8000

Response contract:
- POST always answers 200 with a skill envelope, even on internal failure
- OPTIONS answers 200 with an empty body (CORS preflight)
- any other method answers 405, still inside a skill envelope
"""

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from lecturebot import __version__
from lecturebot.rag.pipeline import RAGPipeline
from lecturebot.shared.config import Settings, get_settings
from lecturebot.shared.logging import configure_from_settings, get_logger
from lecturebot.shared.schemas import SkillResponse

logger = get_logger(__name__)

ALLOWED_METHODS = ["POST", "OPTIONS"]


def skill_json(text: str, status_code: int = 200, **kwargs: Any) -> JSONResponse:
    """Wrap text in the skill envelope."""
    return JSONResponse(
        content=SkillResponse.from_text(text).to_payload(),
        status_code=status_code,
        **kwargs,
    )


async def _read_json(request: Request) -> Any:
    """Decode the request body; undecodable bodies count as absent."""
    try:
        return await request.json()
    except ValueError:
        logger.warning("Request body is not valid JSON")
        return None


def create_app(
    pipeline: Optional[RAGPipeline] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the webhook application.

    Args:
        pipeline: Pipeline to serve (built from settings when omitted)
        settings: Application settings (global settings when omitted)
    """
    settings = settings or get_settings()
    configure_from_settings(settings)

    if pipeline is None:
        pipeline = RAGPipeline.from_settings(settings)

    app = FastAPI(
        title="LectureBot Skill API",
        description="Lecture-grounded RAG answers for Kakao i Open Builder.",
        version=__version__,
    )
    app.state.pipeline = pipeline
    app.state.settings = settings

    # ── CORS ──────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_methods=ALLOWED_METHODS,
        allow_headers=["Content-Type"],
    )

    path = settings.server.path
    messages = settings.messages

    # ── Routes ────────────────────────────────────────────────────────────
    @app.post(path)
    async def chat(request: Request) -> JSONResponse:
        payload = await _read_json(request)
        # Remote calls are blocking; keep them off the event loop
        result = await run_in_threadpool(app.state.pipeline.handle_payload, payload)
        logger.debug(f"Responding with outcome={result.outcome.value}")
        return skill_json(result.text)

    @app.options(path)
    async def chat_preflight() -> Response:
        return Response(status_code=200)

    @app.exception_handler(StarletteHTTPException)
    async def skill_http_exception(request: Request, exc: StarletteHTTPException):
        # Routing raises 405 for every method without a route on the skill path
        if exc.status_code == 405 and request.url.path == path:
            return skill_json(
                messages.method_not_allowed,
                status_code=405,
                headers={"Allow": ", ".join(ALLOWED_METHODS)},
            )
        return await http_exception_handler(request, exc)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    logger.info(f"Skill webhook ready at {path}")
    return app
