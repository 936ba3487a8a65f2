"""FastAPI proxy that relays scoring and question generation to OpenAI.

Endpoints:
    POST /api/score     {question, answer}      -> {score, feedback}
    POST /api/generate  {topic?, difficulty?}   -> {question}

Both also answer under ``/api/openai/...``. Any other path answers 404,
any method other than POST answers 405.
"""

import json
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from ..providers.openai_provider import OpenAIProvider, build_question_prompt, build_score_prompt
from ..services.configuration_manager import AppConfig, ConfigurationManager
from ..utils.logging import get_correlation_id, get_logger, log_error, set_correlation_id
from .reply_parser import read_question_reply, read_score_reply

logger = get_logger("proxy")

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]
SCORE_SUFFIXES = ("/api/score", "/api/openai/score")
GENERATE_SUFFIXES = ("/api/generate", "/api/openai/generate")
MISSING_KEY_ERROR = "OPENAI_API_KEY not set"


class ScoreRequest(BaseModel):
    """Request body for /api/score."""
    question: str = Field(default="", description="Question text")
    answer: str = Field(default="", description="Candidate answer")


class GenerateRequest(BaseModel):
    """Request body for /api/generate."""
    topic: str = Field(default="general", description="Question topic")
    difficulty: str = Field(default="medium", description="Question difficulty")


def create_app(config: Optional[AppConfig] = None, provider: Optional[Any] = None) -> FastAPI:
    """Build the proxy application.

    Args:
        config: Application configuration; loaded from ``config/`` when omitted
        provider: Object with ``is_configured`` and ``async complete(prompt, max_tokens)``;
            an ``OpenAIProvider`` built from ``config.llm`` when omitted

    Returns:
        Configured FastAPI application
    """
    if config is None:
        config_manager = ConfigurationManager()
        config_manager.initialize()
        config = config_manager.get_config()

    llm_config = config.llm
    if provider is None:
        provider = OpenAIProvider(llm_config.model_dump())

    app = FastAPI(title="Mock Interview Proxy", version=config.version)
    app.state.provider = provider

    @app.middleware("http")
    async def correlation_middleware(request: Request, call_next):
        set_correlation_id(request.headers.get("X-Correlation-ID") or uuid.uuid4().hex[:8])
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = get_correlation_id()
        return response

    async def score(body: Dict[str, Any]) -> JSONResponse:
        payload = ScoreRequest.model_validate(body)
        text = await provider.complete(
            build_score_prompt(payload.question, payload.answer),
            max_tokens=llm_config.score_max_tokens,
        )
        reply = read_score_reply(text)
        logger.info(f"Scored answer: {reply.score}")
        return JSONResponse(status_code=200, content=reply.model_dump())

    async def generate(body: Dict[str, Any]) -> JSONResponse:
        payload = GenerateRequest.model_validate(body)
        text = await provider.complete(
            build_question_prompt(payload.topic, payload.difficulty),
            max_tokens=llm_config.generate_max_tokens,
        )
        reply = read_question_reply(text)
        logger.info(f"Generated {payload.difficulty} question about {payload.topic}")
        return JSONResponse(status_code=200, content=reply.model_dump())

    async def unknown(body: Dict[str, Any]) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": "unknown endpoint"})

    async def handle(request: Request, action: Callable[[Dict[str, Any]], Awaitable[JSONResponse]]) -> JSONResponse:
        try:
            raw = await request.body()
            body = json.loads(raw) if raw else {}
            if not provider.is_configured:
                logger.error("Rejecting request: OPENAI_API_KEY is not set")
                return JSONResponse(status_code=500, content={"error": MISSING_KEY_ERROR})
            return await action(body if isinstance(body, dict) else {})
        except Exception as e:
            log_error(e, {"path": request.url.path})
            return JSONResponse(status_code=500, content={"error": str(e)})

    @app.post("/api/score")
    @app.post("/api/openai/score")
    async def score_endpoint(request: Request):
        """Score one answer."""
        return await handle(request, score)

    @app.post("/api/generate")
    @app.post("/api/openai/generate")
    async def generate_endpoint(request: Request):
        """Generate one interview question."""
        return await handle(request, generate)

    @app.api_route("/{path:path}", methods=ALL_METHODS)
    async def fallback_endpoint(request: Request, path: str):
        if request.method != "POST":
            return Response(status_code=405)

        request_path = request.url.path
        if request_path.endswith(SCORE_SUFFIXES):
            return await handle(request, score)
        if request_path.endswith(GENERATE_SUFFIXES):
            return await handle(request, generate)
        return await handle(request, unknown)

    return app
