"""
VisionChat Relay
Handles: chat relay to Groq (text + optional image)
Port: 5001 (PORT)

- One upstream call per request, no retries, no state between requests
- Upstream failures are mapped to 429 / 400 / generic and returned as {"error": ...}
- CORS is a fixed allow-list picked by APP_ENV
"""

import json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from visionchat import config
from visionchat.exceptions import from_groq_error
from visionchat.groq_client import GroqAPIError, build_messages, extract_text, send_to_groq
from visionchat.middleware import BodySizeLimitMiddleware
from visionchat.models import ChatRequest, ChatResponse, ErrorResponse, HealthResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Groq API key present: %s", bool(config.GROQ_API_KEY))
    logger.info("[relay] Started (env=%s, model=%s)", config.APP_ENV, config.GROQ_MODEL)
    yield


def create_app(app_env: str = config.APP_ENV) -> FastAPI:
    app = FastAPI(title="VisionChat Relay", version="1.0.0", lifespan=lifespan)

    app.add_middleware(BodySizeLimitMiddleware)

    # outermost, so 413s still carry CORS headers
    app.add_middleware(
        CORSMiddleware,
        allow_methods=["*"],
        allow_headers=["*"],
        **config.cors_options(app_env),
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        reason = "; ".join(err.get("msg", "invalid") for err in exc.errors()) or "invalid body"
        return JSONResponse(status_code=400, content={"error": f"Bad Request: {reason}"})

    # ── Endpoints ─────────────────────────────────────────────────────────────

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "VisionChat AI Server is Running on Groq! 🚀"

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return {"status": "ok", "service": "relay"}

    @app.post(
        "/api/chat",
        response_model=ChatResponse,
        responses={code: {"model": ErrorResponse} for code in (400, 413, 429, 500)},
    )
    async def chat(body: ChatRequest):
        preview = json.dumps(body.model_dump())[:100]
        logger.info("Incoming request to /api/chat: %s...", preview)
        if body.image:
            logger.info("Image detected in request")

        messages = build_messages(body.text, body.image)
        try:
            result = await send_to_groq(messages)
            ai_text = extract_text(result)
        except GroqAPIError as e:
            logger.error("Groq call failed (status=%s): %s", e.status, e.message)
            raise from_groq_error(e) from e

        logger.info("AI responded successfully")
        return {"text": ai_text}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("visionchat.main:app", host="0.0.0.0", port=config.PORT)
