import os
import logging
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

# Load .env from project root (one level above ai-proxy/)
load_dotenv(dotenv_path=Path(__file__).parent.parent / ".env")

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
GEMINI_TIMEOUT = float(os.getenv("GEMINI_TIMEOUT", "60"))

MAX_OUTPUT_TOKENS = 300
TEMPERATURE = 0.7

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def gemini_url() -> str:
    return f"{GEMINI_BASE_URL}/{GEMINI_MODEL}:generateContent"


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not GEMINI_API_KEY:
        logger.warning(
            "GEMINI_API_KEY is not set. "
            "The /api/ai endpoint will return 500 until the key is configured."
        )
    yield


app = FastAPI(
    title="WeatherNow AI Proxy",
    description="Translates chat messages into Gemini generateContent requests.",
    version="1.0.0",
    lifespan=lifespan,
)


# ── Custom exception handlers ────────────────────────────────────────────────

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return 400 (not FastAPI's default 422) for a malformed body."""
    return JSONResponse(status_code=400, content={"error": "Invalid request body."})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Normalise routing errors (404, 405) to {"error": "..."}."""
    if exc.status_code == 405:
        return JSONResponse(status_code=405, content={"error": "Method not allowed"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


# ── Pydantic models ──────────────────────────────────────────────────────────

class MessageModel(BaseModel):
    role: str
    content: str


class AIRequest(BaseModel):
    messages: list[MessageModel]
    system: str = ""


class AIResponse(BaseModel):
    text: str


class HealthResponse(BaseModel):
    status: str
    api_key_configured: bool
    model: str


# ── Gemini translation ───────────────────────────────────────────────────────

def to_gemini_body(request: AIRequest) -> dict:
    """Gemini names the assistant role "model" and wraps text in parts."""
    contents = [
        {
            "role": "model" if msg.role == "assistant" else "user",
            "parts": [{"text": msg.content}],
        }
        for msg in request.messages
    ]
    return {
        "system_instruction": {"parts": [{"text": request.system}]},
        "contents": contents,
        "generationConfig": {
            "maxOutputTokens": MAX_OUTPUT_TOKENS,
            "temperature": TEMPERATURE,
        },
    }


def extract_text(data: dict) -> str:
    try:
        return data["candidates"][0]["content"]["parts"][0].get("text") or ""
    except (KeyError, IndexError, TypeError, AttributeError):
        return ""


# ── Endpoints ────────────────────────────────────────────────────────────────

@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        api_key_configured=bool(GEMINI_API_KEY),
        model=GEMINI_MODEL,
    )


@app.post("/api/ai", response_model=AIResponse)
async def ai(request: AIRequest):
    logger.info(
        "Incoming POST /api/ai: messages=%d, system_chars=%d",
        len(request.messages),
        len(request.system),
    )

    if not GEMINI_API_KEY:
        return JSONResponse(
            status_code=500,
            content={"error": "GEMINI_API_KEY not configured"},
        )

    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                gemini_url(),
                params={"key": GEMINI_API_KEY},
                json=to_gemini_body(request),
                timeout=GEMINI_TIMEOUT,
            )

        if not response.is_success:
            try:
                message = response.json().get("error", {}).get("message")
            except (ValueError, AttributeError):
                message = None
            logger.error("Gemini error %d: %s", response.status_code, message)
            return JSONResponse(
                status_code=response.status_code,
                content={"error": message or "Gemini API error"},
            )

        text = extract_text(response.json())
        logger.info("Gemini reply: chars=%d", len(text))
        return AIResponse(text=text)

    except Exception:
        logger.error("Proxy error in /api/ai", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


if __name__ == "__main__":
    uvicorn.run(
        "ai_proxy:app",
        host="0.0.0.0",
        port=int(os.getenv("AI_PROXY_PORT", "8002")),
        reload=False,
    )
