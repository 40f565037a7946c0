"""Verdict AI chat app built with FastAPI.

Run with:
    python -m verdict_chat.app
"""

from __future__ import annotations as _annotations

from contextlib import asynccontextmanager
from pathlib import Path

import fastapi
import httpx
import logfire
from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse

from . import config, relay
from .models import RelayRequest

# Configure logging
logfire.configure(send_to_logfire="if-token-present")

THIS_DIR = Path(__file__).parent


@asynccontextmanager
async def lifespan(_app: fastapi.FastAPI):
    """Manage the outbound HTTP client lifecycle."""
    # Gemini calls are awaited to completion, without a client-side deadline
    async with httpx.AsyncClient(timeout=None) as http_client:
        yield {"http_client": http_client}


app = fastapi.FastAPI(lifespan=lifespan)
logfire.instrument_fastapi(app)


async def get_http_client(request: Request) -> httpx.AsyncClient:
    """Dependency to get the shared outbound HTTP client."""
    return request.state.http_client


@app.exception_handler(RequestValidationError)
async def invalid_request(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed chat requests with a displayable reply."""
    logfire.warn("Rejected chat request: {errors}", errors=str(exc.errors()))
    return JSONResponse({"reply": config.INVALID_REQUEST_REPLY}, status_code=422)


@app.get("/")
async def index() -> FileResponse:
    """Serve the main chat interface."""
    return FileResponse((THIS_DIR / "chat_app.html"), media_type="text/html")


@app.get("/chat_app.js")
async def main_js() -> FileResponse:
    """Serve the chat client script."""
    return FileResponse((THIS_DIR / "chat_app.js"), media_type="text/javascript")


@app.post("/api/chat")
async def post_chat(
    request: RelayRequest, http_client: httpx.AsyncClient = Depends(get_http_client)
) -> JSONResponse:
    """Relay a chat message to Gemini and return the reply."""
    result = await relay.handle(request, http_client)
    return JSONResponse({"reply": result.reply}, status_code=result.http_status)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("verdict_chat.app:app", reload=True, reload_dirs=[str(THIS_DIR)])
