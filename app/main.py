from __future__ import annotations

import os
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
import logging
from pydantic import BaseModel, ConfigDict
import uvicorn

from config.settings import get_settings
from relay.clients import DialogEngineError
from relay.orchestrator import MessageOrchestrator, build_orchestrator


settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="[%(asctime)s] %(levelname)s - %(message)s",
)
logger = logging.getLogger("relay")

app = FastAPI(title="NLU Conversation Relay", version="1.0.0")

# CORS: allow local frontend during development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


class MessageRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    input: Optional[Dict[str, Any]] = None
    context: Optional[Dict[str, Any]] = None


def get_orchestrator() -> MessageOrchestrator:
    return build_orchestrator(get_settings())


@app.exception_handler(DialogEngineError)
async def dialog_engine_error_handler(request: Request, exc: DialogEngineError) -> JSONResponse:
    logger.warning("Dialog engine failed with %s: %s", exc.code, exc)
    return JSONResponse(status_code=exc.code, content=exc.body)


@app.post("/api/message")
async def message(
    req: Optional[MessageRequest] = Body(default=None),
    orchestrator: MessageOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    payload = req.model_dump() if req is not None else {}
    try:
        return await orchestrator.handle_message(payload)
    except DialogEngineError:
        raise
    except Exception as e:
        logger.exception("Message processing failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/health")
def health():
    return {"status": "ok"}


# Mounted last so the API routes above take precedence
if os.path.isdir(settings.static_dir):
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="ui")


def run() -> None:
    settings = get_settings()
    logger.info("Starting relay on %s:%s", settings.host, settings.port)
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
