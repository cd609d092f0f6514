"""Assistant endpoints."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from kharcha.dependencies import get_current_user, get_snapshot_cache
from kharcha.schemas.assistant import ChatRequest, ChatResponse
from kharcha.services.assistant_service import AssistantClient, build_context
from kharcha.services.snapshot_cache import SnapshotCache

router = APIRouter()


@lru_cache(maxsize=1)
def get_assistant_client() -> AssistantClient:
    """Return the shared assistant client and its connection pool."""
    return AssistantClient()


@router.get("/context", response_class=PlainTextResponse)
def get_context(
    _: Any = Depends(get_current_user),
    cache: SnapshotCache = Depends(get_snapshot_cache),
) -> str:
    """Return the ledger summary the assistant answers from."""
    return build_context(cache.state)


@router.post("/chat", response_model=ChatResponse)
def chat(
    payload: ChatRequest,
    _: Any = Depends(get_current_user),
    cache: SnapshotCache = Depends(get_snapshot_cache),
    assistant: AssistantClient = Depends(get_assistant_client),
) -> dict:
    """Answer a question about the ledger."""
    reply = assistant.reply(
        build_context(cache.state),
        [m.model_dump() for m in payload.history],
        payload.message,
    )
    return {"reply": reply}
