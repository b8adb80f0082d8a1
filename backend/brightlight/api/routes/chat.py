"""Chat endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from brightlight.api.deps import get_chat_service
from brightlight.api.errors import http_error_from
from brightlight.api.schemas.chat import ChatRequest, ChatResponse, SummarizeRequest, SummarizeResponse
from brightlight.core.errors import BrightLightError
from brightlight.observability.tracing import trace
from brightlight.services.chat_service import ChatService

router = APIRouter()


@router.post("/chat", response_model=ChatResponse, tags=["chat"])
def chat_reply(
    request: Request,
    payload: ChatRequest,
    chat: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    request_id = getattr(request.state, "request_id", None)
    with trace("chat.reply", metadata={"message_length": len(payload.message)}, request_id=request_id):
        try:
            reply = chat.reply(payload.message)
        except BrightLightError as exc:
            raise http_error_from(exc) from exc
    return ChatResponse(reply=reply, request_id=request_id or "")


@router.post("/chat/summarize", response_model=SummarizeResponse, tags=["chat"])
def chat_summarize(
    request: Request,
    payload: SummarizeRequest,
    chat: ChatService = Depends(get_chat_service),
) -> SummarizeResponse:
    request_id = getattr(request.state, "request_id", None)
    try:
        summary = chat.summarize(payload.text)
    except BrightLightError as exc:
        raise http_error_from(exc) from exc
    return SummarizeResponse(summary=summary, request_id=request_id or "")
