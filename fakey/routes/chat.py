"""
chat.py — Forensic assistant endpoint.

POST /api/v1/chat opens a fresh assistant session for each request and sends
one turn. Conversation history is not kept server-side; clients that want a
multi-turn conversation use ForensicsService.start_assistant_chat() directly.
"""

import logging

from fastapi import APIRouter, Request

from fakey.ai.forensics import forensics_service
from fakey.core.rate_limit import limiter
from fakey.models.requests import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/chat", tags=["chat"])


@router.post("", response_model=ChatResponse, status_code=200)
@limiter.limit("30/minute")
async def chat(request: Request, payload: ChatRequest):
    session = forensics_service.start_assistant_chat()
    reply = await session.send_message(payload.message)
    return ChatResponse(reply=reply.text or "")
