from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from models.schemas import TerminalRole


router = APIRouter(prefix="/chat", tags=["chat"])


class ChatMessageRequest(BaseModel):
    conversation_id: str = Field(min_length=1)
    content: str
    terminal_role: TerminalRole = TerminalRole.BROKER


def _orchestrator(request: Request):
    return request.app.state.orchestrator


@router.post("/message")
async def post_chat_message(payload: ChatMessageRequest, request: Request):
    orchestrator = _orchestrator(request)
    response = await orchestrator.process_message(
        payload.content,
        payload.conversation_id,
        terminal_role=payload.terminal_role,
    )
    return response.model_dump(mode="json")


@router.get("/history/{conversation_id}")
async def get_chat_history(conversation_id: str, request: Request):
    record = await _orchestrator(request).get_conversation_history(conversation_id)
    if record is None:
        raise HTTPException(status_code=404, detail="conversation_not_found")
    return record.model_dump(mode="json")


@router.delete("/history/{conversation_id}")
async def delete_chat_history(conversation_id: str, request: Request):
    await _orchestrator(request).clear_conversation_history(conversation_id)
    return {"ok": True, "conversation_id": conversation_id}


@router.get("/conversations")
async def list_conversations(request: Request):
    ids = await _orchestrator(request).get_active_conversations()
    return {"ok": True, "conversations": ids}
