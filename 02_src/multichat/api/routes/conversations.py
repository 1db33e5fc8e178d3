"""Conversation API routes."""

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...app import IApplication
from ...chat import ChatNotFoundError


class ConversationResponse(BaseModel):
    """Protocol messages that would be sent to a model."""

    chat_id: str
    messages: list[dict[str, Any]]


def create_conversations_router(app: IApplication) -> APIRouter:
    """Create conversations router."""
    router = APIRouter(prefix="/api/chats", tags=["conversations"])

    @router.get("/{chat_id}/conversation", response_model=ConversationResponse)
    async def get_conversation(chat_id: str) -> dict:
        """Encode the chat as it would be sent to a model."""
        try:
            conversation = await app.chat_service.build_conversation(chat_id)
        except ChatNotFoundError:
            raise HTTPException(status_code=404, detail=f"Chat {chat_id} not found")
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        return {"chat_id": chat_id, "messages": [m.to_dict() for m in conversation]}

    @router.get("/{chat_id}/conversation/synthesis", response_model=ConversationResponse)
    async def get_synthesis_conversation(chat_id: str) -> dict:
        """Encode the chat as a request to merge its last compare block."""
        try:
            conversation = await app.chat_service.build_synthesis_conversation(chat_id)
        except ChatNotFoundError:
            raise HTTPException(status_code=404, detail=f"Chat {chat_id} not found")
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        return {"chat_id": chat_id, "messages": [m.to_dict() for m in conversation]}

    return router
