"""
Assistant API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from auth import dependencies as auth_dependencies

from . import service

router = APIRouter(prefix="/ai")


class SummarizeRequest(BaseModel):
    content: str = Field(..., min_length=1)


class ChatTurn(BaseModel):
    role: str = Field(..., max_length=20)
    content: str = ""


class GlobalChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=8000)
    history: list[ChatTurn] = Field(default_factory=list)


@router.post("/summarize")
async def summarize(
    request: SummarizeRequest,
    _: int = Depends(auth_dependencies.current_user_id),
) -> dict:
    return await service.summarize(request.content)


@router.post("/global-chat")
async def global_chat(
    request: GlobalChatRequest,
    user_id: int = Depends(auth_dependencies.current_user_id),
) -> dict:
    return await service.global_chat(
        request.message,
        [turn.model_dump() for turn in request.history],
        user_id=user_id,
    )
