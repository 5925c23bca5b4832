from pydantic import BaseModel, Field
from typing import List, Literal

from app.schemas.actions import BudgetAction


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str = Field(..., max_length=4000)


class AdvisorChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(..., min_length=1)


class AdvisorChatResponse(BaseModel):
    reply: str
    actions: List[BudgetAction] = []
