from fastapi import APIRouter, Depends

from app.api.budgets import get_budget_store
from app.schemas.advisor import AdvisorChatRequest, AdvisorChatResponse
from app.services import advisor
from app.services.budget_store import BudgetStore

router = APIRouter(prefix="/advisor", tags=["advisor"])


@router.post("/chat", response_model=AdvisorChatResponse)
async def advisor_chat(request: AdvisorChatRequest, store: BudgetStore = Depends(get_budget_store)):
    reply, actions = await advisor.chat(store, [m.model_dump() for m in request.messages])
    return AdvisorChatResponse(reply=reply, actions=actions)
