"""Cost API routes."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...app import IApplication
from ...costs import ModelPricing, format_cost


class CostResponse(BaseModel):
    """Stored total cost of a chat or project."""

    id: str
    total_cost_usd: float | None
    formatted: str


class RecomputeResponse(BaseModel):
    chat_id: str
    project_id: str | None
    total_cost_usd: float | None
    formatted: str


class UsageRequest(BaseModel):
    """Token usage of one completed generation."""

    prompt_tokens: int
    completion_tokens: int
    generation_id: str | None = None
    prompt_price_per_token: float | None = None
    completion_price_per_token: float | None = None


class UsageResponse(BaseModel):
    message_id: str
    cost_usd: float | None
    formatted: str


def create_costs_router(app: IApplication) -> APIRouter:
    """Create costs router."""
    router = APIRouter(prefix="/api", tags=["costs"])

    @router.get("/chats/{chat_id}/cost", response_model=CostResponse)
    async def get_chat_cost(chat_id: str) -> dict:
        chat = await app.storage.get_chat(chat_id)
        if chat is None:
            raise HTTPException(status_code=404, detail=f"Chat {chat_id} not found")
        return {
            "id": chat.id,
            "total_cost_usd": chat.total_cost_usd,
            "formatted": format_cost(chat.total_cost_usd),
        }

    @router.post("/chats/{chat_id}/cost/recompute", response_model=RecomputeResponse)
    async def recompute_chat_cost(chat_id: str) -> dict:
        """Recompute the chat total and its project's total."""
        if await app.storage.get_chat(chat_id) is None:
            raise HTTPException(status_code=404, detail=f"Chat {chat_id} not found")
        try:
            project_id = await app.cost_rollup.recompute_chat_and_project_cost(chat_id)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        chat = await app.storage.get_chat(chat_id)
        total = chat.total_cost_usd if chat else None
        return {
            "chat_id": chat_id,
            "project_id": project_id,
            "total_cost_usd": total,
            "formatted": format_cost(total),
        }

    @router.get("/projects/{project_id}/cost", response_model=CostResponse)
    async def get_project_cost(project_id: str) -> dict:
        project = await app.storage.get_project(project_id)
        if project is None:
            raise HTTPException(status_code=404, detail=f"Project {project_id} not found")
        return {
            "id": project.id,
            "total_cost_usd": project.total_cost_usd,
            "formatted": format_cost(project.total_cost_usd),
        }

    @router.post("/messages/{message_id}/usage", response_model=UsageResponse)
    async def record_message_usage(message_id: str, usage: UsageRequest) -> dict:
        """Store usage and cost on a message and roll the totals up."""
        if await app.storage.get_message(message_id) is None:
            raise HTTPException(status_code=404, detail=f"Message {message_id} not found")

        pricing = None
        if (
            usage.prompt_price_per_token is not None
            and usage.completion_price_per_token is not None
        ):
            pricing = ModelPricing(
                prompt_price_per_token=usage.prompt_price_per_token,
                completion_price_per_token=usage.completion_price_per_token,
            )

        try:
            cost_usd = await app.chat_service.record_usage(
                message_id,
                usage.prompt_tokens,
                usage.completion_tokens,
                pricing,
                generation_id=usage.generation_id,
            )
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        return {
            "message_id": message_id,
            "cost_usd": cost_usd,
            "formatted": format_cost(cost_usd),
        }

    return router
