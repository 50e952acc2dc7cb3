"""
Per-plugin API for the tasbih counter. Mounted at /api/tasbih/.
"""
from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field


class TasbihResponse(BaseModel):
    phrase: str
    count: int
    target: int
    total: int


class TasbihTargetUpdate(BaseModel):
    target: int = Field(gt=0)


def get_router(companion_app: Any) -> Optional[APIRouter]:
    """Return router for this plugin; mounted with prefix /api."""
    router = APIRouter(prefix="/tasbih", tags=["Tasbih"])
    counters = companion_app.tasbih_counters

    @router.get("/{user_id}", response_model=TasbihResponse)
    def get_counter(user_id: str) -> TasbihResponse:
        return TasbihResponse(**counters.snapshot(user_id))

    @router.post("/{user_id}/increment", response_model=TasbihResponse)
    def increment(user_id: str) -> TasbihResponse:
        return TasbihResponse(**counters.increment(user_id))

    @router.post("/{user_id}/reset", response_model=TasbihResponse)
    def reset(user_id: str) -> TasbihResponse:
        return TasbihResponse(**counters.reset(user_id))

    @router.put("/{user_id}", response_model=TasbihResponse)
    def set_target(user_id: str, body: TasbihTargetUpdate) -> TasbihResponse:
        return TasbihResponse(**counters.set_target(user_id, body.target))

    return router
