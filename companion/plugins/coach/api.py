"""
Per-plugin API for the AI coach. Mounted at /api/.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body

from companion.core.errors import UpstreamServiceError

from .client import CoachAdvice, DuaRecommendation


def get_router(companion_app: Any) -> Optional[APIRouter]:
    """Return router for this plugin; mounted with prefix /api."""
    router = APIRouter(tags=["Coach"])

    @router.get("/dua", response_model=DuaRecommendation, response_model_exclude_none=True)
    def get_dua(mood: str = "peaceful") -> DuaRecommendation:
        """Dua recommendation for a mood."""
        try:
            return companion_app.coach_client.get_dua_recommendation(mood)
        except UpstreamServiceError as e:
            e.user_message = "Failed to fetch Dua"
            raise

    @router.post("/coach", response_model=CoachAdvice)
    def get_coach(context: Optional[Dict[str, Any]] = Body(None), lang: str = "en") -> CoachAdvice:
        """Three tips and a motivation line for the user's progress so far."""
        try:
            return companion_app.coach_client.get_coach_advice(context or {}, lang=lang)
        except UpstreamServiceError as e:
            e.user_message = "Failed to fetch coach advice"
            raise

    return router
