"""
Per-plugin API for the Quran reader. Mounted at /api/quran/.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from .quran_base import SURAH_COUNT


def get_router(companion_app: Any) -> Optional[APIRouter]:
    """Return router for this plugin; mounted with prefix /api."""
    router = APIRouter(prefix="/quran", tags=["Quran"])

    @router.get("/surahs")
    def list_surahs() -> List[Dict[str, Any]]:
        return companion_app.quran_backend.list_surahs()

    @router.get("/surahs/{number}")
    def get_surah(number: int):
        if not 1 <= number <= SURAH_COUNT:
            return JSONResponse(status_code=404, content={"error": f"Surah must be between 1 and {SURAH_COUNT}"})
        return companion_app.quran_backend.get_surah(number)

    return router
