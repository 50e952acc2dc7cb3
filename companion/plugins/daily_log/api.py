"""
Per-plugin API for daily logs. Mounted at /api/.
Uses DailyLog ORM with Pydantic from_attributes.
"""
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from companion.core.errors import PersistenceError

from .schemas import DailyLogResponse
from .service import get_daily_log, list_daily_logs, upsert_daily_log


def get_router(companion_app: Any) -> Optional[APIRouter]:
    """Return router for this plugin; mounted with prefix /api."""
    router = APIRouter(tags=["Daily Logs"])

    @router.post("/logs")
    async def save_log(request: Request) -> Dict[str, bool]:
        """Create or replace the log for (user_id, date). Any bad body fails like a storage error."""
        try:
            payload = await request.json()
        except ValueError as e:
            raise PersistenceError(f"Request body is not JSON: {e}") from e
        await run_in_threadpool(upsert_daily_log, payload)
        return {"success": True}

    @router.get("/logs/{user_id}", response_model=List[DailyLogResponse])
    def get_logs(user_id: str) -> List[DailyLogResponse]:
        """All logs for a user, newest date first."""
        return [DailyLogResponse.model_validate(r) for r in list_daily_logs(user_id)]

    @router.get("/logs/{user_id}/{log_date}", response_model=DailyLogResponse)
    def get_log(user_id: str, log_date: date):
        record = get_daily_log(user_id, log_date)
        if record is None:
            return JSONResponse(status_code=404, content={"error": "No log for this date"})
        return DailyLogResponse.model_validate(record)

    return router
