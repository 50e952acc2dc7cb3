"""
FastAPI server for the companion API.
Central endpoints: GET /api/health, GET /api/tasks. Per-plugin routes are mounted
from companion.plugins.<package>.api (get_router(companion_app)) under /api/.
Docs: http://<host>:<port>/docs
"""
import importlib
import logging
import pkgutil
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from companion.core.errors import CompanionError

logger = logging.getLogger(__name__)


def _serialize_datetime(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.isoformat()


def create_app(companion_app: Any) -> FastAPI:
    """Create FastAPI app with routes that use the given CompanionApp instance."""
    app = FastAPI(title="Ramadan Companion API", description="Prayer times, daily logs, coach and utilities")

    @app.exception_handler(CompanionError)
    def handle_companion_error(request: Request, exc: CompanionError) -> JSONResponse:
        logger.error(f"{request.method} {request.url.path} failed: {exc!r}", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": exc.user_message})

    @app.get("/api/health")
    def health() -> Dict[str, Any]:
        return {
            "status": "ok",
            "environment": companion_app.config.data.get("environment", "local"),
            "time": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/api/tasks")
    def list_tasks() -> Dict[str, Any]:
        """Active in-memory timers and their next run time."""
        timers = companion_app.task_manager.get_active_timers()
        return {
            "active_timers": [
                {"name": t["name"], "next_run_at": _serialize_datetime(t["next_run_at"])}
                for t in timers
            ]
        }

    # Mount per-plugin API routers from companion.plugins.<name>.api (get_router(companion_app))
    plugins_pkg = importlib.import_module("companion.plugins")
    for _mod, name, is_pkg in pkgutil.iter_modules(plugins_pkg.__path__):
        if not is_pkg:
            continue
        try:
            api_module = importlib.import_module(f"companion.plugins.{name}.api")
        except ModuleNotFoundError as e:
            if e.name != f"companion.plugins.{name}.api":
                raise
            continue
        if not callable(getattr(api_module, "get_router", None)):
            continue
        router = api_module.get_router(companion_app)
        if router is not None:
            app.include_router(router, prefix="/api")
            logger.debug(f"Mounted API router for plugin {name}")

    return app


def run_api_server(companion_app: Any) -> None:
    """
    Serve the API with uvicorn until interrupted.
    Reads server.host (default 127.0.0.1) and server.port (default 3000) from config.
    """
    import uvicorn

    server_config = companion_app.config.section("server")
    host = server_config.get("host", "127.0.0.1")
    port = int(server_config.get("port", 3000))
    fastapi_app = create_app(companion_app)
    logger.info(f"API server listening at http://{host}:{port} (docs at /docs)")
    uvicorn.run(fastapi_app, host=host, port=port, log_config=None)
