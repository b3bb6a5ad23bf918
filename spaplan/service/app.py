"""FastAPI application entrypoint for spaplan service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, Literal, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..errors import PlanError
from ..models import BuildGraph
from ..planner import Planner, default_options


class PlanRequest(BaseModel):
    path: str
    mode: Literal["development", "production"] = "development"
    port: Optional[int] = 8080


class PlanResponse(BaseModel):
    mode: str
    fingerprint: str
    graph: Dict[str, Any]


class HealthResponse(BaseModel):
    status: str


def _default_planner() -> Planner:
    return Planner()


def create_app(
    planner_factory: Callable[[], Planner] = _default_planner,
) -> FastAPI:
    """Create the FastAPI application exposing build planning."""

    app = FastAPI(title="spaplan Service", version="1.0.0")

    async def get_planner() -> Planner:
        # Fresh planner per request; invocations never share configuration.
        return planner_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/plan", response_model=PlanResponse)
    async def plan(
        payload: PlanRequest,
        planner: Planner = Depends(get_planner),
    ) -> PlanResponse:
        def _run_plan() -> BuildGraph:
            return planner.plan(
                payload.mode,
                default_options(port=payload.port),
                workspace=payload.path,
            )

        loop = asyncio.get_running_loop()
        graph = await loop.run_in_executor(None, _run_plan)
        return PlanResponse(
            mode=graph.mode,
            fingerprint=graph.fingerprint(),
            graph=graph.to_dict(),
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(
        _: Any, exc: FileNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(PlanError)
    async def plan_error_handler(_: Any, exc: PlanError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
