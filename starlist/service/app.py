"""FastAPI application entrypoint for starlist service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..orchestrator import Orchestrator, RunOutcome


class GenerateRequest(BaseModel):
    path: str
    config_path: Optional[str] = None
    token: Optional[str] = None
    local: Optional[bool] = None


class GenerateResponse(BaseModel):
    status: str
    output_path: str
    data_path: str
    source: str
    record_count: int
    committed: bool


class HealthResponse(BaseModel):
    status: str


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = Orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing starlist generation."""
    app = FastAPI(title="starlist", version="1.0.0")
    # One orchestrator so concurrent requests share its run lock.
    orchestrator = orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(payload: GenerateRequest) -> GenerateResponse:
        def _run() -> RunOutcome:
            return orchestrator.run(
                payload.path,
                config_path=payload.config_path,
                token=payload.token,
                local=payload.local,
            )

        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(None, _run)
        return GenerateResponse(
            status="ok",
            output_path=str(outcome.output_path),
            data_path=str(outcome.data_path),
            source=outcome.source,
            record_count=outcome.record_count,
            committed=outcome.committed,
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover
    uvicorn.run(create_app(), host=host, port=port)
