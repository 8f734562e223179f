"""FastAPI application exposing the expense tracking endpoints."""
from __future__ import annotations

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from . import database
from .config import load_settings
from .logging import setup_logger
from .routes import authorized_users_router, expenses_router

settings = load_settings()
LOG = setup_logger(
    "expense_api",
    json_format=settings.json_logs,
    level=settings.log_level,
    log_dir=settings.log_dir,
)
ACCESS_LOG = LOG.getChild("access")


@asynccontextmanager
async def lifespan(_: FastAPI):
    database.init_db()
    LOG.info("Expense API ready")
    yield


app = FastAPI(title="Expense Tracker API", version="1.0.0", lifespan=lifespan)
app.state.settings = settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000.0
    ACCESS_LOG.info(
        "%s %s -> %s (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": elapsed_ms,
        },
    )
    return response


app.include_router(expenses_router, prefix="/api")
app.include_router(authorized_users_router, prefix="/api")


@app.get("/health", tags=["system"])
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
