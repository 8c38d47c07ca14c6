# src/tourguide/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance and ties the service lifecycle to the app:
the worker pool and background tracker start with the app and are shut down
(gracefully, letting in-flight tracking finish) when it stops.
Business logic lives in `tourguide.service` and the packages it wires together.

Run with: `uvicorn tourguide.api.app:app`
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from starlette.middleware.cors import CORSMiddleware

from tourguide.core.logging import configure_logging

from . import routes

configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    service = routes._service()
    service.start()
    try:
        yield
    finally:
        service.shutdown()
        routes.reset_service()


app = FastAPI(title="TourGuide API", version="0.1.0", lifespan=lifespan)

# CORS (dev-friendly). Configure via env:
# - TOURGUIDE_CORS_ORIGINS="http://localhost:3000,http://127.0.0.1:3000"
cors_origins = [s.strip() for s in os.getenv("TOURGUIDE_CORS_ORIGINS", "").split(",") if s.strip()]
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(routes.router)


@app.get("/", response_class=PlainTextResponse)
def index() -> str:
    return "Greetings from TourGuide!"
