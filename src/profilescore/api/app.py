# src/profilescore/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance and mounts the routers.
Business logic lives in `profilescore.api.routes` and `profilescore.scoring`.
"""

from __future__ import annotations

import os

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from profilescore.core.logging import configure_logging

from .routes import router

configure_logging()

app = FastAPI(title="profilescore API", version="0.1.0")

# Configure via env: PROFILESCORE_CORS_ORIGINS="http://localhost:8003,http://127.0.0.1:8003"
cors_origins = [s.strip() for s in os.getenv("PROFILESCORE_CORS_ORIGINS", "").split(",") if s.strip()]
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(router)
