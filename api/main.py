from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.sessions_api import build_sessions_router
from core.config import load_scoring_config
from sessions.store import InMemorySessionStore

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

config = load_scoring_config()
session_store = InMemorySessionStore()

app = FastAPI(title="Circle Trials API", version="0.1.0")

allowed_origins = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()]
if allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
app.include_router(build_sessions_router(session_store, config))


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "target_radius": config.target_radius, "n_angles": config.n_angles}
