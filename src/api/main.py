from __future__ import annotations

from fastapi import FastAPI

from api.actions import analyze, config, export, health

app = FastAPI(title="transeg API")

app.include_router(health.router, prefix="/api")
app.include_router(config.router, prefix="/api")
app.include_router(analyze.router, prefix="/api")
app.include_router(export.router, prefix="/api")
