"""
Main FastAPI application for the League Night Operations system.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import routes
from app.core.config import CORS_ORIGINS
from app.core.logging_config import setup_logging

setup_logging()

app = FastAPI(
    title="League Night Operations API",
    description="API for roster check-in, balanced teams, match schedules and the public dashboard",
    version="1.0.0"
)

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(routes.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "League Night Operations API",
        "version": "1.0.0",
        "endpoints": {
            "players": "/api/players",
            "teams": "/api/teams/generate",
            "schedule": "/api/schedule/generate",
            "publish": "/api/publish",
            "public": "/api/public/snapshot",
            "health": "/api/health"
        }
    }
