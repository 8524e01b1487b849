"""
FastAPI application entry point.

Run with: uvicorn api.main:app --reload
"""
from fastapi import FastAPI
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.routes import imports


# Create app
app = FastAPI(
    title="Takeout Place Sync API",
    description="API for syncing saved places from a takeout export into Markdown notes",
    version="0.1.0",
)

# Include routers
app.include_router(imports.router, prefix="/imports", tags=["imports"])


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Takeout Place Sync API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
