"""FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from careforms.config import get_settings
from careforms.database import init_db
from careforms.routers import templates, responses, transcription

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

app = FastAPI(
    title="CareForms",
    description="Schema-driven forms with repeatable sections, drafts, and voice dictation",
    version="1.0.0",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(templates.router, prefix="/api/templates", tags=["Templates"])
app.include_router(responses.router, prefix="/api/responses", tags=["Form Responses"])
app.include_router(transcription.router, prefix="/api/transcribe", tags=["Transcription"])


@app.on_event("startup")
def create_tables():
    init_db()


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "careforms-backend"}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "CareForms API",
        "docs": "/docs",
        "health": "/health",
    }
