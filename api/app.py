"""Main FastAPI application with modularized routes."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config import CORS_ALLOW_ORIGINS
from api.routes import builder, metadata, question_types
from core.logging_setup import setup_console_logging

setup_console_logging()

app = FastAPI(title="Question Structure Builder API")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# Include routers
app.include_router(question_types.router)
app.include_router(builder.router)
app.include_router(metadata.router)
