"""
Main application entry point - FastAPI app instance and configuration.
This is where the ASGI application is created and configured.
Run with: uvicorn jarvis.main:app --reload
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jarvis.core.config import settings
from jarvis.routers import insights, jarvis

app = FastAPI(
    title=settings.APP_NAME,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(jarvis.router)
app.include_router(insights.router)


@app.get("/health", tags=["health"])
def health_check():
    """
    Simple health check endpoint.

    Does NOT check the AI providers or collaborators; it only shows the
    process is serving requests.

    Returns:
        {"status": "ok"}
    """
    return {"status": "ok"}
