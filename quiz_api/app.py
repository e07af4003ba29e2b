"""Main FastAPI application with modularized routes."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quiz_api.config import CORS_ALLOW_ORIGINS, LOG_LEVEL
from quiz_api.database import init_db
from quiz_api.logging_setup import setup_console_logging
from quiz_api.routes import quizzes

setup_console_logging(LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    init_db()
    yield


app = FastAPI(title="Quiz Grading API", lifespan=lifespan)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


# Include routers
app.include_router(quizzes.router)
