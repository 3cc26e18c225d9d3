"""Main FastAPI application with modularized routes."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from codequiz.database import init_db
from codequiz.logging_setup import setup_console_logging
from codequiz.routes import auth, quizzes, results, sessions, statistics, tutor
from codequiz.services.cleanup_service import schedule_sessions_cleanup

setup_console_logging()

app = FastAPI(title="CodeQuiz API")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Startup events
@app.on_event("startup")
def startup_events() -> None:
    """Initialize database and schedule cleanup tasks on startup."""
    init_db()
    schedule_sessions_cleanup()


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


# Include routers
app.include_router(auth.router)
app.include_router(quizzes.router)
app.include_router(sessions.router)
app.include_router(results.router)
app.include_router(statistics.router)
app.include_router(tutor.router)
