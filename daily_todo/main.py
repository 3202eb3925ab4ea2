"""FastAPI application for the daily todo backend."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from daily_todo.config import get_settings
from daily_todo.routes.daily_saves import router as daily_saves_router
from daily_todo.routes.todos import router as todos_router
from daily_todo.storage import calendar, scheduler

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Arm the daily snapshot timer on startup; cancel it and close the calendar client on shutdown."""
    if settings.scheduler_enabled:
        scheduler.start()
    else:
        logger.info("Daily snapshot scheduler disabled")
    yield
    scheduler.stop()
    calendar.close()


app = FastAPI(title="Daily Todo", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type"],
)

app.include_router(todos_router)
app.include_router(daily_saves_router)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/api/health")
def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "daily-todo-api",
        "scheduler_running": scheduler.running,
        "next_daily_save": scheduler.next_fire_at.isoformat() if scheduler.next_fire_at else None,
    }
