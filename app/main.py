# backend-server/app/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from app.api.v1.api import api_router

# Import the specific router from the auth endpoint file
from app.api.v1.endpoints import auth
from app.core.config import settings
from app.core.errors import AppError, app_error_handler
from app.db import models
from app.db.session import engine, SessionLocal
from app.services.scheduler import TaskActivationSweep, create_scheduler

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    models.Base.metadata.create_all(bind=engine)
    logger.info("Starting Employee Tracker API")

    scheduler = None
    if settings.SCHEDULER_ENABLED:
        scheduler = create_scheduler(TaskActivationSweep(SessionLocal))
        scheduler.start()
        logger.info("Task activation sweep scheduled daily at %02d:%02d %s",
                    settings.SWEEP_CRON_HOUR, settings.SWEEP_CRON_MINUTE, settings.SWEEP_TIMEZONE)
    yield
    if scheduler is not None:
        scheduler.shutdown(wait=False)
        logger.info("Task activation sweep stopped")
    logger.info("Shutting down Employee Tracker API")


app = FastAPI(title="Employee Tracker API", lifespan=lifespan)
app.add_exception_handler(AppError, app_error_handler)

# Include the main router for all routes prefixed with /api/v1
app.include_router(api_router, prefix="/api/v1")

# Include the auth router separately for the /auth prefix
app.include_router(auth.router, prefix="/auth")

@app.get("/")
def read_root():
    return {"message": "Welcome to the Employee Tracker API"}
