# backend-server/app/services/scheduler.py
# Periodic activation of scheduled tasks. The sweep itself knows nothing
# about APScheduler; the scheduler only calls TaskActivationSweep.run.
import logging
from datetime import datetime
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from app.core.clock import utcnow
from app.core.config import settings
from app.services import tasks

logger = logging.getLogger(__name__)


class TaskActivationSweep:
    def __init__(self, session_factory: Callable, clock: Callable[[], datetime] = utcnow):
        self.session_factory = session_factory
        self.clock = clock

    def run(self) -> int:
        """ Runs one sweep and returns the number of tasks activated. Never raises. """
        logger.info("Running scheduled task activation sweep...")
        db = self.session_factory()
        try:
            activated = tasks.activate_scheduled_tasks(db, self.clock())
        except Exception:
            logger.exception("Error running task activation sweep")
            return 0
        finally:
            db.close()
        logger.info("%d scheduled tasks activated.", activated)
        return activated


def create_scheduler(sweep: TaskActivationSweep) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(timezone=settings.SWEEP_TIMEZONE)
    scheduler.add_job(
        sweep.run,
        CronTrigger(hour=settings.SWEEP_CRON_HOUR, minute=settings.SWEEP_CRON_MINUTE, timezone=settings.SWEEP_TIMEZONE),
        id="activate_scheduled_tasks",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    return scheduler
