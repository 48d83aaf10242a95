from __future__ import annotations

import logging
import os

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler

from app.rules.workflow import reconcile
from app.store import DocumentStore

logger = logging.getLogger(__name__)


def schedule_reconciliation(scheduler: BaseScheduler, store: DocumentStore) -> None:
    minutes = int(os.getenv("RECONCILE_INTERVAL_MINUTES", "30"))
    if minutes <= 0:
        logger.info("Periodic reconciliation disabled")
        return
    scheduler.add_job(
        reconcile,
        "interval",
        minutes=minutes,
        args=[store],
        id="relation-reconcile",
        replace_existing=True,
    )


def start_scheduler(store: DocumentStore) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(timezone="UTC")
    schedule_reconciliation(scheduler, store)
    scheduler.start()
    return scheduler


def shutdown_scheduler(scheduler: BackgroundScheduler) -> None:
    if scheduler.running:
        scheduler.shutdown(wait=False)
