from apscheduler.schedulers.background import BackgroundScheduler

from app.scheduler import schedule_reconciliation


def test_reconciliation_job_registered(store, monkeypatch):
    monkeypatch.setenv("RECONCILE_INTERVAL_MINUTES", "15")
    scheduler = BackgroundScheduler(timezone="UTC")

    schedule_reconciliation(scheduler, store)

    job = scheduler.get_job("relation-reconcile")
    assert job is not None
    assert job.args == (store,)
    assert job.trigger.interval.total_seconds() == 15 * 60


def test_reconciliation_can_be_disabled(store, monkeypatch):
    monkeypatch.setenv("RECONCILE_INTERVAL_MINUTES", "0")
    scheduler = BackgroundScheduler(timezone="UTC")

    schedule_reconciliation(scheduler, store)

    assert scheduler.get_jobs() == []
